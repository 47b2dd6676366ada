import logging
import logging.handlers

import pytest

from sitemap_gen.shared.logging_config import (
    setup_logging, date_prefixed_name, LOGGER_NAMES, get_error_logger
)


@pytest.fixture
def restore_loggers():
    """setup_logging 会修改全局 logger，测试后移除文件处理器并恢复传播"""
    root = logging.getLogger()
    root_handlers, root_level = root.handlers[:], root.level
    yield
    root.handlers = root_handlers
    root.setLevel(root_level)
    for name in (*LOGGER_NAMES, 'sitemap_gen'):
        logger = logging.getLogger(name)
        for handler in logger.handlers[:]:
            handler.close()
            logger.removeHandler(handler)
        logger.propagate = True
        logger.setLevel(logging.NOTSET)


class TestSetupLogging:

    def test_creates_category_directories_and_files(self, tmp_path, restore_loggers):
        root = setup_logging(tmp_path / "logs")

        assert root == tmp_path / "logs"
        for category in ("run_lifecycle", "crawl_process", "error"):
            files = list((root / category).glob(f"*_{category}.log"))
            assert len(files) == 1

    def test_json_lines_written(self, tmp_path, restore_loggers):
        root = setup_logging(tmp_path)

        get_error_logger().error("disk full")
        for handler in get_error_logger().handlers:
            handler.flush()

        content = next((root / "error").glob("*_error.log")).read_text(encoding="utf-8")
        assert '"message": "disk full"' in content
        assert '"levelname": "ERROR"' in content

    def test_debug_flag_lowers_process_level(self, tmp_path, restore_loggers):
        setup_logging(tmp_path, debug=True)
        assert logging.getLogger("domain.crawl_process").level == logging.DEBUG

        setup_logging(tmp_path)
        assert logging.getLogger("domain.crawl_process").level == logging.INFO

    def test_rotating_handlers_use_date_prefixed_names(self, tmp_path, restore_loggers):
        setup_logging(tmp_path)

        handlers = [
            h for name in LOGGER_NAMES for h in logging.getLogger(name).handlers
            if isinstance(h, logging.handlers.TimedRotatingFileHandler)
        ]
        assert len(handlers) == 3
        assert all(h.namer is date_prefixed_name for h in handlers)


class TestDatePrefixedName:

    def test_rotated_name(self, tmp_path):
        rotated = str(tmp_path / "2025-11-30_crawl_process.log.2025-11-29")
        assert date_prefixed_name(rotated) == str(tmp_path / "2025-11-29_crawl_process.log")

    @pytest.mark.parametrize("name", ["crawl.log", "2025-11-30_crawl_process.log", "plain"])
    def test_other_names_unchanged(self, name):
        assert date_prefixed_name(name) == name
