from unittest.mock import MagicMock, patch

import pytest

from sitemap_gen.crawl.domain.exceptions import OutputDirectoryError
from sitemap_gen.crawl.domain.value_objects.crawl_delay_policy import CrawlDelayPolicy
from sitemap_gen.crawl.domain.value_objects.run_summary import RunSummary
from sitemap_gen.crawl.view import cli
from sitemap_gen.crawl.view.access import ACCESS_KEY_ENV


@pytest.fixture(autouse=True)
def access_key(monkeypatch):
    monkeypatch.setenv(ACCESS_KEY_ENV, "s3cret")


@pytest.fixture
def run_service():
    """替换组合根与日志初始化，只验证 CLI 的参数处理与退出码"""
    service = MagicMock()
    service.run.return_value = RunSummary(
        run_id="run-1", domains=["https://x.test"], status="completed",
        url_count=12, sitemap_paths=["out/sitemap.xml"]
    )
    with patch.object(cli, "setup_logging") as mock_setup, \
            patch.object(cli, "build_run_service", return_value=service) as mock_build:
        service.mock_setup = mock_setup
        service.mock_build = mock_build
        yield service


class TestCli:

    def test_wrong_key_exits_before_crawling(self, run_service, capsys):
        assert cli.main(["--url=https://x.test", "--key=wrong"]) == 1

        assert "Unauthorized" in capsys.readouterr().err
        run_service.mock_build.assert_not_called()

    def test_missing_key_exits(self, run_service):
        assert cli.main(["--url=https://x.test"]) == 1
        run_service.run.assert_not_called()

    def test_missing_url_exits(self, run_service, capsys):
        assert cli.main(["--key=s3cret"]) == 1
        assert "Missing required --url parameter." in capsys.readouterr().err

    def test_success_prints_summary(self, run_service, capsys, tmp_path):
        code = cli.main([
            "--url=https://x.test/,https://y.test", "--key=s3cret", "--depth=0", "--threads=4",
            "--gzip", "--splitbysite", "--no-respectrobots", "--crawldelaypolicy=ratelimit",
            f"--logdir={tmp_path}"
        ])

        assert code == 0
        assert "Sitemap created with 12 URLs: out/sitemap.xml" in capsys.readouterr().out

        config = run_service.mock_build.call_args.args[0]
        assert config.domains == ["https://x.test", "https://y.test"]
        assert config.max_depth == 0
        assert config.thread_count == 4
        assert config.use_gzip and config.split_by_site
        assert config.respect_robots is False
        assert config.crawl_delay_policy is CrawlDelayPolicy.RATE_LIMIT
        run_service.mock_setup.assert_called_once_with(str(tmp_path), debug=False)

    def test_defaults(self, run_service):
        cli.main(["--url=https://x.test", "--key=s3cret"])

        config = run_service.mock_build.call_args.args[0]
        assert config.max_depth == 3
        assert config.thread_count == 10
        assert config.respect_robots is True
        assert config.output_path == "sitemap.xml"
        assert config.allow_files is False

    def test_allowfiles_flag(self, run_service):
        cli.main(["--url=https://x.test", "--key=s3cret", "--allowfiles"])

        config = run_service.mock_build.call_args.args[0]
        assert config.allow_files is True
        assert config.ignored_extensions == frozenset()

    def test_index_path_printed(self, run_service, capsys):
        run_service.run.return_value.index_path = "out/sitemap_index.xml"

        cli.main(["--url=https://x.test", "--key=s3cret"])

        assert "Sitemap index: out/sitemap_index.xml" in capsys.readouterr().out

    def test_fatal_output_error_exits_1(self, run_service, capsys):
        run_service.run.side_effect = OutputDirectoryError("/readonly")

        assert cli.main(["--url=https://x.test", "--key=s3cret"]) == 1
        assert "/readonly" in capsys.readouterr().err
