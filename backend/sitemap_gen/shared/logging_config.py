"""
日志配置模块
统一管理3类日志：
1. run_lifecycle/ - 运行生命周期日志（事件驱动：域名开始/结束、站点地图写出、ping）
2. crawl_process/ - 爬取过程日志（事件驱动：页面成功、robots/meta 拦截、请求失败）
3. error/ - 错误日志（Infrastructure层直接调用）

文件命名格式：{日期}_{日志类型}.log
例如：2025-11-30_crawl_process.log
"""

import logging
import logging.config
import logging.handlers
from pathlib import Path
from datetime import datetime
from typing import Optional, Union


LOGGER_NAMES = ('domain.run_lifecycle', 'domain.crawl_process', 'infrastructure.error')
LOG_CATEGORIES = ('run_lifecycle', 'crawl_process', 'error')


def _daily_file_handler(filename: Path) -> dict:
    """按天切换的 JSON 日志文件，保留 30 天"""
    return {
        'class': 'logging.handlers.TimedRotatingFileHandler',
        'filename': str(filename),
        'when': 'MIDNIGHT',
        'interval': 1,
        'backupCount': 30,
        'encoding': 'utf-8',
        'formatter': 'json'
    }


def setup_logging(log_dir: Optional[Union[str, Path]] = None, debug: bool = False) -> Path:
    """
    初始化并配置所有logger
    应在程序启动时调用：setup_logging(log_dir, debug)

    参数:
        log_dir: 日志根目录，默认为 backend/logs/
        debug: 是否输出 DEBUG 级别日志（入队、跳过扩展名、base href 等细节）

    返回:
        实际使用的日志根目录
    """

    if log_dir is None:
        log_root_dir = Path(__file__).resolve().parent.parent.parent / 'logs'
    else:
        log_root_dir = Path(log_dir)

    # 每类日志一个子目录：logs/run_lifecycle/、logs/crawl_process/、logs/error/
    today = datetime.now().strftime('%Y-%m-%d')
    file_handlers = {}
    for category in LOG_CATEGORIES:
        directory = log_root_dir / category
        directory.mkdir(parents=True, exist_ok=True)
        file_handlers[f'{category}_file'] = _daily_file_handler(directory / f'{today}_{category}.log')

    level = 'DEBUG' if debug else 'INFO'

    LOGGING_CONFIG = {
        'version': 1,
        'disable_existing_loggers': False,

        # ==================== 格式化器 ====================
        'formatters': {
            'json': {
                '()': 'pythonjsonlogger.jsonlogger.JsonFormatter',
                'format': '%(asctime)s %(name)s %(levelname)s %(message)s',
                'timestamp': True
            },
            'simple': {
                'format': '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
                'datefmt': '%Y-%m-%d %H:%M:%S'
            }
        },

        # ==================== 处理器 ====================
        'handlers': {
            **file_handlers,

            'console': {
                'class': 'logging.StreamHandler',
                'formatter': 'simple',
                'level': level
            }
        },

        # ==================== Logger配置 ====================
        'loggers': {
            'domain.run_lifecycle': {
                'handlers': ['run_lifecycle_file', 'console'],
                'level': 'INFO',
                'propagate': False
            },

            'domain.crawl_process': {
                'handlers': ['crawl_process_file', 'console'],
                'level': level,
                'propagate': False
            },

            'infrastructure.error': {
                'handlers': ['error_file', 'console'],
                'level': 'WARNING',
                'propagate': False
            },

            'sitemap_gen': {
                'handlers': ['console'],
                'level': level,
                'propagate': False
            }
        },

        # ==================== 根Logger（兜底） ====================
        'root': {
            'level': 'WARNING',
            'handlers': ['console']
        }
    }

    logging.config.dictConfig(LOGGING_CONFIG)

    # 自定义文件命名（实现日期前缀命名）
    _setup_custom_namer()

    logger = get_run_lifecycle_logger()
    logger.info("日志系统初始化完成", extra={'log_root_dir': str(log_root_dir)})

    return log_root_dir


def date_prefixed_name(default_name: str) -> str:
    """
    切换后的文件名改为日期前缀

    默认命名：2025-11-30_crawl_process.log.2025-11-29
    修正后：  2025-11-29_crawl_process.log
    """
    path = Path(default_name)
    parts = path.name.split('.')
    if len(parts) != 3 or parts[1] != 'log' or '_' not in parts[0]:
        return default_name

    log_type = parts[0].split('_', 1)[1]
    return str(path.parent / f"{parts[2]}_{log_type}.log")


def _setup_custom_namer():
    for logger_name in LOGGER_NAMES:
        for handler in logging.getLogger(logger_name).handlers:
            if isinstance(handler, logging.handlers.TimedRotatingFileHandler):
                handler.namer = date_prefixed_name


# ==================== 便捷获取Logger的函数 ====================

def get_run_lifecycle_logger() -> logging.Logger:
    """获取运行生命周期日志Logger（EventHandler使用）"""
    return logging.getLogger('domain.run_lifecycle')


def get_crawl_process_logger() -> logging.Logger:
    """获取爬取过程日志Logger（EventHandler使用）"""
    return logging.getLogger('domain.crawl_process')


def get_error_logger() -> logging.Logger:
    """获取错误日志Logger（Infrastructure层使用）"""
    return logging.getLogger('infrastructure.error')
