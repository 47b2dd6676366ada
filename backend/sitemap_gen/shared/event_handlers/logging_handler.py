# shared/event_handlers/logging_handler.py
from typing import Dict, List, Optional
from collections import deque
import logging
from .base_event_handler import BaseEventHandler
from sitemap_gen.shared.domain.events import DomainEvent
from sitemap_gen.shared.logging_config import get_crawl_process_logger, get_run_lifecycle_logger


_LEVELS = {
    'DEBUG': logging.DEBUG,
    'INFO': logging.INFO,
    'SUCCESS': logging.INFO,
    'WARNING': logging.WARNING,
    'ERROR': logging.ERROR,
}

_LIFECYCLE_EVENTS = {
    'RunStartedEvent', 'RunCompletedEvent', 'CacheResetEvent', 'CacheResumedEvent',
    'DomainStartedEvent', 'DomainCompletedEvent', 'DomainAbortedEvent',
    'SitemapWrittenEvent', 'SearchEnginePingedEvent',
}


class LoggingEventHandler(BaseEventHandler):
    """
    日志事件处理器
    职责：
    1. 捕获领域事件并转换为日志格式
    2. 按运行ID分组存储日志到内存队列（只追加的运行日志）
    3. 提供日志查询接口，供健康报告、纯文本日志和 API 使用
    """

    def __init__(self, max_logs_per_run: Optional[int] = None, include_debug: bool = False):
        """
        初始化日志处理器

        参数:
            max_logs_per_run: 每次运行最多保留的日志条数（超出则丢弃最旧的），None 表示不限
            include_debug: 是否把 DEBUG 级别事件（入队、过滤）也保存到内存日志
        """
        self._run_logs: Dict[str, deque] = {}
        self._max_logs_per_run = max_logs_per_run
        self._include_debug = include_debug

        self._process_logger = get_crawl_process_logger()
        self._lifecycle_logger = get_run_lifecycle_logger()

# -------------------- 最重要的方法：将事件转换为日志格式并存储 --------------------

    def handle(self, event: DomainEvent) -> None:
        """
        处理事件：转换为日志格式并存储

        参数:
            event: DomainEvent 实例
        """
        log_entry = self._format_event_to_log(event)
        level = log_entry['level']

        logger = self._lifecycle_logger if event.event_type in _LIFECYCLE_EVENTS else self._process_logger
        logger.log(_LEVELS.get(level, logging.INFO), log_entry['message'], extra={
            'event_type': log_entry['event_type'],
            'run_id': log_entry['run_id']
        })

        if level == 'DEBUG' and not self._include_debug:
            return

        run_id = getattr(event, 'run_id', 'unknown_run')
        if run_id not in self._run_logs:
            self._run_logs[run_id] = deque(maxlen=self._max_logs_per_run)
        self._run_logs[run_id].append(log_entry)

# -------------------- 日志查询接口 --------------------

    def get_logs(self, run_id: str, last_n: Optional[int] = None) -> List[dict]:
        """
        获取运行日志

        参数:
            run_id: 运行ID
            last_n: 获取最近N条，None表示全部
        """
        logs = self._run_logs.get(run_id, deque())

        if last_n:
            return list(logs)[-last_n:]
        return list(logs)

    def get_all_run_ids(self) -> List[str]:
        """获取所有有日志的运行ID列表"""
        return list(self._run_logs.keys())

    def get_log_count(self, run_id: str) -> int:
        return len(self._run_logs.get(run_id, deque()))

    def get_logs_by_level(self, run_id: str, level: str) -> List[dict]:
        logs = self._run_logs.get(run_id, deque())
        return [log for log in logs if log['level'] == level]

    def get_error_logs(self, run_id: str) -> List[dict]:
        """快捷方法：获取所有错误日志"""
        return self.get_logs_by_level(run_id, 'ERROR')

    def render_text(self, run_id: str) -> str:
        """将运行日志渲染为纯文本（crawl_log.txt / 邮件正文）"""
        return "\n".join(log['message'] for log in self.get_logs(run_id))

# -------------------- 丢弃和检查错误 --------------------

    def discard_run(self, run_id: str) -> None:
        """丢弃整次运行的日志（Web 进程淘汰旧运行时调用）"""
        self._run_logs.pop(run_id, None)

    def has_errors(self, run_id: str) -> bool:
        return len(self.get_error_logs(run_id)) > 0
