"""
后台运行管理（Web 入口使用）
- 运行在后台线程中执行，不阻塞 HTTP 请求线程；
- 同一时间只允许一次运行（共用一个已访问缓存文件）；
- 保存最近若干次运行的 RunSummary 供状态查询，更早的已结束运行连同日志一起淘汰。
"""

import threading
import uuid
from datetime import datetime
from typing import Callable, Dict, List, Optional

from ..domain.exceptions import RunInProgressError
from ..domain.value_objects.crawl_config import CrawlConfig
from ..domain.value_objects.run_summary import RunSummary
from .sitemap_run_service import SitemapRunService
from sitemap_gen.shared.logging_config import get_error_logger


DEFAULT_MAX_FINISHED_RUNS = 20


class SitemapRunManager:

    def __init__(
        self,
        service_factory: Callable[[CrawlConfig], SitemapRunService],
        max_finished_runs: int = DEFAULT_MAX_FINISHED_RUNS,
        on_discard: Optional[Callable[[str], None]] = None
    ):
        """
        参数:
            service_factory: 按配置构建 SitemapRunService（通常是组合根）
            max_finished_runs: 最多保留的已结束运行数，超出时淘汰最早的
            on_discard: 运行被淘汰时以 run_id 回调（用于丢弃该运行的内存日志）
        """
        self._factory = service_factory
        self._max_finished_runs = max(1, max_finished_runs)
        self._on_discard = on_discard
        self._lock = threading.Lock()
        self._runs: Dict[str, RunSummary] = {}
        self._threads: Dict[str, threading.Thread] = {}
        self._active_run_id: Optional[str] = None
        self._error_logger = get_error_logger()

    @property
    def active_run_id(self) -> Optional[str]:
        return self._active_run_id

    def start(self, config: CrawlConfig) -> str:
        """
        启动后台运行

        返回:
            run_id

        异常:
            RunInProgressError: 已有运行未结束
        """
        with self._lock:
            if self._active_run_id is not None:
                raise RunInProgressError(self._active_run_id)

            run_id = str(uuid.uuid4())
            self._active_run_id = run_id
            self._runs[run_id] = RunSummary(run_id=run_id, domains=list(config.domains))
            thread = threading.Thread(target=self._execute, args=(run_id, config), daemon=True)
            self._threads[run_id] = thread

        thread.start()
        return run_id

    def _execute(self, run_id: str, config: CrawlConfig) -> None:
        try:
            summary = self._factory(config).run(run_id)
        except Exception as e:
            self._error_logger.error(f"运行失败: {run_id} - {type(e).__name__}: {str(e)}", exc_info=True)
            summary = self._runs[run_id]
            summary.status = "failed"
            summary.error = str(e)
            summary.finished_at = datetime.now()

        with self._lock:
            self._runs[run_id] = summary
            self._threads.pop(run_id, None)
            self._active_run_id = None
            discarded = self._prune_finished_runs()

        if self._on_discard:
            for old_run_id in discarded:
                self._on_discard(old_run_id)

    def _prune_finished_runs(self) -> List[str]:
        """按启动顺序淘汰超出保留数的已结束运行（调用方持有锁）"""
        finished = [run_id for run_id in self._runs if run_id != self._active_run_id]
        discarded = finished[:max(0, len(finished) - self._max_finished_runs)]
        for run_id in discarded:
            del self._runs[run_id]
        return discarded

    def get_run(self, run_id: str) -> Optional[RunSummary]:
        return self._runs.get(run_id)

    def wait(self, run_id: str, timeout: Optional[float] = None) -> Optional[RunSummary]:
        """阻塞等待后台运行结束"""
        thread = self._threads.get(run_id)
        if thread:
            thread.join(timeout)
        return self.get_run(run_id)
