"""
模块职责（应用层：多域名编排）
- 按配置顺序逐个爬取域名（域名之间从不并发，并发只发生在单个域名的批次内）；
- 处理缓存的重置与断点续爬；
- 合并模式下把所有域名的已访问集合合并后一次性生成站点地图，
  按站点拆分模式下每个域名单独生成，再建立索引；
- 运行结束后写出健康报告与纯文本日志，并按配置发送邮件报告、通知搜索引擎。

错误处理
- 起始URL无效、拆分模式下输出目录不可用：只中止当前域名，继续后续域名；
- 合并模式下最终写出失败：向上抛出 OutputDirectoryError。
"""

import re
import time
import uuid
from datetime import datetime
from pathlib import Path
from typing import Dict, List, Optional
from urllib.parse import urlparse

from ..domain.demand_interface.i_report_mailer import IReportMailer
from ..domain.demand_interface.i_visited_store import IVisitedStore
from ..domain.domain_event.run_life_cycle_event import (
    RunStartedEvent, CacheResetEvent, CacheResumedEvent, DomainAbortedEvent,
    SitemapWrittenEvent, SearchEnginePingedEvent, RunCompletedEvent
)
from ..domain.domain_service.url_resolver import host_of, is_same_host
from ..domain.exceptions import InvalidStartUrlError, OutputDirectoryError
from ..domain.value_objects.crawl_config import CrawlConfig
from ..domain.value_objects.run_summary import RunSummary
from ..infrastructure.search_engine_pinger import SearchEnginePinger
from .crawler_service import CrawlerService
from .health_report import build_health_summary, render_health_report
from sitemap_gen.shared.event_bus import EventBus
from sitemap_gen.shared.event_handlers.logging_handler import LoggingEventHandler
from sitemap_gen.shared.logging_config import get_error_logger
from sitemap_gen.sitemap.domain.value_objects.sitemap_entry import SitemapFile
from sitemap_gen.sitemap.services.sitemap_builder import SitemapBuilder


EMAIL_SUBJECT = "Sitemap Crawl Report"
HEALTH_REPORT_FILE = "health_report.txt"
CRAWL_LOG_FILE = "crawl_log.txt"

_EMAIL_RE = re.compile(r'^[^@\s]+@[^@\s]+\.[^@\s]+$')


def is_valid_email(address: Optional[str]) -> bool:
    return bool(address) and bool(_EMAIL_RE.match(address))


class SitemapRunService:
    """
    应用服务 - 一次完整的站点地图生成运行
    """

    def __init__(
        self,
        config: CrawlConfig,
        crawler_service: CrawlerService,
        visited_store: IVisitedStore,
        sitemap_builder: SitemapBuilder,
        event_bus: EventBus,
        run_log: LoggingEventHandler,
        pinger: Optional[SearchEnginePinger] = None,
        mailer: Optional[IReportMailer] = None
    ):
        """
        参数:
            config: 运行配置
            crawler_service: 单域名爬取调度
            visited_store: 已访问状态存储（跨域名共用一个缓存文件）
            sitemap_builder: 站点地图生成器
            event_bus: 事件总线
            run_log: 订阅在事件总线上的日志处理器，健康报告与邮件正文来自它
            pinger: 搜索引擎通知（--ping 时使用）
            mailer: 邮件报告投递（可选）
        """
        self._config = config
        self._crawler = crawler_service
        self._store = visited_store
        self._builder = sitemap_builder
        self._event_bus = event_bus
        self._run_log = run_log
        self._pinger = pinger
        self._mailer = mailer
        self._error_logger = get_error_logger()

    def run(self, run_id: Optional[str] = None) -> RunSummary:
        """
        执行一次运行：爬取所有域名 -> 生成站点地图 -> 报告

        返回:
            RunSummary
        """
        config = self._config
        run_id = run_id or str(uuid.uuid4())
        summary = RunSummary(run_id=run_id, domains=list(config.domains))
        start_time = time.time()

        self._publish(RunStartedEvent(
            run_id=run_id,
            domains=list(config.domains),
            max_depth=config.max_depth,
            thread_count=config.thread_count,
            resume=config.resume
        ))

        # 1. 缓存：先重置，再按需恢复
        persisted = self._prepare_cache(run_id)

        # 2. 逐个域名爬取
        combined: Dict[str, bool] = {}
        files: List[SitemapFile] = []
        for start_url in config.domains:
            try:
                crawl = self._crawler.crawl_domain(run_id, start_url, self._seed_for(start_url, persisted))
            except InvalidStartUrlError as e:
                self._abort_domain(summary, start_url, e.message)
                continue

            summary.fetched_count += crawl.fetched_count

            if not config.split_by_site:
                combined.update(crawl.visited)
                continue

            try:
                files.extend(self._builder.write(crawl.visited, self._site_output_path(crawl.host)))
            except OutputDirectoryError as e:
                self._abort_domain(summary, start_url, e.message)

        # 3. 合并模式：所有域名结束后一次性生成
        if not config.split_by_site:
            files = self._builder.write(combined, config.output_path)

        index_file = self._write_index_if_needed(files)

        summary.sitemap_paths = [f.path for f in files]
        summary.index_path = index_file.path if index_file else None
        summary.url_count = sum(f.url_count for f in files)

        self._publish(SitemapWrittenEvent(
            run_id=run_id,
            paths=list(summary.sitemap_paths),
            url_count=summary.url_count,
            index_path=summary.index_path or ""
        ))

        # 4. 报告与通知
        if config.ping and self._pinger and files:
            self._ping(summary, index_file or files[0])

        summary.health = build_health_summary(self._run_log.get_logs(run_id))
        self._publish(RunCompletedEvent(
            run_id=run_id,
            url_count=summary.url_count,
            elapsed_time=time.time() - start_time
        ))
        self._write_reports(summary)
        self._send_report(summary)

        summary.status = "completed"
        summary.finished_at = datetime.now()
        return summary

# --------------------- 内部方法 ---------------------

    def _prepare_cache(self, run_id: str) -> Dict[str, bool]:
        if self._config.reset_cache:
            discarded = self._store.reset()
            self._publish(CacheResetEvent(run_id=run_id, discarded=discarded))

        if not self._config.resume:
            return {}

        persisted = self._store.load()
        self._publish(CacheResumedEvent(run_id=run_id, entries=len(persisted)))
        return persisted

    @staticmethod
    def _seed_for(start_url: str, persisted: Dict[str, bool]) -> Dict[str, bool]:
        """只把属于该域名的缓存记录带入本域名的已访问映射"""
        host = host_of(start_url)
        if not host or not persisted:
            return {}
        return {url: value for url, value in persisted.items() if is_same_host(host_of(url), host)}

    def _site_output_path(self, host: str) -> Path:
        output = Path(self._config.output_path)
        site_dir = re.sub(r'[^a-z0-9.\-]', '_', host.lower())
        return output.parent / site_dir / output.name

    def _index_path(self) -> Path:
        output = Path(self._config.output_path)
        return output.with_name(f"{output.stem}_index{output.suffix or '.xml'}")

    def _base_url(self) -> str:
        if self._config.sitemap_base_url:
            return self._config.sitemap_base_url
        for domain in self._config.domains:
            parsed = urlparse(domain)
            if parsed.scheme and parsed.netloc:
                return f"{parsed.scheme}://{parsed.netloc}"
        return ""

    def _write_index_if_needed(self, files: List[SitemapFile]) -> Optional[SitemapFile]:
        if len(files) <= 1:
            return None
        return self._builder.write_index(
            files, self._index_path(), self._base_url(), self._config.output_dir
        )

    def _abort_domain(self, summary: RunSummary, start_url: str, reason: str) -> None:
        summary.aborted_domains[start_url] = reason
        self._error_logger.error(f"域名处理中止: {start_url} - {reason}")
        self._publish(DomainAbortedEvent(run_id=summary.run_id, start_url=start_url, reason=reason))

    def _ping(self, summary: RunSummary, sitemap: SitemapFile) -> None:
        sitemap_url = SitemapBuilder.public_url(sitemap.path, self._base_url(), self._config.output_dir)
        for engine, success, detail in self._pinger.ping(sitemap_url):
            summary.ping_results[engine] = success
            self._publish(SearchEnginePingedEvent(
                run_id=summary.run_id, engine=engine, success=success, detail=detail
            ))

    def _write_reports(self, summary: RunSummary) -> None:
        """健康报告与纯文本日志写入日志目录，写失败只记录错误"""
        log_dir = Path(self._config.log_dir)
        try:
            log_dir.mkdir(parents=True, exist_ok=True)
            (log_dir / HEALTH_REPORT_FILE).write_text(render_health_report(summary.health), encoding='utf-8')
            (log_dir / CRAWL_LOG_FILE).write_text(self._run_log.render_text(summary.run_id), encoding='utf-8')
        except OSError as e:
            self._error_logger.error(f"运行报告写入失败: {log_dir} - {str(e)}")

    def _send_report(self, summary: RunSummary) -> None:
        if not self._mailer or not is_valid_email(self._config.email):
            return
        try:
            self._mailer.send_report(self._config.email, EMAIL_SUBJECT, self._run_log.render_text(summary.run_id))
        except Exception as e:
            self._error_logger.error(f"邮件报告发送失败: {self._config.email} - {type(e).__name__}: {str(e)}")

    def _publish(self, event) -> None:
        if self._event_bus:
            self._event_bus.publish(event)
