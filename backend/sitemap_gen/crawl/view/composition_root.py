"""
组合根：按一次运行的配置组装基础设施、领域服务与应用服务
CLI 与 Web 入口共用，保证两种入口的行为一致
"""

from typing import Optional

from ..domain.demand_interface.i_report_mailer import IReportMailer
from ..domain.domain_service.rule_engine import RuleEngine
from ..domain.value_objects.crawl_config import CrawlConfig
from ..infrastructure.filter_config_loader import load_filter_config_for
from ..infrastructure.html_parser_impl import HtmlParserImpl
from ..infrastructure.http_client_impl import HttpClientImpl
from ..infrastructure.robots_txt_parser_impl import RobotsTxtParserImpl
from ..infrastructure.search_engine_pinger import SearchEnginePinger
from ..infrastructure.visited_store_impl import VisitedStoreImpl
from ..services.crawler_service import CrawlerService
from ..services.sitemap_run_service import SitemapRunService
from sitemap_gen.shared.event_bus import EventBus
from sitemap_gen.shared.event_handlers.logging_handler import LoggingEventHandler
from sitemap_gen.sitemap.services.sitemap_builder import SitemapBuilder


PING_TIMEOUT = 10


def build_run_service(
    config: CrawlConfig,
    event_bus: EventBus,
    run_log: LoggingEventHandler,
    mailer: Optional[IReportMailer] = None
) -> SitemapRunService:
    """
    参数:
        config: 本次运行配置
        event_bus: 事件总线（run_log 必须已订阅在上面）
        run_log: 日志事件处理器
        mailer: 邮件报告投递（可选）
    """
    http_client = HttpClientImpl(
        user_agent=config.user_agent,
        timeout=config.timeout,
        max_retries=config.max_retries,
        pool_size=config.thread_count
    )
    html_parser = HtmlParserImpl()
    visited_store = VisitedStoreImpl(config.cache_dir)
    rule_engine = RuleEngine(load_filter_config_for(config), ignored_extensions=config.ignored_extensions)

    crawler = CrawlerService(
        config=config,
        http_client=http_client,
        html_parser=html_parser,
        robots_parser=RobotsTxtParserImpl(http_client),
        visited_store=visited_store,
        rule_engine=rule_engine,
        event_bus=event_bus
    )

    builder = SitemapBuilder(
        rule_engine=rule_engine,
        pretty=config.pretty_xml,
        use_gzip=config.use_gzip
    )

    pinger = None
    if config.ping:
        pinger = SearchEnginePinger(HttpClientImpl(
            user_agent=config.user_agent, timeout=PING_TIMEOUT, max_retries=0
        ))

    return SitemapRunService(
        config=config,
        crawler_service=crawler,
        visited_store=visited_store,
        sitemap_builder=builder,
        event_bus=event_bus,
        run_log=run_log,
        pinger=pinger,
        mailer=mailer
    )


def build_event_pipeline(include_debug: bool = False):
    """
    创建事件总线并订阅日志处理器

    返回:
        (event_bus, run_log)
    """
    event_bus = EventBus()
    run_log = LoggingEventHandler(include_debug=include_debug)
    event_bus.subscribe_to_all(run_log.handle)
    return event_bus, run_log
