"""
模块职责（应用层：Frontier 与抓取调度）
- 驱动单个域名的爬取：Seed -> Batch-Fetch -> Expand -> (重复) -> Drain；
- 协调 URL 解析、robots 策略、meta 过滤、规则引擎与已访问存储；
- 以固定大小的线程池并发抓取一个批次，整批完成后才扩展队列（同步屏障）。

设计要点
- 同步屏障：下一批次的任何请求都不会在本批次全部返回（成功/失败/超时）之前开始；
- 去重只发生在控制线程上（批次选择与扩展阶段），工作线程只做网络请求，不触碰已访问映射；
- 单个URL的失败只记录事件，不会中止批次或整次运行；
- Crawl-delay 的执行方式由 CrawlDelayPolicy 明确指定（SERIALIZE / RATE_LIMIT）。
"""

import time
from concurrent.futures import ThreadPoolExecutor, wait
from typing import Callable, Dict, List, Optional
from urllib.parse import urljoin

from ..domain.demand_interface.i_http_client import IHttpClient
from ..domain.demand_interface.i_html_parser import IHtmlParser
from ..domain.demand_interface.i_robots_txt_parser import IRobotsTxtParser
from ..domain.demand_interface.i_url_queue import IUrlQueue
from ..domain.demand_interface.i_visited_store import IVisitedStore
from ..domain.domain_service.meta_directive_filter import MetaDirectiveFilter
from ..domain.domain_service.rule_engine import RuleEngine
from ..domain.domain_service.url_resolver import resolve, canonicalize, host_of, is_same_host
from ..domain.entity.domain_crawl import DomainCrawl
from ..domain.value_objects.crawl_config import CrawlConfig
from ..domain.value_objects.crawl_delay_policy import CrawlDelayPolicy
from ..domain.value_objects.http_response import HttpResponse
from ..domain.value_objects.queued_url import QueuedUrl
from ..domain.value_objects.robots_policy import RobotsPolicy
from ..infrastructure.url_queue_impl import UrlQueueImpl
from sitemap_gen.shared.event_bus import EventBus
from sitemap_gen.shared.logging_config import get_error_logger


class CrawlerService:
    """
    应用服务 - 单域名爬取调度
    职责：
    - 维护该域名的 URL 队列并按批次出队；
    - 批次内并发抓取，整批完成后逐个处理结果并扩展队列；
    - 每接受一个页面就持久化一次已访问映射；
    - 发布领域事件到事件总线。
    """

    def __init__(
        self,
        config: CrawlConfig,
        http_client: IHttpClient,
        html_parser: IHtmlParser,
        robots_parser: IRobotsTxtParser,
        visited_store: IVisitedStore,
        rule_engine: RuleEngine,
        event_bus: Optional[EventBus] = None,
        url_queue_factory: Callable[[], IUrlQueue] = UrlQueueImpl
    ):
        """
        构造函数注入依赖

        参数:
            config: 运行配置（深度、线程数、User-Agent、开关）
            http_client: HTTP客户端
            html_parser: HTML解析器
            robots_parser: robots.txt 解析器
            visited_store: 已访问状态存储
            rule_engine: 过滤/优先级规则
            event_bus: 事件总线 (可选，便于测试)
            url_queue_factory: 每个域名新建一个队列
        """
        self._config = config
        self._http = http_client
        self._parser = html_parser
        self._robots = robots_parser
        self._store = visited_store
        self._rules = rule_engine
        self._event_bus = event_bus
        self._queue_factory = url_queue_factory
        self._meta_filter = MetaDirectiveFilter(html_parser, enabled=not config.ignore_meta)
        self._error_logger = get_error_logger()

        # RATE_LIMIT 策略下记录本域名是否已发出过请求
        self._has_started_request = False

# -------------------- 单域名爬取 --------------------

    def crawl_domain(
        self,
        run_id: str,
        start_url: str,
        visited: Optional[Dict[str, bool]] = None
    ) -> DomainCrawl:
        """
        爬取一个域名直到队列耗尽

        参数:
            run_id: 运行ID（事件归属）
            start_url: 起始URL
            visited: 初始已访问映射（resume 时由缓存提供）

        返回:
            DomainCrawl 聚合根，包含最终的已访问映射
        """
        crawl = DomainCrawl(run_id, start_url, self._config.max_depth, visited)
        self._has_started_request = False

        # 1. robots.txt：每个域名加载一次，之后只读
        policy = self._load_robots_policy(crawl)

        # 2. Seed
        queue = self._queue_factory()
        queue.initialize(start_url, max_depth=self._config.max_depth)
        self._publish_domain_events(crawl)

        with ThreadPoolExecutor(max_workers=self._config.thread_count) as executor:
            while not queue.is_empty():
                # 3. Batch-Fetch：出队一个批次并筛选
                batch = queue.dequeue_batch(self._config.thread_count)
                fetchable = self._select_fetchable(crawl, batch, policy)

                # 4. 并发抓取，等待整批完成
                responses = self._fetch_batch(executor, fetchable, policy)

                # 5. Expand：逐个处理结果
                for queued, response in zip(fetchable, responses):
                    self._process_response(crawl, queue, queued, response)

                    if policy.crawl_delay and self._config.crawl_delay_policy is CrawlDelayPolicy.SERIALIZE:
                        time.sleep(policy.crawl_delay)

                self._publish_domain_events(crawl)

        # 6. Drain：队列耗尽，最终持久化（包含被拦截的URL）
        crawl.complete()
        self._store.persist(crawl.visited)
        self._publish_domain_events(crawl)
        return crawl

# --------------------- 内部方法 ---------------------

    def _load_robots_policy(self, crawl: DomainCrawl) -> RobotsPolicy:
        if not self._config.respect_robots:
            return RobotsPolicy.empty()

        policy = self._robots.load(crawl.start_url, self._config.user_agent)
        crawl.record_robots_loaded(policy)
        return policy

    def _select_fetchable(
        self,
        crawl: DomainCrawl,
        batch: List[QueuedUrl],
        policy: RobotsPolicy
    ) -> List[QueuedUrl]:
        """
        批次筛选：已访问 / 超过最大深度 / 规则排除 / robots 禁止 的条目不抓取
        robots 禁止的URL记为已访问，避免重复判定
        """
        fetchable = []
        selected = set()

        for queued in batch:
            canonical = canonicalize(queued.url)
            if not canonical:
                crawl.record_link_filtered(queued.url, "invalid_url")
                continue

            # 同一批次中可能出现重复的URL（入队时都还未访问）
            if crawl.is_url_visited(canonical) or canonical in selected:
                continue

            if queued.depth > self._config.max_depth:
                crawl.record_link_filtered(queued.url, "max_depth")
                continue

            if self._rules.is_ignored_file(canonical):
                crawl.record_link_filtered(queued.url, "ignored_extension")
                continue

            if self._rules.should_exclude(canonical):
                crawl.record_link_filtered(queued.url, "excluded")
                continue

            if policy.is_blocked(queued.url):
                crawl.record_robots_blocked(canonical)
                continue

            selected.add(canonical)
            fetchable.append(queued)

        return fetchable

    def _fetch_batch(
        self,
        executor: ThreadPoolExecutor,
        batch: List[QueuedUrl],
        policy: RobotsPolicy
    ) -> List[HttpResponse]:
        """并发抓取一个批次，阻塞直到所有请求结束"""
        if not batch:
            return []

        futures = []
        for queued in batch:
            if (policy.crawl_delay
                    and self._config.crawl_delay_policy is CrawlDelayPolicy.RATE_LIMIT
                    and self._has_started_request):
                # 相邻两次请求的发起时间至少间隔 crawl-delay 秒
                time.sleep(policy.crawl_delay)
            self._has_started_request = True
            futures.append(executor.submit(self._fetch_one, queued.url))

        wait(futures)
        return [future.result() for future in futures]

    def _fetch_one(self, url: str) -> HttpResponse:
        """在工作线程中执行，任何异常都转换为失败响应"""
        try:
            return self._http.get(url)
        except Exception as e:
            self._error_logger.error(f"抓取异常: {url} - {type(e).__name__}: {str(e)}")
            return HttpResponse(
                url=url,
                status_code=0,
                headers={},
                content='',
                content_type='',
                is_success=False,
                error_message=f"未预期的错误: {type(e).__name__} - {str(e)}"
            )

    def _process_response(
        self,
        crawl: DomainCrawl,
        queue: IUrlQueue,
        queued: QueuedUrl,
        response: HttpResponse
    ) -> None:
        url = queued.url
        canonical = canonicalize(url)

        # 1. 失败或空响应：不记为已访问，下次 resume 时可重试
        if not response.is_success:
            crawl.record_crawl_error(
                url, response.error_message or "请求失败", "RequestFailed", response.status_code
            )
            return

        html = response.content
        if not html:
            crawl.record_crawl_error(url, "[EMPTY RESPONSE]", "EmptyResponse", response.status_code)
            return

        # 2. meta robots：记为已访问，但不提取链接、不进站点地图
        directives = self._meta_filter.blocking_directives(html)
        if directives:
            crawl.record_meta_blocked(canonical, directives)
            return

        # 3. 接受页面并立即持久化
        crawl.mark_url_visited(canonical)
        # 只有标准化后仍不同的最终URL才算重定向（"https://x.test" -> "https://x.test/" 不算）
        redirected = response.url and canonicalize(response.url) != canonical
        crawl.record_page_crawled(
            url, queued.depth, response.status_code, response.elapsed,
            final_url=response.url if redirected else ""
        )
        self._store.persist(crawl.visited)

        # 4. 扩展队列
        self._expand_links(crawl, queue, queued, html)

    def _expand_links(self, crawl: DomainCrawl, queue: IUrlQueue, queued: QueuedUrl, html: str) -> None:
        base_context = queued.url
        base_href = self._parser.extract_base_href(html)
        if base_href:
            crawl.record_base_href(queued.url, base_href)
            base_context = urljoin(queued.url, base_href)

        next_depth = queued.depth + 1
        if next_depth > self._config.max_depth:
            return

        for href in self._parser.iter_hrefs(html):
            link = resolve(href, base_context)
            if link is None:
                continue

            canonical_link = canonicalize(link)
            if not canonical_link or crawl.is_url_visited(canonical_link):
                continue

            if self._rules.is_ignored_file(canonical_link):
                crawl.record_link_filtered(canonical_link, "ignored_extension")
                continue

            if self._rules.should_exclude(canonical_link):
                crawl.record_link_filtered(canonical_link, "excluded")
                continue

            if not is_same_host(host_of(canonical_link), crawl.host):
                continue

            queue.enqueue(canonical_link, next_depth)
            crawl.record_link_queued(canonical_link, next_depth)

    def _publish_domain_events(self, crawl: DomainCrawl):
        """发布聚合根中积压的领域事件"""
        if not self._event_bus:
            crawl.clear_events()
            return

        for event in crawl.get_uncommitted_events():
            self._event_bus.publish(event)

        crawl.clear_events()
