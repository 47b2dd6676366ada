import datetime
from typing import Dict, List, Optional
from urllib.parse import urlparse
from sitemap_gen.shared.domain.events import DomainEvent
from ..domain_event.crawl_process_event import (
    RobotsLoadedEvent, PageCrawledEvent, RobotsBlockedEvent, MetaBlockedEvent,
    CrawlErrorEvent, LinkQueuedEvent, LinkFilteredEvent, BaseHrefFoundEvent
)
from ..domain_event.run_life_cycle_event import DomainStartedEvent, DomainCompletedEvent
from ..exceptions import InvalidStartUrlError
from ..value_objects.robots_policy import RobotsPolicy


class DomainCrawl:
    """
    单个域名的一次爬取，作为聚合根
    持有该域名的已访问映射（标准化URL -> 是否进入站点地图）和待发布的领域事件
    """

    def __init__(
        self,
        run_id: str,
        start_url: str,
        max_depth: int = 3,
        visited: Optional[Dict[str, bool]] = None
    ):
        parsed = urlparse(start_url)
        if not parsed.scheme or not parsed.hostname:
            raise InvalidStartUrlError(start_url)

        self.run_id = run_id
        self.start_url = start_url
        self.scheme = parsed.scheme
        self.host = parsed.hostname.lower()
        self.max_depth = max_depth
        self.fetched_count = 0
        self.started_at = datetime.datetime.now()
        self.finished_at: Optional[datetime.datetime] = None

        self._visited: Dict[str, bool] = dict(visited or {})
        self._events: List[DomainEvent] = []

        self._record_event(DomainStartedEvent(
            run_id=self.run_id,
            start_url=self.start_url,
            max_depth=self.max_depth,
            resumed_entries=len(self._visited)
        ))

    def _record_event(self, event: DomainEvent):
        self._events.append(event)

    def get_uncommitted_events(self) -> List[DomainEvent]:
        """获取未提交的领域事件（由应用服务读取并发布）"""
        return list(self._events)

    def clear_events(self):
        self._events.clear()

#-------------------   已访问映射   -------------------

    def is_url_visited(self, canonical_url: str) -> bool:
        return canonical_url in self._visited

    def mark_url_visited(self, canonical_url: str):
        """抓取成功：进入站点地图"""
        self._visited[canonical_url] = True

    def mark_url_blocked(self, canonical_url: str):
        """被策略拦截：记为已访问，但不进入站点地图"""
        self._visited[canonical_url] = False

    @property
    def visited(self) -> Dict[str, bool]:
        """已访问映射的副本"""
        return dict(self._visited)

    @property
    def indexable_urls(self) -> List[str]:
        return [url for url, indexable in self._visited.items() if indexable]

#-------------------   事件记录   -------------------

    def record_robots_loaded(self, policy: RobotsPolicy, error_message: str = ""):
        self._record_event(RobotsLoadedEvent(
            run_id=self.run_id,
            robots_url=policy.robots_url,
            loaded=policy.loaded,
            rule_count=len(policy.rules),
            crawl_delay=policy.crawl_delay,
            error_message=error_message
        ))

    def record_page_crawled(self, url: str, depth: int, status_code: int,
                            elapsed: float = 0.0, final_url: str = ""):
        self.fetched_count += 1
        self._record_event(PageCrawledEvent(
            run_id=self.run_id,
            url=url,
            depth=depth,
            status_code=status_code,
            elapsed=elapsed,
            final_url=final_url
        ))

    def record_robots_blocked(self, canonical_url: str):
        self.mark_url_blocked(canonical_url)
        self._record_event(RobotsBlockedEvent(run_id=self.run_id, url=canonical_url))

    def record_meta_blocked(self, canonical_url: str, directives: List[str]):
        self.mark_url_blocked(canonical_url)
        self._record_event(MetaBlockedEvent(run_id=self.run_id, url=canonical_url, directives=list(directives)))

    def record_crawl_error(self, url: str, error_message: str, error_type: str = "RequestFailed",
                           status_code: int = 0):
        self._record_event(CrawlErrorEvent(
            run_id=self.run_id,
            url=url,
            error_type=error_type,
            error_message=error_message,
            status_code=status_code
        ))

    def record_link_queued(self, url: str, depth: int):
        self._record_event(LinkQueuedEvent(run_id=self.run_id, url=url, depth=depth))

    def record_link_filtered(self, url: str, reason: str):
        self._record_event(LinkFilteredEvent(run_id=self.run_id, url=url, reason=reason))

    def record_base_href(self, url: str, base_href: str):
        self._record_event(BaseHrefFoundEvent(run_id=self.run_id, url=url, base_href=base_href))

#-------------------   状态转换   -------------------

    def complete(self):
        if self.finished_at is not None:
            return
        self.finished_at = datetime.datetime.now()
        self._record_event(DomainCompletedEvent(
            run_id=self.run_id,
            start_url=self.start_url,
            fetched_count=self.fetched_count,
            visited_count=len(self._visited),
            elapsed_time=(self.finished_at - self.started_at).total_seconds()
        ))
