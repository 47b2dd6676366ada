from dataclasses import dataclass, field
from typing import List, Optional
from sitemap_gen.shared.domain.events import DomainEvent


@dataclass
class RobotsLoadedEvent(DomainEvent):
    """robots.txt 加载完成（失败时 loaded=False，策略为空，不影响爬取）"""
    robots_url: str
    loaded: bool
    rule_count: int = 0
    crawl_delay: Optional[int] = None
    error_message: str = ""


@dataclass
class PageCrawledEvent(DomainEvent):
    """页面爬取成功事件"""
    url: str
    depth: int
    status_code: int
    elapsed: float = 0.0
    final_url: str = ""


@dataclass
class RobotsBlockedEvent(DomainEvent):
    """URL 被 robots.txt 禁止（标记为已访问，不请求）"""
    url: str


@dataclass
class MetaBlockedEvent(DomainEvent):
    """页面含 noindex/nofollow（标记为已访问，不提取链接，不进站点地图）"""
    url: str
    directives: List[str] = field(default_factory=list)


@dataclass
class CrawlErrorEvent(DomainEvent):
    """爬取过程中发生的非致命错误（如单个页面失败）"""
    url: str
    error_type: str
    error_message: str
    status_code: int = 0


@dataclass
class LinkQueuedEvent(DomainEvent):
    """新链接入队"""
    url: str
    depth: int


@dataclass
class LinkFilteredEvent(DomainEvent):
    """链接被过滤事件（调试用）"""
    url: str
    reason: str  # e.g., "excluded", "ignored_extension", "max_depth"


@dataclass
class BaseHrefFoundEvent(DomainEvent):
    """页面声明了 <base href>"""
    url: str
    base_href: str
