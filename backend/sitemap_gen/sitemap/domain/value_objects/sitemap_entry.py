from dataclasses import dataclass
from datetime import date


@dataclass(frozen=True)
class SitemapEntry:
    """站点地图中的一个 <url>（由最终已访问集合推导，不单独存储）"""
    loc: str
    lastmod: date
    changefreq: str = "weekly"
    priority: str = "0.5"


@dataclass(frozen=True)
class SitemapFile:
    """已写出的站点地图文件（sitemap index 引用它）"""
    path: str
    url_count: int
    lastmod: date
