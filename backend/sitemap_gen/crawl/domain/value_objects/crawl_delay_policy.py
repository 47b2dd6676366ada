from enum import Enum


class CrawlDelayPolicy(Enum):
    """
    robots.txt Crawl-delay 的执行方式

    SERIALIZE: 批次内每处理完一个页面就休眠 crawl-delay 秒
    RATE_LIMIT: 不在处理阶段休眠，而是让同一域名内相邻两次请求的发起时间至少间隔 crawl-delay 秒
    """
    SERIALIZE = "serialize"
    RATE_LIMIT = "ratelimit"
