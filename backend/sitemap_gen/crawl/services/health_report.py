"""
健康报告：由一次运行的日志条目统计 robots/meta 拦截、HTTP 错误、重定向与慢页面
"""

from typing import Dict, Iterable


SLOW_PAGE_SECONDS = 3.0

HEALTH_KEYS = ('blocked_robots', 'blocked_meta', 'http_errors', 'redirects', 'slow_pages')


def build_health_summary(logs: Iterable[dict]) -> Dict[str, int]:
    """
    参数:
        logs: LoggingEventHandler.get_logs() 返回的日志条目

    返回:
        {指标名: 次数}
    """
    summary = dict.fromkeys(HEALTH_KEYS, 0)

    for log in logs:
        event_type = log.get('event_type')
        data = log.get('data') or {}

        if event_type == 'RobotsBlockedEvent':
            summary['blocked_robots'] += 1
        elif event_type == 'MetaBlockedEvent':
            summary['blocked_meta'] += 1
        elif event_type == 'CrawlErrorEvent':
            if data.get('status_code', 0) >= 400:
                summary['http_errors'] += 1
        elif event_type == 'PageCrawledEvent':
            final_url = data.get('final_url')
            if final_url and final_url != data.get('url'):
                summary['redirects'] += 1
            if data.get('elapsed', 0) > SLOW_PAGE_SECONDS:
                summary['slow_pages'] += 1

    return summary


def render_health_report(summary: Dict[str, int]) -> str:
    lines = ["[HEALTH CHECK]"]
    lines.extend(f"{key.upper()}: {summary.get(key, 0)}" for key in HEALTH_KEYS)
    return "\n".join(lines) + "\n"
