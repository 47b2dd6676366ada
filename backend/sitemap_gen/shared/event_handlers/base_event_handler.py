from abc import ABC, abstractmethod
from datetime import datetime
from sitemap_gen.shared.domain.events import DomainEvent


class BaseEventHandler(ABC):
    """
    事件处理器基类
    提供通用的事件格式化方法
    """

    @abstractmethod
    def handle(self, event: DomainEvent) -> None:
        """
        处理事件（子类必须实现）

        参数:
            event: DomainEvent 实例
        """
        pass

    def _format_event_to_log(self, event: DomainEvent) -> dict:
        """
        将领域事件转换为日志格式（通用方法）

        返回:
            格式化的日志字典
        """
        message, level = self._get_message_and_level(event)

        return {
            "timestamp": self._format_timestamp(event.timestamp),
            "level": level,
            "message": message,
            "event_type": event.event_type,
            "run_id": event.run_id,
            "data": event.data
        }

    def _get_message_and_level(self, event: DomainEvent) -> tuple[str, str]:
        """
        根据事件类型生成消息和日志级别
        消息前缀沿用纯文本爬取日志的标签（[✓]、[robots.txt BLOCKED] 等），
        便于健康报告与人工排查。

        返回:
            (message, level) 元组
        """
        event_type = event.event_type
        data = event.data

        # --- 运行生命周期事件 ---
        if event_type == "RunStartedEvent":
            return (
                f"▶ 开始运行: {', '.join(data.get('domains', []))} "
                f"[最大深度: {data.get('max_depth')}, 线程数: {data.get('thread_count')}]",
                "INFO"
            )

        elif event_type == "CacheResetEvent":
            return (f"缓存已重置，丢弃 {data.get('discarded', 0)} 条已访问记录", "WARNING")

        elif event_type == "CacheResumedEvent":
            return (f"从缓存恢复爬取 ({data.get('entries', 0)} 条已访问记录)", "INFO")

        elif event_type == "DomainStartedEvent":
            return (f"--- Crawling: {data.get('start_url')} ---", "INFO")

        elif event_type == "DomainCompletedEvent":
            return (
                f"✓ 域名完成: {data.get('start_url')} "
                f"(新抓取 {data.get('fetched_count', 0)} 页, 已访问 {data.get('visited_count', 0)} 个URL, "
                f"耗时: {data.get('elapsed_time', 0):.1f}秒)",
                "SUCCESS"
            )

        elif event_type == "DomainAbortedEvent":
            return (f"✗ 域名中止: {data.get('start_url')} ({data.get('reason')})", "ERROR")

        elif event_type == "SitemapWrittenEvent":
            index_info = f", 索引: {data.get('index_path')}" if data.get('index_path') else ""
            return (
                f"Sitemap successfully created with {data.get('url_count', 0)} URLs "
                f"({len(data.get('paths', []))} 个文件{index_info})",
                "SUCCESS"
            )

        elif event_type == "SearchEnginePingedEvent":
            status = "Success" if data.get('success') else "Failed"
            return (
                f"[Ping][{data.get('engine')}] {status} - {data.get('detail', '')}",
                "INFO" if data.get('success') else "WARNING"
            )

        elif event_type == "RunCompletedEvent":
            return (
                f"✓ 运行完成: 共 {data.get('url_count', 0)} 个URL "
                f"(耗时: {data.get('elapsed_time', 0):.1f}秒)",
                "SUCCESS"
            )

        # --- 爬取过程事件 ---

        elif event_type == "RobotsLoadedEvent":
            if not data.get('loaded'):
                return (f"robots.txt not found or unreadable: {data.get('robots_url')}", "WARNING")
            delay = data.get('crawl_delay')
            delay_info = f", Crawl-delay detected: {delay}s" if delay else ""
            return (f"robots.txt 已加载: {data.get('rule_count', 0)} 条规则{delay_info}", "INFO")

        elif event_type == "PageCrawledEvent":
            url = data.get('url', '')
            final_url = data.get('final_url') or url
            redirect_info = f" [REDIRECT] -> {final_url}" if final_url != url else ""
            return (
                f"[✓] {url} (深度: {data.get('depth', 0)}, {data.get('elapsed', 0):.2f}s){redirect_info}",
                "INFO"
            )

        elif event_type == "RobotsBlockedEvent":
            return (f"[robots.txt BLOCKED] {data.get('url')}", "INFO")

        elif event_type == "MetaBlockedEvent":
            return (
                f"[META BLOCKED] {data.get('url')} ({', '.join(data.get('directives', []))})",
                "INFO"
            )

        elif event_type == "CrawlErrorEvent":
            status_code = data.get('status_code', 0)
            status_info = f"[HTTP {status_code}] " if status_code else ""
            return (
                f"✗ 爬取失败 [{data.get('error_type', 'UNKNOWN')}]: {status_info}{data.get('url', '')}\n"
                f"  错误: {data.get('error_message', '')}",
                "ERROR"
            )

        elif event_type == "LinkQueuedEvent":
            return (f"[QUEUE] {data.get('url')} (深度: {data.get('depth')})", "DEBUG")

        elif event_type == "LinkFilteredEvent":
            if data.get('reason') == "ignored_extension":
                return (f"[SKIPPED EXT] {data.get('url')}", "DEBUG")
            return (f"∅ 链接过滤: {data.get('url')} ({data.get('reason')})", "DEBUG")

        elif event_type == "BaseHrefFoundEvent":
            return (f"[BASE HREF] Found base: {data.get('base_href')}", "DEBUG")

        else:
            # 未知事件类型
            return (
                f"事件: {event_type}",
                "DEBUG"
            )

    def _format_timestamp(self, timestamp: datetime) -> str:
        """格式化时间戳"""
        if not isinstance(timestamp, datetime):
            return str(timestamp)
        return timestamp.strftime('%Y-%m-%d %H:%M:%S')
