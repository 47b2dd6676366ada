from collections import defaultdict
from typing import Callable, DefaultDict, List
import logging

from sitemap_gen.shared.domain.events import DomainEvent


EventHandler = Callable[[DomainEvent], None]


class EventBus:
    """
    事件总线 - 共享基础设施
    不定义接口，直接实现（因为只有一个版本）

    事件只在控制线程上发布（批次屏障之后），处理器按订阅顺序同步执行；
    单个处理器失败只记录日志，不影响其他处理器，也不会中断爬取。
    """

    def __init__(self):
        self._handlers: DefaultDict[str, List[EventHandler]] = defaultdict(list)
        self._global_handlers: List[EventHandler] = []
        self._logger = logging.getLogger(__name__)

    def subscribe(self, event_type: str, handler: EventHandler) -> None:
        """按事件类型名订阅（如 "RobotsBlockedEvent"）"""
        self._handlers[event_type].append(handler)
        self._logger.debug(f"订阅事件: {event_type}")

    def subscribe_to_all(self, handler: EventHandler) -> None:
        """订阅全部事件（运行日志处理器使用）"""
        self._global_handlers.append(handler)
        self._logger.debug("订阅全部事件")

    def publish(self, event: DomainEvent) -> None:
        for handler in [*self._handlers.get(event.event_type, ()), *self._global_handlers]:
            try:
                handler(event)
            except Exception as e:
                self._logger.error(f"事件处理失败: {event.event_type} - {type(e).__name__}: {str(e)}")

    def unsubscribe(self, event_type: str, handler: EventHandler) -> None:
        if handler in self._handlers.get(event_type, ()):
            self._handlers[event_type].remove(handler)
