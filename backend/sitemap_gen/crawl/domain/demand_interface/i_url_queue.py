from abc import ABC, abstractmethod
from typing import List, Optional
from ..value_objects.queued_url import QueuedUrl


class IUrlQueue(ABC):
    """
    URL队列接口（Frontier）- 管理待爬取的 (url, depth)
    职责: 先进先出，按批次出队
    """

    @abstractmethod
    def initialize(self, start_url: str, max_depth: int = 3) -> None:
        """
        初始化队列：清空后放入 (start_url, 0)

        参数:
            start_url: 起始URL
            max_depth: 最大爬取深度，超过的URL不入队
        """
        pass

    @abstractmethod
    def enqueue(self, url: str, depth: int) -> None:
        """添加URL到队列"""
        pass

    @abstractmethod
    def dequeue(self) -> Optional[QueuedUrl]:
        """取出下一个URL，队列为空时返回None"""
        pass

    @abstractmethod
    def dequeue_batch(self, size: int) -> List[QueuedUrl]:
        """按入队顺序取出最多 size 个URL"""
        pass

    @abstractmethod
    def is_empty(self) -> bool:
        pass

    @abstractmethod
    def size(self) -> int:
        pass

    @abstractmethod
    def clear(self) -> None:
        pass
