# crawl/infrastructure/url_queue_impl.py
from collections import deque
from typing import List, Optional
from ..domain.demand_interface.i_url_queue import IUrlQueue
from ..domain.value_objects.queued_url import QueuedUrl


class UrlQueueImpl(IUrlQueue):
    """URL队列实现 - 先进先出（广度优先），按批次出队"""

    def __init__(self):
        self._max_depth: int = 3
        self._queue: deque = deque()

    def initialize(self, start_url: str, max_depth: int = 3) -> None:
        """初始化队列"""
        self._max_depth = max_depth
        self.clear()

        # 添加起始URL(深度为0)
        self.enqueue(start_url, depth=0)

    def enqueue(self, url: str, depth: int) -> None:
        """添加URL到队列"""
        # 深度限制检查
        if depth > self._max_depth:
            return

        self._queue.append(QueuedUrl(url=url, depth=depth))

    def dequeue(self) -> Optional[QueuedUrl]:
        """从队列取出下一个URL"""
        if not self._queue:
            return None
        return self._queue.popleft()

    def dequeue_batch(self, size: int) -> List[QueuedUrl]:
        """取出一个批次（最多 size 个）"""
        batch = []
        while self._queue and len(batch) < size:
            batch.append(self._queue.popleft())
        return batch

    def is_empty(self) -> bool:
        """判断队列是否为空"""
        return len(self._queue) == 0

    def size(self) -> int:
        """返回队列大小"""
        return len(self._queue)

    def clear(self) -> None:
        """清空队列"""
        self._queue.clear()
