"""
UrlQueueImpl 的 pytest 测试套件
覆盖：先进先出、深度限制、批次出队、边界情况
"""

import pytest

from sitemap_gen.crawl.infrastructure.url_queue_impl import UrlQueueImpl
from sitemap_gen.crawl.domain.value_objects.queued_url import QueuedUrl


@pytest.fixture
def queue():
    q = UrlQueueImpl()
    q.initialize("https://x.test", max_depth=2)
    return q


class TestUrlQueueImpl:

    def test_initialize_seeds_start_url(self, queue):
        assert queue.size() == 1
        assert queue.dequeue() == QueuedUrl(url="https://x.test", depth=0)
        assert queue.is_empty()

    def test_initialize_clears_previous_entries(self, queue):
        queue.enqueue("https://x.test/a", 1)
        queue.initialize("https://y.test", max_depth=1)
        assert [item.url for item in queue.dequeue_batch(10)] == ["https://y.test"]

    def test_fifo_order(self, queue):
        queue.enqueue("https://x.test/a", 1)
        queue.enqueue("https://x.test/b", 1)
        assert [queue.dequeue().url for _ in range(3)] == [
            "https://x.test", "https://x.test/a", "https://x.test/b"
        ]

    def test_entries_deeper_than_max_depth_are_dropped(self, queue):
        queue.enqueue("https://x.test/deep", 3)
        queue.enqueue("https://x.test/ok", 2)
        assert queue.size() == 2

    def test_dequeue_batch_respects_size(self, queue):
        for i in range(5):
            queue.enqueue(f"https://x.test/{i}", 1)

        first = queue.dequeue_batch(4)
        second = queue.dequeue_batch(4)

        assert [item.url for item in first] == ["https://x.test", "https://x.test/0", "https://x.test/1", "https://x.test/2"]
        assert [item.url for item in second] == ["https://x.test/3", "https://x.test/4"]
        assert queue.dequeue_batch(4) == []

    def test_dequeue_empty_returns_none(self):
        assert UrlQueueImpl().dequeue() is None

    def test_clear(self, queue):
        queue.clear()
        assert queue.is_empty()
