import threading
import time

import pytest

from sitemap_gen.crawl.domain.demand_interface.i_http_client import IHttpClient
from sitemap_gen.crawl.domain.value_objects.http_response import HttpResponse


class FakeSite(IHttpClient):
    """
    内存中的站点：URL -> HTML 字符串 / HttpResponse / 异常
    记录每次请求的开始与结束，用于检查批次屏障与并发上限
    """

    def __init__(self, pages, latency=0.0):
        self.pages = dict(pages)
        self.latency = latency
        self.requested = []
        self.timeline = []
        self.max_in_flight = 0
        self._in_flight = 0
        self._lock = threading.Lock()

    def get(self, url):
        with self._lock:
            self.requested.append(url)
            self.timeline.append(("start", url))
            self._in_flight += 1
            self.max_in_flight = max(self.max_in_flight, self._in_flight)

        try:
            if self.latency:
                time.sleep(self.latency)
            page = self.pages.get(url)
            if isinstance(page, Exception):
                raise page
            if isinstance(page, HttpResponse):
                return page
            if page is None:
                return HttpResponse(url, 404, {}, '', 'text/html', False, "HTTP 404")
            return HttpResponse(url, 200, {'Content-Type': 'text/html'}, page, 'text/html', True)
        finally:
            with self._lock:
                self._in_flight -= 1
                self.timeline.append(("end", url))

    def count(self, url):
        return self.requested.count(url)


@pytest.fixture
def make_site():
    return FakeSite
