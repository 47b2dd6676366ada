from unittest.mock import Mock

from sitemap_gen.crawl.domain.value_objects.http_response import HttpResponse
from sitemap_gen.crawl.infrastructure.search_engine_pinger import SearchEnginePinger, PING_ENDPOINTS


def make_response(url, ok, content=""):
    return HttpResponse(
        url=url, status_code=200 if ok else 0, headers={}, content=content,
        content_type="", is_success=ok, error_message=None if ok else "连接失败: refused"
    )


class TestSearchEnginePinger:

    def test_pings_every_engine_with_encoded_url(self):
        http_client = Mock()
        http_client.get.side_effect = lambda url: make_response(url, True, "ok")

        results = SearchEnginePinger(http_client).ping("https://x.test/sitemap.xml")

        called = [c.args[0] for c in http_client.get.call_args_list]
        assert called[0] == "https://www.google.com/ping?sitemap=https%3A%2F%2Fx.test%2Fsitemap.xml"
        assert len(called) == len(PING_ENDPOINTS)
        assert results[0] == ("Google", True, "Response Length: 2")

    def test_failure_is_reported_not_raised(self):
        http_client = Mock()
        http_client.get.side_effect = lambda url: make_response(url, "bing" not in url)

        results = dict((name, (ok, detail)) for name, ok, detail in
                       SearchEnginePinger(http_client).ping("https://x.test/sitemap.xml"))

        assert results["Bing"] == (False, "连接失败: refused")
        assert results["Google"][0] is True
        assert results["Yandex"][0] is True
