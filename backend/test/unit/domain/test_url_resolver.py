"""
url_resolver 的 pytest 测试套件
覆盖：相对/绝对/协议相对链接解析、忽略的协议、fragment、标准化与幂等性、同站判断
"""

import pytest

from sitemap_gen.crawl.domain.domain_service.url_resolver import (
    resolve, canonicalize, host_of, is_same_host
)


BASE = "https://example.com/docs/page"


class TestResolve:

    @pytest.mark.parametrize("href,expected", [
        ("/about", "https://example.com/about"),
        ("/about/", "https://example.com/about"),
        ("/", "https://example.com"),
        ("child", "https://example.com/docs/child"),
        ("./child", "https://example.com/docs/child"),
        ("../up", "https://example.com/up"),
        ("page?x=1", "https://example.com/docs/page?x=1"),
        ("/search?q=a#results", "https://example.com/search?q=a"),
    ])
    def test_relative_links(self, href, expected):
        assert resolve(href, BASE) == expected

    def test_absolute_link_is_kept(self):
        assert resolve("https://Other.example.org/x/", BASE) == "https://Other.example.org/x"

    def test_protocol_relative_link_uses_base_scheme(self):
        assert resolve("//cdn.example.com/lib", BASE) == "https://cdn.example.com/lib"

    def test_base_directory_is_used_for_relative_links(self):
        assert resolve("a.html", "http://example.com/dir/") == "http://example.com/dir/a.html"

    def test_dot_segments_never_escape_root(self):
        assert resolve("../../../x", "http://example.com/a/b") == "http://example.com/x"

    @pytest.mark.parametrize("href", [
        "mailto:a@b.com",
        "MAILTO:a@b.com",
        "javascript:void(0)",
        "tel:+123456",
        "#top",
        "   ",
        "",
        None,
    ])
    def test_ignored_links(self, href):
        assert resolve(href, BASE) is None

    def test_result_never_contains_fragment(self):
        for href in ["/a#b", "c#d", "https://example.com/e#f", "//example.com/g#h"]:
            result = resolve(href, BASE)
            assert result is not None
            assert '#' not in result

    def test_invalid_base_returns_none(self):
        assert resolve("/about", "not a url") is None


class TestCanonicalize:

    @pytest.mark.parametrize("url,expected", [
        ("HTTP://Example.COM/Path", "http://example.com/Path"),
        ("https://example.com/", "https://example.com"),
        ("https://example.com/blog/index.html", "https://example.com/blog"),
        ("https://example.com/index.php", "https://example.com"),
        ("https://example.com/a/index.php/", "https://example.com/a"),
        ("https://example.com/p?q=1#frag", "https://example.com/p?q=1"),
    ])
    def test_canonical_forms(self, url, expected):
        assert canonicalize(url) == expected

    @pytest.mark.parametrize("url", ["", "   ", "not a url", "/relative/path", None])
    def test_invalid_input_yields_empty_string(self, url):
        assert canonicalize(url) == ''

    @pytest.mark.parametrize("url", [
        "https://Example.com/a/index.html/index.php/",
        "http://example.com//",
        "https://example.com/x/?a=b",
        "https://example.com/index.htm",
    ])
    def test_idempotent(self, url):
        once = canonicalize(url)
        assert canonicalize(once) == once


class TestHosts:

    def test_host_of_lowercases(self):
        assert host_of("https://WWW.Example.com:8080/a") == "www.example.com"

    def test_host_of_invalid(self):
        assert host_of("no-scheme") == ''

    @pytest.mark.parametrize("a,b,expected", [
        ("www.example.com", "example.com", True),
        ("example.com", "www.example.com", True),
        ("EXAMPLE.com", "example.com", True),
        ("blog.example.com", "example.com", False),
        ("", "example.com", False),
    ])
    def test_is_same_host(self, a, b, expected):
        assert is_same_host(a, b) is expected
