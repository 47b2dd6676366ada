"""
RobotsTxtParserImpl 的 pytest 测试套件
覆盖：User-agent 分组选择、注释、Crawl-delay、加载失败降级
"""

import pytest
from unittest.mock import Mock

from sitemap_gen.crawl.infrastructure.robots_txt_parser_impl import RobotsTxtParserImpl
from sitemap_gen.crawl.domain.value_objects.http_response import HttpResponse
from sitemap_gen.crawl.domain.value_objects.robots_policy import RobotsRule, ALLOW, DISALLOW


# ============================================================================
# Fixtures
# ============================================================================

@pytest.fixture
def http_client():
    return Mock()


@pytest.fixture
def parser(http_client):
    return RobotsTxtParserImpl(http_client)


def make_response(url, content="", ok=True, status_code=200):
    return HttpResponse(
        url=url,
        status_code=status_code,
        headers={},
        content=content,
        content_type="text/plain",
        is_success=ok,
        error_message=None if ok else f"HTTP {status_code}"
    )


ROBOTS_TXT = """
# global rules
User-agent: *
Disallow: /private   # members only
Allow: /private/public

User-agent: SitemapGenerator
Disallow: /only-for-us
Crawl-delay: 2
"""


# ============================================================================
# 解析
# ============================================================================

class TestParse:

    def test_wildcard_group_for_unknown_agent(self, parser):
        policy = parser.parse(ROBOTS_TXT, "OtherBot")
        assert policy.rules == (
            RobotsRule(DISALLOW, "/private"),
            RobotsRule(ALLOW, "/private/public"),
        )
        assert policy.loaded is True

    def test_matching_agent_case_insensitive(self, parser):
        policy = parser.parse(ROBOTS_TXT, "sitemapgenerator")
        assert policy.rules == (RobotsRule(DISALLOW, "/only-for-us"),)

    def test_no_matching_group_is_empty(self, parser):
        policy = parser.parse("User-agent: Googlebot\nDisallow: /", "SitemapGenerator")
        assert policy.rules == ()
        assert policy.is_blocked("https://x.test/anything") is False

    def test_consecutive_user_agents_share_rules(self, parser):
        content = "User-agent: a\nUser-agent: b\nDisallow: /x\n\nUser-agent: c\nDisallow: /y"
        assert parser.parse(content, "a").rules == (RobotsRule(DISALLOW, "/x"),)
        assert parser.parse(content, "b").rules == (RobotsRule(DISALLOW, "/x"),)
        assert parser.parse(content, "c").rules == (RobotsRule(DISALLOW, "/y"),)

    def test_empty_disallow_allows_everything(self, parser):
        policy = parser.parse("User-agent: *\nDisallow:", "bot")
        assert policy.is_blocked("https://x.test/a") is False

    def test_rules_before_any_user_agent_are_ignored(self, parser):
        policy = parser.parse("Disallow: /x\nUser-agent: *\nDisallow: /y", "bot")
        assert policy.rules == (RobotsRule(DISALLOW, "/y"),)

    def test_crawl_delay_last_occurrence_wins(self, parser):
        content = "User-agent: *\nCrawl-delay: 1\nDisallow: /a\nCrawl-delay: 3"
        assert parser.parse(content, "bot").crawl_delay == 3

    def test_crawl_delay_integer_part(self, parser):
        assert parser.parse("User-agent: *\nCrawl-delay: 5.5", "bot").crawl_delay == 5

    def test_crawl_delay_absent(self, parser):
        assert parser.parse("User-agent: *\nDisallow: /a", "bot").crawl_delay is None

    def test_private_path_blocked(self, parser):
        policy = parser.parse("User-agent: *\nDisallow: /private", "SitemapGenerator")
        assert policy.is_blocked("https://x.test/private/page") is True
        assert policy.is_blocked("https://x.test/about") is False


# ============================================================================
# 加载
# ============================================================================

class TestLoad:

    def test_fetches_robots_from_domain_root(self, parser, http_client):
        http_client.get.return_value = make_response("https://x.test/robots.txt", ROBOTS_TXT)

        policy = parser.load("https://x.test/some/page", "OtherBot")

        http_client.get.assert_called_once_with("https://x.test/robots.txt")
        assert policy.robots_url == "https://x.test/robots.txt"
        assert policy.is_blocked("https://x.test/private/x") is True

    def test_fetch_failure_yields_empty_policy(self, parser, http_client):
        http_client.get.return_value = make_response("https://x.test/robots.txt", ok=False, status_code=404)

        policy = parser.load("https://x.test", "bot")

        assert policy.loaded is False
        assert policy.rules == ()
        assert policy.robots_url == "https://x.test/robots.txt"

    def test_empty_body_yields_empty_policy(self, parser, http_client):
        http_client.get.return_value = make_response("https://x.test/robots.txt", "")
        assert parser.load("https://x.test", "bot").loaded is False
