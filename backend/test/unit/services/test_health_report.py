from sitemap_gen.crawl.services.health_report import build_health_summary, render_health_report


def log(event_type, **data):
    return {"event_type": event_type, "data": data}


class TestHealthSummary:

    def test_counts_each_category(self):
        logs = [
            log("RobotsBlockedEvent", url="https://x.test/private"),
            log("RobotsBlockedEvent", url="https://x.test/private/2"),
            log("MetaBlockedEvent", url="https://x.test/hidden", directives=["noindex"]),
            log("CrawlErrorEvent", url="https://x.test/missing", status_code=404),
            log("CrawlErrorEvent", url="https://x.test/down", status_code=503),
            log("PageCrawledEvent", url="https://x.test/old", final_url="https://x.test/new", elapsed=0.2),
            log("PageCrawledEvent", url="https://x.test/slow", final_url="", elapsed=3.5),
        ]

        assert build_health_summary(logs) == {
            "blocked_robots": 2, "blocked_meta": 1, "http_errors": 2, "redirects": 1, "slow_pages": 1
        }

    def test_connection_errors_are_not_http_errors(self):
        logs = [log("CrawlErrorEvent", url="https://x.test/a", status_code=0)]
        assert build_health_summary(logs)["http_errors"] == 0

    def test_exactly_three_seconds_is_not_slow(self):
        logs = [log("PageCrawledEvent", url="https://x.test/a", elapsed=3.0)]
        assert build_health_summary(logs)["slow_pages"] == 0

    def test_empty_log(self):
        assert set(build_health_summary([]).values()) == {0}


def test_render_health_report():
    text = render_health_report({"blocked_robots": 2, "http_errors": 1})

    assert text == (
        "[HEALTH CHECK]\n"
        "BLOCKED_ROBOTS: 2\n"
        "BLOCKED_META: 0\n"
        "HTTP_ERRORS: 1\n"
        "REDIRECTS: 0\n"
        "SLOW_PAGES: 0\n"
    )
