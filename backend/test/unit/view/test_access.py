import pytest

from sitemap_gen.crawl.domain.exceptions import UnauthorizedError
from sitemap_gen.crawl.view.access import require_access_key, ACCESS_KEY_ENV


class TestRequireAccessKey:

    def test_matching_key_passes(self):
        require_access_key("s3cret", expected="s3cret")

    @pytest.mark.parametrize("provided", [None, "", "wrong", "s3cret "])
    def test_missing_or_wrong_key_rejected(self, provided):
        with pytest.raises(UnauthorizedError) as exc_info:
            require_access_key(provided, expected="s3cret")
        assert exc_info.value.message == "Unauthorized. Valid key parameter required."

    def test_reads_expected_key_from_environment(self, monkeypatch):
        monkeypatch.setenv(ACCESS_KEY_ENV, "from-env")

        require_access_key("from-env")
        with pytest.raises(UnauthorizedError):
            require_access_key("other")

    def test_unconfigured_key_rejects_everything(self, monkeypatch):
        monkeypatch.delenv(ACCESS_KEY_ENV, raising=False)

        with pytest.raises(UnauthorizedError):
            require_access_key("anything")
