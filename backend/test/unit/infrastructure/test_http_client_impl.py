"""
HttpClientImpl 的 pytest 测试套件
覆盖：初始化配置、GET 成功/失败状态码、重定向、编码、网络异常转换为失败响应
"""

import pytest
from unittest.mock import Mock, patch
import requests
import requests_mock

from sitemap_gen.crawl.infrastructure.http_client_impl import HttpClientImpl
from sitemap_gen.crawl.domain.value_objects.http_response import HttpResponse


# ============================================================================
# Fixtures
# ============================================================================

@pytest.fixture
def http_client():
    """创建 HttpClientImpl 实例并在测试后自动关闭"""
    client = HttpClientImpl(user_agent="TestBot/1.0", timeout=5, max_retries=2)
    yield client
    client.close()


@pytest.fixture
def mock_session():
    """Mock requests.Session 对象"""
    with patch('sitemap_gen.crawl.infrastructure.http_client_impl.requests.Session') as mock_session_cls:
        session = Mock()
        session.headers = {}
        mock_session_cls.return_value = session
        yield session


# ============================================================================
# 初始化和配置测试
# ============================================================================

class TestInitialization:

    def test_default_configuration(self):
        client = HttpClientImpl()
        assert client._timeout == 15
        assert client._session.headers['User-Agent'] == "SitemapGenerator"
        client.close()

    def test_custom_configuration(self, http_client):
        assert http_client._timeout == 5
        assert http_client._session.headers['User-Agent'] == "TestBot/1.0"
        assert 'gzip' in http_client._session.headers['Accept-Encoding']

    def test_adapter_retry_and_pool(self):
        client = HttpClientImpl(max_retries=3, pool_size=7)
        adapter = client._session.get_adapter("https://x.test")
        assert adapter.max_retries.total == 3
        assert adapter._pool_maxsize == 7
        client.close()

    def test_context_manager_closes_session(self):
        with patch.object(HttpClientImpl, 'close') as close:
            with HttpClientImpl():
                pass
        close.assert_called_once()


# ============================================================================
# GET 请求
# ============================================================================

class TestGet:

    def test_get_success(self, http_client):
        with requests_mock.Mocker() as m:
            m.get("https://x.test/page", text="<html>ok</html>", headers={'Content-Type': 'text/html'})

            response = http_client.get("https://x.test/page")

        assert isinstance(response, HttpResponse)
        assert response.is_success is True
        assert response.status_code == 200
        assert response.content == "<html>ok</html>"
        assert response.content_type == 'text/html'
        assert response.error_message is None
        assert m.last_request.headers['User-Agent'] == "TestBot/1.0"

    def test_get_follows_redirects(self, http_client):
        with requests_mock.Mocker() as m:
            m.get("https://x.test/old", status_code=301, headers={'Location': 'https://x.test/new'})
            m.get("https://x.test/new", text="moved")

            response = http_client.get("https://x.test/old")

        assert response.is_success is True
        assert response.url == "https://x.test/new"
        assert response.content == "moved"

    @pytest.mark.parametrize("status_code", [400, 403, 404, 500, 503])
    def test_get_error_status_is_failure(self, http_client, status_code):
        with requests_mock.Mocker() as m:
            m.get("https://x.test/page", status_code=status_code, text="error")

            response = http_client.get("https://x.test/page")

        assert response.is_success is False
        assert response.status_code == status_code
        assert response.error_message == f"HTTP {status_code}"

    def test_get_utf8_content(self, http_client):
        with requests_mock.Mocker() as m:
            m.get("https://x.test/cn", content="中文内容".encode('utf-8'),
                  headers={'Content-Type': 'text/html; charset=utf-8'})

            response = http_client.get("https://x.test/cn")

        assert response.content == "中文内容"

    def test_get_uses_timeout(self, mock_session):
        client = HttpClientImpl(timeout=7)
        mock_session.get.side_effect = requests.exceptions.Timeout("slow")

        response = client.get("https://x.test")

        mock_session.get.assert_called_once_with("https://x.test", timeout=7, allow_redirects=True)
        assert response.is_success is False
        assert "请求超时" in response.error_message


# ============================================================================
# 网络异常
# ============================================================================

class TestGetExceptions:

    @pytest.mark.parametrize("exception_cls,error_keyword", [
        (requests.exceptions.Timeout, "请求超时"),
        (requests.exceptions.ConnectionError, "连接失败"),
        (requests.exceptions.TooManyRedirects, "重定向过多"),
        (requests.exceptions.RequestException, "请求异常"),
    ])
    def test_network_exceptions_become_failed_responses(self, http_client, exception_cls, error_keyword):
        with requests_mock.Mocker() as m:
            m.get("https://x.test/page", exc=exception_cls("Network error"))

            response = http_client.get("https://x.test/page")

        assert response.is_success is False
        assert response.status_code == 0
        assert response.content == ''
        assert error_keyword in response.error_message
