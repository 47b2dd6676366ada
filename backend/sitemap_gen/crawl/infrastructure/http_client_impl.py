import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry
from ..domain.demand_interface.i_http_client import IHttpClient
from ..domain.value_objects.http_response import HttpResponse


# 顺序有意义：ConnectTimeout 同时是 Timeout 和 ConnectionError，按超时处理
_FAILURES = (
    (requests.exceptions.Timeout, "请求超时", lambda client, e: f"请求超过{client._timeout}秒未响应"),
    (requests.exceptions.ConnectionError, "连接失败", lambda client, e: f"无法连接到服务器: {str(e)}"),
    (requests.exceptions.TooManyRedirects, "重定向过多", lambda client, e: "重定向次数超过限制"),
)

_RETRY_STATUSES = (429, 500, 502, 503, 504)


class HttpClientImpl(IHttpClient):
    """
    基于 requests 的 HTTP 客户端

    - 一个 Session 被同一批次的所有工作线程共用，连接池大小与批次并发数一致；
    - 重试交给 urllib3 的 Retry（连接错误、读超时、429/5xx）；
    - 所有网络异常都转换为 is_success=False 的 HttpResponse，从不向爬取循环抛出。
    """

    def __init__(
        self,
        user_agent: str = "SitemapGenerator",
        timeout: int = 15,
        max_retries: int = 2,
        retry_backoff: float = 0.3,
        pool_size: int = 10
    ):
        """
        参数:
            user_agent: 每个请求（包括 robots.txt）携带的 User-Agent
            timeout: 单次请求超时(秒)
            max_retries: 最大重试次数，0 表示不重试（ping 使用）
            retry_backoff: 重试退避系数
            pool_size: 连接池大小
        """
        self._timeout = timeout
        self._session = self._build_session(user_agent, max_retries, retry_backoff, pool_size)

    @staticmethod
    def _build_session(user_agent: str, max_retries: int, retry_backoff: float, pool_size: int) -> requests.Session:
        session = requests.Session()
        session.headers.update({
            'User-Agent': user_agent,
            'Accept': 'text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8',
            'Accept-Language': 'en;q=0.9,*;q=0.5',
            'Accept-Encoding': 'gzip, deflate',
            'Connection': 'keep-alive'
        })

        retry = Retry(
            total=max_retries,
            connect=max_retries,
            read=max_retries,
            redirect=5,
            backoff_factor=retry_backoff,
            status_forcelist=_RETRY_STATUSES,
            allowed_methods=["HEAD", "GET", "OPTIONS"],
            raise_on_status=False,
        )
        adapter = HTTPAdapter(max_retries=retry, pool_connections=pool_size, pool_maxsize=pool_size)
        session.mount("http://", adapter)
        session.mount("https://", adapter)
        return session

    def get(self, url: str) -> HttpResponse:
        """
        GET 请求，自动跟随重定向

        返回:
            HttpResponse；url 为重定向后的最终地址，非 2xx 时 error_message 为 "HTTP <状态码>"
        """
        try:
            response = self._session.get(url, timeout=self._timeout, allow_redirects=True)
        except requests.exceptions.RequestException as e:
            return self._failure(url, e)

        return HttpResponse(
            url=response.url,
            status_code=response.status_code,
            headers=dict(response.headers),
            content=self._decode(response),
            content_type=response.headers.get('Content-Type', ''),
            is_success=response.ok,
            error_message=None if response.ok else f"HTTP {response.status_code}",
            elapsed=response.elapsed.total_seconds() if response.elapsed else 0.0
        )

    @staticmethod
    def _decode(response: requests.Response) -> str:
        # header 未声明编码时 requests 回落到 ISO-8859-1，改用内容探测的编码
        if response.encoding == 'ISO-8859-1':
            response.encoding = response.apparent_encoding
        if not response.encoding:
            response.encoding = 'utf-8'
        return response.text

    def _failure(self, url: str, error: requests.exceptions.RequestException) -> HttpResponse:
        for exc_type, label, describe in _FAILURES:
            if isinstance(error, exc_type):
                message = f"{label}: {describe(self, error)}"
                break
        else:
            message = f"请求异常: 请求失败: {str(error)}"

        return HttpResponse(
            url=url,
            status_code=0,
            headers={},
            content='',
            content_type='',
            is_success=False,
            error_message=message
        )

    def close(self):
        self._session.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
