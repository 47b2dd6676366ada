from abc import ABC, abstractmethod
from ..value_objects.http_response import HttpResponse

class IHttpClient(ABC):
    @abstractmethod
    def get(self, url: str) -> HttpResponse:
        """
        执行HTTP GET请求（跟随重定向，固定超时，自定义 User-Agent）
        返回: HttpResponse(status_code, headers, content, content_type)
        处理: 网络异常、超时、重试；失败时返回 is_success=False，不抛异常
        """
        pass
