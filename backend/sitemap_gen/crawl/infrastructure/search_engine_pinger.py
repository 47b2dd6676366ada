from typing import Dict, List, Tuple
from urllib.parse import quote

from ..domain.demand_interface.i_http_client import IHttpClient


PING_ENDPOINTS: Dict[str, str] = {
    'Google': 'https://www.google.com/ping?sitemap={sitemap}',
    'Bing': 'https://www.bing.com/ping?sitemap={sitemap}',
    'Yandex': 'https://webmaster.yandex.com/ping?sitemap={sitemap}',
}


class SearchEnginePinger:
    """站点地图生成后通知搜索引擎（简单的 GET 请求，失败不影响运行结果）"""

    def __init__(self, http_client: IHttpClient, endpoints: Dict[str, str] = None):
        self._http = http_client
        self._endpoints = endpoints or PING_ENDPOINTS

    def ping(self, sitemap_url: str) -> List[Tuple[str, bool, str]]:
        """
        返回:
            [(引擎名, 是否成功, 说明)]
        """
        results = []
        encoded = quote(sitemap_url, safe='')
        for name, template in self._endpoints.items():
            response = self._http.get(template.format(sitemap=encoded))
            if response.is_success:
                results.append((name, True, f"Response Length: {len(response.content)}"))
            else:
                results.append((name, False, response.error_message or "Unknown error"))
        return results
