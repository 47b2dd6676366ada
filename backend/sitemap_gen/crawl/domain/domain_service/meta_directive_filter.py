from typing import List
from ..demand_interface.i_html_parser import IHtmlParser


BLOCKING_DIRECTIVES = ('noindex', 'nofollow')


class MetaDirectiveFilter:
    """
    页面级 <meta name="robots"> 过滤
    任一指令为 noindex 或 nofollow 即视为拦截：页面仍记为已访问，但不提取链接、不进站点地图
    """

    def __init__(self, html_parser: IHtmlParser, enabled: bool = True):
        self._parser = html_parser
        self._enabled = enabled

    @property
    def enabled(self) -> bool:
        return self._enabled

    def blocking_directives(self, html: str) -> List[str]:
        """返回命中的拦截指令，未命中或已禁用时返回空列表"""
        if not self._enabled or not html:
            return []
        directives = self._parser.extract_meta_robots(html)
        return [d for d in directives if d in BLOCKING_DIRECTIVES]
