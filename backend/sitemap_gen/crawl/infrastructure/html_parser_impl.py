# crawl/infrastructure/html_parser_impl.py
from typing import Iterator, List, Optional, Tuple
from bs4 import BeautifulSoup

from ..domain.demand_interface.i_html_parser import IHtmlParser


class HtmlParserImpl(IHtmlParser):
    """基于BeautifulSoup的HTML解析器实现（静态HTML，不执行JavaScript）"""

    def __init__(self, parser: str = 'html.parser'):
        """
        初始化HTML解析器

        参数:
            parser: 解析器类型，可选值:
                   'html.parser' (Python内置，默认)
                   'lxml' (更快，需安装lxml)
                   'html5lib' (最宽容，需安装html5lib)
        """
        self._parser = parser
        # 最近一次解析的 (html, soup)：同一页面的 meta、base、链接提取共用一次解析
        self._last_document: Tuple[Optional[str], Optional[BeautifulSoup]] = (None, None)

    def _soup(self, html: str) -> BeautifulSoup:
        cached_html, cached_soup = self._last_document
        if cached_soup is not None and cached_html == html:
            return cached_soup

        soup = BeautifulSoup(html, self._parser)
        self._last_document = (html, soup)
        return soup

    def iter_hrefs(self, html: str) -> Iterator[str]:
        """
        按文档顺序返回所有 <a href> 的原始值

        说明:
            - 只做结构解析，mailto/javascript/锚点等由 url_resolver 统一过滤
            - 生成器：调用方可以随时停止迭代
        """
        if not html:
            return

        soup = self._soup(html)
        for a_tag in soup.find_all('a', href=True):
            href = a_tag.get('href')
            if isinstance(href, str) and href.strip():
                yield href

    def extract_base_href(self, html: str) -> Optional[str]:
        if not html:
            return None

        soup = self._soup(html)
        base_tag = soup.find('base', href=True)
        if base_tag is None:
            return None

        base_href = base_tag.get('href', '').strip()
        return base_href or None

    def extract_meta_robots(self, html: str) -> List[str]:
        """
        提取 <meta name="robots" content="..."> 的指令

        返回:
            指令列表（小写、去空白），例如 ['noindex', 'nofollow']
        """
        if not html:
            return []

        soup = self._soup(html)
        directives = []

        # html.parser 会把属性名转为小写，属性值保持原样，因此这里手动比较 name
        for meta in soup.find_all('meta'):
            name = meta.get('name')
            content = meta.get('content')
            if not isinstance(name, str) or name.strip().lower() != 'robots':
                continue
            if not isinstance(content, str):
                continue

            for token in content.split(','):
                token = token.strip().lower()
                if token:
                    directives.append(token)

        return directives
