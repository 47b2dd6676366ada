from typing import Iterator, List, Optional
from abc import ABC, abstractmethod


class IHtmlParser(ABC):
    """只负责HTML结构解析，不包含业务判断"""

    @abstractmethod
    def iter_hrefs(self, html: str) -> Iterator[str]:
        """按文档顺序惰性返回所有 <a href> 的原始值（未解析、未标准化）"""
        pass

    @abstractmethod
    def extract_base_href(self, html: str) -> Optional[str]:
        """返回 <base href> 的值，没有则返回 None"""
        pass

    @abstractmethod
    def extract_meta_robots(self, html: str) -> List[str]:
        """
        返回所有 <meta name="robots"> 的 content 指令（逗号拆分、去空白、小写）
        name 大小写不敏感，属性顺序任意
        """
        pass
