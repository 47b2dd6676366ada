"""
模块职责（领域服务：过滤与分类规则）
- is_ignored_file: 内置忽略的文件类型（图片、文档、压缩包、音视频），allowfiles 时为空；
- should_exclude: 扩展名排除 -> 通配符排除 -> 仅包含白名单（非空时生效）；
- priority_of / changefreq_of: 按子串匹配给出站点地图的 priority 与 changefreq。

设计要点
- 规则在构造时编译一次，之后只读；
- 排除规则先于仅包含规则评估，两者冲突时排除优先。
"""

import posixpath
import re
from typing import List, Pattern
from urllib.parse import urlparse

from ..value_objects.filter_config import FilterConfig


HIGH_PRIORITY = "0.8"
DEFAULT_PRIORITY = "0.5"
LOW_PRIORITY = "0.2"

DAILY = "daily"
WEEKLY = "weekly"
MONTHLY = "monthly"


def compile_wildcard(pattern: str) -> Pattern:
    """
    把通配符模式编译为正则
    "*" -> ".*"，其余字符全部转义；大小写不敏感，整串匹配
    """
    regex = '.*'.join(re.escape(part) for part in pattern.split('*'))
    return re.compile(regex, re.IGNORECASE)


class RuleEngine:
    """过滤/优先级/更新频率规则引擎"""

    def __init__(self, filter_config: FilterConfig = None, ignored_extensions: frozenset = frozenset()):
        self._config = filter_config or FilterConfig.empty()
        self._ignored_extensions = frozenset(ignored_extensions)
        self._exclude: List[Pattern] = [compile_wildcard(p) for p in self._config.exclude_patterns]
        self._include_only: List[Pattern] = [compile_wildcard(p) for p in self._config.include_only_patterns]

    @property
    def config(self) -> FilterConfig:
        return self._config

    def extension_of(self, url: str) -> str:
        """返回URL路径的扩展名（小写，不含点）"""
        try:
            path = urlparse(url).path
        except ValueError:
            return ''
        return posixpath.splitext(path)[1].lstrip('.').lower()

    def is_ignored_file(self, url: str) -> bool:
        return bool(self._ignored_extensions) and self.extension_of(url) in self._ignored_extensions

    def should_exclude(self, url: str) -> bool:
        if self._config.exclude_extensions and self.extension_of(url) in self._config.exclude_extensions:
            return True

        if any(pattern.fullmatch(url) for pattern in self._exclude):
            return True

        # 仅包含列表非空时作为最终白名单
        if self._include_only:
            return not any(pattern.fullmatch(url) for pattern in self._include_only)

        return False

    def priority_of(self, url: str) -> str:
        for pattern in self._config.high_priority_patterns:
            if pattern in url:
                return HIGH_PRIORITY
        for pattern in self._config.low_priority_patterns:
            if pattern in url:
                return LOW_PRIORITY
        return DEFAULT_PRIORITY

    def changefreq_of(self, url: str) -> str:
        for pattern in self._config.daily_patterns:
            if pattern in url:
                return DAILY
        for pattern in self._config.monthly_patterns:
            if pattern in url:
                return MONTHLY
        return WEEKLY
