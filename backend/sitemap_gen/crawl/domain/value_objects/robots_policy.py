from dataclasses import dataclass
from typing import Optional, Tuple
from urllib.parse import urlparse


ALLOW = "allow"
DISALLOW = "disallow"


@dataclass(frozen=True)
class RobotsRule:
    directive: str  # "allow" | "disallow"
    path_prefix: str


@dataclass(frozen=True)
class RobotsPolicy:
    """
    选定 User-agent 的 robots.txt 规则（按出现顺序）与 Crawl-delay
    每个域名在爬取开始时加载一次，之后不可变
    """
    rules: Tuple[RobotsRule, ...] = ()
    crawl_delay: Optional[int] = None
    robots_url: str = ""
    loaded: bool = False

    @classmethod
    def empty(cls, robots_url: str = "") -> "RobotsPolicy":
        """空策略：不禁止任何URL"""
        return cls(robots_url=robots_url)

    def is_blocked(self, url: str) -> bool:
        """
        判断URL是否被禁止

        规则:
            - 取URL的path（缺省为 "/"）
            - 在 pathPrefix 为空或为 path 前缀的规则中，选 pathPrefix 最长的一条
            - 长度相同时先出现者优先
            - 仅当选中规则为 disallow 时返回 True；没有匹配规则即允许
        """
        try:
            path = urlparse(url).path or '/'
        except ValueError:
            return False

        matched: Optional[RobotsRule] = None
        matched_len = -1

        for rule in self.rules:
            if rule.path_prefix == '' or path.startswith(rule.path_prefix):
                if len(rule.path_prefix) > matched_len:
                    matched = rule
                    matched_len = len(rule.path_prefix)

        return matched is not None and matched.directive == DISALLOW
