from abc import ABC, abstractmethod
from ..value_objects.robots_policy import RobotsPolicy


class IRobotsTxtParser(ABC):
    """Robots.txt协议解析器接口"""

    @abstractmethod
    def load(self, domain: str, user_agent: str) -> RobotsPolicy:
        """
        获取并解析 {scheme}://{host}/robots.txt

        参数:
            domain: 起始URL（只使用其 scheme 和 host）
            user_agent: 爬虫的User-Agent标识

        返回:
            RobotsPolicy；获取失败时返回空策略（loaded=False），不抛异常
        """
        pass

    @abstractmethod
    def parse(self, content: str, user_agent: str, robots_url: str = "") -> RobotsPolicy:
        """
        解析 robots.txt 文本

        逻辑:
            1. 逐行去除 # 注释，跟踪当前 User-agent 分组
            2. 在分组下记录 Allow/Disallow
            3. Crawl-delay 取整数秒，最后一次出现为准
            4. 选择与 user_agent 完全匹配（大小写不敏感）的分组，否则 *，否则空规则
        """
        pass
