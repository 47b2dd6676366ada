# crawl/infrastructure/robots_txt_parser_impl.py
import logging
import re
from typing import Dict, List, Optional
from urllib.parse import urlparse

from ..domain.demand_interface.i_http_client import IHttpClient
from ..domain.demand_interface.i_robots_txt_parser import IRobotsTxtParser
from ..domain.value_objects.robots_policy import RobotsPolicy, RobotsRule, ALLOW, DISALLOW


logger = logging.getLogger(__name__)

_CRAWL_DELAY_RE = re.compile(r'^\d+')


class RobotsTxtParserImpl(IRobotsTxtParser):
    """
    robots.txt 解析实现

    没有使用 urllib.robotparser：这里需要"最长前缀优先、同长先出现者优先"的判定，
    以及"取开头整数、全文件最后一次出现者生效"的 Crawl-delay 提取方式。
    """

    def __init__(self, http_client: IHttpClient):
        self._http = http_client

    def load(self, domain: str, user_agent: str) -> RobotsPolicy:
        """获取并解析robots.txt，失败时返回空策略（不禁止任何URL）"""
        parsed = urlparse(domain)
        robots_url = f"{parsed.scheme}://{parsed.netloc}/robots.txt"

        response = self._http.get(robots_url)
        if not response.is_success or not response.content:
            logger.warning(f"robots.txt not found or unreadable: {robots_url} ({response.error_message})")
            return RobotsPolicy.empty(robots_url)

        return self.parse(response.content, user_agent, robots_url)

    def parse(self, content: str, user_agent: str, robots_url: str = "") -> RobotsPolicy:
        groups: Dict[str, List[RobotsRule]] = {}
        current_agents: List[str] = []
        reading_agents = False
        crawl_delay: Optional[int] = None

        for raw_line in content.splitlines():
            line = raw_line.split('#', 1)[0].strip()
            if not line or ':' not in line:
                continue

            field, value = line.split(':', 1)
            field = field.strip().lower()
            value = value.strip()

            if field == 'user-agent':
                # 连续的 User-agent 行共享同一组规则
                if not reading_agents:
                    current_agents = []
                agent = value.lower()
                current_agents.append(agent)
                groups.setdefault(agent, [])
                reading_agents = True

            elif field in (ALLOW, DISALLOW):
                reading_agents = False
                if not current_agents:
                    continue
                directive = field
                # 空的 Disallow 按 robots 标准表示不限制任何路径，不作为匹配所有路径的空前缀拦截规则
                if directive == DISALLOW and value == '':
                    directive = ALLOW
                for agent in current_agents:
                    groups[agent].append(RobotsRule(directive, value))

            elif field == 'crawl-delay':
                reading_agents = False
                match = _CRAWL_DELAY_RE.match(value)
                if match:
                    crawl_delay = int(match.group())

        agent_key = user_agent.strip().lower()
        if agent_key in groups:
            rules = groups[agent_key]
        else:
            rules = groups.get('*', [])

        return RobotsPolicy(
            rules=tuple(rules),
            crawl_delay=crawl_delay,
            robots_url=robots_url,
            loaded=True
        )

