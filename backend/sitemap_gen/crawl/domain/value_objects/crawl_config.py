from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Mapping, Any
from .crawl_delay_policy import CrawlDelayPolicy


# 未加 allowfiles 时始终跳过的文件类型
DEFAULT_IGNORED_EXTENSIONS = frozenset({
    'doc', 'docx', 'xls', 'xlsx', 'ppt', 'pptx', 'zip', 'rar',
    'jpg', 'jpeg', 'png', 'gif', 'webp', 'svg', 'mp3', 'mp4', 'avi',
})

_TRUE_VALUES = {'1', 'true', 'yes', 'on', ''}


def _flag(options: Mapping[str, Any], name: str, default: bool = False) -> bool:
    """
    读取布尔开关
    CLI 传入 True/False；Web 查询参数只要出现（?gzip 或 ?gzip=1）即视为开启
    """
    if name not in options or options[name] is None:
        return default
    value = options[name]
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in _TRUE_VALUES


def _int(options: Mapping[str, Any], name: str, default: int) -> int:
    value = options.get(name)
    if value is None or value == '':
        return default
    return int(value)


@dataclass
class CrawlConfig:
    """
    一次运行的完整配置，启动时构建一次，之后只读
    """
    domains: List[str]
    max_depth: int = 3
    thread_count: int = 10
    user_agent: str = "SitemapGenerator"
    output_path: str = "sitemap.xml"
    timeout: int = 15
    use_gzip: bool = False
    pretty_xml: bool = False
    resume: bool = False
    reset_cache: bool = False
    ignore_meta: bool = False
    allow_files: bool = False
    respect_robots: bool = True
    use_filters: bool = False
    use_priority_rules: bool = False
    use_changefreq_rules: bool = False
    split_by_site: bool = False
    ping: bool = False
    debug: bool = False
    email: Optional[str] = None
    filter_config_path: Optional[str] = None
    cache_dir: str = "cache"
    log_dir: str = "logs"
    sitemap_base_url: Optional[str] = None
    crawl_delay_policy: CrawlDelayPolicy = CrawlDelayPolicy.SERIALIZE
    max_retries: int = 2

    def __post_init__(self):
        """
        数据清洗与验证
        """
        cleaned = []
        for domain in self.domains or []:
            if not domain:
                continue
            domain = domain.strip().rstrip('/')
            if domain and domain not in cleaned:
                cleaned.append(domain)
        self.domains = cleaned

        self.max_depth = max(0, int(self.max_depth))
        self.thread_count = max(1, int(self.thread_count))
        self.timeout = max(1, int(self.timeout))

        if isinstance(self.crawl_delay_policy, str):
            self.crawl_delay_policy = CrawlDelayPolicy(self.crawl_delay_policy.strip().lower())

        if self.sitemap_base_url:
            self.sitemap_base_url = self.sitemap_base_url.rstrip('/')

    @property
    def ignored_extensions(self) -> frozenset:
        return frozenset() if self.allow_files else DEFAULT_IGNORED_EXTENSIONS

    @property
    def output_dir(self) -> Path:
        return Path(self.output_path).parent

    @classmethod
    def from_options(cls, options: Mapping[str, Any]) -> "CrawlConfig":
        """
        由 CLI 参数或 Web 查询参数构建配置（选项名：url/depth/threads/agent/...）

        参数:
            options: 选项字典，url 可为逗号分隔字符串或列表
        """
        urls = options.get('url') or []
        if isinstance(urls, str):
            urls = urls.split(',')

        config = cls(
            domains=list(urls),
            max_depth=_int(options, 'depth', 3),
            thread_count=_int(options, 'threads', 10),
            user_agent=options.get('agent') or "SitemapGenerator",
            output_path=options.get('output') or "sitemap.xml",
            timeout=_int(options, 'timeout', 15),
            use_gzip=_flag(options, 'gzip'),
            pretty_xml=_flag(options, 'prettyxml'),
            resume=_flag(options, 'resume'),
            reset_cache=_flag(options, 'resetcache'),
            ignore_meta=_flag(options, 'ignoremeta'),
            allow_files=_flag(options, 'allowfiles'),
            respect_robots=_flag(options, 'respectrobots', default=True),
            use_filters=_flag(options, 'filters'),
            use_priority_rules=_flag(options, 'priorityrules'),
            use_changefreq_rules=_flag(options, 'changefreqrules'),
            split_by_site=_flag(options, 'splitbysite'),
            ping=_flag(options, 'ping'),
            debug=_flag(options, 'debug'),
            email=options.get('email') or None,
            filter_config_path=options.get('filterconfig') or None,
            cache_dir=options.get('cachedir') or "cache",
            log_dir=options.get('logdir') or "logs",
            sitemap_base_url=options.get('baseurl') or None,
            crawl_delay_policy=options.get('crawldelaypolicy') or CrawlDelayPolicy.SERIALIZE,
        )
        return config
