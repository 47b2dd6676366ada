import json
import logging
from pathlib import Path
from typing import Optional, Union

from ..domain.value_objects.crawl_config import CrawlConfig
from ..domain.value_objects.filter_config import FilterConfig


logger = logging.getLogger(__name__)

DEFAULT_FILTER_CONFIG = Path("filter_config.json")


def load_filter_config(
    path: Optional[Union[str, Path]],
    use_filters: bool = True,
    use_priority_rules: bool = True,
    use_changefreq_rules: bool = True
) -> FilterConfig:
    """
    读取过滤配置文件

    - 三个开关都关闭时不读文件，直接返回空配置
    - 文件不存在：过滤实际上被禁用（空列表），记录警告
    - JSON 损坏：解析为 None，静默退化为空列表
    """
    if not (use_filters or use_priority_rules or use_changefreq_rules):
        return FilterConfig.empty()

    config_path = Path(path) if path else DEFAULT_FILTER_CONFIG
    if not config_path.exists():
        logger.warning(f"过滤配置文件不存在，过滤规则未启用: {config_path}")
        return FilterConfig.empty()

    try:
        with open(config_path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except ValueError:
        data = None
    except OSError as e:
        logger.warning(f"过滤配置文件无法读取: {config_path} - {str(e)}")
        data = None

    return FilterConfig.from_dict(
        data,
        use_filters=use_filters,
        use_priority_rules=use_priority_rules,
        use_changefreq_rules=use_changefreq_rules
    )


def load_filter_config_for(config: CrawlConfig) -> FilterConfig:
    """按运行配置中的开关读取过滤配置"""
    return load_filter_config(
        config.filter_config_path,
        use_filters=config.use_filters,
        use_priority_rules=config.use_priority_rules,
        use_changefreq_rules=config.use_changefreq_rules
    )
