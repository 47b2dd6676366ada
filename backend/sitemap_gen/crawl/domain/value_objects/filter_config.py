from dataclasses import dataclass
from typing import Any, Mapping, Optional, Tuple


def _strings(value: Any) -> Tuple[str, ...]:
    """把 JSON 中的列表清洗为字符串元组，非列表一律视为空"""
    if not isinstance(value, (list, tuple)):
        return ()
    return tuple(str(item) for item in value if isinstance(item, str) and item)


def _section(data: Mapping[str, Any], name: str) -> Mapping[str, Any]:
    value = data.get(name)
    return value if isinstance(value, Mapping) else {}


@dataclass(frozen=True)
class FilterConfig:
    """过滤/优先级/更新频率规则（不可变，构造后只读）"""
    exclude_extensions: frozenset = frozenset()
    exclude_patterns: Tuple[str, ...] = ()
    include_only_patterns: Tuple[str, ...] = ()
    high_priority_patterns: Tuple[str, ...] = ()
    low_priority_patterns: Tuple[str, ...] = ()
    daily_patterns: Tuple[str, ...] = ()
    monthly_patterns: Tuple[str, ...] = ()

    @classmethod
    def empty(cls) -> "FilterConfig":
        return cls()

    @classmethod
    def from_dict(
        cls,
        data: Optional[Mapping[str, Any]],
        use_filters: bool = True,
        use_priority_rules: bool = True,
        use_changefreq_rules: bool = True
    ) -> "FilterConfig":
        """
        由过滤配置文件的 JSON 对象构建

        参数:
            data: 解析后的 JSON（None 表示文件损坏，全部退化为空列表）
            use_filters: 关闭时 excludeExtensions/excludePatterns/includeOnlyPatterns 为空
            use_priority_rules: 关闭时 priorityPatterns 为空（全部为默认 0.5）
            use_changefreq_rules: 关闭时 changefreqPatterns 为空（全部为默认 weekly）
        """
        if not isinstance(data, Mapping):
            return cls.empty()

        priority = _section(data, 'priorityPatterns')
        changefreq = _section(data, 'changefreqPatterns')

        return cls(
            exclude_extensions=frozenset(
                ext.lower().lstrip('.') for ext in _strings(data.get('excludeExtensions'))
            ) if use_filters else frozenset(),
            exclude_patterns=_strings(data.get('excludePatterns')) if use_filters else (),
            include_only_patterns=_strings(data.get('includeOnlyPatterns')) if use_filters else (),
            high_priority_patterns=_strings(priority.get('high')) if use_priority_rules else (),
            low_priority_patterns=_strings(priority.get('low')) if use_priority_rules else (),
            daily_patterns=_strings(changefreq.get('daily')) if use_changefreq_rules else (),
            monthly_patterns=_strings(changefreq.get('monthly')) if use_changefreq_rules else (),
        )
