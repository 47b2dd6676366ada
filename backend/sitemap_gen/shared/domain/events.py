"""
领域事件基类
写在 shared 中是因为 event_handlers/ 中的 base_event_handler 需要识别领域事件共同的字段，
而 shared 本身独立于任何上下文（crawl / sitemap），放在这里才能让处理器与具体事件解耦。

说明：
- 每次运行（run）有一个 run_id，所有事件都挂在这个 run_id 下，构成一份只追加的运行日志；
- timestamp 使用 kw_only，避免子类无默认值字段排在默认值字段之后的 dataclass 继承问题。
"""


from dataclasses import dataclass, field, asdict
from datetime import datetime
from typing import Any, Dict


@dataclass
class DomainEvent:
    """
    所有领域事件的基类
    自动提供时间戳和通用的数据转换接口
    """
    run_id: str
    timestamp: datetime = field(default_factory=datetime.now, kw_only=True)

    @property
    def event_type(self) -> str:
        """默认使用类名作为事件类型"""
        return self.__class__.__name__

    @property
    def data(self) -> Dict[str, Any]:
        """将事件字段转换为字典，排除基类字段"""
        all_data = asdict(self)
        return {
            k: v for k, v in all_data.items()
            if k not in ('run_id', 'timestamp')
        }
