from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Optional


@dataclass
class RunSummary:
    """
    一次运行的结构化结果，由编排服务逐步填充后返回给 CLI / Web 入口
    """
    run_id: str
    domains: List[str]
    status: str = "running"  # running / completed / failed
    url_count: int = 0
    fetched_count: int = 0
    sitemap_paths: List[str] = field(default_factory=list)
    index_path: Optional[str] = None
    aborted_domains: Dict[str, str] = field(default_factory=dict)
    health: Dict[str, int] = field(default_factory=dict)
    ping_results: Dict[str, bool] = field(default_factory=dict)
    error: Optional[str] = None
    started_at: datetime = field(default_factory=datetime.now)
    finished_at: Optional[datetime] = None

    @property
    def elapsed_time(self) -> float:
        end = self.finished_at or datetime.now()
        return (end - self.started_at).total_seconds()

    def to_dict(self) -> dict:
        return {
            "run_id": self.run_id,
            "status": self.status,
            "domains": list(self.domains),
            "url_count": self.url_count,
            "fetched_count": self.fetched_count,
            "sitemap_paths": list(self.sitemap_paths),
            "index_path": self.index_path,
            "aborted_domains": dict(self.aborted_domains),
            "health": dict(self.health),
            "ping_results": dict(self.ping_results),
            "error": self.error,
            "started_at": self.started_at.isoformat(),
            "finished_at": self.finished_at.isoformat() if self.finished_at else None,
            "elapsed_time": self.elapsed_time,
        }
