from dataclasses import dataclass
from typing import List
from sitemap_gen.shared.domain.events import DomainEvent


@dataclass
class RunStartedEvent(DomainEvent):
    domains: list
    max_depth: int
    thread_count: int
    resume: bool


@dataclass
class CacheResetEvent(DomainEvent):
    discarded: int


@dataclass
class CacheResumedEvent(DomainEvent):
    entries: int


@dataclass
class DomainStartedEvent(DomainEvent):
    start_url: str
    max_depth: int
    resumed_entries: int = 0


@dataclass
class DomainCompletedEvent(DomainEvent):
    start_url: str
    fetched_count: int
    visited_count: int
    elapsed_time: float


@dataclass
class DomainAbortedEvent(DomainEvent):
    start_url: str
    reason: str


@dataclass
class SitemapWrittenEvent(DomainEvent):
    paths: List[str]
    url_count: int
    index_path: str = ""


@dataclass
class SearchEnginePingedEvent(DomainEvent):
    engine: str
    success: bool
    detail: str = ""


@dataclass
class RunCompletedEvent(DomainEvent):
    url_count: int
    elapsed_time: float
