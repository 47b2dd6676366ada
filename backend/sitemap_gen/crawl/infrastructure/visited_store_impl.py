"""
已访问状态存储（JSON 缓存文件）

文件格式: {"https://example.com/page": true, ...}
    true  = 已抓取，进入站点地图
    false = 已访问但被 robots/meta 拦截

每接受一个页面就整体覆盖写出一次（不做批量），进程被杀时最多丢失正在处理的批次；
不保证原子重命名，读取时容忍半写入的损坏文件（视为空缓存）。
"""

import json
import logging
from pathlib import Path
from typing import Dict, Union

from ..domain.demand_interface.i_visited_store import IVisitedStore
from sitemap_gen.shared.logging_config import get_error_logger


logger = logging.getLogger(__name__)

CACHE_FILE_NAME = "visited.json"


class VisitedStoreImpl(IVisitedStore):
    """基于本地 JSON 文件的已访问状态存储（每个安装一个缓存文件）"""

    def __init__(self, cache_dir: Union[str, Path] = "cache"):
        self._cache_dir = Path(cache_dir)
        self._path = self._cache_dir / CACHE_FILE_NAME
        # 已写出的全部记录：多个域名共用一个文件，写某个域名时不能覆盖掉其他域名
        self._entries: Dict[str, bool] = {}
        self._error_logger = get_error_logger()

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> Dict[str, bool]:
        entries = self._read_file()
        self._entries = dict(entries)
        return entries

    def persist(self, visited: Dict[str, bool]) -> None:
        self._entries.update(visited)
        try:
            self._cache_dir.mkdir(parents=True, exist_ok=True)
            with open(self._path, 'w', encoding='utf-8') as f:
                json.dump(self._entries, f)
        except OSError as e:
            # 缓存写失败只影响断点续爬，不中止爬取
            self._error_logger.error(f"已访问缓存写入失败: {self._path} - {str(e)}")

    def reset(self) -> int:
        discarded = len(self._read_file())
        self._entries = {}
        try:
            self._path.unlink()
        except FileNotFoundError:
            pass
        except OSError as e:
            self._error_logger.error(f"已访问缓存删除失败: {self._path} - {str(e)}")

        logger.info(f"缓存已重置，丢弃 {discarded} 条记录")
        return discarded

    def _read_file(self) -> Dict[str, bool]:
        if not self._path.exists():
            return {}

        try:
            with open(self._path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning(f"已访问缓存无法读取，按空缓存处理: {self._path} - {str(e)}")
            return {}

        if not isinstance(data, dict):
            return {}
        return {str(url): bool(value) for url, value in data.items() if url}
