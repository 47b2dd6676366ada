from abc import ABC, abstractmethod
from typing import Dict


class IVisitedStore(ABC):
    """
    已访问状态存储 - 支持中断后恢复（resume）与全量重爬（resetcache）

    映射: 标准化URL -> bool
        True  表示已抓取且可进入站点地图
        False 表示已访问但被 robots/meta 拦截（不再入队，也不进站点地图）
    """

    @abstractmethod
    def load(self) -> Dict[str, bool]:
        """读取缓存文件，文件不存在或损坏时返回空字典"""
        pass

    @abstractmethod
    def persist(self, visited: Dict[str, bool]) -> None:
        """把当前域名的已访问映射合并进缓存并整体覆盖写出"""
        pass

    @abstractmethod
    def reset(self) -> int:
        """删除缓存文件，返回被丢弃的记录数"""
        pass
