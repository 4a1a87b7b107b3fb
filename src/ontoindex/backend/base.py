"""检索后端抽象基类。"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

from ontoindex.backend.cache import TermCache
from ontoindex.constants import DEFAULT_QUERY_LIMIT

if TYPE_CHECKING:
    from ontoindex.core.record import TermRecord


class SearchBackend(ABC):
    """检索后端抽象基类。

    一个后端实例对应一个词表 core。add 的文档在 commit 之后才可查询，
    同 ID 文档重复添加视为覆盖。所有失败统一以 BackendError 抛出。

    Attributes:
        core: 词表 core 名称。
        cache: 读穿透术语缓存，每次提交后清空。
    """

    def __init__(self, core: str, cache: TermCache | None = None) -> None:
        self.core = core
        self.cache = cache if cache is not None else TermCache()

    @abstractmethod
    def add(self, record: TermRecord) -> None:
        """暂存一条文档。"""
        ...

    @abstractmethod
    def commit(self) -> None:
        """提交所有暂存文档。"""
        ...

    @abstractmethod
    def query(self, field: str, value: str, limit: int = DEFAULT_QUERY_LIMIT) -> list[TermRecord]:
        """按字段取值精确匹配查询，value 为 ``*`` 时匹配任意取值。"""
        ...

    @abstractmethod
    def count(self) -> int:
        """已提交的文档数。"""
        ...

    @abstractmethod
    def clear(self) -> None:
        """删除本 core 的全部文档。"""
        ...

    def evict_cache(self) -> None:
        """清空术语缓存。"""
        self.cache.clear()

    def close(self) -> None:
        """释放后端资源。"""
        pass
