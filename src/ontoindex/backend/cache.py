"""术语缓存模块。

提供读穿透的术语缓存，命中与未命中都会缓存，
批量提交时整体清空，因此读者在两次提交之间可能看到旧结果。
"""

from __future__ import annotations

import threading
from collections import OrderedDict
from typing import TYPE_CHECKING

from ontoindex.constants import DEFAULT_CACHE_ENTRIES

if TYPE_CHECKING:
    from ontoindex.core.record import TermRecord

NOT_CACHED = object()


class TermCache:
    """线程安全的 LRU 术语缓存。

    每次 clear 都会递增 generation。读者在查询后端之前记下 generation，
    写回时带上它；期间发生过清空则放弃写回，旧结果不会跨过一次提交。
    存入与取出的记录都是副本，调用方修改返回值不会影响缓存。

    Attributes:
        max_entries: 最大条目数，超出时淘汰最久未使用的条目。
    """

    def __init__(self, max_entries: int = DEFAULT_CACHE_ENTRIES) -> None:
        if max_entries <= 0:
            raise ValueError("max_entries must be positive")
        self.max_entries = max_entries
        self._entries: OrderedDict[str, TermRecord | None] = OrderedDict()
        self._generation = 0
        self._lock = threading.Lock()

    @property
    def generation(self) -> int:
        """清空次数计数。"""
        with self._lock:
            return self._generation

    def get(self, term_id: str, default: object = NOT_CACHED) -> TermRecord | None | object:
        """读取缓存。

        Args:
            term_id: 术语 ID。
            default: 未缓存时的返回值。

        Returns:
            缓存记录的副本；缓存的未命中为 None；未缓存时返回 default。
        """
        with self._lock:
            if term_id not in self._entries:
                return default
            self._entries.move_to_end(term_id)
            record = self._entries[term_id]
        return record.copy() if record is not None else None

    def put(self, term_id: str, record: TermRecord | None, generation: int | None = None) -> bool:
        """写入缓存。

        Args:
            term_id: 术语 ID。
            record: 查询结果，None 表示未命中。
            generation: 查询前读取的 generation，与当前值不同时放弃写入。

        Returns:
            是否实际写入。
        """
        stored = record.copy() if record is not None else None
        with self._lock:
            if generation is not None and generation != self._generation:
                return False
            self._entries[term_id] = stored
            self._entries.move_to_end(term_id)
            while len(self._entries) > self.max_entries:
                self._entries.popitem(last=False)
            return True

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
            self._generation += 1

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
