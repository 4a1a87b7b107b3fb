"""术语查询模块。"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ontoindex.backend.cache import NOT_CACHED
from ontoindex.constants import ID_FIELD, SEPARATOR
from ontoindex.core.record import TermRecord
from ontoindex.exceptions import BackendError
from ontoindex.logger import logger as default_logger

if TYPE_CHECKING:
    from ontoindex.backend.base import SearchBackend


class TermLookupResolver:
    """按 ID 查询术语，带一次前缀剥离重试。

    精确查询未命中时，若 ID 以 ``<前缀><分隔符>``（大小写不敏感）开头，
    去掉第一个分隔符及其之前的部分后再精确查询一次。重试的 ID 不再检查前缀，
    因此 ``ORPHA:ORPHA:1`` 只会重试 ``ORPHA:1``。

    Attributes:
        backend: 检索后端，其缓存作为读穿透缓存使用。
        term_prefix: 词表术语前缀，如 ``ORPHA``。
        separator: 前缀分隔符。
    """

    def __init__(
        self,
        backend: SearchBackend,
        term_prefix: str,
        separator: str = SEPARATOR,
        *,
        logger: logging.Logger | None = None,
    ) -> None:
        self.backend = backend
        self.term_prefix = term_prefix
        self.separator = separator
        self._logger = logger or default_logger

    def lookup(self, term_id: str | None) -> TermRecord | None:
        """查询术语。

        Args:
            term_id: 术语 ID，允许带词表前缀。

        Returns:
            术语记录，不存在时返回 None。
        """
        if term_id is None or not term_id.strip():
            return None

        found = self._search(term_id)
        if found is not None:
            return found

        stripped = self.strip_prefix(term_id)
        if stripped is None:
            return None
        return self._search(stripped)

    def strip_prefix(self, term_id: str) -> str | None:
        """去掉一次词表前缀，不以前缀开头时返回 None。"""
        if not self.term_prefix:
            return None
        prefix = f"{self.term_prefix}{self.separator}"
        if not term_id.upper().startswith(prefix.upper()):
            return None
        return term_id.split(self.separator, 1)[1]

    def _search(self, term_id: str) -> TermRecord | None:
        if not term_id.strip():
            return None
        cache = self.backend.cache
        cached = cache.get(term_id)
        if cached is not NOT_CACHED:
            return cached

        # 查询期间若有提交清空了缓存，本次结果不再写回
        generation = cache.generation
        try:
            results = self.backend.query(ID_FIELD, term_id, limit=1)
        except BackendError as e:
            self._logger.warning(f"Failed to look up term {term_id} in core '{self.backend.core}': {e}")
            return None

        record = results[0] if results else None
        cache.put(term_id, record, generation=generation)
        return record
