"""检索后端模块。

本模块提供术语索引的存储与查询，包括：
- SearchBackend: add / commit / query / evict_cache 抽象
- DuckDBBackend: 基于 DuckDB 文件的实现
- TermCache: 读穿透术语缓存
"""

from ontoindex.backend.base import SearchBackend
from ontoindex.backend.cache import NOT_CACHED, TermCache
from ontoindex.backend.duckdb_backend import DuckDBBackend

__all__ = [
    "NOT_CACHED",
    "DuckDBBackend",
    "SearchBackend",
    "TermCache",
]
