"""DuckDB 检索后端。

文档以 JSON 形式存放在 _sys_term_docs，每个 (字段, 取值) 对
另存一行到 _sys_term_fields 以支持按字段精确匹配查询。
多个词表以 core 列区分，可共用同一个数据库文件。
"""

from collections.abc import Generator
from contextlib import contextmanager, suppress
from datetime import UTC, datetime
from pathlib import Path

import duckdb

from ontoindex.backend.base import SearchBackend
from ontoindex.backend.cache import TermCache
from ontoindex.constants import (
    ANY_VALUE,
    DEFAULT_QUERY_LIMIT,
    ID_FIELD,
    TERM_DOCS_TABLE,
    TERM_FIELDS_TABLE,
)
from ontoindex.core.record import TermRecord
from ontoindex.exceptions import BackendError
from ontoindex.logger import logger
from ontoindex.utils.rwlock import lock_for


class DuckDBBackend(SearchBackend):
    """基于 DuckDB 文件的检索后端。

    每次操作使用独立连接，读操作可并发，写操作独占。
    add 只在内存中暂存，commit 在一个事务内写入全部暂存文档。

    Attributes:
        db_path: 数据库文件路径。
        core: 词表 core 名称。
    """

    def __init__(self, db_path: Path | str, core: str, cache: TermCache | None = None) -> None:
        """初始化后端并确保表结构存在。

        Args:
            db_path: 数据库文件路径，父目录不存在时自动创建。
            core: 词表 core 名称。
            cache: 术语缓存，默认新建。

        Raises:
            BackendError: 数据库无法打开或建表失败时抛出。
        """
        super().__init__(core, cache)
        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._rw_lock = lock_for(self.db_path)
        self._pending: dict[str, TermRecord] = {}
        self._create_tables()

    def _connect(self, read_only: bool) -> duckdb.DuckDBPyConnection:
        try:
            return duckdb.connect(str(self.db_path), read_only=read_only)
        except duckdb.Error as e:
            raise BackendError(f"Failed to open database {self.db_path}: {e}") from e

    def execute_read(self, sql: str, params: list | None = None) -> list:
        """执行读操作（可并发）。

        Args:
            sql: SQL 查询语句。
            params: 查询参数。

        Returns:
            查询结果列表。
        """
        with self._rw_lock.read_lock():
            conn = self._connect(read_only=True)
            try:
                return conn.execute(sql, params or []).fetchall()
            except duckdb.Error as e:
                raise BackendError(f"Query failed on core '{self.core}': {e}") from e
            finally:
                conn.close()

    @contextmanager
    def write_transaction(self) -> Generator[duckdb.DuckDBPyConnection, None, None]:
        """写事务上下文（独占）。

        Yields:
            写连接实例。

        Raises:
            BackendError: 事务执行失败时回滚并抛出。
        """
        with self._rw_lock.write_lock():
            conn = self._connect(read_only=False)
            try:
                conn.begin()
                yield conn
                conn.commit()
            except duckdb.Error as e:
                with suppress(duckdb.Error):
                    conn.rollback()
                raise BackendError(f"Write failed on core '{self.core}': {e}") from e
            except Exception:
                with suppress(duckdb.Error):
                    conn.rollback()
                raise
            finally:
                conn.close()

    def _create_tables(self) -> None:
        with self.write_transaction() as conn:
            conn.execute(f"""
                CREATE TABLE IF NOT EXISTS {TERM_DOCS_TABLE} (
                    core VARCHAR NOT NULL,
                    doc_id VARCHAR NOT NULL,
                    doc VARCHAR NOT NULL,
                    indexed_at TIMESTAMP,
                    PRIMARY KEY (core, doc_id)
                )
            """)
            conn.execute(f"""
                CREATE TABLE IF NOT EXISTS {TERM_FIELDS_TABLE} (
                    core VARCHAR NOT NULL,
                    doc_id VARCHAR NOT NULL,
                    field VARCHAR NOT NULL,
                    value VARCHAR NOT NULL
                )
            """)
        logger.debug(f"Term tables ready in {self.db_path}")

    @property
    def pending(self) -> int:
        """暂存未提交的文档数。"""
        return len(self._pending)

    def add(self, record: TermRecord) -> None:
        term_id = record.id
        if not term_id:
            raise BackendError(f"Document without '{ID_FIELD}' cannot be added to core '{self.core}'")
        # 同一批次内同 ID 以最后一次为准
        self._pending[term_id] = TermRecord.from_dict(record.to_dict())

    def commit(self) -> None:
        """提交暂存文档。

        在一个事务内 UPSERT 文档行并替换其字段行。

        Raises:
            BackendError: 写入失败时抛出，暂存文档保留。
        """
        if not self._pending:
            return

        now = datetime.now(UTC)
        doc_ids = list(self._pending)
        doc_rows = [
            [self.core, doc_id, record.to_json().decode("utf-8"), now]
            for doc_id, record in self._pending.items()
        ]
        field_rows = [
            [self.core, doc_id, name, value]
            for doc_id, record in self._pending.items()
            for name, value in record.fields()
        ]

        with self.write_transaction() as conn:
            conn.execute(
                f"DELETE FROM {TERM_FIELDS_TABLE} "
                "WHERE core = ? AND doc_id IN (SELECT unnest(?::VARCHAR[]))",
                [self.core, doc_ids],
            )
            conn.executemany(
                f"INSERT INTO {TERM_DOCS_TABLE} (core, doc_id, doc, indexed_at) "
                "VALUES (?, ?, ?, ?) "
                "ON CONFLICT (core, doc_id) DO UPDATE SET "
                "doc = excluded.doc, indexed_at = excluded.indexed_at",
                doc_rows,
            )
            if field_rows:
                conn.executemany(
                    f"INSERT INTO {TERM_FIELDS_TABLE} (core, doc_id, field, value) VALUES (?, ?, ?, ?)",
                    field_rows,
                )

        logger.debug(f"Committed {len(doc_rows)} documents to core '{self.core}'")
        self._pending.clear()

    def query(self, field: str, value: str, limit: int = DEFAULT_QUERY_LIMIT) -> list[TermRecord]:
        if field == ID_FIELD and value != ANY_VALUE:
            rows = self.execute_read(
                f"SELECT doc FROM {TERM_DOCS_TABLE} WHERE core = ? AND doc_id = ? LIMIT ?",
                [self.core, value, limit],
            )
            return [TermRecord.from_json(row[0]) for row in rows]

        value_clause = "" if value == ANY_VALUE else "AND f.value = ?"
        params: list = [self.core, field]
        if value != ANY_VALUE:
            params.append(value)
        params.append(limit)
        rows = self.execute_read(
            f"""
            SELECT d.doc FROM {TERM_DOCS_TABLE} d
            WHERE d.core = ? AND d.doc_id IN (
                SELECT f.doc_id FROM {TERM_FIELDS_TABLE} f
                WHERE f.core = d.core AND f.field = ? {value_clause}
            )
            ORDER BY d.doc_id
            LIMIT ?
            """,
            params,
        )
        return [TermRecord.from_json(row[0]) for row in rows]

    def count(self) -> int:
        rows = self.execute_read(
            f"SELECT COUNT(*) FROM {TERM_DOCS_TABLE} WHERE core = ?",
            [self.core],
        )
        return rows[0][0] if rows else 0

    def clear(self) -> None:
        with self.write_transaction() as conn:
            conn.execute(f"DELETE FROM {TERM_FIELDS_TABLE} WHERE core = ?", [self.core])
            conn.execute(f"DELETE FROM {TERM_DOCS_TABLE} WHERE core = ?", [self.core])
        self._pending.clear()
        self.evict_cache()
        logger.info(f"Cleared core '{self.core}'")
