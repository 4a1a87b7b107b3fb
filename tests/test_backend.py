"""DuckDB 检索后端测试。"""

import pytest

from ontoindex.backend import DuckDBBackend
from ontoindex.core import TermRecord
from ontoindex.exceptions import BackendError


def _record(term_id, **fields):
    record = TermRecord(term_id)
    for name, values in fields.items():
        for value in values if isinstance(values, list) else [values]:
            record.add_field(name, value)
    return record


class TestDuckDBBackend:
    """DuckDBBackend 测试。"""

    def test_creates_database_file(self, db_backend):
        assert db_backend.db_path.exists()
        assert db_backend.count() == 0

    def test_add_visible_after_commit(self, db_backend):
        db_backend.add(_record("558", label="Marfan syndrome"))

        assert db_backend.pending == 1
        assert db_backend.query("id", "558") == []

        db_backend.commit()

        assert db_backend.pending == 0
        found = db_backend.query("id", "558")
        assert found == [_record("558", label="Marfan syndrome")]

    def test_commit_without_pending(self, db_backend):
        db_backend.commit()
        assert db_backend.count() == 0

    def test_same_id_overwrites(self, db_backend):
        db_backend.add(_record("558", label="old", is_a="1"))
        db_backend.commit()
        db_backend.add(_record("558", label="new"))
        db_backend.commit()

        assert db_backend.count() == 1
        assert db_backend.query("id", "558")[0].get("label") == ["new"]
        assert db_backend.query("label", "old") == []
        assert db_backend.query("is_a", "1") == []

    def test_same_id_within_batch(self, db_backend):
        db_backend.add(_record("558", label="first"))
        db_backend.add(_record("558", label="second"))
        db_backend.commit()

        assert db_backend.query("id", "558")[0].get("label") == ["second"]

    def test_query_multi_valued_field(self, db_backend):
        db_backend.add(_record("1", term_category=["10", "20"]))
        db_backend.add(_record("2", term_category="20"))
        db_backend.add(_record("3", term_category="30"))
        db_backend.commit()

        ids = [record.id for record in db_backend.query("term_category", "20")]
        assert ids == ["1", "2"]

    def test_query_any_value(self, db_backend):
        db_backend.add(_record("HEADER_INFO", version="2021-04"))
        db_backend.add(_record("1", label="x"))
        db_backend.commit()

        results = db_backend.query("version", "*")
        assert [record.id for record in results] == ["HEADER_INFO"]

    def test_query_limit(self, db_backend):
        for i in range(5):
            db_backend.add(_record(str(i), label="same"))
        db_backend.commit()

        assert len(db_backend.query("label", "same", limit=2)) == 2

    def test_record_without_id_rejected(self, db_backend):
        with pytest.raises(BackendError):
            db_backend.add(TermRecord())

    def test_cores_are_isolated(self, db_backend):
        other = DuckDBBackend(db_backend.db_path, "other")
        db_backend.add(_record("1"))
        db_backend.commit()

        assert other.count() == 0
        assert other.query("id", "1") == []
        assert db_backend._rw_lock is other._rw_lock

    def test_clear(self, db_backend):
        db_backend.add(_record("1", label="x"))
        db_backend.commit()
        db_backend.cache.put("1", None)

        db_backend.clear()

        assert db_backend.count() == 0
        assert db_backend.query("label", "x") == []
        assert len(db_backend.cache) == 0

    def test_persists_across_instances(self, db_backend):
        db_backend.add(_record("1", label="x"))
        db_backend.commit()

        reopened = DuckDBBackend(db_backend.db_path, "orphanet")
        assert reopened.query("id", "1")[0].get("label") == ["x"]

    def test_unopenable_database(self, tmp_path):
        path = tmp_path / "not_a_db.duckdb"
        path.write_text("garbage", encoding="utf-8")
        with pytest.raises(BackendError):
            DuckDBBackend(path, "orphanet")
