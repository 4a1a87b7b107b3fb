"""TermRecord 字段累加器测试。"""

from ontoindex.core import TermRecord


class TestAddField:
    """字段写入测试。"""

    def test_same_pair_added_once(self):
        """测试同一 (字段, 取值) 只保留一次。"""
        record = TermRecord("100")
        assert record.add_field("is_a", "183500") is True
        assert record.add_field("is_a", "183500") is False

        assert record.get("is_a") == ["183500"]
        assert len(record) == 2

    def test_multiple_values_per_field(self):
        record = TermRecord("100")
        record.add_field("term_category", "183500")
        record.add_field("term_category", "98006")

        assert set(record.get("term_category")) == {"183500", "98006"}

    def test_id_field(self):
        assert TermRecord("558").id == "558"
        assert TermRecord().id is None

    def test_missing_field(self):
        record = TermRecord("1")
        assert record.get("label") == []
        assert record.first("label") is None
        assert "label" not in record
        assert "id" in record


class TestSerialization:
    """序列化测试。"""

    def test_json_keeps_fields(self):
        record = TermRecord("100")
        record.add_field("omim_id", "208900")
        record.add_field("label", "Ataxia-telangiectasia")

        restored = TermRecord.from_json(record.to_json())

        assert restored == record
        assert restored.first("omim_id") == "208900"

    def test_from_dict_accepts_scalars(self):
        record = TermRecord.from_dict({"id": "7", "version": "2021-04", "is_a": ["1", "1", "2"]})

        assert record.id == "7"
        assert record.get("version") == ["2021-04"]
        assert record.get("is_a") == ["1", "2"]

    def test_equality_ignores_value_order(self):
        a = TermRecord("1")
        a.add_field("is_a", "x")
        a.add_field("is_a", "y")
        b = TermRecord("1")
        b.add_field("is_a", "y")
        b.add_field("is_a", "x")

        assert a == b

    def test_copy_is_independent(self):
        original = TermRecord("1")
        original.add_field("is_a", "x")

        duplicate = original.copy()
        duplicate.add_field("is_a", "y")

        assert duplicate == TermRecord.from_dict({"id": "1", "is_a": ["x", "y"]})
        assert original.get("is_a") == ["x"]
