"""术语记录模块。

TermRecord 是单个本体类扁平化后的字段/取值文档，
所有字段写入都经过 add_field 去重。
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping

import orjson

from ontoindex.constants import ID_FIELD


class TermRecord:
    """去重的字段累加器。

    每个字段对应一组取值，同一 (字段, 取值) 重复写入不产生效果。
    字段内取值顺序不具有语义。

    Example:
        ```python
        record = TermRecord("558")
        record.add_field("is_a", "98006")
        record.add_field("is_a", "98006")
        assert record.get("is_a") == ["98006"]
        ```
    """

    def __init__(self, term_id: str | None = None) -> None:
        self._fields: dict[str, list[str]] = {}
        if term_id is not None:
            self.add_field(ID_FIELD, term_id)

    @property
    def id(self) -> str | None:
        """术语 ID，未设置时为 None。"""
        return self.first(ID_FIELD)

    def add_field(self, name: str, value: str) -> bool:
        """写入字段取值。

        Args:
            name: 字段名。
            value: 字段取值。

        Returns:
            是否实际写入（已存在时返回 False）。
        """
        values = self._fields.setdefault(name, [])
        if value in values:
            return False
        values.append(value)
        return True

    def get(self, name: str) -> list[str]:
        """获取字段的全部取值，字段不存在时返回空列表。"""
        return list(self._fields.get(name, ()))

    def first(self, name: str) -> str | None:
        values = self._fields.get(name)
        return values[0] if values else None

    def has(self, name: str, value: str | None = None) -> bool:
        if value is None:
            return bool(self._fields.get(name))
        return value in self._fields.get(name, ())

    def fields(self) -> Iterator[tuple[str, str]]:
        """遍历全部 (字段, 取值) 对。"""
        for name, values in self._fields.items():
            for value in values:
                yield name, value

    def clear(self) -> None:
        self._fields.clear()

    def copy(self) -> TermRecord:
        """返回独立的副本，修改副本不影响原记录。"""
        record = TermRecord()
        record._fields = {name: list(values) for name, values in self._fields.items()}
        return record

    def to_dict(self) -> dict[str, list[str]]:
        return {name: list(values) for name, values in self._fields.items() if values}

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> TermRecord:
        """从字典还原记录，标量取值视为单值列表。"""
        record = cls()
        for name, raw in data.items():
            values = raw if isinstance(raw, list) else [raw]
            for value in values:
                if value is not None:
                    record.add_field(name, str(value))
        return record

    def to_json(self) -> bytes:
        return orjson.dumps(self.to_dict())

    @classmethod
    def from_json(cls, data: bytes | str) -> TermRecord:
        return cls.from_dict(orjson.loads(data))

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.has(name)

    def __len__(self) -> int:
        return sum(len(values) for values in self._fields.values())

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TermRecord):
            return NotImplemented
        return {k: set(v) for k, v in self.to_dict().items()} == {
            k: set(v) for k, v in other.to_dict().items()
        }

    def __repr__(self) -> str:
        return f"TermRecord({self.to_dict()!r})"
