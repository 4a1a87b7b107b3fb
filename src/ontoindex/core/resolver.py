"""类表达式解析模块。

将本体类的祖先表达式（具名父类、限制、交集）和类自身属性
扁平化为 TermRecord 字段。解析中遇到的不支持或残缺的表达式
只记录告警并跳过，不会中断遍历。
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ontoindex.constants import IS_A_FIELD, TERM_CATEGORY_FIELD
from ontoindex.core.record import TermRecord
from ontoindex.graph import (
    ClassExpression,
    IntersectionExpression,
    NamedClass,
    OntologyClass,
    OntologyGraph,
    Restriction,
    RestrictionKind,
)
from ontoindex.logger import logger as default_logger

if TYPE_CHECKING:
    from ontoindex.vocabularies.base import OntologyFamily

ON_PROPERTY = "onProperty"


class ClassExpressionResolver:
    """类表达式解析器。

    按表达式变体分派：
    - NamedClass: 写入 term_category，直接父类同时写入 is_a，层级根不参与。
    - Restriction: someValuesFrom / hasValue 写入 (属性标签 -> 取值)。
    - IntersectionExpression: 对每个操作数递归解析，自身不贡献字段。

    Attributes:
        graph: 本体图。
        family: 本体家族能力接口。
        roots: 本次运行的层级根集合。
    """

    def __init__(
        self,
        graph: OntologyGraph,
        family: OntologyFamily,
        roots: frozenset[OntologyClass],
        *,
        logger: logging.Logger | None = None,
    ) -> None:
        self.graph = graph
        self.family = family
        self.roots = roots
        self._root_nodes = frozenset(root.node for root in roots)
        self._logger = logger or default_logger

    def resolve_ancestors(self, cls: OntologyClass, record: TermRecord) -> TermRecord:
        """解析 cls 的全部祖先表达式。"""
        for expression in self.graph.all_superclasses(cls):
            self.resolve(cls, expression, record)
        return record

    def resolve(self, cls: OntologyClass, expression: ClassExpression, record: TermRecord) -> TermRecord:
        """将一个祖先表达式解析到记录中。

        Args:
            cls: 正在处理的类。
            expression: cls 的某个祖先表达式。
            record: cls 的记录，就地写入。

        Returns:
            同一个记录实例。
        """
        if isinstance(expression, Restriction):
            return self._resolve_restriction(expression, record)
        if isinstance(expression, IntersectionExpression):
            # 交集只是限制的分组
            for operand in expression.operands:
                self.resolve(cls, operand, record)
            return record
        if isinstance(expression, NamedClass) and not expression.cls.anonymous:
            return self._resolve_named(cls, expression.cls, record)
        self._logger.warning(
            f"Parent {getattr(expression, 'node', expression)} of {cls.local_name} is an anonymous "
            "class that is neither restriction nor intersection"
        )
        return record

    def extract_own_properties(self, cls: OntologyClass, record: TermRecord) -> TermRecord:
        """写入 cls 的直接属性，具体取舍由本体家族决定。"""
        for relation, value in self.graph.properties(cls.node):
            self.family.extract_property(record, relation, value)
        return record

    def is_root(self, cls: OntologyClass) -> bool:
        return cls.node in self._root_nodes

    def has_root_as_parent(self, cls: OntologyClass, direct: bool) -> bool:
        """判断层级根是否为 cls 的父类。

        Args:
            cls: 待判断的类。
            direct: True 时只看直接父类，否则看整个祖先闭包。
        """
        return any(self.graph.has_superclass(cls, root, direct=direct) for root in self.roots)

    def _resolve_named(self, cls: OntologyClass, parent: OntologyClass, record: TermRecord) -> TermRecord:
        if self.is_root(parent) or self.has_root_as_parent(parent, direct=True):
            return record

        parent_id = self.family.format_term_id(parent.local_name)
        if not parent_id:
            self._logger.warning(f"Parent {parent.node} of {cls.local_name} has no usable identifier")
            return record

        record.add_field(TERM_CATEGORY_FIELD, parent_id)
        if self.graph.has_superclass(cls, parent, direct=True):
            record.add_field(IS_A_FIELD, parent_id)
        return record

    def _resolve_restriction(self, restriction: Restriction, record: TermRecord) -> TermRecord:
        if restriction.kind is RestrictionKind.SOME_VALUES_FROM:
            field_name = self._on_property_label(restriction)
            field_value = self._some_values_from_value(restriction)
        elif restriction.kind is RestrictionKind.HAS_VALUE:
            field_name = self._on_property_label(restriction)
            field_value = restriction.value
        else:
            self._logger.warning(
                f"Restriction {restriction.node} in class {record.id} is neither someValuesFrom nor hasValue type"
            )
            return record

        if _is_blank(field_name) or _is_blank(field_value):
            self._logger.warning(
                f"Could not extract data from {restriction.kind.value} restriction {restriction.node}, "
                f"onProperty {field_name}, in class {record.id}"
            )
            return record

        record.add_field(field_name, field_value)
        return record

    def _on_property_label(self, restriction: Restriction) -> str | None:
        """从限制自身的属性语句中找到 onProperty，返回该属性的标签。"""
        for relation, value in self.graph.properties(restriction.node):
            if relation == ON_PROPERTY:
                return self.graph.label(value)
        return None

    def _some_values_from_value(self, restriction: Restriction) -> str | None:
        filler = restriction.filler
        if filler is None:
            return None
        if self.has_root_as_parent(filler, direct=False):
            return self.family.format_term_id(filler.local_name)
        return filler.label


def _is_blank(value: str | None) -> bool:
    return value is None or not value.strip()
