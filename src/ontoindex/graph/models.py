"""本体图模型定义模块。

本模块定义图查询返回的只读快照类型，包括：
- OntologyClass: 本体类视图
- NamedClass / Restriction / IntersectionExpression: 类表达式的封闭变体
- RestrictionKind: 限制类型
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from rdflib.term import Node


@dataclass(frozen=True)
class OntologyClass:
    """本体类的只读视图。

    Attributes:
        node: 图内句柄（URIRef 或 BNode）。
        local_name: 本地名，用于派生公开的术语 ID，匿名类为空字符串。
        label: 标签，可能为空。
        anonymous: 是否为匿名类。
    """

    node: Node
    local_name: str
    label: str | None = None
    anonymous: bool = False


class RestrictionKind(str, Enum):
    """限制表达式类型。"""

    SOME_VALUES_FROM = "someValuesFrom"
    HAS_VALUE = "hasValue"
    OTHER = "other"


@dataclass(frozen=True)
class NamedClass:
    """具名类表达式。

    cls.anonymous 为 True 时表示既不是限制也不是交集的匿名类，解析时只记录告警。
    """

    cls: OntologyClass


@dataclass(frozen=True)
class Restriction:
    """限制表达式。

    Attributes:
        node: 限制节点句柄。
        kind: 限制类型。
        filler: someValuesFrom 的取值类。
        value: hasValue 字面量的词法形式。
    """

    node: Node
    kind: RestrictionKind
    filler: OntologyClass | None = None
    value: str | None = None


@dataclass(frozen=True)
class IntersectionExpression:
    """交集表达式，操作数保持原有顺序。"""

    node: Node
    operands: tuple[ClassExpression, ...] = ()


ClassExpression = NamedClass | Restriction | IntersectionExpression
