"""本体图模块。

本模块提供本体源的加载与只读查询，包括：
- load_graph: 通过 rdflib 加载 OWL/RDF 本体
- OntologyGraph: 类层级与属性查询
- 类表达式变体：NamedClass、Restriction、IntersectionExpression
"""

from ontoindex.graph.models import (
    ClassExpression,
    IntersectionExpression,
    NamedClass,
    OntologyClass,
    Restriction,
    RestrictionKind,
)
from ontoindex.graph.provider import OntologyGraph, load_graph, local_name

__all__ = [
    "ClassExpression",
    "IntersectionExpression",
    "NamedClass",
    "OntologyClass",
    "OntologyGraph",
    "Restriction",
    "RestrictionKind",
    "load_graph",
    "local_name",
]
