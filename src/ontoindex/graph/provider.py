"""本体图查询模块。

基于 rdflib 加载本体，并提供只读的类层级查询：
直接子类、直接/全部父类、类属性以及类型判断。
所有查询返回快照元组，不暴露底层迭代器。
"""

from __future__ import annotations

from collections import deque
from pathlib import Path

from rdflib import BNode, Graph, Literal, URIRef
from rdflib.collection import Collection
from rdflib.namespace import OWL, RDF, RDFS
from rdflib.term import Node
from rdflib.util import guess_format

from ontoindex.exceptions import SourceLoadError
from ontoindex.graph.models import (
    ClassExpression,
    IntersectionExpression,
    NamedClass,
    OntologyClass,
    Restriction,
    RestrictionKind,
)
from ontoindex.logger import logger

_IGNORED_SUPERCLASSES = {OWL.Thing, RDFS.Resource}


def local_name(node: Node) -> str:
    """获取节点的本地名。

    取 IRI 中最后一个 ``#`` 或 ``/`` 之后的部分，匿名节点返回空字符串。

    Args:
        node: 图节点。

    Returns:
        本地名。
    """
    if not isinstance(node, URIRef):
        return ""
    text = str(node)
    for sep in ("#", "/"):
        if sep in text:
            tail = text.rsplit(sep, 1)[1]
            if tail:
                return tail
    return text


def load_graph(source: str | Path, format: str | None = None) -> OntologyGraph:
    """加载本体源。

    Args:
        source: 本地路径或 URL。
        format: rdflib 解析器名称，None 时根据扩展名猜测。

    Returns:
        加载完成的本体图。

    Raises:
        SourceLoadError: 读取或解析失败时抛出。
    """
    location = str(source)
    graph = Graph()
    logger.info(f"Loading ontology from {location}")
    try:
        graph.parse(location, format=format or guess_format(location))
    except MemoryError:
        raise
    except Exception as e:
        raise SourceLoadError(location, str(e)) from e
    logger.info(f"Loaded {len(graph)} triples from {location}")
    return OntologyGraph(graph)


class OntologyGraph:
    """加载后的本体图。

    图在加载后视为不可变，祖先闭包按节点缓存。

    Attributes:
        rdf: 底层 rdflib 图。
    """

    def __init__(self, graph: Graph) -> None:
        self.rdf = graph
        self._ancestors: dict[Node, frozenset[Node]] = {}

    def __len__(self) -> int:
        return len(self.rdf)

    def get_class(self, iri: str) -> OntologyClass | None:
        """按 IRI 获取类，图中不存在该 IRI 时返回 None。"""
        node = URIRef(iri)
        if (node, None, None) not in self.rdf and (None, None, node) not in self.rdf:
            return None
        return self.to_class(node)

    def to_class(self, node: Node) -> OntologyClass:
        """将图节点包装为 OntologyClass 视图。"""
        return OntologyClass(
            node=node,
            local_name=local_name(node),
            label=self.label(node),
            anonymous=self.is_anonymous(node),
        )

    def label(self, node: Node) -> str | None:
        """获取节点标签。

        优先选择无语言标记或英文标签。

        Args:
            node: 图节点。

        Returns:
            标签文本，不存在时返回 None。
        """
        labels = list(self.rdf.objects(node, RDFS.label))
        if not labels:
            return None
        for candidate in labels:
            if isinstance(candidate, Literal) and candidate.language in (None, "en"):
                return str(candidate)
        return str(labels[0])

    def is_anonymous(self, node: Node) -> bool:
        return isinstance(node, BNode)

    def is_restriction(self, node: Node) -> bool:
        return (node, RDF.type, OWL.Restriction) in self.rdf or (
            node,
            OWL.onProperty,
            None,
        ) in self.rdf

    def is_intersection(self, node: Node) -> bool:
        return (node, OWL.intersectionOf, None) in self.rdf

    @staticmethod
    def is_literal(value: Node) -> bool:
        return isinstance(value, Literal)

    def properties(self, node: Node) -> tuple[tuple[str, Node], ...]:
        """列出节点的直接属性。

        Args:
            node: 图节点。

        Returns:
            (关系本地名, 取值) 元组序列。
        """
        return tuple((local_name(p), o) for p, o in self.rdf.predicate_objects(node))

    def direct_subclasses(self, cls: OntologyClass) -> tuple[OntologyClass, ...]:
        """列出具名直接子类，按 IRI 排序。"""
        children = {s for s in self.rdf.subjects(RDFS.subClassOf, cls.node) if isinstance(s, URIRef)}
        children.discard(cls.node)
        return tuple(self.to_class(child) for child in sorted(children, key=str))

    def direct_superclasses(self, cls: OntologyClass) -> tuple[ClassExpression, ...]:
        """列出直接父类表达式。"""
        return tuple(self.expression(node) for node in self._superclass_nodes(cls.node))

    def all_superclasses(self, cls: OntologyClass) -> tuple[ClassExpression, ...]:
        """列出全部父类表达式（直接与传递）。

        只沿具名父类向上展开，匿名表达式作为终点交给解析器递归处理。
        已访问节点不会重复展开，因此层级中存在环时也能终止。

        Args:
            cls: 起始类。

        Returns:
            父类表达式序列，不包含起始类自身。
        """
        seen: set[Node] = {cls.node}
        result: list[ClassExpression] = []
        queue: deque[Node] = deque([cls.node])
        while queue:
            current = queue.popleft()
            for parent in self._superclass_nodes(current):
                if parent in seen:
                    continue
                seen.add(parent)
                result.append(self.expression(parent))
                if not self.is_anonymous(parent):
                    queue.append(parent)
        return tuple(result)

    def has_superclass(self, cls: OntologyClass, ancestor: OntologyClass, direct: bool = False) -> bool:
        """判断 ancestor 是否为 cls 的父类。

        Args:
            cls: 待判断的类。
            ancestor: 候选父类。
            direct: True 时只检查直接父类，否则检查整个祖先闭包。

        Returns:
            是否存在父子关系。
        """
        if direct:
            return ancestor.node in self._superclass_nodes(cls.node)
        return ancestor.node in self._named_ancestors(cls.node)

    def expression(self, node: Node, _stack: frozenset[Node] = frozenset()) -> ClassExpression:
        """将节点转换为类表达式变体。

        Args:
            node: 图节点。

        Returns:
            NamedClass、Restriction 或 IntersectionExpression。
        """
        if node in _stack:
            logger.warning(f"Cyclic class expression at {node}, treating as opaque")
            return NamedClass(self.to_class(node))
        if self.is_restriction(node):
            return self._restriction(node)
        if self.is_intersection(node):
            list_node = self.rdf.value(node, OWL.intersectionOf)
            stack = _stack | {node}
            operands = tuple(
                self.expression(operand, stack) for operand in Collection(self.rdf, list_node)
            )
            return IntersectionExpression(node=node, operands=operands)
        return NamedClass(self.to_class(node))

    def ontology_version(self, base_uri: str) -> str | None:
        """获取本体声明的 owl:versionInfo。"""
        value = self.rdf.value(URIRef(base_uri), OWL.versionInfo)
        if value is None:
            return None
        return str(value)

    def _restriction(self, node: Node) -> Restriction:
        filler = self.rdf.value(node, OWL.someValuesFrom)
        if filler is not None:
            return Restriction(
                node=node,
                kind=RestrictionKind.SOME_VALUES_FROM,
                filler=self.to_class(filler),
            )
        has_value = self.rdf.value(node, OWL.hasValue)
        if has_value is not None:
            return Restriction(
                node=node,
                kind=RestrictionKind.HAS_VALUE,
                value=str(has_value) if isinstance(has_value, Literal) else None,
            )
        return Restriction(node=node, kind=RestrictionKind.OTHER)

    def _superclass_nodes(self, node: Node) -> list[Node]:
        """直接父类节点：rdfs:subClassOf 的取值加上匿名的 owl:equivalentClass 定义。"""
        parents: list[Node] = []
        for parent in self.rdf.objects(node, RDFS.subClassOf):
            if parent != node and parent not in _IGNORED_SUPERCLASSES and parent not in parents:
                parents.append(parent)
        for equivalent in self.rdf.objects(node, OWL.equivalentClass):
            if isinstance(equivalent, BNode) and equivalent not in parents:
                parents.append(equivalent)
        return parents

    def _named_ancestors(self, node: Node) -> frozenset[Node]:
        cached = self._ancestors.get(node)
        if cached is not None:
            return cached
        seen: set[Node] = set()
        queue: deque[Node] = deque([node])
        while queue:
            current = queue.popleft()
            for parent in self._superclass_nodes(current):
                if isinstance(parent, BNode) or parent in seen:
                    continue
                seen.add(parent)
                queue.append(parent)
        seen.discard(node)
        ancestors = frozenset(seen)
        self._ancestors[node] = ancestors
        return ancestors
