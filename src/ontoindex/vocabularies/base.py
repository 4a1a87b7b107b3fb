"""本体家族能力接口。

每个受支持的本体家族（如 Orphanet/ORDO）实现一次 OntologyFamily，
层级遍历器与解析器以参数形式接收它，而不是通过继承特化。
"""

from abc import ABC, abstractmethod

from rdflib.term import Node

from ontoindex.constants import DEFAULT_DOCS_PER_BATCH
from ontoindex.core.record import TermRecord
from ontoindex.graph import OntologyClass, OntologyGraph
from ontoindex.logger import logger


class OntologyFamily(ABC):
    """本体家族能力接口。

    Attributes:
        identifier: 词表标识，也用作后端 core 名称。
        name: 展示名称。
        term_prefix: 术语前缀（如 ORPHA），用于查询时的前缀回退。
        base_ontology_uri: 本体 IRI，版本信息挂在该 IRI 上。
        default_source_location: 未指定来源时使用的默认地址。
        docs_per_batch: 每批提交的文档数。
        root_iris: 层级根类 IRI。
        website: 官方网站。
        citation: 引用说明。
    """

    identifier: str = ""
    name: str = ""
    term_prefix: str = ""
    base_ontology_uri: str = ""
    default_source_location: str = ""
    docs_per_batch: int = DEFAULT_DOCS_PER_BATCH
    root_iris: tuple[str, ...] = ()
    website: str = ""
    citation: str = ""

    @property
    def aliases(self) -> frozenset[str]:
        """词表别名：名称、标识和术语前缀。"""
        return frozenset(alias for alias in (self.name, self.identifier, self.term_prefix) if alias)

    def hierarchy_roots(self, graph: OntologyGraph) -> frozenset[OntologyClass]:
        """计算本次运行的层级根集合。

        图中缺失的根类只记录告警。

        Args:
            graph: 已加载的本体图。

        Returns:
            层级根类集合。
        """
        roots = set()
        for iri in self.root_iris:
            root = graph.get_class(iri)
            if root is None:
                logger.warning(f"Hierarchy root {iri} not found in {self.identifier} ontology")
                continue
            roots.add(root)
        return frozenset(roots)

    @abstractmethod
    def format_term_id(self, local_name: str | None) -> str | None:
        """由本地名派生公开术语 ID，本地名为空时返回 None。"""
        ...

    @abstractmethod
    def extract_property(self, record: TermRecord, relation: str, value: Node) -> None:
        """将类的一条直接属性写入记录（如果是关注的属性）。

        Args:
            record: 目标记录。
            relation: 属性本地名。
            value: 属性取值节点。
        """
        ...

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.identifier!r})"
