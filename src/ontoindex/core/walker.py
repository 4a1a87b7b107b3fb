"""层级遍历模块。

从层级根向下遍历本体类，为每个访问到的类生成一条术语记录，
交给批量提交控制器写入检索后端。
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from enum import IntEnum
from typing import TYPE_CHECKING

from ontoindex.constants import TERM_GROUP_FIELD
from ontoindex.core.commit import BatchCommitController
from ontoindex.core.record import TermRecord
from ontoindex.core.resolver import ClassExpressionResolver
from ontoindex.core.version import VersionExtractor
from ontoindex.exceptions import BackendError, SourceLoadError
from ontoindex.graph import OntologyClass, OntologyGraph, load_graph
from ontoindex.logger import logger as default_logger

if TYPE_CHECKING:
    from ontoindex.backend.base import SearchBackend
    from ontoindex.vocabularies.base import OntologyFamily

GraphLoader = Callable[[str, str | None], OntologyGraph]


class IndexStatus(IntEnum):
    """索引运行状态。"""

    SUCCESS = 0
    FAILURE = 1


class HierarchyWalker:
    """本体层级遍历器。

    流程：
    1. 加载本体图并计算层级根集合
    2. 写入版本记录（单独提交）
    3. 对每个层级根的每个直接子类（分类）深度优先遍历全部后代
    4. 每个访问到的类生成一条记录并提交
    5. 遍历结束后无条件提交一次

    每个分类的遍历各自维护已访问集合，层级中存在环时也能终止；
    同一个类可从多个分类到达，此时会提交多次，后端按 ID 覆盖。

    Attributes:
        family: 本体家族能力接口。
        backend: 检索后端。
        threshold: 每批提交的文档数。
        graph_format: rdflib 解析器名称，None 时自动猜测。
    """

    def __init__(
        self,
        family: OntologyFamily,
        backend: SearchBackend,
        *,
        docs_per_batch: int | None = None,
        graph_format: str | None = None,
        graph_loader: GraphLoader = load_graph,
        logger: logging.Logger | None = None,
    ) -> None:
        self.family = family
        self.backend = backend
        self.threshold = docs_per_batch or family.docs_per_batch
        self.graph_format = graph_format
        self._load = graph_loader
        self._logger = logger or default_logger

    def run(self, source_url: str | None = None) -> IndexStatus:
        """执行一次索引运行。

        Args:
            source_url: 本体来源，为空时使用本体家族的默认地址。

        Returns:
            SUCCESS，或在源加载失败、后端失败、内存耗尽时返回 FAILURE。
            已提交的批次不会回滚。
        """
        url = source_url if source_url and source_url.strip() else self.family.default_source_location
        controller = BatchCommitController(self.backend, self.threshold, logger=self._logger)
        try:
            graph = self._load(url, self.graph_format)
            roots = self.family.hierarchy_roots(graph)
            resolver = ClassExpressionResolver(graph, self.family, roots, logger=self._logger)
            VersionExtractor(self.backend, self.family.base_ontology_uri, logger=self._logger).write(
                graph, controller
            )
            for root in sorted(roots, key=lambda r: str(r.node)):
                for category in graph.direct_subclasses(root):
                    self._walk(graph, resolver, category, controller)
            controller.flush()
        except SourceLoadError as e:
            self._logger.warning(f"Failed to index ontology: {e}")
            return IndexStatus.FAILURE
        except BackendError as e:
            self._logger.warning(f"Failed to communicate with the search backend while indexing ontology: {e}")
            return IndexStatus.FAILURE
        except MemoryError as e:
            self._logger.warning(f"Failed to add terms to the search backend. Ran out of memory. {e}")
            return IndexStatus.FAILURE

        self._logger.info(
            f"Indexed {controller.submitted} documents into core '{self.backend.core}' "
            f"in {controller.commits} commits"
        )
        return IndexStatus.SUCCESS

    def build_record(
        self,
        resolver: ClassExpressionResolver,
        cls: OntologyClass,
        term_group: str | None = None,
    ) -> TermRecord | None:
        """为一个类生成术语记录。

        Args:
            resolver: 本次运行的解析器。
            cls: 本体类。
            term_group: 所属分类的标签。

        Returns:
            术语记录，类没有可用 ID 时返回 None。
        """
        term_id = self.family.format_term_id(cls.local_name)
        if not term_id:
            self._logger.warning(f"Skipping class {cls.node} without a usable identifier")
            return None

        record = TermRecord(term_id)
        if term_group:
            record.add_field(TERM_GROUP_FIELD, term_group)
        resolver.extract_own_properties(cls, record)
        resolver.resolve_ancestors(cls, record)
        return record

    def _walk(
        self,
        graph: OntologyGraph,
        resolver: ClassExpressionResolver,
        category: OntologyClass,
        controller: BatchCommitController,
    ) -> None:
        visited = set()
        stack = [category]
        while stack:
            cls = stack.pop()
            if cls.node in visited or resolver.is_root(cls):
                continue
            visited.add(cls.node)

            record = self.build_record(resolver, cls, category.label)
            if record is not None:
                controller.submit(record)

            stack.extend(reversed(graph.direct_subclasses(cls)))
