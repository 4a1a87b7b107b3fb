"""OWL 词表门面。

把本体家族、检索后端和核心组件组装为对外接口：
index / get_term / get_version / search / count。
"""

import logging

from ontoindex.backend import DuckDBBackend, SearchBackend, TermCache
from ontoindex.config import IndexConfig
from ontoindex.constants import DEFAULT_QUERY_LIMIT
from ontoindex.core import (
    HierarchyWalker,
    IndexStatus,
    TermLookupResolver,
    TermRecord,
    VersionExtractor,
)
from ontoindex.exceptions import BackendError
from ontoindex.logger import logger as default_logger
from ontoindex.vocabularies import OntologyFamily, get_family


class OWLVocabulary:
    """由 OWL 本体构建的词表。

    Attributes:
        family: 本体家族能力接口。
        backend: 检索后端。
        default_source: 配置中的来源覆盖。

    Example:
        ```python
        vocabulary = OWLVocabulary.from_config("orphanet", IndexConfig.from_yaml("config.yaml"))
        if vocabulary.index("ordo.owl") == IndexStatus.SUCCESS:
            term = vocabulary.get_term("ORPHA:558")
            print(vocabulary.get_version())
        ```
    """

    def __init__(
        self,
        family: OntologyFamily,
        backend: SearchBackend,
        *,
        docs_per_batch: int | None = None,
        graph_format: str | None = None,
        default_source: str | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self.family = family
        self.backend = backend
        self.default_source = default_source
        self._logger = logger or default_logger
        self._walker = HierarchyWalker(
            family,
            backend,
            docs_per_batch=docs_per_batch,
            graph_format=graph_format,
            logger=self._logger,
        )
        self._lookup = TermLookupResolver(backend, family.term_prefix, logger=self._logger)
        self._versions = VersionExtractor(backend, family.base_ontology_uri, logger=self._logger)

    @classmethod
    def from_config(cls, name: str, config: IndexConfig) -> "OWLVocabulary":
        """按配置创建词表。

        Args:
            name: 词表标识或别名。
            config: OntoIndex 配置。

        Returns:
            使用 DuckDB 后端的词表实例。

        Raises:
            UnknownVocabularyError: 词表未注册时抛出。
            BackendError: 数据库无法打开时抛出。
        """
        family = get_family(name)
        vocab_config = config.vocabulary(family.identifier)
        backend = DuckDBBackend(
            config.database.path,
            family.identifier,
            cache=TermCache(config.cache.max_entries),
        )
        return cls(
            family,
            backend,
            docs_per_batch=vocab_config.docs_per_batch,
            graph_format=vocab_config.format,
            default_source=vocab_config.source,
        )

    @property
    def identifier(self) -> str:
        return self.family.identifier

    @property
    def name(self) -> str:
        return self.family.name

    @property
    def aliases(self) -> frozenset[str]:
        return self.family.aliases

    def index(self, source_url: str | None = None, *, reindex: bool = False) -> IndexStatus:
        """索引本体。

        Args:
            source_url: 本体来源，为空时依次使用配置来源和本体家族默认地址。
            reindex: 是否先清空本词表已有文档。

        Returns:
            运行状态。
        """
        if reindex:
            try:
                self.backend.clear()
            except BackendError as e:
                self._logger.warning(f"Failed to clear core '{self.identifier}' before reindexing: {e}")
                return IndexStatus.FAILURE
        return self._walker.run(source_url or self.default_source)

    def get_term(self, term_id: str | None) -> TermRecord | None:
        """按 ID 查询术语，支持 ``ORPHA:558`` 形式的前缀。"""
        return self._lookup.lookup(term_id)

    def get_version(self) -> str | None:
        """查询已索引的本体版本。"""
        return self._versions.read()

    def search(self, field: str, value: str, limit: int = DEFAULT_QUERY_LIMIT) -> list[TermRecord]:
        """按字段取值查询术语，查询失败时返回空列表。"""
        try:
            return self.backend.query(field, value, limit=limit)
        except BackendError as e:
            self._logger.warning(f"Search {field}={value} failed on core '{self.identifier}': {e}")
            return []

    def count(self) -> int:
        """已索引的文档数（包含版本记录）。"""
        return self.backend.count()

    def close(self) -> None:
        self.backend.close()
