"""本体版本记录模块。"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ontoindex.constants import HEADER_INFO_ID, ID_FIELD, VERSION_FIELD
from ontoindex.core.record import TermRecord
from ontoindex.exceptions import BackendError
from ontoindex.graph import OntologyGraph
from ontoindex.logger import logger as default_logger

if TYPE_CHECKING:
    from ontoindex.backend.base import SearchBackend
    from ontoindex.core.commit import BatchCommitController


class VersionExtractor:
    """写入与读取版本哨兵记录。

    版本记录的 ID 为 ``HEADER_INFO``，写入后立即单独提交，
    保证即使后续遍历失败也能查询到版本。
    """

    def __init__(
        self,
        backend: SearchBackend,
        base_ontology_uri: str,
        *,
        logger: logging.Logger | None = None,
    ) -> None:
        self.backend = backend
        self.base_ontology_uri = base_ontology_uri
        self._logger = logger or default_logger

    def write(self, graph: OntologyGraph, controller: BatchCommitController) -> str | None:
        """读取本体声明的版本并写入版本记录。

        Args:
            graph: 已加载的本体图。
            controller: 批量提交控制器。

        Returns:
            写入的版本字符串，本体未声明版本时返回 None。

        Raises:
            BackendError: 写入失败时抛出。
        """
        version = graph.ontology_version(self.base_ontology_uri)
        if version is None or not version.strip():
            self._logger.info(f"No version info declared for {self.base_ontology_uri}")
            return None

        record = TermRecord(HEADER_INFO_ID)
        record.add_field(VERSION_FIELD, version)
        controller.submit(record)
        controller.flush()
        self._logger.info(f"Indexed ontology version {version}")
        return version

    def read(self) -> str | None:
        """按哨兵 ID 查询已索引的版本，未找到或查询失败时返回 None。"""
        try:
            results = self.backend.query(ID_FIELD, HEADER_INFO_ID, limit=1)
        except BackendError as e:
            self._logger.warning(f"Failed to query ontology version: {e}")
            return None
        if not results:
            return None
        return results[0].first(VERSION_FIELD)
