"""批量提交控制模块。"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ontoindex.core.record import TermRecord
from ontoindex.exceptions import BackendError
from ontoindex.logger import logger as default_logger

if TYPE_CHECKING:
    from ontoindex.backend.base import SearchBackend


class BatchCommitController:
    """批量提交控制器。

    唯一允许调用后端 add / commit / evict_cache 的组件。
    计数达到阈值时提交并清空术语缓存，因此未提交的文档数不会超过阈值。
    后端错误记录后原样抛出，不做重试。

    Attributes:
        backend: 检索后端。
        threshold: 每批提交的文档数。
        counter: 当前未提交的文档数。
        submitted: 本次运行累计提交的文档数。
        commits: 本次运行累计的提交次数。
    """

    def __init__(
        self,
        backend: SearchBackend,
        threshold: int,
        *,
        logger: logging.Logger | None = None,
    ) -> None:
        if threshold <= 0:
            raise ValueError("threshold must be positive")
        self.backend = backend
        self.threshold = threshold
        self.counter = 0
        self.submitted = 0
        self.commits = 0
        self._logger = logger or default_logger

    def submit(self, record: TermRecord) -> None:
        """添加一条记录，达到阈值时提交。

        Args:
            record: 待添加的记录。

        Raises:
            BackendError: 后端添加或提交失败时抛出。
        """
        try:
            self.backend.add(record)
        except BackendError as e:
            self._logger.error(f"Failed to add term {record.id} to core '{self.backend.core}': {e}")
            raise
        self.counter += 1
        self.submitted += 1
        if self.counter >= self.threshold:
            self.flush()

    def flush(self) -> None:
        """无条件提交并清空术语缓存，计数归零。

        Raises:
            BackendError: 后端提交失败时抛出。
        """
        try:
            self.backend.commit()
        except BackendError as e:
            self._logger.error(f"Failed to commit {self.counter} terms to core '{self.backend.core}': {e}")
            raise
        self.backend.evict_cache()
        self.commits += 1
        self._logger.debug(f"Committed batch of {self.counter} terms ({self.submitted} total)")
        self.counter = 0
