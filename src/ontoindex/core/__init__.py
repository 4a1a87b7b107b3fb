"""本体索引编译核心模块。

本模块把本体类层级编译为检索后端中的术语文档，包括：
- TermRecord: 去重的字段累加器
- ClassExpressionResolver: 祖先表达式解析
- HierarchyWalker: 层级遍历
- BatchCommitController: 批量提交
- TermLookupResolver: 带前缀回退的术语查询
- VersionExtractor: 版本记录写入与读取
"""

from ontoindex.core.record import TermRecord
from ontoindex.core.commit import BatchCommitController
from ontoindex.core.lookup import TermLookupResolver
from ontoindex.core.resolver import ClassExpressionResolver
from ontoindex.core.version import VersionExtractor
from ontoindex.core.walker import HierarchyWalker, IndexStatus

__all__ = [
    "BatchCommitController",
    "ClassExpressionResolver",
    "HierarchyWalker",
    "IndexStatus",
    "TermLookupResolver",
    "TermRecord",
    "VersionExtractor",
]
