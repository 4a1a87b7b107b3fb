"""OntoIndex - 将 OWL 本体编译为 DuckDB 术语索引的工具。

本模块提供本体索引的核心功能，包括：
- 本体图加载与类表达式解析
- 层级遍历与字段扁平化
- 批量提交与术语缓存
- 术语与版本查询
"""

from importlib.metadata import version

__version__ = version("ontoindex")
