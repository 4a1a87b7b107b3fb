"""日志配置模块。

本模块提供统一的日志配置功能，使用 Rich 库实现美观的控制台输出。
"""

import logging

from rich.console import Console
from rich.logging import RichHandler


def setup_logging(level: str = "INFO"):
    """配置应用程序日志。

    使用 RichHandler 将带格式的日志输出到 stderr，stdout 留给 CLI 的 JSON 结果。
    同时降低 rdflib 的日志级别以减少解析噪音。

    Args:
        level: 日志级别，默认为 INFO。可选值：DEBUG、INFO、WARNING、ERROR、CRITICAL。
    """
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), rich_tracebacks=True, markup=False)],
    )

    logging.getLogger("rdflib").setLevel(logging.WARNING)
    logging.getLogger("urllib3").setLevel(logging.WARNING)


logger = logging.getLogger("ontoindex")
