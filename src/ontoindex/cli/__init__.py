"""CLI 模块。"""

from ontoindex.cli.main import app

__all__ = ["app"]
