"""命令行入口模块。

本模块提供 OntoIndex 的 CLI 命令：索引本体、查询术语、查询版本。
"""

from pathlib import Path
from typing import Any

import orjson
import typer

from ontoindex import __version__
from ontoindex.config import IndexConfig
from ontoindex.constants import CONFIG_FILE_NAME, DEFAULT_QUERY_LIMIT
from ontoindex.core import IndexStatus
from ontoindex.exceptions import BackendError, OntoIndexError
from ontoindex.logger import logger, setup_logging
from ontoindex.vocabularies import FAMILIES
from ontoindex.vocabulary import OWLVocabulary

app = typer.Typer(help="OntoIndex: compile OWL ontologies into a DuckDB term index.")

_state: dict[str, Any] = {}


def _echo_json(data: Any) -> None:
    typer.echo(orjson.dumps(data, option=orjson.OPT_INDENT_2).decode("utf-8"))


def _open_vocabulary(name: str) -> OWLVocabulary:
    """按名称打开词表，失败时以退出码 2 结束。"""
    config: IndexConfig = _state["config"]
    try:
        return OWLVocabulary.from_config(name, config)
    except OntoIndexError as e:
        logger.error(str(e))
        raise typer.Exit(code=2) from e


def _count_or_none(vocab: OWLVocabulary) -> int | None:
    """统计文档数，后端失败时记录告警并返回 None。"""
    try:
        return vocab.count()
    except BackendError as e:
        logger.warning(f"Failed to count documents in core '{vocab.identifier}': {e}")
        return None


@app.callback()
def main(
    config_path: Path = typer.Option(
        Path(CONFIG_FILE_NAME),
        "--config",
        "-c",
        help="Path to config.yaml",
    ),
):
    """OntoIndex CLI 入口。

    加载配置并配置日志。

    Args:
        config_path: 配置文件路径，默认为当前目录下的 config.yaml。
    """
    try:
        config = IndexConfig.from_yaml(config_path)
    except OntoIndexError as e:
        typer.echo(str(e), err=True)
        raise typer.Exit(code=2) from e
    _state["config"] = config
    setup_logging(config.log_level)


@app.command()
def index(
    vocabulary: str = typer.Argument(..., help="Vocabulary identifier or alias"),
    source: str | None = typer.Option(None, "--source", "-s", help="Ontology URL or file path"),
    reindex: bool = typer.Option(False, "--reindex", help="Drop existing terms first"),
):
    """索引本体，退出码即运行状态（0 成功，1 失败）。"""
    vocab = _open_vocabulary(vocabulary)
    try:
        status = vocab.index(source, reindex=reindex)
        if status == IndexStatus.SUCCESS:
            _echo_json({"vocabulary": vocab.identifier, "status": "success", "count": _count_or_none(vocab)})
        else:
            _echo_json({"vocabulary": vocab.identifier, "status": "failure"})
    finally:
        vocab.close()
    raise typer.Exit(code=int(status))


@app.command()
def term(
    vocabulary: str = typer.Argument(..., help="Vocabulary identifier or alias"),
    term_id: str = typer.Argument(..., help="Term identifier, e.g. ORPHA:558"),
):
    """查询单个术语。"""
    vocab = _open_vocabulary(vocabulary)
    try:
        record = vocab.get_term(term_id)
    finally:
        vocab.close()
    if record is None:
        typer.echo(f"Term {term_id} not found", err=True)
        raise typer.Exit(code=1)
    _echo_json(record.to_dict())


@app.command()
def version(
    vocabulary: str | None = typer.Argument(None, help="Vocabulary identifier or alias"),
):
    """显示已索引的本体版本；未指定词表时显示 OntoIndex 版本。"""
    if vocabulary is None:
        typer.echo(f"OntoIndex v{__version__}")
        return
    vocab = _open_vocabulary(vocabulary)
    try:
        ontology_version = vocab.get_version()
    finally:
        vocab.close()
    if ontology_version is None:
        typer.echo(f"No version recorded for {vocab.identifier}", err=True)
        raise typer.Exit(code=1)
    typer.echo(ontology_version)


@app.command()
def search(
    vocabulary: str = typer.Argument(..., help="Vocabulary identifier or alias"),
    field: str = typer.Argument(..., help="Field name, e.g. is_a"),
    value: str = typer.Argument(..., help="Exact field value, or * for any"),
    limit: int = typer.Option(DEFAULT_QUERY_LIMIT, "--limit", "-n", min=1),
):
    """按字段取值查询术语。"""
    vocab = _open_vocabulary(vocabulary)
    try:
        records = vocab.search(field, value, limit=limit)
    finally:
        vocab.close()
    _echo_json([record.to_dict() for record in records])


@app.command()
def vocabularies():
    """列出受支持的词表。"""
    _echo_json(
        [
            {
                "identifier": family.identifier,
                "name": family.name,
                "prefix": family.term_prefix,
                "aliases": sorted(family.aliases),
                "website": family.website,
                "citation": family.citation,
            }
            for family in (family_cls() for family_cls in FAMILIES.values())
        ]
    )


if __name__ == "__main__":
    app()
