"""配置管理模块。

本模块负责从 config.yaml 读取 OntoIndex 配置，包括：
- 日志级别
- DuckDB 数据库文件位置
- 术语缓存大小
- 各词表的来源、解析格式与批量大小覆盖
"""

from pathlib import Path

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from ontoindex.constants import (
    CONFIG_FILE_NAME,
    DEFAULT_CACHE_ENTRIES,
    DEFAULT_DB_PATH,
    DEFAULT_LOG_LEVEL,
    VALID_LOG_LEVELS,
)
from ontoindex.exceptions import ConfigurationError


class DatabaseConfig(BaseModel):
    """数据库配置模型。

    Attributes:
        path: DuckDB 数据库文件路径，相对路径按配置文件所在目录解析。
    """

    path: Path = Path(DEFAULT_DB_PATH)

    @field_validator("path", mode="before")
    @classmethod
    def validate_path(cls, v: str | Path) -> Path:
        """验证并转换数据库路径。

        Args:
            v: 待验证的路径值。

        Returns:
            转换后的 Path 对象。
        """
        if isinstance(v, str):
            if not v.strip():
                raise ValueError("database path cannot be empty")
            return Path(v)
        return v


class CacheConfig(BaseModel):
    """术语缓存配置模型。"""

    max_entries: int = Field(default=DEFAULT_CACHE_ENTRIES, ge=1)


class VocabularyConfig(BaseModel):
    """单个词表的配置覆盖。

    Attributes:
        source: 本体来源，覆盖本体家族的默认地址。
        format: rdflib 解析器名称，None 时自动猜测。
        docs_per_batch: 每批提交文档数，覆盖本体家族的默认值。
    """

    source: str | None = None
    format: str | None = None
    docs_per_batch: int | None = Field(default=None, ge=1)


class IndexConfig(BaseModel):
    """OntoIndex 配置模型。

    Attributes:
        log_level: 日志级别，默认为 INFO。
        database: 数据库配置。
        cache: 术语缓存配置。
        vocabularies: 按词表标识索引的配置覆盖。
    """

    log_level: str = DEFAULT_LOG_LEVEL
    database: DatabaseConfig = Field(default_factory=DatabaseConfig)
    cache: CacheConfig = Field(default_factory=CacheConfig)
    vocabularies: dict[str, VocabularyConfig] = Field(default_factory=dict)

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """验证日志级别。

        Args:
            v: 待验证的日志级别字符串。

        Returns:
            验证通过的大写日志级别。

        Raises:
            ValueError: 日志级别无效时抛出。
        """
        v_upper = v.upper()
        if v_upper not in VALID_LOG_LEVELS:
            raise ValueError(f"log_level must be one of: {sorted(VALID_LOG_LEVELS)}")
        return v_upper

    def vocabulary(self, identifier: str) -> VocabularyConfig:
        """获取词表配置，未配置时返回默认值。"""
        return self.vocabularies.get(identifier) or VocabularyConfig()

    @classmethod
    def from_yaml(cls, config_path: Path | str) -> "IndexConfig":
        """从 YAML 配置文件加载配置。

        Args:
            config_path: 配置文件路径，或包含 config.yaml 的目录。

        Returns:
            加载的配置实例，若配置文件不存在则返回默认配置。

        Raises:
            ConfigurationError: 文件无法解析或配置项无效时抛出。
        """
        path = Path(config_path)
        if path.is_dir():
            path = path / CONFIG_FILE_NAME
        if not path.exists():
            return cls()

        try:
            with open(path, encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in {path}: {e}") from e
        if not isinstance(data, dict):
            raise ConfigurationError(f"Config file {path} must contain a mapping")

        try:
            config = cls(**data)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid configuration in {path}: {e}") from e

        if not config.database.path.is_absolute():
            config.database.path = path.parent / config.database.path
        return config
