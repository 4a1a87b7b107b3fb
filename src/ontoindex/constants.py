"""全局常量定义模块。

本模块定义了 OntoIndex 项目中使用的所有全局常量，包括：
- 保留字段名
- 术语 ID 分隔符
- 批量提交与缓存默认值
- 日志级别配置
"""

ID_FIELD = "id"
TERM_CATEGORY_FIELD = "term_category"
IS_A_FIELD = "is_a"
TERM_GROUP_FIELD = "term_group"
VERSION_FIELD = "version"

HEADER_INFO_ID = "HEADER_INFO"

SEPARATOR = ":"
ANY_VALUE = "*"

DEFAULT_DOCS_PER_BATCH = 15000
DEFAULT_CACHE_ENTRIES = 10000
DEFAULT_QUERY_LIMIT = 100
DEFAULT_LOG_LEVEL = "INFO"
DEFAULT_DB_PATH = "data/ontoindex.duckdb"
CONFIG_FILE_NAME = "config.yaml"

VALID_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}

TERM_DOCS_TABLE = "_sys_term_docs"
TERM_FIELDS_TABLE = "_sys_term_fields"
