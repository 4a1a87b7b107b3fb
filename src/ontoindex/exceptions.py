"""异常定义模块。

本模块定义了 OntoIndex 项目中使用的所有自定义异常类，
采用层级化设计便于异常捕获和处理。

解析过程中的告警（不支持的祖先表达式、缺失的属性标签等）只记录日志，
不会以异常形式出现；查询未命中以 None 表示，同样不是异常。
"""


class OntoIndexError(Exception):
    """OntoIndex 基础异常类。

    所有 OntoIndex 自定义异常的基类，可用于统一捕获所有项目异常。
    """

    pass


class ConfigurationError(OntoIndexError):
    """配置相关异常。

    当配置项缺失、格式错误或验证失败时抛出。
    """

    pass


class SourceLoadError(OntoIndexError):
    """本体源加载异常。

    当本体文件无法读取、网络获取失败或解析失败时抛出。
    """

    def __init__(self, source: str, reason: str):
        self.source = source
        self.reason = reason
        super().__init__(f"Failed to load ontology from '{source}': {reason}")


class BackendError(OntoIndexError):
    """检索后端异常。

    后端不可达、文档格式错误或提交失败时抛出。对一次索引运行而言不可恢复。
    """

    pass


class UnknownVocabularyError(ConfigurationError):
    """未知词表异常。

    当请求的词表标识既不是已注册的标识也不是别名时抛出。
    """

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Unknown vocabulary '{name}'")
