"""词表注册模块。

维护受支持的本体家族，并按标识或别名（大小写不敏感）查找。
"""

from ontoindex.exceptions import UnknownVocabularyError
from ontoindex.vocabularies.base import OntologyFamily
from ontoindex.vocabularies.orphanet import Orphanet

FAMILIES: dict[str, type[OntologyFamily]] = {
    Orphanet.identifier: Orphanet,
}


def get_family(name: str) -> OntologyFamily:
    """按标识或别名获取本体家族实例。

    Args:
        name: 词表标识或别名，例如 ``orphanet``、``ORPHA``。

    Returns:
        本体家族实例。

    Raises:
        UnknownVocabularyError: 未找到对应词表时抛出。
    """
    wanted = name.strip().lower()
    for family_cls in FAMILIES.values():
        family = family_cls()
        if wanted in {alias.lower() for alias in family.aliases}:
            return family
    raise UnknownVocabularyError(name)


__all__ = [
    "FAMILIES",
    "OntologyFamily",
    "Orphanet",
    "get_family",
]
