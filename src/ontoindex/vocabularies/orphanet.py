"""Orphanet (ORDO) 本体家族。"""

from rdflib.term import Node

from ontoindex.constants import SEPARATOR
from ontoindex.core.record import TermRecord
from ontoindex.graph import OntologyGraph
from ontoindex.vocabularies.base import OntologyFamily

PHENOME_IRI = "http://www.orpha.net/ORDO/Orphanet_C001"
GENETIC_MATERIAL_IRI = "http://www.orpha.net/ORDO/Orphanet_C010"

HAS_DBXREF = "hasDbXref"
LOCAL_NAME_PREFIX = "Orphanet_"


class Orphanet(OntologyFamily):
    """Orphanet 罕见病本体，术语前缀为 ``ORPHA``。

    层级根为表型（C001）和遗传物质（C010）两个顶级分类；
    术语 ID 为去掉 ``Orphanet_`` 的本地名。
    """

    identifier = "orphanet"
    name = "Orphanet"
    term_prefix = "ORPHA"
    base_ontology_uri = "http://www.orpha.net/ontology/orphanet.owl"
    default_source_location = (
        "http://data.bioontology.org/ontologies/ORDO/submissions/10/download"
        "?apikey=8b5b7825-538d-40e0-9e9e-5ab9274a9aeb"
    )
    docs_per_batch = 15000
    root_iris = (PHENOME_IRI, GENETIC_MATERIAL_IRI)
    website = "http://www.orpha.net/"
    citation = (
        "Orphanet: an online database of rare diseases and orphan drugs. "
        "Copyright, INSERM 1997. Available at http://www.orpha.net."
    )

    def format_term_id(self, local_name: str | None) -> str | None:
        if not local_name or not local_name.strip():
            return None
        return local_name.replace(LOCAL_NAME_PREFIX, "")

    def extract_property(self, record: TermRecord, relation: str, value: Node) -> None:
        # 非字面量（rdf:type、subClassOf 等）已通过父类处理
        if not OntologyGraph.is_literal(value):
            return
        lexical = str(value)
        if relation == HAS_DBXREF:
            self._extract_dbxref(record, lexical)
        else:
            record.add_field(relation, lexical)

    def _extract_dbxref(self, record: TermRecord, reference: str) -> None:
        """外部引用 ``OMIM:208900`` 写为 ``omim_id = 208900``。"""
        ontology, _, external_id = reference.partition(SEPARATOR)
        record.add_field(f"{ontology.lower()}_id", external_id)
