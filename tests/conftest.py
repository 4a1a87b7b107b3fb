"""测试配置和共享 fixtures。"""

import pytest

from ontoindex.backend import DuckDBBackend, SearchBackend, TermCache
from ontoindex.constants import ANY_VALUE, ID_FIELD
from ontoindex.core import ClassExpressionResolver, TermRecord
from ontoindex.exceptions import BackendError
from ontoindex.graph import load_graph
from ontoindex.vocabularies import Orphanet

ORDO = "http://www.orpha.net/ORDO/"

ORDO_TTL = """
@prefix : <http://www.orpha.net/ORDO/> .
@prefix owl: <http://www.w3.org/2002/07/owl#> .
@prefix rdf: <http://www.w3.org/1999/02/22-rdf-syntax-ns#> .
@prefix rdfs: <http://www.w3.org/2000/01/rdf-schema#> .
@prefix oboInOwl: <http://www.geneontology.org/formats/oboInOwl#> .
@prefix efo: <http://www.ebi.ac.uk/efo/> .

<http://www.orpha.net/ontology/orphanet.owl> a owl:Ontology ;
    owl:versionInfo "2021-04" .

:Orphanet_C001 a owl:Class ; rdfs:label "phenome" .
:Orphanet_C010 a owl:Class ; rdfs:label "genetic material" .

:Orphanet_C016 a owl:ObjectProperty ; rdfs:label "has_inheritance" .
:Orphanet_C017 a owl:ObjectProperty ; rdfs:label "has_age_of_onset" .
:Orphanet_C021 a owl:ObjectProperty ; rdfs:label "part_of" .
:Orphanet_C099 a owl:ObjectProperty .

:Orphanet_409930 a owl:Class ; rdfs:label "Autosomal recessive" .

:Orphanet_377788 a owl:Class ;
    rdfs:label "disease" ;
    rdfs:subClassOf :Orphanet_C001 .

:Orphanet_98006 a owl:Class ;
    rdfs:label "Rare neurologic disease" ;
    rdfs:subClassOf :Orphanet_377788 .

:Orphanet_183500 a owl:Class ;
    rdfs:label "Rare hereditary ataxia" ;
    rdfs:subClassOf :Orphanet_98006 .

:Orphanet_100 a owl:Class ;
    rdfs:label "Ataxia-telangiectasia" ;
    efo:definition "A rare neurodegenerative disorder." ;
    oboInOwl:hasDbXref "OMIM:208900", "ICD-10:G11.3" ;
    rdfs:subClassOf :Orphanet_183500 ;
    rdfs:subClassOf [
        a owl:Restriction ;
        owl:onProperty :Orphanet_C021 ;
        owl:someValuesFrom :Orphanet_98006
    ] ;
    rdfs:subClassOf [
        a owl:Class ;
        owl:intersectionOf (
            [ a owl:Restriction ; owl:onProperty :Orphanet_C016 ; owl:someValuesFrom :Orphanet_409930 ]
            [ a owl:Restriction ; owl:onProperty :Orphanet_C017 ; owl:hasValue "Infancy" ]
        )
    ] ;
    rdfs:subClassOf [
        a owl:Restriction ;
        owl:onProperty :Orphanet_C099 ;
        owl:someValuesFrom :Orphanet_409930
    ] ;
    rdfs:subClassOf [
        a owl:Restriction ;
        owl:onProperty :Orphanet_C016 ;
        owl:allValuesFrom :Orphanet_409930
    ] ;
    rdfs:subClassOf [
        owl:unionOf ( :Orphanet_98006 :Orphanet_409930 )
    ] .

:Orphanet_410298 a owl:Class ;
    rdfs:label "gene" ;
    rdfs:subClassOf :Orphanet_C010 .

:Orphanet_119000 a owl:Class ;
    rdfs:label "ATM serine/threonine kinase" ;
    rdfs:subClassOf :Orphanet_410298 .
"""

TOY_TTL = """
@prefix ex: <http://example.org/> .
@prefix owl: <http://www.w3.org/2002/07/owl#> .
@prefix rdfs: <http://www.w3.org/2000/01/rdf-schema#> .

<http://example.org/toy> a owl:Ontology .

ex:R a owl:Class ; rdfs:label "Root" .
ex:hasInheritance a owl:ObjectProperty ; rdfs:label "hasInheritance" .
ex:ageOfOnset a owl:DatatypeProperty ; rdfs:label "ageOfOnset" .
ex:AutosomalRecessive a owl:Class ; rdfs:label "AutosomalRecessive" .

ex:A a owl:Class ;
    rdfs:subClassOf ex:R ;
    rdfs:subClassOf [
        owl:intersectionOf (
            [ a owl:Restriction ; owl:onProperty ex:hasInheritance ; owl:someValuesFrom ex:AutosomalRecessive ]
            [ a owl:Restriction ; owl:onProperty ex:ageOfOnset ; owl:hasValue "Infant" ]
        )
    ] .
"""

CYCLIC_TTL = """
@prefix ex: <http://example.org/> .
@prefix owl: <http://www.w3.org/2002/07/owl#> .
@prefix rdfs: <http://www.w3.org/2000/01/rdf-schema#> .

ex:R a owl:Class ; rdfs:label "Root" .
ex:A a owl:Class ; rdfs:label "A" ; rdfs:subClassOf ex:R, ex:C .
ex:B a owl:Class ; rdfs:label "B" ; rdfs:subClassOf ex:A .
ex:C a owl:Class ; rdfs:label "C" ; rdfs:subClassOf ex:B .
"""


class ToyFamily(Orphanet):
    """只有一个根 R 的测试本体家族。"""

    identifier = "toy"
    name = "Toy"
    term_prefix = "TOY"
    base_ontology_uri = "http://example.org/toy"
    default_source_location = ""
    docs_per_batch = 100
    root_iris = ("http://example.org/R",)


class RecordingBackend(SearchBackend):
    """记录调用的内存后端。

    add 暂存，commit 后可查询；fail_on_commit 指定第几次提交抛出 BackendError。
    """

    def __init__(self, core: str = "test", fail_on_commit: int | None = None, fail_on_query: bool = False):
        super().__init__(core, TermCache())
        self.calls: list[str] = []
        self.pending: list[TermRecord] = []
        self.docs: dict[str, TermRecord] = {}
        self.queries: list[tuple[str, str]] = []
        self.fail_on_commit = fail_on_commit
        self.fail_on_query = fail_on_query
        self.commit_count = 0
        self.evictions = 0

    def add(self, record: TermRecord) -> None:
        if not record.id:
            raise BackendError("missing id")
        self.calls.append("add")
        self.pending.append(record)

    def commit(self) -> None:
        self.commit_count += 1
        if self.fail_on_commit is not None and self.commit_count >= self.fail_on_commit:
            raise BackendError("backend unreachable")
        self.calls.append("commit")
        for record in self.pending:
            self.docs[record.id] = record
        self.pending = []

    def evict_cache(self) -> None:
        self.calls.append("evict")
        self.evictions += 1
        super().evict_cache()

    def query(self, field: str, value: str, limit: int = 100) -> list[TermRecord]:
        self.queries.append((field, value))
        if self.fail_on_query:
            raise BackendError("backend unreachable")
        if field == ID_FIELD:
            found = self.docs.get(value)
            return [found] if found is not None else []
        return [
            record
            for record in self.docs.values()
            if record.has(field, None if value == ANY_VALUE else value)
        ][:limit]

    def count(self) -> int:
        return len(self.docs)

    def clear(self) -> None:
        self.docs.clear()
        self.pending = []


@pytest.fixture
def ordo_path(tmp_path):
    """写入 ORDO 结构的测试本体。"""
    path = tmp_path / "ordo.ttl"
    path.write_text(ORDO_TTL, encoding="utf-8")
    return path


@pytest.fixture
def toy_path(tmp_path):
    """写入只含根 R 与类 A 的测试本体。"""
    path = tmp_path / "toy.ttl"
    path.write_text(TOY_TTL, encoding="utf-8")
    return path


@pytest.fixture
def cyclic_path(tmp_path):
    """写入存在子类环的测试本体。"""
    path = tmp_path / "cyclic.ttl"
    path.write_text(CYCLIC_TTL, encoding="utf-8")
    return path


@pytest.fixture
def ordo_graph(ordo_path):
    return load_graph(ordo_path)


@pytest.fixture
def orphanet():
    return Orphanet()


@pytest.fixture
def toy_family():
    return ToyFamily()


@pytest.fixture
def resolver(ordo_graph, orphanet):
    """ORDO 测试本体上的解析器。"""
    roots = orphanet.hierarchy_roots(ordo_graph)
    return ClassExpressionResolver(ordo_graph, orphanet, roots)


@pytest.fixture
def recording_backend():
    return RecordingBackend()


@pytest.fixture
def backend_factory():
    """按需构造带故障注入的内存后端。"""
    return RecordingBackend


@pytest.fixture
def db_backend(tmp_path):
    """DuckDB 后端实例。"""
    backend = DuckDBBackend(tmp_path / "data" / "terms.duckdb", "orphanet")
    yield backend
    backend.close()
