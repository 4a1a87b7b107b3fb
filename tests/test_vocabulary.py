"""OWL 词表端到端测试（DuckDB 后端）。"""

import pytest

from ontoindex.config import DatabaseConfig, IndexConfig, VocabularyConfig
from ontoindex.core import IndexStatus, TermRecord
from ontoindex.exceptions import ConfigurationError, UnknownVocabularyError
from ontoindex.vocabularies import Orphanet, get_family
from ontoindex.vocabulary import OWLVocabulary


@pytest.fixture
def vocabulary(db_backend):
    return OWLVocabulary(Orphanet(), db_backend)


@pytest.fixture
def indexed(vocabulary, ordo_path):
    assert vocabulary.index(str(ordo_path)) == IndexStatus.SUCCESS
    return vocabulary


class TestIndex:
    """索引测试。"""

    def test_document_count(self, indexed):
        assert indexed.count() == 7

    def test_get_term(self, indexed):
        record = indexed.get_term("100")

        assert record.get("term_group") == ["disease"]
        assert set(record.get("term_category")) == {"183500", "98006"}
        assert record.get("is_a") == ["183500"]
        assert record.get("omim_id") == ["208900"]
        assert record.get("has_inheritance") == ["Autosomal recessive"]

    def test_get_term_with_prefix(self, indexed):
        assert indexed.get_term("ORPHA:100") == indexed.get_term("100")

    def test_get_missing_term(self, indexed):
        assert indexed.get_term("ORPHA:999999") is None
        assert indexed.get_term("") is None

    def test_get_version(self, indexed):
        assert indexed.get_version() == "2021-04"

    def test_search(self, indexed):
        children = indexed.search("is_a", "98006")
        assert [record.id for record in children] == ["183500"]

        descendants = indexed.search("term_category", "98006")
        assert {record.id for record in descendants} == {"183500", "100"}

    def test_search_any_value(self, indexed):
        ids = {record.id for record in indexed.search("term_group", "*")}
        assert ids == {"377788", "98006", "183500", "100", "410298", "119000"}

    def test_index_twice_is_stable(self, indexed, ordo_path):
        first = indexed.get_term("100")
        assert indexed.index(str(ordo_path)) == IndexStatus.SUCCESS
        assert indexed.count() == 7
        assert indexed.get_term("100") == first

    def test_reindex_drops_stale_terms(self, indexed, ordo_path):
        indexed.backend.add(TermRecord("stale"))
        indexed.backend.commit()
        assert indexed.get_term("stale") is not None

        assert indexed.index(str(ordo_path), reindex=True) == IndexStatus.SUCCESS
        assert indexed.get_term("stale") is None
        assert indexed.count() == 7

    def test_failed_run_keeps_previous_terms(self, indexed, tmp_path):
        assert indexed.index(str(tmp_path / "missing.owl")) == IndexStatus.FAILURE
        assert indexed.get_term("100") is not None

    def test_default_source(self, db_backend, ordo_path):
        vocabulary = OWLVocabulary(Orphanet(), db_backend, default_source=str(ordo_path))
        assert vocabulary.index() == IndexStatus.SUCCESS

    def test_no_version(self, toy_family, db_backend, toy_path):
        vocabulary = OWLVocabulary(toy_family, db_backend)
        assert vocabulary.index(str(toy_path)) == IndexStatus.SUCCESS
        assert vocabulary.get_version() is None
        assert vocabulary.get_term("TOY:A").get("ageOfOnset") == ["Infant"]


class TestVocabularyRegistry:
    """词表注册测试。"""

    @pytest.mark.parametrize("name", ["orphanet", "Orphanet", "ORPHA", "orpha"])
    def test_get_family_by_alias(self, name):
        assert isinstance(get_family(name), Orphanet)

    def test_unknown_family(self):
        with pytest.raises(UnknownVocabularyError):
            get_family("hpo")

    def test_properties(self, vocabulary):
        assert vocabulary.identifier == "orphanet"
        assert vocabulary.name == "Orphanet"
        assert vocabulary.aliases == frozenset({"Orphanet", "orphanet", "ORPHA"})

    def test_from_config(self, tmp_path, ordo_path):
        config = IndexConfig(
            database=DatabaseConfig(path=tmp_path / "cfg.duckdb"),
            vocabularies={"orphanet": VocabularyConfig(source=str(ordo_path), docs_per_batch=3)},
        )
        vocabulary = OWLVocabulary.from_config("ORPHA", config)

        assert vocabulary.default_source == str(ordo_path)
        assert vocabulary.index() == IndexStatus.SUCCESS
        assert vocabulary.get_version() == "2021-04"
        assert (tmp_path / "cfg.duckdb").exists()

    def test_from_config_unknown(self):
        with pytest.raises(ConfigurationError):
            OWLVocabulary.from_config("nope", IndexConfig())
