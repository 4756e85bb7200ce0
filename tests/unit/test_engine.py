"""
Unit tests for the search engine facade.

Document search is either the in-memory implementation or an AsyncMock,
ontologies come from in-memory sources or the YAML fixture.
"""

import logging
import math
from unittest.mock import AsyncMock, Mock

import pytest

from fdp_search.config import SearchSettings
from fdp_search.documents import InMemoryDocumentSearch, SearchResult
from fdp_search.engine import SearchEngine, SearchEngineFactory, get_search_engine, start_search_engine
from fdp_search.errors import DocumentSearchError, OntologySourceError
from fdp_search.ontology import (
    Annotation,
    FileOntologySource,
    InMemoryOntologySource,
    OntologyClass,
    OntologySource,
)

pytestmark = pytest.mark.unit


class BrokenSource(OntologySource):
    """Source yielding some classes, then failing"""

    def __init__(self, classes, error):
        self._classes = classes
        self._error = error

    def classes(self):
        yield from self._classes
        raise self._error


@pytest.fixture
def document_search(metadata_documents, extractor):
    return InMemoryDocumentSearch(metadata_documents, extractor=extractor)


@pytest.fixture
def engine(document_search, extractor):
    return SearchEngine(document_search, extractor=extractor)


def uris(results):
    return [result.uri.rsplit("/", 1)[-1] for result in results]


class TestRankedSearch:
    """Test expansion + scoring + ranking end to end"""

    @pytest.mark.asyncio
    async def test_expanded_query_ranks_associated_documents(self, engine, blood_cancer_class):
        """
        'cancer' expands to {cancer, blood, leukemia}:
        blood-donors:      tf(blood) = 2/5, idf = ln(3/1)
        leukemia-registry: tf(leukemia) = 2/6, idf = ln(3/1)
        climate:           no match
        """
        await engine.build_index(InMemoryOntologySource([blood_cancer_class]))

        results = await engine.ranked_search("cancer")

        assert uris(results) == ["blood-donors", "leukemia-registry"]

    @pytest.mark.asyncio
    async def test_scores(self, engine, blood_cancer_class):
        await engine.build_index(InMemoryOntologySource([blood_cancer_class]))

        ranked = await engine.ranked_search_scored("cancer")

        assert [r.position for r in ranked] == [1, 2]
        assert ranked[0].score == pytest.approx(0.4 * math.log(3))
        assert ranked[1].score == pytest.approx((2 / 6) * math.log(3))

    @pytest.mark.asyncio
    async def test_without_ontology(self, engine):
        """Test an empty index still searches the query keywords themselves"""
        results = await engine.ranked_search("cancer")

        assert results == []
        assert uris(await engine.ranked_search("climate")) == ["climate"]

    @pytest.mark.asyncio
    async def test_top_k(self, engine, blood_cancer_class):
        await engine.build_index(InMemoryOntologySource([blood_cancer_class]))

        assert uris(await engine.ranked_search("cancer", top_k=1)) == ["blood-donors"]

    @pytest.mark.asyncio
    async def test_query_without_keywords(self, engine):
        document_search = engine.document_search

        assert await engine.ranked_search("the of and") == []
        assert await document_search.count_total_documents() == 3

    @pytest.mark.asyncio
    async def test_repeatable(self, engine, blood_cancer_class):
        await engine.build_index(InMemoryOntologySource([blood_cancer_class]))

        first = await engine.ranked_search("blood cancer")
        second = await engine.ranked_search("blood cancer")

        assert first == second

    def test_expand_query(self, engine):
        assert engine.expand_query("Blood Cancer") == {"blood", "cancer"}

    @pytest.mark.asyncio
    async def test_association_threshold(self, document_search, extractor):
        """Test weak associations are not searched when a threshold is set"""
        engine = SearchEngine(document_search, extractor=extractor, association_threshold=0.5)
        await engine.build_index(InMemoryOntologySource([
            OntologyClass(iri="c1", annotations=[
                Annotation(value="Cancer", is_label=True),
                Annotation(value="Leukemia"),
            ]),
        ]))

        # cancer → [cancer, leukemia]: both at strength 0.5
        assert engine.expand_query("cancer") == {"cancer", "leukemia"}

        engine.association_threshold = 0.6
        assert engine.expand_query("cancer") == {"cancer"}


class TestDocumentSearchFailures:
    """Test collaborator errors surface as DocumentSearchError"""

    @pytest.mark.asyncio
    async def test_lookup_failure_wrapped(self, extractor):
        document_search = Mock()
        document_search.count_total_documents = AsyncMock(return_value=10)
        document_search.find_by_word = AsyncMock(side_effect=ConnectionError("triple store down"))
        engine = SearchEngine(document_search, extractor=extractor)

        with pytest.raises(DocumentSearchError, match="triple store down") as exc_info:
            await engine.ranked_search("cancer")

        assert isinstance(exc_info.value.__cause__, ConnectionError)

    @pytest.mark.asyncio
    async def test_count_failure_wrapped(self, extractor):
        document_search = Mock()
        document_search.count_total_documents = AsyncMock(side_effect=TimeoutError("count timed out"))
        document_search.find_by_word = AsyncMock(return_value=[])
        engine = SearchEngine(document_search, extractor=extractor)

        with pytest.raises(DocumentSearchError, match="count timed out"):
            await engine.ranked_search("cancer")

    @pytest.mark.asyncio
    async def test_plain_search_failure_wrapped(self, extractor):
        document_search = Mock()
        document_search.find_by_text = AsyncMock(side_effect=RuntimeError("boom"))
        engine = SearchEngine(document_search, extractor=extractor)

        with pytest.raises(DocumentSearchError) as exc_info:
            await engine.search("cancer")

        assert isinstance(exc_info.value.__cause__, RuntimeError)


class TestPlainSearch:
    """Test unexpanded search"""

    @pytest.mark.asyncio
    async def test_substring_match(self, engine):
        assert uris(await engine.search("Blood don")) == ["blood-donors"]

    @pytest.mark.asyncio
    async def test_duplicates_collapsed(self, extractor):
        first = SearchResult(uri="d1", title="Leukemia")
        document_search = Mock()
        document_search.find_by_text = AsyncMock(return_value=[
            first,
            SearchResult(uri="d2", title="Sarcoma"),
            SearchResult(uri="d1", title="Leukemia (again)"),
        ])
        engine = SearchEngine(document_search, extractor=extractor)

        results = await engine.search("anything")

        assert [r.uri for r in results] == ["d1", "d2"]
        assert results[0].title == "Leukemia"


class TestIndexBuilding:
    """Test index publication"""

    @pytest.mark.asyncio
    async def test_build_index_is_additive(self, engine, blood_cancer_class):
        source = InMemoryOntologySource([blood_cancer_class])

        await engine.build_index(source)
        stats = await engine.build_index(source)

        assert engine.index.keyword_count("cancer") == 2
        assert stats.classes_indexed == 2

    @pytest.mark.asyncio
    async def test_build_publishes_new_instance(self, engine, blood_cancer_class):
        """Test a held reference to the old index is never mutated"""
        before = engine.index

        await engine.build_index(InMemoryOntologySource([blood_cancer_class]))

        assert engine.index is not before
        assert len(before) == 0

    @pytest.mark.asyncio
    async def test_failing_source_keeps_index(self, engine, blood_cancer_class, tmp_path, caplog):
        await engine.build_index(InMemoryOntologySource([blood_cancer_class]))
        published = engine.index

        with caplog.at_level(logging.ERROR, logger="fdp_search.engine"):
            stats = await engine.build_index(FileOntologySource(tmp_path / "missing.yaml"))

        assert engine.index is published
        assert stats.classes_indexed == 1
        assert "missing.yaml" in caplog.text

    @pytest.mark.asyncio
    async def test_partially_read_source_discarded(self, engine, blood_cancer_class, caplog):
        """Test classes read before a failure do not leak into the index"""
        source = BrokenSource([blood_cancer_class], RuntimeError("connection reset"))

        with caplog.at_level(logging.ERROR, logger="fdp_search.engine"):
            await engine.build_index(source)

        assert len(engine.index) == 0
        assert "connection reset" in caplog.text

    @pytest.mark.asyncio
    async def test_reindex_starts_fresh(self, engine, blood_cancer_class, cancer_ontology_file):
        await engine.build_index(InMemoryOntologySource([blood_cancer_class]))
        await engine.build_index(InMemoryOntologySource([blood_cancer_class]))

        stats = await engine.reindex([FileOntologySource(cancer_ontology_file)])

        assert stats.classes_indexed == 3
        assert engine.index.keyword_count("cancer") == 1
        assert engine.index.keyword_count("sarcoma") == 1

    @pytest.mark.asyncio
    async def test_reindex_skips_failing_sources(self, engine, blood_cancer_class, tmp_path):
        error = OntologySourceError("remote", "unreachable")

        stats = await engine.reindex([
            BrokenSource([blood_cancer_class], error),
            FileOntologySource(tmp_path / "missing.yaml"),
            InMemoryOntologySource([blood_cancer_class]),
        ])

        assert stats.classes_indexed == 1
        assert engine.index.keyword_count("blood") == 1

    @pytest.mark.asyncio
    async def test_reindex_nothing(self, engine, blood_cancer_class):
        await engine.build_index(InMemoryOntologySource([blood_cancer_class]))

        stats = await engine.reindex([])

        assert stats.keywords == 0
        assert engine.expand_query("cancer") == {"cancer"}


class TestSearchEngineFactory:
    """Test process-wide engine creation"""

    def test_create_from_defaults(self, document_search):
        engine = SearchEngineFactory.create(document_search)

        assert engine.document_search is document_search
        assert engine.association_threshold == 0.0
        assert engine.extractor.min_length == 4

    def test_create_cached(self, document_search):
        first = SearchEngineFactory.create(document_search)
        second = SearchEngineFactory.create(document_search)

        assert first is second

    def test_force_reload(self, document_search):
        first = SearchEngineFactory.create(document_search)
        second = SearchEngineFactory.create(document_search, force_reload=True)

        assert first is not second

    def test_cleanup(self, document_search):
        first = SearchEngineFactory.create(document_search)
        SearchEngineFactory.cleanup()

        assert SearchEngineFactory.create(document_search) is not first

    def test_get_search_engine(self, document_search):
        engine = get_search_engine(document_search)

        assert SearchEngineFactory.create(document_search) is engine
        assert get_search_engine(document_search, force_reload=True) is not engine

    def test_explicit_settings(self, document_search):
        settings = SearchSettings(min_keyword_length=2, association_threshold=0.25, max_concurrent_lookups=2)

        engine = SearchEngineFactory.create(document_search, settings=settings)

        assert engine.extractor.min_length == 2
        assert engine.association_threshold == 0.25
        assert engine.scorer.max_concurrency == 2

    def test_settings_from_environment(self, document_search, monkeypatch):
        monkeypatch.setenv("SEARCH_ASSOCIATION_THRESHOLD", "0.4")
        monkeypatch.setenv("SEARCH_FILTER_PUNCTUATION", "false")

        engine = SearchEngineFactory.create(document_search)

        assert engine.association_threshold == 0.4
        assert engine.extractor.filter_punctuation is False

    def test_invalid_environment(self, document_search, monkeypatch):
        monkeypatch.setenv("SEARCH_MAX_CONCURRENT_LOOKUPS", "zero")

        with pytest.raises(ValueError, match="SEARCH_MAX_CONCURRENT_LOOKUPS"):
            SearchEngineFactory.create(document_search)


class TestStartSearchEngine:
    """Test process startup"""

    @pytest.mark.asyncio
    async def test_indexes_configured_sources(self, document_search, cancer_ontology_file, tmp_path):
        (tmp_path / ".env").write_text(f"ONTOLOGY_SOURCES={cancer_ontology_file}\n", encoding="utf-8")

        engine = await start_search_engine(document_search, project_root=tmp_path, configure_logging=False)

        assert engine.index.stats().classes_indexed == 3
        assert engine.expand_query("sarcoma") == {"sarcoma", "malignant", "mesenchymal", "tumor"}
        assert SearchEngineFactory.create(document_search) is engine

    @pytest.mark.asyncio
    async def test_missing_source_starts_with_empty_index(self, document_search, tmp_path, monkeypatch):
        monkeypatch.setenv("ONTOLOGY_SOURCES", str(tmp_path / "missing.yaml"))

        engine = await start_search_engine(document_search, project_root=tmp_path, configure_logging=False)

        assert len(engine.index) == 0
        assert uris(await engine.ranked_search("climate")) == ["climate"]

    @pytest.mark.asyncio
    async def test_invalid_log_level_rejected_before_logging_setup(self, document_search, tmp_path, monkeypatch):
        """Test a logging attribute that is not a level name fails as configuration error"""
        monkeypatch.setenv("LOG_LEVEL", "basic_format")
        monkeypatch.setenv("LOG_FILE", "")
        handlers = list(logging.getLogger().handlers)

        with pytest.raises(ValueError, match="LOG_LEVEL"):
            await start_search_engine(document_search, project_root=tmp_path)

        assert logging.getLogger().handlers == handlers
