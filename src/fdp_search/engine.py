"""
Relevance search engine: ontology-expanded TF-IDF ranking of metadata documents.

Search flow:
1. Extract query keywords and expand them through the ontology index
2. Look up every word in the document search (concurrently)
3. Score matched documents with TF-IDF, summed over words
4. Sort documents by score (stable, highest first)

The ontology index is built in the background of a request-serving process:
builds work on a private copy and the finished index is published with a
single assignment, so concurrent searches always see a complete index.

Usage:
    engine = await start_search_engine(document_search)   # env-configured, cached
    results = await engine.ranked_search("blood cancer")
"""

import asyncio
import logging
from pathlib import Path
from typing import Iterable, List, Optional, Set, Union

from .config import SearchSettings, load_environment
from .documents import DocumentSearch, SearchResult
from .errors import DocumentSearchError, OntologySourceError
from .logging_config import setup_logging
from .ontology.base import OntologySource
from .ontology.index import IndexStats, OntologyIndex
from .ontology.sources import FileOntologySource
from .relevance.expander import QueryExpander
from .relevance.ranker import RankedResult, ResultRanker
from .relevance.scorer import TfidfScorer
from .relevance.tokenizer import KeywordExtractor, load_stopwords

logger = logging.getLogger(__name__)


class SearchEngine:
    """
    Ontology-expanded relevance search over a document search collaborator.

    Per-request state (word set, score map, ranking) is local to each call,
    the engine itself only holds configuration and the published index.
    """

    def __init__(
        self,
        document_search: DocumentSearch,
        extractor: Optional[KeywordExtractor] = None,
        association_threshold: float = 0.0,
        max_concurrent_lookups: int = 8,
    ):
        """
        Initialize search engine with an empty ontology index.

        Args:
            document_search: Collaborator answering word lookups and corpus size
            extractor: Keyword extractor shared by indexing, expansion and scoring
                Default: bundled English stopwords, punctuation filtered
            association_threshold: Minimum association strength followed by expansion
                Default: 0.0 (all associations)
            max_concurrent_lookups: Bound on concurrent per-word lookups
                Default: 8
        """
        self.document_search = document_search
        self.extractor = extractor or KeywordExtractor()
        self.association_threshold = association_threshold
        self.scorer = TfidfScorer(self.extractor, max_concurrency=max_concurrent_lookups)
        self.ranker = ResultRanker()

        self._index = OntologyIndex(self.extractor)
        self._build_lock = asyncio.Lock()

    @classmethod
    def from_settings(cls, document_search: DocumentSearch, settings: SearchSettings) -> "SearchEngine":
        extractor = KeywordExtractor(
            stopwords=load_stopwords(settings.stopwords_file),
            filter_punctuation=settings.filter_punctuation,
            min_length=settings.min_keyword_length,
        )
        return cls(
            document_search,
            extractor=extractor,
            association_threshold=settings.association_threshold,
            max_concurrent_lookups=settings.max_concurrent_lookups,
        )

    @property
    def index(self) -> OntologyIndex:
        """Currently published ontology index (treat as read-only)"""
        return self._index

    # ------------------------------------------------------------------
    # Indexing
    # ------------------------------------------------------------------

    def _index_source(self, index: OntologyIndex, source: OntologySource) -> bool:
        """Index one source into index. Returns False (and logs) when the source fails."""
        logger.info(f"Indexing ontology source: {source.name}")
        try:
            count = index.index_ontology(source.classes())
        except OntologySourceError as e:
            logger.error(f"Failed to index ontology source {source.name}: {e}")
            return False
        except Exception as e:
            logger.exception(f"Unexpected error while indexing ontology source {source.name}: {e}")
            return False

        logger.info(f"Finished indexing {source.name}: {count} classes")
        return True

    async def build_index(self, source: OntologySource) -> IndexStats:
        """
        Add an ontology source to the index.

        Additive: the source is indexed on top of what is already there.
        A failing source leaves the published index untouched.

        Returns:
            Statistics of the published index
        """
        async with self._build_lock:
            candidate = self._index.copy()
            if await asyncio.to_thread(self._index_source, candidate, source):
                self._index = candidate
            stats = self._index.stats()

        logger.info(f"Ontology index: {stats.keywords} keywords, {stats.association_keys} association keys")
        return stats

    async def reindex(self, sources: Iterable[OntologySource]) -> IndexStats:
        """
        Rebuild the index from scratch and publish it once complete.

        Failing sources are skipped, the others are still indexed.

        Returns:
            Statistics of the new index
        """
        async with self._build_lock:
            index = OntologyIndex(self.extractor)
            for source in sources:
                candidate = index.copy()
                if await asyncio.to_thread(self._index_source, candidate, source):
                    index = candidate
            self._index = index
            stats = index.stats()

        logger.info(
            f"Reindexed ontologies: {stats.classes_indexed} classes, "
            f"{stats.keywords} keywords, {stats.association_keys} association keys"
        )
        return stats

    # ------------------------------------------------------------------
    # Search
    # ------------------------------------------------------------------

    def expand_query(self, query: str) -> Set[str]:
        """Query keywords plus their one-hop ontology associations."""
        expander = QueryExpander(self._index, min_strength=self.association_threshold)
        return expander.expand(query)

    async def ranked_search_scored(self, query: str, top_k: Optional[int] = None) -> List[RankedResult]:
        """
        Ontology-expanded TF-IDF search with scores.

        Raises:
            DocumentSearchError: Document search failed (no partial results)
        """
        words = self.expand_query(query)
        if not words:
            logger.warning(f"No keywords in query '{query}', nothing to search")
            return []

        logger.info(f"Searching {len(words)} words for query '{query}'")
        try:
            scores = await self.scorer.score(words, self.document_search)
        except DocumentSearchError:
            raise
        except Exception as e:
            raise DocumentSearchError(f"Document search failed for query '{query}': {e}") from e

        return self.ranker.rank_scored(scores, top_k=top_k)

    async def ranked_search(self, query: str, top_k: Optional[int] = None) -> List[SearchResult]:
        """
        Ontology-expanded TF-IDF search.

        Args:
            query: Free-text user query
            top_k: Maximum number of documents (default: all)

        Returns:
            Documents ordered by relevance, best first

        Raises:
            DocumentSearchError: Document search failed (no partial results)
        """
        return [ranked.document for ranked in await self.ranked_search_scored(query, top_k=top_k)]

    async def search(self, query: str) -> List[SearchResult]:
        """
        Plain search: documents matching the raw query text, no expansion or scoring.

        Duplicated URIs are collapsed, first occurrence wins.

        Raises:
            DocumentSearchError: Document search failed
        """
        logger.info(f"A regular search has been submitted with query '{query}'")
        try:
            results = await self.document_search.find_by_text(query)
        except DocumentSearchError:
            raise
        except Exception as e:
            raise DocumentSearchError(f"Document search failed for query '{query}': {e}") from e

        return list(dict.fromkeys(results))


class SearchEngineFactory:
    """Creates the process-wide search engine from configuration."""

    _instance: Optional[SearchEngine] = None  # Singleton cache

    @classmethod
    def create(
        cls,
        document_search: DocumentSearch,
        settings: Optional[SearchSettings] = None,
        force_reload: bool = False,
    ) -> SearchEngine:
        """
        Create search engine based on settings (environment by default).

        Args:
            document_search: Document search collaborator for the new engine
            settings: Explicit settings, read from environment when omitted
            force_reload: If True, recreate instance even if cached

        Returns:
            Search engine (cached instance unless force_reload)
        """
        if cls._instance is not None and not force_reload:
            logger.debug("Returning cached search engine instance")
            return cls._instance

        settings = settings or SearchSettings.from_env()
        logger.info(
            f"Creating search engine (punctuation filter={settings.filter_punctuation}, "
            f"association threshold={settings.association_threshold}, "
            f"max concurrent lookups={settings.max_concurrent_lookups})"
        )
        cls._instance = SearchEngine.from_settings(document_search, settings)
        return cls._instance

    @classmethod
    def cleanup(cls):
        """Drop cached engine instance."""
        if cls._instance is not None:
            logger.info("Cleaning up search engine instance")
            cls._instance = None


def get_search_engine(document_search: DocumentSearch, force_reload: bool = False) -> SearchEngine:
    """Get configured search engine instance (factory convenience function)."""
    return SearchEngineFactory.create(document_search, force_reload=force_reload)


async def start_search_engine(
    document_search: DocumentSearch,
    project_root: Optional[Union[str, Path]] = None,
    configure_logging: bool = True,
) -> SearchEngine:
    """
    Process startup: load environment, configure logging, create the engine
    and index the configured ontology files.

    Ontology failures are logged, the engine then starts with whatever
    index could be built (possibly empty).
    """
    load_environment(project_root)
    settings = SearchSettings.from_env()

    if configure_logging:
        console_level = getattr(logging, settings.log_level)
        setup_logging(log_file=settings.log_file, console_level=console_level, file_level=logging.DEBUG)

    engine = SearchEngineFactory.create(document_search, settings=settings, force_reload=True)

    logger.info(f"Beginning to index {len(settings.ontology_sources)} ontology sources")
    await engine.reindex(FileOntologySource(path) for path in settings.ontology_sources)
    return engine
