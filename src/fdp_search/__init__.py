"""
FDP Search - ontology-expanded relevance search for FAIR metadata documents.

Free-text queries are expanded with keywords that co-occur with the query
keywords in ontology class annotations, then every matching metadata
document is ranked by TF-IDF.

Components:
- relevance: keyword extraction, query expansion, TF-IDF scoring, ranking
- ontology: ontology model, sources and keyword association index
- documents: search results and the document search collaborator
- engine: search engine facade and process-wide factory
"""

from .errors import DocumentSearchError, OntologySourceError, SearchEngineError
from .relevance import KeywordExtractor, QueryExpander, RankedResult, ResultRanker, TfidfScorer, extract_keywords
from .ontology import (
    Annotation,
    FileOntologySource,
    InMemoryOntologySource,
    Literal,
    OntologyClass,
    OntologyIndex,
    OntologySource,
)
from .documents import DocumentSearch, InMemoryDocumentSearch, SearchResult
from .config import SearchSettings
from .engine import SearchEngine, SearchEngineFactory, get_search_engine, start_search_engine

__version__ = "0.1.0"

__all__ = [
    "SearchEngineError",
    "OntologySourceError",
    "DocumentSearchError",
    "KeywordExtractor",
    "extract_keywords",
    "QueryExpander",
    "TfidfScorer",
    "RankedResult",
    "ResultRanker",
    "Annotation",
    "Literal",
    "OntologyClass",
    "OntologySource",
    "OntologyIndex",
    "FileOntologySource",
    "InMemoryOntologySource",
    "DocumentSearch",
    "InMemoryDocumentSearch",
    "SearchResult",
    "SearchSettings",
    "SearchEngine",
    "SearchEngineFactory",
    "get_search_engine",
    "start_search_engine",
]
