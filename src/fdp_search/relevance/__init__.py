"""
Relevance search: keyword extraction, query expansion, TF-IDF scoring, ranking.

Components:
- tokenizer: Keyword extraction (lowercase, punctuation, stopwords, length filter)
- expander: One-hop query expansion through ontology keyword associations
- scorer: TF-IDF scoring over an external document search (concurrent per-word lookups)
- ranker: Stable descending sort of scored documents

Key properties:
- Same extractor for ontology annotations, queries and documents
- Corpus size read once per scoring call (consistent IDF within a ranking)
- Deterministic tie-break (insertion order of the score map)
"""

from .tokenizer import KeywordExtractor, extract_keywords, load_stopwords
from .expander import QueryExpander
from .scorer import TfidfScorer, inverse_document_frequency, term_frequency
from .ranker import RankedResult, ResultRanker

__all__ = [
    "KeywordExtractor",
    "extract_keywords",
    "load_stopwords",
    "QueryExpander",
    "TfidfScorer",
    "inverse_document_frequency",
    "term_frequency",
    "RankedResult",
    "ResultRanker",
]
