"""
TF-IDF relevance scoring of metadata documents.

Every search word is looked up independently in the document search and
contributes to the score of each document it matches.

Formula:
    score(doc) = Σ over words w matching doc:  tf(w, doc) × idf(w)

Where:
    idf(w)      = ln(N / n_w)
    tf(w, doc)  = occurrences of w in doc / number of keywords in doc
    N           = total number of documents (read once per scoring call)
    n_w         = number of distinct documents matching w

Both tf counts come from re-tokenizing title + description with the same
keyword extractor that built the ontology index.

Guards:
    - a word matching no document is skipped (no division by zero, no IDF distortion)
    - a document without keywords gets a 0.0 contribution
    - a word matching every document has idf = 0 and contributes nothing

Lookups run concurrently (bounded by max_concurrency). Partial results are
merged in sorted word order once every lookup has finished, so the score map
and its insertion order are reproducible and never returned half-built. The
first failing lookup cancels the ones still in flight.
"""

import asyncio
import logging
import math
from typing import TYPE_CHECKING, Dict, Iterable, List, Tuple

from .tokenizer import KeywordExtractor

if TYPE_CHECKING:
    from ..documents import DocumentSearch, SearchResult

logger = logging.getLogger(__name__)


def inverse_document_frequency(total_documents: int, match_count: int) -> float:
    """
    Natural-log IDF: ln(total / matches).

    Examples:
        >>> inverse_document_frequency(10, 2)
        1.6094...
        >>> inverse_document_frequency(10, 10)
        0.0
    """
    return math.log(total_documents / match_count)


def term_frequency(word: str, keywords: List[str]) -> float:
    """
    Normalized term frequency of word in a keyword sequence.

    Returns 0.0 for an empty sequence (e.g. a document made of stopwords only).
    """
    if not keywords:
        return 0.0
    return keywords.count(word) / len(keywords)


class TfidfScorer:
    """
    TF-IDF scorer over an external document search.

    Holds configuration only, every score() call starts from an empty score map.
    """

    def __init__(self, extractor: KeywordExtractor, max_concurrency: int = 8):
        """
        Initialize TF-IDF scorer.

        Args:
            extractor: Keyword extractor used to re-tokenize documents

            max_concurrency: Maximum number of word lookups in flight
                Default: 8
        """
        if max_concurrency < 1:
            raise ValueError(f"max_concurrency must be positive, got {max_concurrency}")
        self.extractor = extractor
        self.max_concurrency = max_concurrency

    def document_keywords(self, document: "SearchResult") -> List[str]:
        return self.extractor.extract(document.text)

    async def score(
        self,
        words: Iterable[str],
        document_search: "DocumentSearch",
    ) -> Dict["SearchResult", float]:
        """
        Score documents matching any of the words.

        Args:
            words: Search words (typically an expanded query)
            document_search: Collaborator answering per-word lookups

        Returns:
            Score map {document: score}, insertion order = first appearance
            while walking words in sorted order

        Raises:
            Whatever the document search raises; no partial map is returned
        """
        total = await document_search.count_total_documents()
        return await self.score_with_total(words, document_search, total)

    async def score_with_total(
        self,
        words: Iterable[str],
        document_search: "DocumentSearch",
        total_documents: int,
    ) -> Dict["SearchResult", float]:
        """Score documents with a corpus size fixed by the caller."""
        ordered_words = sorted(set(words))
        if not ordered_words:
            return {}

        if total_documents <= 0:
            logger.warning(f"Document search reports {total_documents} documents, nothing to score")
            return {}

        semaphore = asyncio.Semaphore(self.max_concurrency)

        async def score_word(word: str) -> List[Tuple["SearchResult", float]]:
            async with semaphore:
                results = await document_search.find_by_word(word)
            return self._word_contributions(word, results, total_documents)

        tasks = [asyncio.ensure_future(score_word(word)) for word in ordered_words]
        try:
            partials = await asyncio.gather(*tasks)
        except BaseException:
            # First failure wins, remaining lookups are cancelled and drained
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise

        scores: Dict["SearchResult", float] = {}
        for contributions in partials:
            for document, contribution in contributions:
                scores[document] = scores.get(document, 0.0) + contribution

        logger.info(f"Scored {len(scores)} documents for {len(ordered_words)} words (corpus size {total_documents})")
        return scores

    def _word_contributions(
        self,
        word: str,
        results: List["SearchResult"],
        total_documents: int,
    ) -> List[Tuple["SearchResult", float]]:
        """TF-IDF contribution of one word to each document it matched."""
        # Same URI returned twice by the collaborator counts once
        documents = list(dict.fromkeys(results))
        if not documents:
            return []

        idf = inverse_document_frequency(total_documents, len(documents))
        logger.debug(f"{len(documents)} results for word '{word}' (idf={idf:.4f})")

        contributions = []
        for document in documents:
            tf = term_frequency(word, self.document_keywords(document))
            contributions.append((document, tf * idf))
        return contributions
