"""
Metadata documents and the document search collaborator.

The relevance engine never stores documents itself. It asks a DocumentSearch
implementation (triple store, database, in-memory list) for the documents
matching a single word and for the size of the corpus.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Iterable, List, Optional

from .relevance.tokenizer import KeywordExtractor

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SearchResult:
    """
    Metadata document returned by a document search.

    Identity is the URI: two results with the same URI are the same document,
    whatever their title and description.
    """
    uri: str
    title: str = field(default="", compare=False)
    description: str = field(default="", compare=False)

    @property
    def text(self) -> str:
        """Text that is re-tokenized for term frequencies"""
        return f"{self.title} {self.description}"


class DocumentSearch(ABC):
    """
    Abstract document search collaborator.

    Implementations may hit the network; timeouts and retries are theirs to
    impose. Any exception raised here fails the current search request.
    """

    @abstractmethod
    async def find_by_word(self, word: str) -> List[SearchResult]:
        """
        Find all documents whose indexed content contains word.

        Args:
            word: Single keyword (lowercase, normalized)

        Returns:
            Matching documents (may contain the same URI more than once)
        """
        pass

    @abstractmethod
    async def count_total_documents(self) -> int:
        """Total number of searchable documents in the corpus"""
        pass

    async def find_by_text(self, text: str) -> List[SearchResult]:
        """
        Find documents matching a raw text literal (plain, unexpanded search).

        Default: same as find_by_word.
        """
        return await self.find_by_word(text)


class InMemoryDocumentSearch(DocumentSearch):
    """
    Document search over an in-memory list of documents.

    A document matches a word when the word is one of the keywords of its
    title and description. Used for tests and small embedded corpora.
    """

    def __init__(self, documents: Iterable[SearchResult], extractor: Optional[KeywordExtractor] = None):
        self.documents = list(documents)
        self.extractor = extractor or KeywordExtractor()

    async def find_by_word(self, word: str) -> List[SearchResult]:
        word = word.lower()
        matches = [doc for doc in self.documents if word in self.extractor.extract(doc.text)]
        logger.debug(f"In-memory search: {len(matches)} documents for '{word}'")
        return matches

    async def find_by_text(self, text: str) -> List[SearchResult]:
        needle = text.lower()
        return [doc for doc in self.documents if needle in doc.text.lower()]

    async def count_total_documents(self) -> int:
        return len(self.documents)
