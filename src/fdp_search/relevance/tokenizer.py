"""
Keyword extraction for ontology indexing and TF-IDF scoring.

Extraction pipeline:
1. Split on whitespace
2. Lowercase conversion (str.lower, no locale-specific rules)
3. Strip every character that is not a letter or decimal digit (optional, on by default)
4. Filter stopwords (static list, loaded once)
5. Filter short words (length <= 3)
6. Return keywords in input order, duplicates preserved

The same extractor is used to index ontology annotations and to re-tokenize
documents during scoring, so both sides of a match are normalized identically.
"""

import logging
from pathlib import Path
from typing import FrozenSet, Iterable, List, Optional, Union

logger = logging.getLogger(__name__)

DEFAULT_STOPWORDS_FILE = Path(__file__).parent.parent / "data" / "english-stopwords.txt"

# Keywords must be strictly longer than 3 characters
DEFAULT_MIN_LENGTH = 4


def load_stopwords(path: Optional[Union[str, Path]] = None) -> FrozenSet[str]:
    """
    Load a stopword list (one word per line, blank lines ignored).

    Args:
        path: Stopword file, defaults to the bundled English list

    Returns:
        Frozen set of lowercase stopwords
    """
    path = Path(path) if path else DEFAULT_STOPWORDS_FILE
    with open(path, "r", encoding="utf-8") as f:
        words = frozenset(line.strip().lower() for line in f if line.strip())
    logger.debug(f"Loaded {len(words)} stopwords from {path}")
    return words


def strip_punctuation(word: str) -> str:
    """
    Remove every character that is not a letter or decimal digit.

    Other Unicode numerics (superscripts, fractions) are removed too.

    Examples:
        >>> strip_punctuation("(leukemia),")
        'leukemia'
        >>> strip_punctuation("non-hodgkin's")
        'nonhodgkins'
    """
    return "".join(c for c in word if c.isalpha() or c.isdecimal())


class KeywordExtractor:
    """
    Normalizes free text into a filtered keyword sequence.

    Stateless apart from its configuration, safe to share between requests.
    """

    def __init__(
        self,
        stopwords: Optional[Iterable[str]] = None,
        filter_punctuation: bool = True,
        min_length: int = DEFAULT_MIN_LENGTH,
    ):
        """
        Initialize keyword extractor.

        Args:
            stopwords: Words to drop (compared after normalization)
                Default: bundled English list

            filter_punctuation: Strip non-alphanumeric characters from each word
                Default: True

            min_length: Shortest keyword kept
                Default: 4 (keywords longer than 3 characters)
        """
        if min_length < 1:
            raise ValueError(f"min_length must be positive, got {min_length}")

        self.stopwords = frozenset(w.lower() for w in stopwords) if stopwords is not None else load_stopwords()
        self.filter_punctuation = filter_punctuation
        self.min_length = min_length

    def extract(self, text: str) -> List[str]:
        """
        Extract keywords from text.

        Args:
            text: Input text (title, label, query, ...)

        Returns:
            Keywords in input order, duplicates preserved

        Examples:
            >>> KeywordExtractor().extract("Acute Leukemia, acute phase")
            ['acute', 'leukemia', 'acute', 'phase']

            >>> KeywordExtractor().extract("the cat")
            []
        """
        if not text:
            return []

        keywords = []
        for word in text.lower().split():
            if self.filter_punctuation:
                word = strip_punctuation(word)

            if len(word) < self.min_length or word in self.stopwords:
                continue

            keywords.append(word)

        return keywords

    def __call__(self, text: str) -> List[str]:
        return self.extract(text)


_default_extractor: Optional[KeywordExtractor] = None


def extract_keywords(text: str) -> List[str]:
    """Extract keywords with the default extractor (bundled stopwords, punctuation filtered)."""
    global _default_extractor
    if _default_extractor is None:
        _default_extractor = KeywordExtractor()
    return _default_extractor.extract(text)
