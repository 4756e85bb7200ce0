"""
Keyword association index built from ontology annotations.

For every class of an ontology, each keyword extracted from a string
annotation is counted once per occurrence. Keywords coming from a label
annotation are additionally associated with every keyword extracted from
every annotation of the same class (the label's own keywords included).

Example (one class):
    label:   "Blood Cancer"
    synonym: "Leukemia"

    keyword counts: {"blood": 1, "cancer": 1, "leukemia": 1}
    associations:   {"blood":  ["blood", "cancer", "leukemia"],
                     "cancer": ["blood", "cancer", "leukemia"]}

Association lists are append-only and keep duplicates: a keyword that
co-occurs with another in many classes lists it many times, which is what
the association strength is computed from.
"""

import logging
from collections import Counter
from dataclasses import dataclass
from typing import Dict, Iterable, List

from ..relevance.tokenizer import KeywordExtractor
from .base import OntologyClass

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TermAssociation:
    """Directional association between two keywords"""
    key: str
    value: str
    strength: float  # Share of key's association list taken by value (0-1]


@dataclass(frozen=True)
class IndexStats:
    """Size of an ontology index"""
    classes_indexed: int
    annotations_indexed: int
    keywords: int
    association_keys: int


class OntologyIndex:
    """
    Keyword frequency table plus keyword association table.

    Mutated only while indexing. Once published to the search engine an
    instance is treated as read-only, later builds work on a copy().
    """

    def __init__(self, extractor: KeywordExtractor):
        self.extractor = extractor
        self._keyword_counts: Dict[str, int] = {}
        self._associations: Dict[str, List[str]] = {}
        self._classes_indexed = 0
        self._annotations_indexed = 0

    def index_ontology(self, classes: Iterable[OntologyClass]) -> int:
        """
        Add the annotations of every class to the index.

        Counts are additive: indexing the same ontology twice doubles them.

        Args:
            classes: Ontology classes (any iterable, consumed once)

        Returns:
            Number of classes indexed by this call
        """
        indexed = 0
        for cls in classes:
            self.index_class(cls)
            indexed += 1
        return indexed

    def index_class(self, cls: OntologyClass):
        """Index the annotations of a single ontology class."""
        # Keywords per string annotation, non-string values are skipped silently
        annotation_keywords = []
        for annotation in cls.annotations:
            text = annotation.text()
            if text is None:
                continue
            annotation_keywords.append((annotation.is_label, self.extractor.extract(text)))

        class_keywords = [word for _, words in annotation_keywords for word in words]

        for is_label, words in annotation_keywords:
            for key in words:
                self._keyword_counts[key] = self._keyword_counts.get(key, 0) + 1

                if is_label:
                    self._associations.setdefault(key, []).extend(class_keywords)

        self._classes_indexed += 1
        self._annotations_indexed += len(annotation_keywords)

    def keyword_count(self, keyword: str) -> int:
        """Total number of occurrences of keyword across indexed annotations (0 if unknown)."""
        return self._keyword_counts.get(keyword, 0)

    def keyword_ranking_score(self, keyword: str) -> float:
        """
        Rarity weight of a keyword: 1 / count.

        Higher for rarer keywords, 0.0 for keywords never seen.
        """
        count = self._keyword_counts.get(keyword, 0)
        if count == 0:
            return 0.0
        return 1.0 / count

    def associated_keywords(self, keyword: str) -> List[str]:
        """
        Raw association list of keyword (duplicates kept, insertion order).

        Unknown keywords yield an empty list.
        """
        return list(self._associations.get(keyword, ()))

    def associations(self, keyword: str) -> List[TermAssociation]:
        """
        Distinct associations of keyword with their strength, in first-seen order.

        Example:
            associations list ["blood", "cancer", "leukemia", "cancer"]
            → blood: 0.25, cancer: 0.5, leukemia: 0.25
        """
        values = self._associations.get(keyword)
        if not values:
            return []

        counts = Counter(values)
        total = len(values)
        return [
            TermAssociation(key=keyword, value=value, strength=count / total)
            for value, count in counts.items()
        ]

    @property
    def keyword_counts(self) -> Dict[str, int]:
        """Copy of the keyword frequency table"""
        return dict(self._keyword_counts)

    def stats(self) -> IndexStats:
        return IndexStats(
            classes_indexed=self._classes_indexed,
            annotations_indexed=self._annotations_indexed,
            keywords=len(self._keyword_counts),
            association_keys=len(self._associations),
        )

    def copy(self) -> "OntologyIndex":
        """Independent copy sharing only the (immutable) extractor."""
        clone = OntologyIndex(self.extractor)
        clone._keyword_counts = dict(self._keyword_counts)
        clone._associations = {key: list(values) for key, values in self._associations.items()}
        clone._classes_indexed = self._classes_indexed
        clone._annotations_indexed = self._annotations_indexed
        return clone

    def __len__(self) -> int:
        return len(self._keyword_counts)
