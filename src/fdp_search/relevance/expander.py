"""
Query expansion through ontology keyword associations.

The keywords of the query are extended with every keyword associated with
them in the ontology index (one hop, associated keywords are not expanded
again).
"""

import logging
from typing import TYPE_CHECKING, Set

if TYPE_CHECKING:
    from ..ontology.index import OntologyIndex

logger = logging.getLogger(__name__)


class QueryExpander:
    """Expands a free-text query into a set of keywords."""

    def __init__(self, index: "OntologyIndex", min_strength: float = 0.0):
        """
        Initialize query expander.

        Args:
            index: Ontology index to read associations from (not modified)

            min_strength: Minimum association strength to follow
                Range: 0.0 - 1.0
                Default: 0.0 (follow every association)
                Higher = fewer search words, faster search, fewer hits
        """
        if not 0.0 <= min_strength <= 1.0:
            raise ValueError(f"min_strength must be within [0, 1], got {min_strength}")
        self.index = index
        self.min_strength = min_strength

    def expand(self, query: str) -> Set[str]:
        """
        Expand query keywords with their ontology associations.

        Args:
            query: Raw user query

        Returns:
            Set of keywords: query keywords plus associated keywords

        Example:
            index built from a class labelled "Blood Cancer" with synonym "Leukemia"
            >>> expander.expand("cancer")
            {'cancer', 'blood', 'leukemia'}
        """
        keywords = set(self.index.extractor.extract(query))
        words = set(keywords)

        for keyword in keywords:
            if self.min_strength <= 0.0:
                words.update(self.index.associated_keywords(keyword))
            else:
                words.update(
                    association.value
                    for association in self.index.associations(keyword)
                    if association.strength >= self.min_strength
                )

        logger.debug(f"Expanded {len(keywords)} query keywords to {len(words)} search words")
        return words
