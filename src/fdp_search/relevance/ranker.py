"""
Ranking of scored documents.

Documents are sorted by score, highest first. Ties keep the insertion order
of the score map (Python's sort is stable, reverse=True included), so ranking
the same score map twice always yields the same list.
"""

from dataclasses import dataclass
from typing import TYPE_CHECKING, Dict, List, Optional

if TYPE_CHECKING:
    from ..documents import SearchResult


@dataclass
class RankedResult:
    """Ranked document with its aggregate score"""
    document: "SearchResult"
    score: float
    position: int  # 1-based rank


class ResultRanker:
    """Orders documents by aggregate relevance score."""

    def rank(self, scores: Dict["SearchResult", float], top_k: Optional[int] = None) -> List["SearchResult"]:
        """
        Sort documents by score, descending.

        Args:
            scores: Score map {document: score}
            top_k: Keep only the first top_k documents (default: all)

        Returns:
            Documents, best first
        """
        ranked = sorted(scores, key=lambda document: scores[document], reverse=True)
        if top_k is not None:
            ranked = ranked[:max(top_k, 0)]
        return ranked

    def rank_scored(self, scores: Dict["SearchResult", float], top_k: Optional[int] = None) -> List[RankedResult]:
        """Same order as rank(), with scores and 1-based positions attached."""
        return [
            RankedResult(document=document, score=scores[document], position=position)
            for position, document in enumerate(self.rank(scores, top_k=top_k), start=1)
        ]
