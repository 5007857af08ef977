from types import MappingProxyType
from typing import Callable, Dict, Iterator, List, Mapping, Optional, Tuple


def sum_scores(score1: int, score2: int) -> int:
    """Default combine rule: relevance is the sum of the term frequencies."""
    return score1 + score2


def max_scores(score1: int, score2: int) -> int:
    return max(score1, score2)


def min_scores(score1: int, score2: int) -> int:
    return min(score1, score2)


COMBINE_RULES = {
    "sum": sum_scores,
    "max": max_scores,
    "min": min_scores,
}


class RelevanceSet:
    """
    Relevance of documents for one query term or one compound query.
    Maps document identifiers to non-negative integer scores.

    A document that is not stored has score 0, so zero-score entries are
    never kept. Instances are never mutated: union, intersection and
    difference all return new RelevanceSet objects.
    """

    __slots__ = ("_scores", "_combine")

    def __init__(self, scores: Optional[Mapping[str, int]] = None,
                 combine: Optional[Callable[[int, int], int]] = None):
        """
        Initialize the set from a mapping of document IDs to scores.

        Args:
            scores: Mapping of document ID -> relevance score (copied)
            combine: Rule used to merge two scores of the same document
                     (defaults to addition)

        Raises:
            ValueError: If a score is negative or not an integer
        """
        data = {}
        for doc_id, score in (scores or {}).items():
            if isinstance(score, bool) or not isinstance(score, int):
                raise ValueError(f"Score for {doc_id!r} must be an integer, got {score!r}")
            if score < 0:
                raise ValueError(f"Score for {doc_id!r} must not be negative, got {score}")
            if score:
                data[doc_id] = score

        self._scores = MappingProxyType(data)
        self._combine = combine or sum_scores

    @property
    def scores(self) -> Mapping[str, int]:
        """Read-only view of the stored scores"""
        return self._scores

    @property
    def combine_rule(self) -> Callable[[int, int], int]:
        return self._combine

    def combine(self, score1: int, score2: int) -> int:
        """
        Compute the relevance of a document matched by two searches.

        Args:
            score1: Relevance score from the first search
            score2: Relevance score from the second search

        Returns:
            Combined relevance score
        """
        return self._combine(score1, score2)

    def lookup(self, doc_id: str) -> int:
        """Return the relevance of a document, 0 if it is not in the set"""
        return self._scores.get(doc_id, 0)

    def _derive(self, scores: Dict[str, int]) -> "RelevanceSet":
        return RelevanceSet(scores, combine=self._combine)

    def union(self, other: "RelevanceSet") -> "RelevanceSet":
        """
        Compute the union of two search results (OR).

        Documents found by both searches get the combined score, the rest
        keep the score they have in the set that contains them.
        """
        union = dict(self._scores)
        for doc_id, score in other.scores.items():
            if doc_id in union:
                union[doc_id] = self.combine(union[doc_id], score)
            else:
                union[doc_id] = score
        return self._derive(union)

    def intersection(self, other: "RelevanceSet") -> "RelevanceSet":
        """Compute the intersection of two search results (AND)"""
        intersection = {}
        for doc_id, score in self._scores.items():
            other_score = other.lookup(doc_id)
            if other_score > 0:
                intersection[doc_id] = self.combine(score, other_score)
        return self._derive(intersection)

    def difference(self, other: "RelevanceSet") -> "RelevanceSet":
        """
        Compute the documents of this set that are not in `other` (NOT).
        Scores are kept unchanged, only membership is filtered.
        """
        diff = {doc_id: score for doc_id, score in self._scores.items()
                if other.lookup(doc_id) == 0}
        return self._derive(diff)

    def rank(self, descending: bool = False) -> List[Tuple[str, int]]:
        """
        Sort the results by relevance.

        The entries are copied out of the set before sorting. Documents with
        equal scores are ordered by document ID so the output is fully
        deterministic.

        Args:
            descending: Put the most relevant documents first

        Returns:
            List of (document ID, score) tuples
        """
        entries = list(self._scores.items())
        if descending:
            entries.sort(key=lambda entry: (-entry[1], entry[0]))
        else:
            entries.sort(key=lambda entry: (entry[1], entry[0]))
        return entries

    def top(self, k: int) -> List[Tuple[str, int]]:
        """Return the k most relevant documents"""
        return self.rank(descending=True)[:max(k, 0)]

    @staticmethod
    def search(term: str, index_lookup, combine: Optional[Callable[[int, int], int]] = None) -> "RelevanceSet":
        """
        Perform a single-term search and wrap the result.

        Args:
            term: Query term
            index_lookup: Object providing get_counts(term) -> {doc_id: count}
            combine: Optional combine rule for the returned set

        Returns:
            RelevanceSet of the documents containing the term
        """
        counts = index_lookup.get_counts(term)
        return RelevanceSet(counts, combine=combine)

    def __or__(self, other: "RelevanceSet") -> "RelevanceSet":
        return self.union(other)

    def __and__(self, other: "RelevanceSet") -> "RelevanceSet":
        return self.intersection(other)

    def __sub__(self, other: "RelevanceSet") -> "RelevanceSet":
        return self.difference(other)

    def __len__(self) -> int:
        return len(self._scores)

    def __contains__(self, doc_id) -> bool:
        return doc_id in self._scores

    def __iter__(self) -> Iterator[str]:
        return iter(self._scores)

    def __bool__(self) -> bool:
        return bool(self._scores)

    def __eq__(self, other) -> bool:
        if not isinstance(other, RelevanceSet):
            return NotImplemented
        return dict(self._scores) == dict(other.scores)

    __hash__ = None

    def __repr__(self) -> str:
        entries = ", ".join(f"{doc_id!r}: {score}" for doc_id, score in self.rank())
        return f"RelevanceSet({{{entries}}})"
