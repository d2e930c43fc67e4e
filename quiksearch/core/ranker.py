"""Ordering of matcher hits into result lists."""

from typing import List, Mapping, Optional, Tuple

from .index import Term, TrieIndex


class Ranker:
    """Orders term ids by cost, then by insertion order."""

    def rank_entries(
        self,
        costs_by_id: Mapping[int, int],
        index: TrieIndex,
        limit: Optional[int] = None,
    ) -> List[Tuple[Term, int]]:
        """
        Rank matched terms.

        Args:
            costs_by_id: Lowest cost per term id, as produced by the matcher
            index: Index the ids belong to
            limit: Maximum number of entries (all if None or 0)

        Returns:
            List of (term, cost), cheapest first, ties by ascending term id
        """
        ordered = sorted(costs_by_id.items(), key=lambda item: (item[1], item[0]))
        if limit:
            ordered = ordered[:limit]
        return [(index.get_term(term_id), cost) for term_id, cost in ordered]

    def rank(
        self,
        costs_by_id: Mapping[int, int],
        index: TrieIndex,
        limit: Optional[int] = None,
    ) -> List[str]:
        """Rank matched terms and return their display strings."""
        return [term.display for term, _ in self.rank_entries(costs_by_id, index, limit)]
