"""Strict, prefix and fuzzy traversal over a frozen TrieIndex."""

import heapq
import itertools
from typing import Callable, Dict, FrozenSet, List, Optional, Tuple

from .exceptions import SearchBudgetExceeded
from .index import ROOT, TrieIndex

# Lineage marker for paths that have not restarted yet
NO_LINEAGE = -1


def restart_penalty(fuzz: int) -> int:
    """Cost of a root restart: always above the largest single skip."""
    return fuzz + 1


class TrieMatcher:
    """
    Matches normalized query keys against a TrieIndex.

    Every entry point returns an ordered mapping of term id to the lowest
    cost at which the term was reached. The index is never modified, so
    one matcher can serve concurrent queries.
    """

    def __init__(
        self,
        index: TrieIndex,
        max_states: int = 200000,
        max_restarts: int = 3,
        max_depth: int = 64,
        constrain_restarts: bool = False,
    ) -> None:
        """
        Initialize the matcher.

        Args:
            index: Frozen index to search
            max_states: Most units of work a single fuzzy query may spend, one
                per expanded state and one per trie node visited while
                skipping term characters or collecting completions
            max_restarts: Longest chain of root restarts along one path
            max_depth: Deepest level completion collection may reach
            constrain_restarts: Only keep post-restart matches among the terms
                reachable from where the restart was taken
        """
        if not index.frozen:
            raise ValueError("TrieMatcher requires a frozen TrieIndex")
        self.index = index
        self.max_states = max_states
        self.max_restarts = max_restarts
        self.max_depth = max_depth
        self.constrain_restarts = constrain_restarts

    def strict(self, query: str) -> Dict[int, int]:
        """
        Exact match: terms whose key is exactly the query.

        Args:
            query: Normalized query key

        Returns:
            Mapping of term id to cost (always 0)
        """
        node = self.index.walk(query)
        if node is None:
            return {}
        return {term_id: 0 for term_id in self.index.terminals(node)}

    def prefix(self, query: str, depth: int) -> Dict[int, int]:
        """
        Prefix match: terms ending at most ``depth`` levels below the query's node.

        Args:
            query: Normalized query key
            depth: Extra trie levels to descend

        Returns:
            Mapping of term id to cost (always 0)
        """
        if depth < 0:
            raise ValueError("depth must be non-negative")

        node = self.index.walk(query)
        if node is None:
            return {}
        return {term_id: 0 for term_id in self._collect(node, depth)}

    def fuzzy(
        self,
        query: str,
        fuzz: int,
        depth: int,
        allow_restart: bool = True,
        constrain_restarts: Optional[bool] = None,
    ) -> Dict[int, int]:
        """
        Fuzzy match with skip recovery and root restarts.

        States ``(node, position, restarts)`` are expanded cheapest first
        from an explicit worklist. On a mismatch the search may skip up to
        ``fuzz`` query characters or ``fuzz`` term characters (cost: the
        skip length) and may restart from the root (cost:
        ``restart_penalty(fuzz)``). A fully consumed query collects terms
        below the node it reached.

        Args:
            query: Normalized query key
            fuzz: Longest skip tried in one recovery
            depth: Extra trie levels collected at a completion
            allow_restart: Whether root restarts are tried
            constrain_restarts: Override the matcher's restart scoping

        Returns:
            Mapping of term id to lowest cost, cheapest first

        Raises:
            SearchBudgetExceeded: More than ``max_states`` units of work were
                spent; carries the partial result
        """
        if fuzz < 0 or depth < 0:
            raise ValueError("fuzz and depth must be non-negative")
        if constrain_restarts is None:
            constrain_restarts = self.constrain_restarts

        index = self.index
        length = len(query)
        penalty = restart_penalty(fuzz)

        costs: Dict[int, int] = {}
        collected: Dict[int, List[int]] = {}
        lineages: Dict[int, FrozenSet[int]] = {}
        seen = set()
        explored = 0

        sequence = itertools.count()
        worklist: List[Tuple[int, int, int, int, int, int]] = [
            (0, next(sequence), ROOT, 0, 0, NO_LINEAGE)
        ]

        def push(cost: int, node: int, position: int, restarts: int, lineage: int) -> None:
            heapq.heappush(worklist, (cost, next(sequence), node, position, restarts, lineage))

        def spend() -> None:
            nonlocal explored
            if explored >= self.max_states:
                raise SearchBudgetExceeded(dict(costs), explored, self.max_states)
            explored += 1

        while worklist:
            cost, _, node, position, restarts, lineage = heapq.heappop(worklist)

            state = (node, position, restarts, lineage)
            if state in seen:
                continue
            seen.add(state)
            spend()

            if position == length:
                if node not in collected:
                    collected[node] = self._collect(node, depth, nearest=True, visit=spend)
                allowed = lineages.get(lineage)
                for term_id in collected[node]:
                    if allowed is not None and term_id not in allowed:
                        continue
                    # Cheapest-first order makes the first cost seen the minimum
                    if term_id not in costs:
                        costs[term_id] = cost
                continue

            char = query[position]
            child = index.child(node, char)
            if child is not None:
                push(cost, child, position + 1, restarts, lineage)
                continue

            # Skip query characters the term does not contain
            for skip in range(1, fuzz + 1):
                if position + skip >= length:
                    break
                target = index.child(node, query[position + skip])
                if target is not None:
                    push(cost + skip, target, position + skip + 1, restarts, lineage)

            # Skip term characters the user did not type
            frontier = [node]
            for skip in range(1, fuzz + 1):
                below = []
                for parent in frontier:
                    for descendant in index.children(parent).values():
                        spend()
                        below.append(descendant)
                        target = index.child(descendant, char)
                        if target is not None:
                            push(cost + skip, target, position + 1, restarts, lineage)
                if not below:
                    break
                frontier = below

            if allow_restart and restarts < self.max_restarts and node != ROOT:
                next_lineage = lineage
                if constrain_restarts and lineage == NO_LINEAGE:
                    next_lineage = node
                    if node not in lineages:
                        lineages[node] = self._subtree_terms(node, visit=spend)
                push(cost + penalty, ROOT, position, restarts + 1, next_lineage)

        return costs

    def _collect(
        self,
        node: int,
        depth: int,
        nearest: bool = False,
        visit: Optional[Callable[[], None]] = None,
    ) -> List[int]:
        """
        Collect term ids level by level below a node.

        Args:
            node: Node to start from
            depth: Levels below ``node`` to include
            nearest: When ``depth`` levels hold nothing, keep descending to the
                first level that does (up to ``max_depth``)
            visit: Called once per node read, so callers can bound the work

        Returns:
            Term ids in breadth-first order without duplicates
        """
        found: Dict[int, None] = {}
        frontier = [node]
        level = 0

        while frontier:
            for current in frontier:
                if visit is not None:
                    visit()
                for term_id in self.index.terminals(current):
                    found.setdefault(term_id, None)

            if level >= depth:
                if not nearest or depth == 0 or found or level >= self.max_depth:
                    break

            frontier = [
                descendant
                for current in frontier
                for descendant in self.index.children(current).values()
            ]
            level += 1

        return list(found)

    def _subtree_terms(
        self, node: int, visit: Optional[Callable[[], None]] = None
    ) -> FrozenSet[int]:
        """All term ids at or below a node."""
        terms = set()
        stack = [node]
        while stack:
            current = stack.pop()
            if visit is not None:
                visit()
            terms.update(self.index.terminals(current))
            stack.extend(self.index.children(current).values())
        return frozenset(terms)
