"""Main search engine implementation."""

import threading
import time
from typing import Any, Dict, Iterable, List, Optional

import structlog
from rapidfuzz import fuzz as rf_fuzz, process

from ..config import Settings, get_settings
from ..models.request import SearchMode, SearchRequest
from ..models.response import BuildReport, RejectedTerm, SearchResponse, SearchResult
from .exceptions import SearchBudgetExceeded
from .index import Indexer, TrieIndex
from .matcher import TrieMatcher
from .normalizer import KeyNormalizer
from .ranker import Ranker

logger = structlog.get_logger(__name__)


class SearchEngine:
    """
    Caller-facing facade over the indexer, matcher and ranker.

    The engine holds configuration and query statistics only; indexes are
    built by ``build_index`` and passed back into ``search``.
    """

    def __init__(self, settings: Optional[Settings] = None) -> None:
        """
        Initialize the search engine.

        Args:
            settings: Configuration (cached environment settings if None)
        """
        self.settings = settings or get_settings()
        self.normalizer = KeyNormalizer()
        self.indexer = Indexer(self.normalizer, index_words=self.settings.index_words)
        self.ranker = Ranker()

        # Performance tracking
        self._stats_lock = threading.Lock()
        self._stats = self._empty_stats()

    def build_index(self, terms: Iterable[Optional[str]]) -> TrieIndex:
        """
        Build a frozen index from raw terms.

        Args:
            terms: Raw display strings

        Returns:
            TrieIndex; rejected terms are listed in ``index.rejected``
        """
        index = self.indexer.build(terms)
        if index.rejected:
            logger.warning(
                "Terms rejected during build",
                rejected=len(index.rejected),
                positions=[error.position for error in index.rejected[:10]],
            )
        return index

    def build_report(self, index: TrieIndex) -> BuildReport:
        """Summarize an index build."""
        stats = index.get_stats()
        return BuildReport(
            total=len(index) + len(index.rejected),
            indexed=len(index),
            rejected=[
                RejectedTerm(position=error.position, raw=error.raw, reason=str(error))
                for error in index.rejected
            ],
            node_count=index.node_count,
            elapsed_ms=stats["build_time_ms"] or 0.0,
        )

    def matcher_for(self, index: TrieIndex) -> TrieMatcher:
        """Create a matcher over an index using the configured bounds."""
        return TrieMatcher(
            index,
            max_states=self.settings.max_states,
            max_restarts=self.settings.max_restarts,
            max_depth=self.settings.max_depth,
            constrain_restarts=self.settings.constrain_restarts,
        )

    def search(
        self,
        index: TrieIndex,
        query: str,
        mode: Optional[SearchMode] = None,
        fuzz: Optional[int] = None,
        depth: Optional[int] = None,
        allow_restart: bool = True,
        constrain_restarts: Optional[bool] = None,
        max_results: Optional[int] = None,
        include_suggestions: bool = False,
    ) -> SearchResponse:
        """
        Search an index for terms matching a query.

        Args:
            index: Index built by ``build_index``
            query: Whitespace-free query
            mode: Matching algorithm (configured default if None)
            fuzz: Longest skip after a mismatch, ignored unless fuzzy
            depth: Extra levels collected after a match, ignored for strict
            allow_restart: Whether fuzzy search may restart at a new word
            constrain_restarts: Override the configured restart scoping
            max_results: Maximum number of results
            include_suggestions: Whether to suggest terms when nothing matches

        Returns:
            SearchResponse with ranked results and metadata

        Raises:
            InvalidQuery: The query contains whitespace
        """
        request = SearchRequest(
            query=query or "",
            mode=mode or SearchMode(self.settings.default_mode),
            fuzz=fuzz,
            depth=depth,
            allow_restart=allow_restart,
            constrain_restarts=constrain_restarts,
            max_results=max_results,
            include_suggestions=include_suggestions,
        )
        return self.execute(index, request)

    def execute(self, index: TrieIndex, request: SearchRequest) -> SearchResponse:
        """
        Run a validated search request against an index.

        Args:
            index: Index built by ``build_index``
            request: Search parameters

        Returns:
            SearchResponse with ranked results and metadata
        """
        start_time = time.time()

        key = self.normalizer.normalize_query(request.query)
        fuzz = self._cap(request.fuzz, self.settings.default_fuzz, self.settings.max_fuzz)
        depth = self._cap(request.depth, self.settings.default_depth, self.settings.max_depth)
        max_results = request.max_results if request.max_results is not None else self.settings.max_results

        matcher = self.matcher_for(index)
        budget_exceeded = False

        if request.mode == SearchMode.STRICT:
            costs = matcher.strict(key)
        elif request.mode == SearchMode.PREFIX:
            costs = matcher.prefix(key, depth)
        else:
            try:
                costs = matcher.fuzzy(
                    key,
                    fuzz,
                    depth,
                    allow_restart=request.allow_restart,
                    constrain_restarts=request.constrain_restarts,
                )
            except SearchBudgetExceeded as e:
                logger.warning("Search budget exceeded", query=request.query, **e.to_dict())
                costs = e.partial
                budget_exceeded = True

        entries = self.ranker.rank_entries(costs, index, limit=max_results)
        results = [
            SearchResult(term_id=term.id, display=term.display, cost=cost, rank=rank)
            for rank, (term, cost) in enumerate(entries, start=1)
        ]

        suggestions = None
        if not results and request.include_suggestions:
            suggestions = self._get_suggestions(index, key)

        execution_time = (time.time() - start_time) * 1000
        self._record(execution_time, matched=bool(results), budget_exceeded=budget_exceeded)

        logger.debug(
            "Query executed",
            query=request.query,
            mode=request.mode.value,
            fuzz=fuzz,
            depth=depth,
            results=len(results),
            execution_time_ms=round(execution_time, 3),
        )

        return SearchResponse(
            query=request.query,
            normalized_query=key,
            mode=request.mode,
            fuzz=fuzz,
            depth=depth,
            execution_time_ms=execution_time,
            total_results=len(results),
            results=results,
            budget_exceeded=budget_exceeded,
            suggestions=suggestions,
        )

    def lookup(
        self,
        index: TrieIndex,
        query: str,
        mode: Optional[SearchMode] = None,
        fuzz: Optional[int] = None,
        depth: Optional[int] = None,
        allow_restart: bool = True,
    ) -> List[str]:
        """Search and return only the ranked display strings."""
        return self.search(
            index, query, mode=mode, fuzz=fuzz, depth=depth, allow_restart=allow_restart
        ).displays

    def _cap(self, value: Optional[int], default: int, maximum: int) -> int:
        if value is None:
            value = default
        return min(value, maximum)

    def _get_suggestions(self, index: TrieIndex, key: str) -> List[str]:
        """
        Get suggestions for a query with no matches.

        Args:
            index: Index searched
            key: Normalized query key

        Returns:
            Display strings of the closest terms
        """
        if not key or not len(index) or not self.settings.max_suggestions:
            return []

        terms = index.get_all_terms()
        choices = [self.normalizer.normalize(term.display)[1] for term in terms]
        suggestions = process.extract(
            key,
            choices,
            scorer=rf_fuzz.partial_ratio,
            limit=self.settings.max_suggestions,
            score_cutoff=self.settings.suggestion_cutoff,
        )
        return [terms[position].display for _, _, position in suggestions]

    def _record(self, execution_time: float, matched: bool, budget_exceeded: bool) -> None:
        with self._stats_lock:
            self._stats["total_queries"] += 1
            self._stats["total_execution_time"] += execution_time
            if matched:
                self._stats["matched_queries"] += 1
            else:
                self._stats["no_matches"] += 1
            if budget_exceeded:
                self._stats["budget_exceeded"] += 1

    def _empty_stats(self) -> Dict[str, Any]:
        return {
            "total_queries": 0,
            "matched_queries": 0,
            "no_matches": 0,
            "budget_exceeded": 0,
            "total_execution_time": 0.0,
        }

    def get_stats(self) -> Dict[str, Any]:
        """Get engine statistics."""
        with self._stats_lock:
            stats = self._stats.copy()

        # Calculate averages
        if stats["total_queries"] > 0:
            stats["average_execution_time_ms"] = (
                stats["total_execution_time"] / stats["total_queries"]
            )
            stats["match_rate"] = stats["matched_queries"] / stats["total_queries"]
            stats["no_match_rate"] = stats["no_matches"] / stats["total_queries"]
        else:
            stats["average_execution_time_ms"] = 0.0
            stats["match_rate"] = 0.0
            stats["no_match_rate"] = 0.0

        return stats

    def reset_stats(self) -> None:
        """Reset query statistics."""
        with self._stats_lock:
            self._stats = self._empty_stats()


def build_index(terms: Iterable[Optional[str]], settings: Optional[Settings] = None) -> TrieIndex:
    """Build a frozen index from raw terms."""
    return SearchEngine(settings).build_index(terms)


def search(
    index: TrieIndex,
    query: str,
    mode: SearchMode = SearchMode.FUZZY,
    fuzz: Optional[int] = None,
    depth: Optional[int] = None,
    settings: Optional[Settings] = None,
) -> List[str]:
    """Search an index and return the ranked display strings."""
    return SearchEngine(settings).lookup(index, query, mode=mode, fuzz=fuzz, depth=depth)
