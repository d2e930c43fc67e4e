"""Error types raised or recorded by the search core."""

from typing import Any, Dict, Optional


class QuikSearchError(Exception):
    """Base class for all search core errors."""


class InvalidTerm(QuikSearchError):
    """A term normalized to an empty key and was left out of the index."""

    def __init__(self, position: int, raw: Optional[str]) -> None:
        self.position = position
        self.raw = raw
        super().__init__(f"Term at position {position} normalizes to an empty key: {raw!r}")


class InvalidQuery(QuikSearchError):
    """A query contained whitespace."""

    def __init__(self, query: str) -> None:
        self.query = query
        super().__init__(f"Query must not contain whitespace: {query!r}")


class SearchBudgetExceeded(QuikSearchError):
    """
    Fuzzy search explored more states than allowed.

    Carries the best-effort mapping of term id to cost collected before
    the search was cut off.
    """

    def __init__(self, partial: Dict[int, int], explored: int, limit: int) -> None:
        self.partial = partial
        self.explored = explored
        self.limit = limit
        super().__init__(
            f"Fuzzy search stopped after {explored} states (limit {limit}), "
            f"{len(partial)} partial results"
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "explored": self.explored,
            "limit": self.limit,
            "partial_results": len(self.partial),
        }
