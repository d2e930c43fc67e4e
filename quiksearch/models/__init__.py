"""Data models for quiksearch."""

from .request import SearchMode, SearchRequest
from .response import (
    BuildReport,
    RejectedTerm,
    SearchResult,
    SearchResponse,
)

__all__ = [
    "SearchMode",
    "SearchRequest",
    "BuildReport",
    "RejectedTerm",
    "SearchResult",
    "SearchResponse",
]
