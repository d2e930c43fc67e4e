"""
quiksearch - mnemonic search over short free-text terms.

Index a collection of titles or filenames once, then find them by
abbreviation: "phosh" finds "Adobe Photoshop", "phobo" finds "Photo Booth".
Results keep each term's original casing and spacing.
"""

__version__ = "1.0.0"

from .core.engine import SearchEngine, build_index, search
from .core.exceptions import InvalidQuery, InvalidTerm, SearchBudgetExceeded
from .core.index import TrieIndex
from .models.request import SearchMode
from .models.response import SearchResult, SearchResponse

__all__ = [
    "SearchEngine",
    "build_index",
    "search",
    "InvalidQuery",
    "InvalidTerm",
    "SearchBudgetExceeded",
    "TrieIndex",
    "SearchMode",
    "SearchResult",
    "SearchResponse",
]
