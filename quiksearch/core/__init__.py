"""Core search engine functionality."""

from .engine import SearchEngine, build_index, search
from .exceptions import InvalidQuery, InvalidTerm, QuikSearchError, SearchBudgetExceeded
from .index import Indexer, Term, TrieIndex
from .matcher import TrieMatcher
from .normalizer import KeyNormalizer
from .ranker import Ranker

__all__ = [
    "SearchEngine",
    "build_index",
    "search",
    "InvalidQuery",
    "InvalidTerm",
    "QuikSearchError",
    "SearchBudgetExceeded",
    "Indexer",
    "Term",
    "TrieIndex",
    "TrieMatcher",
    "KeyNormalizer",
    "Ranker",
]
