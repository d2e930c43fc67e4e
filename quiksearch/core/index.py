"""Trie index over term keys and the indexer that builds it."""

import time
from types import MappingProxyType
from typing import Any, Dict, Iterable, List, Mapping, NamedTuple, Optional, Tuple

import structlog

from .exceptions import InvalidTerm
from .normalizer import KeyNormalizer

logger = structlog.get_logger(__name__)

ROOT = 0


class Term(NamedTuple):
    """An indexed display string with its stable identifier."""

    id: int
    display: str


class TrieIndex:
    """
    Character trie whose nodes hold the ids of the terms ending there.

    Nodes live in an arena and are addressed by integer index; the root is
    node 0. The index is filled by an Indexer and frozen before it is handed
    out, after which it is read-only and can be shared between threads.
    """

    def __init__(self) -> None:
        """Initialize an empty index holding only the root node."""
        self._children: List[Dict[str, int]] = [{}]
        self._terminals: List[List[int]] = [[]]
        self._terms: List[Term] = []
        self.rejected: List[InvalidTerm] = []
        self._frozen = False
        self._stats: Dict[str, Any] = {
            "total_terms": 0,
            "total_keys": 0,
            "rejected_terms": 0,
            "build_time_ms": None,
            "built_at": None,
        }

    @property
    def root(self) -> int:
        return ROOT

    @property
    def frozen(self) -> bool:
        return self._frozen

    @property
    def node_count(self) -> int:
        return len(self._children)

    def __len__(self) -> int:
        return len(self._terms)

    def child(self, node: int, char: str) -> Optional[int]:
        """Get the child of a node along an edge, or None."""
        return self._children[node].get(char)

    def children(self, node: int) -> Mapping[str, int]:
        """Get the edge mapping of a node."""
        return self._children[node]

    def terminals(self, node: int) -> Tuple[int, ...]:
        """Get the ids of the terms whose keys end exactly at a node."""
        return tuple(self._terminals[node])

    def get_term(self, term_id: int) -> Term:
        return self._terms[term_id]

    def get_all_terms(self) -> List[Term]:
        """Get all terms in id order."""
        return list(self._terms)

    def walk(self, key: str) -> Optional[int]:
        """
        Follow a key from the root.

        Args:
            key: Normalized character sequence

        Returns:
            The node reached, or None if an edge is missing
        """
        node = ROOT
        for char in key:
            node = self._children[node].get(char)
            if node is None:
                return None
        return node

    def get_stats(self) -> Dict[str, Any]:
        """Get index statistics."""
        stats = self._stats.copy()
        stats["total_nodes"] = self.node_count
        return stats

    # Build-time mutation, used by Indexer only

    def _check_mutable(self) -> None:
        if self._frozen:
            raise RuntimeError("TrieIndex is frozen and cannot be modified")

    def _add_term(self, display: str) -> int:
        self._check_mutable()
        term_id = len(self._terms)
        self._terms.append(Term(term_id, display))
        self._stats["total_terms"] = len(self._terms)
        return term_id

    def _insert(self, key: str, term_id: int) -> int:
        self._check_mutable()
        node = ROOT
        for char in key:
            nxt = self._children[node].get(char)
            if nxt is None:
                nxt = len(self._children)
                self._children.append({})
                self._terminals.append([])
                self._children[node][char] = nxt
            node = nxt

        # Terminal sets stay true sets in insertion order
        if term_id not in self._terminals[node]:
            self._terminals[node].append(term_id)
        self._stats["total_keys"] += 1
        return node

    def _reject(self, error: InvalidTerm) -> None:
        self._check_mutable()
        self.rejected.append(error)
        self._stats["rejected_terms"] = len(self.rejected)

    def _freeze(self, build_time_ms: float) -> None:
        self._children = [MappingProxyType(edges) for edges in self._children]
        self._terminals = [tuple(ids) for ids in self._terminals]
        self._stats["build_time_ms"] = build_time_ms
        self._stats["built_at"] = time.time()
        self._frozen = True


class Indexer:
    """Builds a frozen TrieIndex from a batch of raw terms."""

    def __init__(self, normalizer: Optional[KeyNormalizer] = None, index_words: bool = True) -> None:
        """
        Initialize the indexer.

        Args:
            normalizer: Key normalizer (a fresh one if None)
            index_words: Whether each word of a multi-word term is indexed as its own key
        """
        self.normalizer = normalizer or KeyNormalizer()
        self.index_words = index_words

    def keys_for(self, raw: str, keys: Optional[Tuple[str, str]] = None) -> List[str]:
        """
        Get the keys a term is inserted under.

        Args:
            raw: Term exactly as supplied
            keys: Its ``(spaced, spaceless)`` pair, when already normalized

        Returns:
            Spaced key, spaceless key and, for multi-word terms, the word keys
        """
        spaced, spaceless = keys or self.normalizer.normalize(raw)
        result = [spaced, spaceless]
        if self.index_words:
            words = self.normalizer.split_words(spaced)
            if len(words) > 1:
                result.extend(words)
        return result

    def build(self, terms: Iterable[Optional[str]]) -> TrieIndex:
        """
        Build an index from raw terms.

        Terms that normalize to an empty key are recorded on
        ``index.rejected`` and skipped; the rest are indexed in order.

        Args:
            terms: Raw display strings

        Returns:
            Frozen TrieIndex
        """
        start_time = time.time()
        index = TrieIndex()

        for position, raw in enumerate(terms):
            spaced, spaceless = self.normalizer.normalize(raw)
            if not spaceless:
                index._reject(InvalidTerm(position, raw))
                continue

            term_id = index._add_term(raw)
            for key in self.keys_for(raw, (spaced, spaceless)):
                index._insert(key, term_id)

        build_time_ms = (time.time() - start_time) * 1000
        index._freeze(build_time_ms)

        logger.info(
            "Index built",
            accepted=len(index),
            rejected=len(index.rejected),
            nodes=index.node_count,
            elapsed_ms=round(build_time_ms, 2),
        )
        return index
