"""Key normalization for terms and queries."""

import re
from typing import List, Optional, Tuple

from .exceptions import InvalidQuery

BOUNDARY = " "


class KeyNormalizer:
    """Turns raw terms and queries into the character sequences used as trie paths."""

    def __init__(self) -> None:
        """Initialize the normalizer."""
        # Any run of whitespace marks a word boundary
        self.whitespace_regex = re.compile(r'\s+')

    def fold(self, text: Optional[str]) -> str:
        """Case-fold text to the single canonical case."""
        if not text:
            return ""
        return text.lower()

    def normalize(self, raw: Optional[str]) -> Tuple[str, str]:
        """
        Normalize a term into its spaced and spaceless keys.

        Args:
            raw: Term exactly as supplied

        Returns:
            Tuple of (spaced_key, spaceless_key)
        """
        folded = self.fold(raw)

        # Collapse whitespace runs into one boundary character
        spaced = self.whitespace_regex.sub(BOUNDARY, folded).strip(BOUNDARY)

        spaceless = spaced.replace(BOUNDARY, "")

        return spaced, spaceless

    def word_keys(self, raw: Optional[str]) -> List[str]:
        """
        Split a term into its individual folded words.

        Args:
            raw: Term exactly as supplied

        Returns:
            Distinct words in order of appearance
        """
        spaced, _ = self.normalize(raw)
        return self.split_words(spaced)

    def split_words(self, spaced: str) -> List[str]:
        """Distinct words of an already normalized spaced key."""
        if not spaced:
            return []
        return list(dict.fromkeys(spaced.split(BOUNDARY)))

    def validate_query(self, raw: Optional[str]) -> str:
        """Return the query unchanged, raising InvalidQuery if it has whitespace."""
        query = raw or ""
        if self.whitespace_regex.search(query):
            raise InvalidQuery(query)
        return query

    def normalize_query(self, raw: Optional[str]) -> str:
        """
        Normalize a whitespace-free query.

        Args:
            raw: Query as typed by the user

        Returns:
            Case-folded query key (may be empty)
        """
        return self.fold(self.validate_query(raw))
