"""Request models for search queries."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class SearchMode(str, Enum):
    """Matching algorithm used for a query."""

    STRICT = "strict"
    PREFIX = "prefix"
    FUZZY = "fuzzy"


class SearchRequest(BaseModel):
    """Request model for search queries."""

    query: str = Field(default="", description="Whitespace-free search query")
    mode: SearchMode = Field(default=SearchMode.FUZZY, description="Matching algorithm")
    fuzz: Optional[int] = Field(
        None, ge=0, description="Longest skip tried after a mismatch (fuzzy only)"
    )
    depth: Optional[int] = Field(
        None, ge=0, description="Extra trie levels collected after a match (prefix and fuzzy)"
    )
    allow_restart: bool = Field(
        default=True, description="Whether fuzzy search may restart matching at a new word"
    )
    constrain_restarts: Optional[bool] = Field(
        None, description="Only keep post-restart matches related to the word matched before"
    )
    max_results: Optional[int] = Field(
        None, ge=0, description="Maximum number of results to return (0 = unlimited)"
    )
    include_suggestions: bool = Field(
        default=False, description="Whether to include suggestions for no-match queries"
    )
