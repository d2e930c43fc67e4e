"""Response models for search and index building."""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from .request import SearchMode


class SearchResult(BaseModel):
    """Individual search result."""

    term_id: int = Field(..., ge=0, description="Stable identifier of the matched term")
    display: str = Field(..., description="The term exactly as indexed")
    cost: int = Field(..., ge=0, description="Skip and restart penalty of the best path")
    rank: int = Field(..., ge=1, description="Position in the result list")


class SearchResponse(BaseModel):
    """Response for search queries."""

    query: str = Field(..., description="Original search query")
    normalized_query: str = Field(..., description="Case-folded query key")
    mode: SearchMode = Field(..., description="Matching algorithm used")
    fuzz: int = Field(..., description="Fuzz actually applied after capping")
    depth: int = Field(..., description="Depth actually applied after capping")
    execution_time_ms: float = Field(..., description="Query execution time in milliseconds")
    total_results: int = Field(..., description="Total number of results")
    results: List[SearchResult] = Field(..., description="Ranked search results")
    budget_exceeded: bool = Field(
        default=False, description="Whether the fuzzy search was cut off and results are partial"
    )
    suggestions: Optional[List[str]] = Field(None, description="Alternative suggestions if no match")
    timestamp: datetime = Field(default_factory=datetime.utcnow, description="Response timestamp")

    @property
    def displays(self) -> List[str]:
        """Display strings of the results in rank order."""
        return [result.display for result in self.results]


class RejectedTerm(BaseModel):
    """A term left out of the index."""

    position: int = Field(..., ge=0, description="Position of the term in the input")
    raw: Optional[str] = Field(None, description="The term as supplied")
    reason: str = Field(..., description="Why the term was rejected")


class BuildReport(BaseModel):
    """Summary of an index build."""

    total: int = Field(..., description="Terms supplied")
    indexed: int = Field(..., description="Terms accepted into the index")
    rejected: List[RejectedTerm] = Field(..., description="Terms rejected during build")
    node_count: int = Field(..., description="Trie nodes in the index")
    elapsed_ms: float = Field(..., description="Build time in milliseconds")
    timestamp: datetime = Field(default_factory=datetime.utcnow, description="Report timestamp")
