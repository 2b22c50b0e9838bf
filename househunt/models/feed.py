"""
Feed models - listing queries and feed state.
"""
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


ALL_CATEGORY = "All"


class FeedState(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    POPULATED = "populated"
    FAILED = "failed"


class QueryKind(str, Enum):
    ALL = "all"
    CATEGORY = "category"
    SEARCH = "search"


class ListingFeedQuery(BaseModel):
    """
    Which listings to show: everything, one category, or a free-text search.

    Category and search term are mutually exclusive. The "All" category label
    is the same as no category.
    """
    model_config = ConfigDict(frozen=True)

    category: Optional[str] = None
    search_term: Optional[str] = None
    all_label: str = Field(default=ALL_CATEGORY, exclude=True)

    @field_validator("category", "search_term", mode="before")
    @classmethod
    def blank_to_none(cls, v):
        if isinstance(v, str):
            v = v.strip()
            return v or None
        return v

    @model_validator(mode="after")
    def check_exclusive(self) -> "ListingFeedQuery":
        if self.search_term is not None and self.category not in (None, self.all_label):
            raise ValueError("category and search_term are mutually exclusive")
        return self

    @classmethod
    def all(cls) -> "ListingFeedQuery":
        return cls()

    @classmethod
    def for_category(cls, label: Optional[str], all_label: str = ALL_CATEGORY) -> "ListingFeedQuery":
        return cls(category=label, all_label=all_label)

    @classmethod
    def for_search(cls, term: str) -> "ListingFeedQuery":
        return cls(search_term=term)

    @property
    def kind(self) -> QueryKind:
        if self.search_term is not None:
            return QueryKind.SEARCH
        if self.category is not None and self.category != self.all_label:
            return QueryKind.CATEGORY
        return QueryKind.ALL

    @property
    def key(self) -> tuple[QueryKind, Optional[str]]:
        """Identity of the remote request this query maps to."""
        kind = self.kind
        if kind == QueryKind.SEARCH:
            return kind, self.search_term
        if kind == QueryKind.CATEGORY:
            return kind, self.category
        return kind, None

    def describe(self) -> str:
        if self.kind == QueryKind.SEARCH:
            return f"search '{self.search_term}'"
        if self.kind == QueryKind.CATEGORY:
            return f"category '{self.category}'"
        return "all listings"
