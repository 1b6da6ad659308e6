"""Pydantic request/response models for the quotes API."""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from backend.engine.records import Keyword, Quote


# --------------------------------------------------------------------------- #
# Records
# --------------------------------------------------------------------------- #

class QuoteOut(BaseModel):
    id: int
    text: str
    author: str
    category: str

    @classmethod
    def from_record(cls, quote: Quote) -> "QuoteOut":
        return cls(id=quote.id, text=quote.text, author=quote.author, category=quote.category)


class KeywordOut(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str
    source_url: str = Field(alias="sourceUrl")

    @classmethod
    def from_record(cls, keyword: Keyword) -> "KeywordOut":
        return cls(name=keyword.name, source_url=keyword.source_url)


# --------------------------------------------------------------------------- #
# Envelopes
# --------------------------------------------------------------------------- #

class KeywordsResponse(BaseModel):
    """Body for GET /api/keywords."""
    success: bool
    data: List[KeywordOut]
    source: str
    timestamp: int
    error: Optional[str] = None


class KeywordQuotesResponse(BaseModel):
    """Body for GET /api/keyword/{keyword}."""
    success: bool
    data: List[QuoteOut]
    keyword: str
    source: str
    count: int
    timestamp: int
    error: Optional[str] = None


class QuoteGroup(BaseModel):
    """One landing-page column: a keyword and its quotes."""
    keyword: str
    quotes: List[QuoteOut]
    source: str


class ErrorResponse(BaseModel):
    success: bool = False
    error: str
    timestamp: int


# --------------------------------------------------------------------------- #
# Selection
# --------------------------------------------------------------------------- #

class SelectionRequest(BaseModel):
    """Body for PUT /api/selection."""
    keyword: str = Field(min_length=1)


class SelectionResponse(BaseModel):
    keyword: Optional[str] = None
