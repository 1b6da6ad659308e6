"""Quotes router: searchable quote list and the landing-page groups."""

from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from backend.api.deps import get_quote_source, get_selection_memory
from backend.api.models import QuoteGroup, QuoteOut
from backend.engine.quote_source import QuoteSource
from backend.engine.selection_memory import LastSelectionMemory

router = APIRouter(prefix="/api/quotes", tags=["quotes"])


@router.get("", response_model=List[QuoteOut])
async def get_quotes(
    keyword: Optional[str] = Query(None, description="Only quotes for this keyword"),
    source: QuoteSource = Depends(get_quote_source),
    memory: LastSelectionMemory = Depends(get_selection_memory),
):
    """First 10 quotes for ``keyword``, or one quote from each of three keywords."""
    keyword = (keyword or "").strip() or None
    if keyword:
        quotes = await source.search_quotes(keyword)
    else:
        quotes = await source.get_random_quotes(preferred=memory.read_selection())
    return [QuoteOut.from_record(q) for q in quotes]


@router.get("/initial", response_model=List[QuoteGroup])
async def get_initial_quotes(
    source: QuoteSource = Depends(get_quote_source),
    memory: LastSelectionMemory = Depends(get_selection_memory),
):
    """Three keywords with their quotes; the last selected keyword leads when still known."""
    groups = await source.get_initial_groups(preferred=memory.read_selection())
    return [
        QuoteGroup(
            keyword=g["keyword"],
            quotes=[QuoteOut.from_record(q) for q in g["quotes"]],
            source=g["source"],
        )
        for g in groups
    ]
