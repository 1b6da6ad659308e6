"""Selection router: remember the keyword the user opened last."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from backend.api.deps import get_selection_memory
from backend.api.models import SelectionRequest, SelectionResponse
from backend.engine.selection_memory import LastSelectionMemory

router = APIRouter(prefix="/api/selection", tags=["selection"])


@router.get("", response_model=SelectionResponse)
def read_selection(memory: LastSelectionMemory = Depends(get_selection_memory)):
    return SelectionResponse(keyword=memory.read_selection())


@router.put("", response_model=SelectionResponse)
def record_selection(
    body: SelectionRequest,
    memory: LastSelectionMemory = Depends(get_selection_memory),
):
    """Persist the keyword in a 30-day cookie."""
    memory.record_selection(body.keyword)
    return SelectionResponse(keyword=memory.read_selection())


@router.delete("", response_model=SelectionResponse)
def clear_selection(memory: LastSelectionMemory = Depends(get_selection_memory)):
    memory.clear()
    return SelectionResponse(keyword=None)
