"""
Math Solver Editor - Authoring Router
Stateless endpoints: command table, suggestions, palette and preview.
"""

from fastapi import APIRouter, HTTPException, Query
from pydantic import BaseModel, Field
from typing import Optional, List
import logging

from editor.commands import ALL_COMMANDS, render_command
from editor.palette import PALETTE
from editor.preview import PreviewRenderer
from editor.suggestions import suggest

logger = logging.getLogger(__name__)
router = APIRouter()


class CommandInfo(BaseModel):
    """A slash command and its empty snippet."""
    name: str
    snippet: str


class SuggestionResponse(BaseModel):
    """Response model for command suggestions."""
    query: str
    suggestions: List[str]


class PaletteItemModel(BaseModel):
    label: str
    latex: str


class PaletteCategoryModel(BaseModel):
    category: str
    items: List[PaletteItemModel]


class PreviewRequest(BaseModel):
    """Request model for a one-off preview."""
    latex: str = Field("", description="LaTeX source to render")
    display_mode: bool = Field(True, description="Block (true) or inline (false) math")


class PreviewResponse(BaseModel):
    """Rendered markup, or the raw text when rendering failed."""
    raw: str
    html: Optional[str] = None
    fallback: bool


@router.get("/commands", response_model=List[CommandInfo])
async def list_commands():
    """List slash commands in ranking order."""
    return [CommandInfo(name=name, snippet=render_command(name)) for name in ALL_COMMANDS]


@router.get("/suggestions", response_model=SuggestionResponse)
async def get_suggestions(q: str = Query("", description="Text typed after the slash")):
    """Command names starting with the query (case-insensitive)."""
    return SuggestionResponse(query=q, suggestions=suggest(q))


@router.get("/palette", response_model=List[PaletteCategoryModel])
async def get_palette():
    """Symbol palette grouped by category."""
    return [
        PaletteCategoryModel(
            category=cat.category,
            items=[PaletteItemModel(label=i.label, latex=i.latex) for i in cat.items]
        )
        for cat in PALETTE
    ]


@router.post("/preview", response_model=PreviewResponse)
async def preview_latex(request: PreviewRequest):
    """
    Render LaTeX to markup.

    Rendering failures are not errors: the response carries the raw
    text with **fallback** set.
    """
    try:
        renderer = PreviewRenderer(display_mode=request.display_mode)
        result = await renderer.request(request.latex)
        return PreviewResponse(raw=result.raw, html=result.html, fallback=result.fallback)

    except Exception as e:
        logger.error(f"Preview failed: {e}")
        raise HTTPException(
            status_code=500,
            detail=f"Preview failed: {str(e)}"
        )
