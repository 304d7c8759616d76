"""
Math Solver Editor - Sessions Router
Stateful editor sessions: key presses, command picks, palette clicks,
live preview and the session's solve request.
"""

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field
from typing import Optional, List
import logging

from editor.commands import UnknownCommandError
from editor.palette import apply_item, find_item
from services.session_store import EditorSession, get_session_store
from services.solution import format_final_answer

logger = logging.getLogger(__name__)
router = APIRouter()


class BufferModel(BaseModel):
    """Buffer text and selection."""
    text: str
    selection_start: int
    selection_end: int


class SolveStateModel(BaseModel):
    """Live solve result of a session."""
    status: str
    formula: Optional[str] = None
    solution: Optional[dict] = None
    final_answer: Optional[str] = None
    solution_type: Optional[str] = None
    error: Optional[str] = None
    details: Optional[str] = None


class SessionState(BaseModel):
    """Full editor state after an operation."""
    session_id: str
    buffer: BufferModel
    composing: bool
    query: Optional[str] = None
    suggestions: List[str]
    action: Optional[str] = None
    command: Optional[str] = None
    solve: SolveStateModel


class KeyRequest(BaseModel):
    key: str = Field(..., min_length=1, description="Character or named key, e.g. 'Enter'")


class SelectRequest(BaseModel):
    start: int = Field(..., ge=0)
    end: Optional[int] = Field(None, ge=0)


class PickRequest(BaseModel):
    command: str = Field(..., min_length=1)


class InsertRequest(BaseModel):
    text: str


class TextRequest(BaseModel):
    text: str


class PaletteClickRequest(BaseModel):
    category: str
    label: str


class SolveSessionRequest(BaseModel):
    formula: Optional[str] = Field(None, description="Defaults to the buffer text")
    wait: bool = Field(False, description="Wait for the solver before responding")


class PreviewState(BaseModel):
    raw: str
    html: Optional[str] = None
    fallback: bool


def _session(session_id: str) -> EditorSession:
    try:
        return get_session_store().get(session_id)
    except KeyError:
        raise HTTPException(status_code=404, detail=f"Session not found: {session_id}")


def _solve_state(session: EditorSession) -> SolveStateModel:
    state = session.solver.state
    solution = state.solution
    return SolveStateModel(
        status=state.status.value,
        formula=state.formula,
        solution=solution.model_dump(by_alias=True) if solution else None,
        final_answer=format_final_answer(solution.final_answer) if solution else None,
        solution_type=solution.solution_type if solution else None,
        error=state.error,
        details=state.details
    )


def _state(session: EditorSession, action: Optional[str] = None, command: Optional[str] = None) -> SessionState:
    buf = session.controller.buffer
    recognizer = session.recognizer
    return SessionState(
        session_id=session.session_id,
        buffer=BufferModel(
            text=buf.text,
            selection_start=buf.selection_start,
            selection_end=buf.selection_end
        ),
        composing=recognizer.composing,
        query=recognizer.query,
        suggestions=recognizer.suggestions(),
        action=action,
        command=command,
        solve=_solve_state(session)
    )


@router.post("", response_model=SessionState)
async def create_session():
    """Open a new, empty editor session."""
    session = get_session_store().create()
    return _state(session)


@router.get("/{session_id}", response_model=SessionState)
async def get_session(session_id: str):
    return _state(_session(session_id))


@router.delete("/{session_id}")
async def delete_session(session_id: str):
    """
    Close a session. Any in-flight solve request is cancelled.
    """
    if not get_session_store().delete(session_id):
        raise HTTPException(status_code=404, detail=f"Session not found: {session_id}")
    return {"success": True, "session_id": session_id}


@router.post("/{session_id}/keys", response_model=SessionState)
async def press_key(session_id: str, request: KeyRequest):
    """
    Feed one key press to the editor.

    - `/name` followed by space, Enter, Tab or `)` expands a known command
    - `(`, `[`, `{`, `^` and `_` wrap the selection
    - Tab that does not expand a command inserts a thin space
    """
    session = _session(session_id)
    outcome = session.recognizer.handle_key(request.key)
    return _state(session, action=outcome.action.value, command=outcome.command)


@router.post("/{session_id}/select", response_model=SessionState)
async def select_range(session_id: str, request: SelectRequest):
    session = _session(session_id)
    try:
        session.controller.select(request.start, request.end)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return _state(session)


@router.post("/{session_id}/pick", response_model=SessionState)
async def pick_command(session_id: str, request: PickRequest):
    """Expand a command chosen from the suggestion list."""
    session = _session(session_id)
    try:
        session.recognizer.pick(request.command)
    except UnknownCommandError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return _state(session, action="expanded", command=request.command)


@router.post("/{session_id}/insert", response_model=SessionState)
async def insert_text(session_id: str, request: InsertRequest):
    """Insert literal text at the caret, replacing any selection."""
    session = _session(session_id)
    session.controller.insert_at_caret(request.text)
    return _state(session, action="inserted")


@router.post("/{session_id}/palette", response_model=SessionState)
async def click_palette(session_id: str, request: PaletteClickRequest):
    """Insert a symbol palette entry at the caret."""
    session = _session(session_id)
    try:
        item = find_item(request.category, request.label)
    except KeyError as e:
        raise HTTPException(status_code=404, detail=str(e.args[0]))
    apply_item(session.controller, item)
    return _state(session, action="inserted")


@router.put("/{session_id}/text", response_model=SessionState)
async def set_text(session_id: str, request: TextRequest):
    """Replace the whole buffer, e.g. with an example formula."""
    session = _session(session_id)
    session.controller.set_text(request.text)
    return _state(session)


@router.post("/{session_id}/clear", response_model=SessionState)
async def clear_buffer(session_id: str):
    session = _session(session_id)
    session.controller.clear()
    return _state(session)


@router.get("/{session_id}/preview", response_model=PreviewState)
async def get_preview(session_id: str):
    """Preview of the current buffer; raw text when it cannot be rendered."""
    session = _session(session_id)
    result = await session.refresh_preview()
    return PreviewState(raw=result.raw, html=result.html, fallback=result.fallback)


@router.post("/{session_id}/solve", response_model=SessionState)
async def solve_session(session_id: str, request: SolveSessionRequest):
    """
    Submit the buffer (or an explicit formula) to the solver.

    A pending request of this session is cancelled first. With
    **wait** the response carries the outcome, otherwise poll the session.
    """
    session = _session(session_id)
    formula = request.formula if request.formula is not None else session.controller.text
    try:
        session.solver.submit(formula)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    if request.wait:
        await session.solver.wait()
    return _state(session)


@router.post("/{session_id}/cancel", response_model=SessionState)
async def cancel_solve(session_id: str):
    session = _session(session_id)
    session.solver.cancel()
    return _state(session)
