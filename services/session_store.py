"""
Math Solver Editor - Session Store
In-memory editor sessions, one buffer, preview and solve state each.
"""

import asyncio
import logging
import uuid
from typing import Dict, List, Optional, Set

from config import settings
from editor.buffer import TextBufferController
from editor.preview import PreviewRenderer, PreviewResult, RenderFunction
from editor.recognizer import SlashCommandRecognizer
from services.math_solver import MathSolverClient
from services.solve_orchestrator import SolveOrchestrator

logger = logging.getLogger(__name__)


class EditorSession:
    """One editor instance: its buffer is mutated only through `controller`."""

    def __init__(
        self,
        session_id: str,
        render: Optional[RenderFunction] = None,
        client: Optional[MathSolverClient] = None
    ):
        self.session_id = session_id
        self.controller = TextBufferController()
        self.recognizer = SlashCommandRecognizer(self.controller)
        self.preview = PreviewRenderer(render=render)
        self.solver = SolveOrchestrator(client=client)
        # Every render still running; the newest is kept for refresh_preview
        self._preview_tasks: Set[asyncio.Task] = set()
        self._latest_preview: Optional[asyncio.Task] = None

        self.controller.subscribe(self._on_change)

    def _on_change(self, text: str) -> None:
        try:
            asyncio.get_running_loop()
        except RuntimeError:
            # No loop (sync caller); preview is rendered on demand
            return
        task = asyncio.create_task(self.preview.request(text))
        self._preview_tasks.add(task)
        task.add_done_callback(self._preview_tasks.discard)
        self._latest_preview = task

    @property
    def pending_previews(self) -> int:
        return len(self._preview_tasks)

    async def refresh_preview(self) -> PreviewResult:
        """Preview of the current buffer, rendering it if not yet published."""
        if self._latest_preview is not None:
            await self._latest_preview
        current = self.preview.current
        if current is None or current.raw != self.controller.text:
            current = await self.preview.request(self.controller.text)
        return current

    def close(self) -> None:
        self.solver.close()
        for task in list(self._preview_tasks):
            task.cancel()
        if self._preview_tasks:
            logger.debug(f"Cancelled {len(self._preview_tasks)} pending previews of {self.session_id}")


class SessionStore:
    """Registry of live editor sessions keyed by id."""

    def __init__(self, max_sessions: Optional[int] = None):
        self.max_sessions = max_sessions or settings.max_sessions
        self._sessions: Dict[str, EditorSession] = {}

    def create(self, **kwargs) -> EditorSession:
        if len(self._sessions) >= self.max_sessions:
            # Evict the oldest session
            oldest = next(iter(self._sessions))
            logger.warning(f"Session limit reached, evicting {oldest}")
            self.delete(oldest)

        session_id = uuid.uuid4().hex
        session = EditorSession(session_id, **kwargs)
        self._sessions[session_id] = session
        logger.info(f"Created editor session {session_id}")
        return session

    def get(self, session_id: str) -> EditorSession:
        try:
            return self._sessions[session_id]
        except KeyError:
            raise KeyError(f"Session not found: {session_id}") from None

    def delete(self, session_id: str) -> bool:
        session = self._sessions.pop(session_id, None)
        if session is None:
            return False
        session.close()
        logger.info(f"Closed editor session {session_id}")
        return True

    def list_sessions(self) -> List[str]:
        return list(self._sessions)

    def close_all(self) -> None:
        for session_id in list(self._sessions):
            self.delete(session_id)


# Singleton instance
_session_store = None

def get_session_store() -> SessionStore:
    """Get the singleton session store instance."""
    global _session_store
    if _session_store is None:
        _session_store = SessionStore()
    return _session_store
