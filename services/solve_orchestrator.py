"""
Math Solver Editor - Solve Orchestrator
Single in-flight solve request per editor: a new submission cancels the
previous one, and late answers from superseded requests are dropped.
"""

import asyncio
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from services.math_solver import MathSolverClient, MathSolverError, get_solver_client
from services.solution import Solution

logger = logging.getLogger(__name__)

CANCELLED_MESSAGE = "Request was cancelled"
UNEXPECTED_MESSAGE = "An unexpected error occurred. Please try again."


class SolveStatus(str, Enum):
    IDLE = "idle"
    PENDING = "pending"
    SUCCESS = "success"
    ERROR = "error"
    CANCELLED = "cancelled"


@dataclass
class SolveState:
    """The one live solve result shown to the user."""
    status: SolveStatus = SolveStatus.IDLE
    formula: Optional[str] = None
    solution: Optional[Solution] = None
    error: Optional[str] = None
    details: Optional[str] = None


class SolveOrchestrator:
    """Owns the lifecycle of at most one pending solve request."""

    def __init__(self, client: Optional[MathSolverClient] = None):
        self._client = client
        self.state = SolveState()
        self._task: Optional[asyncio.Task] = None
        self._generation = 0

    @property
    def client(self) -> MathSolverClient:
        # Shared client unless one was injected
        return self._client or get_solver_client()

    @property
    def pending(self) -> bool:
        return self._task is not None and not self._task.done()

    def submit(self, formula: str) -> asyncio.Task:
        """
        Start solving formula, superseding any pending request.

        Must be called from a running event loop.

        Raises:
            ValueError: If the formula is blank
        """
        formula = formula.strip()
        if not formula:
            raise ValueError("Formula is required")

        self._generation += 1
        generation = self._generation
        self._abort_pending()

        self.state = SolveState(status=SolveStatus.PENDING, formula=formula)
        logger.info(f"Solve #{generation} submitted: {formula!r}")
        self._task = asyncio.create_task(self._run(generation, formula))
        return self._task

    def cancel(self) -> bool:
        """Cancel the pending request; returns False if nothing was pending."""
        if not self.pending:
            return False
        self._generation += 1
        self._abort_pending()
        self.state = SolveState(
            status=SolveStatus.CANCELLED,
            formula=self.state.formula,
            error=CANCELLED_MESSAGE
        )
        logger.info("Solve request cancelled")
        return True

    def reset(self) -> None:
        """Drop any result and return to Idle."""
        self._generation += 1
        self._abort_pending()
        self.state = SolveState()

    def close(self) -> None:
        """Teardown: cancel outstanding work without publishing anything."""
        self._generation += 1
        self._abort_pending()

    async def wait(self) -> SolveState:
        """Wait for the newest request to settle and return the live state."""
        while self._task is not None:
            task = self._task
            try:
                await task
            except asyncio.CancelledError:
                # Only swallow the cancellation of the solve task itself
                current = asyncio.current_task()
                if current is not None and current.cancelling():
                    raise
            if task is self._task:
                break
        return self.state

    def _abort_pending(self) -> None:
        if self.pending:
            self._task.cancel()

    async def _run(self, generation: int, formula: str) -> None:
        try:
            solution = await self.client.solve(formula)
        except asyncio.CancelledError:
            logger.debug(f"Solve #{generation} aborted")
            raise
        except MathSolverError as e:
            self._publish(generation, SolveState(
                status=SolveStatus.ERROR, formula=formula, error=e.message, details=e.details
            ))
        except Exception as e:
            logger.exception(f"Math solver error: {e}")
            self._publish(generation, SolveState(
                status=SolveStatus.ERROR, formula=formula, error=UNEXPECTED_MESSAGE
            ))
        else:
            self._publish(generation, SolveState(
                status=SolveStatus.SUCCESS, formula=formula, solution=solution
            ))

    def _publish(self, generation: int, state: SolveState) -> None:
        if generation != self._generation:
            logger.debug(f"Discarding late result of solve #{generation}")
            return
        self.state = state
        logger.info(f"Solve #{generation} finished: {state.status.value}")
