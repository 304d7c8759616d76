"""
Tests for the single in-flight solve orchestrator.
"""

import asyncio
import httpx
import pytest

from services.math_solver import MathSolverError
from services.solve_orchestrator import CANCELLED_MESSAGE, SolveOrchestrator, SolveStatus
from services.solution import Solution
from conftest import solution_for


class GatedClient:
    """Fake solver whose answers are released manually, in any order.

    With ignore_cancel the fake keeps going after cancellation, like a
    transport that does not stop promptly, and answers late.
    """

    def __init__(self, ignore_cancel: bool = False):
        self.gates = {}
        self.errors = {}
        self.ignore_cancel = ignore_cancel

    def _gate(self, formula: str) -> asyncio.Event:
        return self.gates.setdefault(formula, asyncio.Event())

    def release(self, formula: str, error: str = None):
        if error:
            self.errors[formula] = error
        self._gate(formula).set()

    async def solve(self, formula: str) -> Solution:
        gate = self._gate(formula)
        try:
            await gate.wait()
        except asyncio.CancelledError:
            if not self.ignore_cancel:
                raise
            await gate.wait()
        if formula in self.errors:
            raise MathSolverError(self.errors[formula], details="from fake")
        return Solution.model_validate(solution_for(formula))


@pytest.mark.asyncio
async def test_success(make_client):
    orchestrator = SolveOrchestrator(client=make_client())
    orchestrator.submit("  2x + 5 = 11  ")
    assert orchestrator.state.status == SolveStatus.PENDING

    state = await orchestrator.wait()

    assert state.status == SolveStatus.SUCCESS
    assert state.formula == "2x + 5 = 11"
    assert state.solution.original_formula == "2x + 5 = 11"


@pytest.mark.asyncio
async def test_blank_formula_rejected(make_client):
    orchestrator = SolveOrchestrator(client=make_client())
    with pytest.raises(ValueError):
        orchestrator.submit("   ")
    assert orchestrator.state.status == SolveStatus.IDLE


@pytest.mark.asyncio
async def test_error_is_surfaced(make_client):
    def handler(request):
        return httpx.Response(422, json={"error": "Cannot parse formula", "details": "x=="})

    orchestrator = SolveOrchestrator(client=make_client(handler))
    orchestrator.submit("x==")
    state = await orchestrator.wait()

    assert state.status == SolveStatus.ERROR
    assert state.error == "Cannot parse formula"
    assert state.details == "x=="
    assert state.solution is None


@pytest.mark.asyncio
async def test_resubmit_supersedes_first_when_first_resolves_last():
    """Only the second request's outcome is ever applied."""
    client = GatedClient(ignore_cancel=True)
    orchestrator = SolveOrchestrator(client=client)

    first = orchestrator.submit("first")
    await asyncio.sleep(0)
    orchestrator.submit("second")
    await asyncio.sleep(0)

    client.release("second")
    await orchestrator.wait()
    assert orchestrator.state.solution.original_formula == "second"

    client.release("first")
    await asyncio.gather(first, return_exceptions=True)
    assert orchestrator.state.status == SolveStatus.SUCCESS
    assert orchestrator.state.solution.original_formula == "second"


@pytest.mark.asyncio
async def test_resubmit_supersedes_first_when_first_resolves_first():
    client = GatedClient(ignore_cancel=True)
    orchestrator = SolveOrchestrator(client=client)

    first = orchestrator.submit("first")
    await asyncio.sleep(0)
    orchestrator.submit("second")
    await asyncio.sleep(0)

    client.release("first", error="stale failure")
    await asyncio.gather(first, return_exceptions=True)
    assert orchestrator.state.status == SolveStatus.PENDING
    assert orchestrator.state.formula == "second"

    client.release("second")
    state = await orchestrator.wait()
    assert state.status == SolveStatus.SUCCESS
    assert state.error is None


@pytest.mark.asyncio
async def test_superseded_request_is_cancelled():
    client = GatedClient()
    orchestrator = SolveOrchestrator(client=client)

    first = orchestrator.submit("first")
    await asyncio.sleep(0)
    orchestrator.submit("second")

    with pytest.raises(asyncio.CancelledError):
        await first
    assert orchestrator.state.status == SolveStatus.PENDING


@pytest.mark.asyncio
async def test_explicit_cancel_without_replacement():
    """Cancelling with nothing else in flight shows the cancelled state."""
    client = GatedClient()
    orchestrator = SolveOrchestrator(client=client)

    orchestrator.submit("x^2 = 4")
    await asyncio.sleep(0)
    assert orchestrator.cancel() is True

    state = await orchestrator.wait()
    assert state.status == SolveStatus.CANCELLED
    assert state.error == CANCELLED_MESSAGE
    assert orchestrator.cancel() is False


@pytest.mark.asyncio
async def test_late_answer_after_cancel_is_discarded():
    client = GatedClient(ignore_cancel=True)
    orchestrator = SolveOrchestrator(client=client)

    task = orchestrator.submit("x")
    await asyncio.sleep(0)
    orchestrator.cancel()
    client.release("x")
    await asyncio.gather(task, return_exceptions=True)

    assert orchestrator.state.status == SolveStatus.CANCELLED
    assert orchestrator.state.solution is None


@pytest.mark.asyncio
async def test_close_and_reset():
    client = GatedClient()
    orchestrator = SolveOrchestrator(client=client)

    task = orchestrator.submit("x")
    await asyncio.sleep(0)
    orchestrator.close()
    await asyncio.gather(task, return_exceptions=True)
    assert task.cancelled()

    orchestrator.reset()
    assert orchestrator.state.status == SolveStatus.IDLE
