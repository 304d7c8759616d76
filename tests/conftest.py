"""
Shared fixtures: a fake solver backend built on httpx.MockTransport.
"""

import json
import httpx
import pytest

from services.math_solver import MathSolverClient

SOLUTION = {
    "originalFormula": "2x + 5 = 11",
    "parsedFormula": "2*x + 5 = 11",
    "steps": [
        {"step": 1, "description": "Subtract 5", "expression": "2x = 6", "explanation": "Both sides"},
        {"step": 2, "description": "Divide by 2", "expression": "x = 3", "explanation": ""},
    ],
    "finalAnswer": 3,
    "verification": [
        {"solution": "3", "leftSide": "11", "rightSide": "11", "isCorrect": True},
    ],
    "explanation": "Linear equation",
    "type": "equation",
}


def solution_for(formula: str) -> dict:
    return dict(SOLUTION, originalFormula=formula)


def echo_handler(request: httpx.Request) -> httpx.Response:
    """Answers every formula with a canned solution."""
    formula = json.loads(request.content)["formula"]
    return httpx.Response(200, json=solution_for(formula))


@pytest.fixture
def make_client():
    def _make(handler=echo_handler) -> MathSolverClient:
        return MathSolverClient(url="http://solver.test/api/math/solve", transport=httpx.MockTransport(handler))
    return _make
