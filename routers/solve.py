"""
Math Solver Editor - Solve Router
Proxy endpoint forwarding formulas to the external math solver.
"""

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field
import logging

from services.math_solver import MathSolverError, get_solver_client

logger = logging.getLogger(__name__)
router = APIRouter()

# Proxy status for each solver error kind; 'http' keeps the upstream status
ERROR_STATUS = {
    'network': 503,
    'format': 502,
}


class SolveRequest(BaseModel):
    """Request model for solving a formula."""
    formula: str = Field("", description="Expression or equation to solve")


def solver_http_error(error: MathSolverError) -> HTTPException:
    """Translate a solver failure into an HTTP error with {error, details}."""
    status = ERROR_STATUS.get(error.kind) or error.status_code or 500
    return HTTPException(status_code=status, detail=error.to_dict())


@router.post("/solve")
async def solve_formula(request: SolveRequest):
    """
    Solve a formula with the external backend.

    Returns the solver's solution (camelCase fields) unchanged in shape.
    Errors come back as `{"detail": {"error": ..., "details": ...}}`.
    """
    formula = request.formula.strip()
    if not formula:
        raise HTTPException(status_code=400, detail={"error": "Formula is required"})

    try:
        client = get_solver_client()
        solution = await client.solve(formula)
        return solution.model_dump(by_alias=True)

    except MathSolverError as e:
        logger.error(f"Solve failed: {e.message}")
        raise solver_http_error(e)
    except Exception as e:
        logger.error(f"Solve proxy error: {e}")
        raise HTTPException(
            status_code=500,
            detail={"error": "Internal server error", "details": str(e)}
        )
