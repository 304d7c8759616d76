"""Services package initialization."""

from . import solution
from . import math_solver
from . import solve_orchestrator
from . import session_store

__all__ = ['solution', 'math_solver', 'solve_orchestrator', 'session_store']
