"""Router package initialization."""

from . import authoring
from . import sessions
from . import solve

__all__ = ['authoring', 'sessions', 'solve']
