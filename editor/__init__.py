"""Editor package initialization."""

from . import buffer
from . import commands
from . import suggestions
from . import palette
from . import recognizer
from . import preview

__all__ = ['buffer', 'commands', 'suggestions', 'palette', 'recognizer', 'preview']
