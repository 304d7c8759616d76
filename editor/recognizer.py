"""
Math Solver Editor - Slash-Command Recognizer
Key handling for the LaTeX editor: slash-command expansion, smart
bracket pairs, super/subscript wrapping and indentation.
"""

import re
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional

from config import settings
from editor.buffer import Buffer, TextBufferController
from editor.commands import COMMAND_TEMPLATES, Template, UnknownCommandError, first_slot
from editor.suggestions import suggest

logger = logging.getLogger(__name__)

# "/name" immediately left of the caret
COMPOSING_PATTERN = re.compile(r"/([A-Za-z0-9_]*)\Z")

TRIGGER_KEYS = (" ", "Enter", "Tab", ")")

BRACKET_PAIRS = {"(": ")", "[": "]", "{": "}"}

SCRIPT_WRAPS = {
    "^": ("{}^{", "}"),
    "_": ("{}_{", "}"),
}

# Fallthrough text for named keys
KEY_TEXT = {"Enter": "\n"}


class KeyAction(str, Enum):
    EXPANDED = "expanded"
    WRAPPED = "wrapped"
    INDENTED = "indented"
    INSERTED = "inserted"
    DELETED = "deleted"
    MOVED = "moved"
    IGNORED = "ignored"


@dataclass
class KeyOutcome:
    """Result of feeding one key press to the recognizer."""
    action: KeyAction
    buffer: Buffer
    command: Optional[str] = None


class SlashCommandRecognizer:
    """Turns key presses into buffer edits.

    The recognizer is Idle unless the text left of the selection ends
    in "/" plus identifier characters; that suffix is the active query.
    """

    def __init__(
        self,
        controller: TextBufferController,
        templates: Optional[Dict[str, Template]] = None,
        indent_token: Optional[str] = None
    ):
        self.controller = controller
        self.templates = templates if templates is not None else COMMAND_TEMPLATES
        self.indent_token = settings.indent_token if indent_token is None else indent_token

    def _match(self) -> Optional[re.Match]:
        buf = self.controller.buffer
        return COMPOSING_PATTERN.search(buf.text, 0, buf.selection_start)

    @property
    def query(self) -> Optional[str]:
        """Active slash query, or None when Idle."""
        match = self._match()
        return match.group(1) if match else None

    @property
    def composing(self) -> bool:
        return self.query is not None

    def suggestions(self) -> List[str]:
        query = self.query
        if not query:
            return []
        return suggest(query, commands=list(self.templates))

    def handle_key(self, key: str) -> KeyOutcome:
        """
        Apply a single key press.

        Args:
            key: A printable character or a named key ("Enter", "Tab",
                "Backspace", "Delete", "ArrowLeft", "ArrowRight")

        Returns:
            KeyOutcome describing what happened and the resulting buffer
        """
        ctl = self.controller
        query = self.query

        if key in TRIGGER_KEYS and query in self.templates:
            buf = self._expand(query)
            return KeyOutcome(KeyAction.EXPANDED, buf, command=query)

        if key in BRACKET_PAIRS:
            return KeyOutcome(KeyAction.WRAPPED, ctl.wrap_selection(key, BRACKET_PAIRS[key]))

        if key in SCRIPT_WRAPS:
            prefix, suffix = SCRIPT_WRAPS[key]
            return KeyOutcome(KeyAction.WRAPPED, ctl.wrap_selection(prefix, suffix))

        if key == "Tab":
            return KeyOutcome(KeyAction.INDENTED, ctl.insert_at_caret(self.indent_token))

        if key == "Backspace":
            return KeyOutcome(KeyAction.DELETED, ctl.delete_backward())
        if key == "Delete":
            return KeyOutcome(KeyAction.DELETED, ctl.delete_forward())
        if key == "ArrowLeft":
            return KeyOutcome(KeyAction.MOVED, ctl.move_caret(-1))
        if key == "ArrowRight":
            return KeyOutcome(KeyAction.MOVED, ctl.move_caret(1))

        text = KEY_TEXT.get(key, key if len(key) == 1 else None)
        if text is None:
            return KeyOutcome(KeyAction.IGNORED, ctl.buffer)
        return KeyOutcome(KeyAction.INSERTED, ctl.insert_at_caret(text))

    def pick(self, name: str) -> Buffer:
        """Expand an explicitly chosen command, whatever the typed query."""
        if name not in self.templates:
            raise UnknownCommandError(name)
        return self._expand(name)

    def _expand(self, name: str) -> Buffer:
        ctl = self.controller
        buf = ctl.buffer
        match = self._match()
        start = match.start() if match else buf.selection_start

        snippet = self.templates[name](buf.selected_text)
        logger.debug(f"Expanding /{name} at {start}")
        return ctl.replace_range(start, buf.selection_end, snippet, caret=first_slot(snippet))
