"""
Math Solver Editor - Text Buffer
Owns the authored LaTeX text and the caret/selection of one editor.
"""

import logging
from dataclasses import dataclass, replace
from typing import Callable, List, Optional

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Buffer:
    """Authored text plus a selection range [selection_start, selection_end)."""
    text: str = ""
    selection_start: int = 0
    selection_end: int = 0

    def __post_init__(self):
        if not 0 <= self.selection_start <= self.selection_end <= len(self.text):
            raise ValueError(
                f"Invalid selection [{self.selection_start}, {self.selection_end}) "
                f"for text of length {len(self.text)}"
            )

    @property
    def caret(self) -> int:
        return self.selection_end

    @property
    def has_selection(self) -> bool:
        return self.selection_end > self.selection_start

    @property
    def selected_text(self) -> str:
        return self.text[self.selection_start:self.selection_end]

    @classmethod
    def at_end(cls, text: str) -> 'Buffer':
        """Buffer with the caret collapsed after the last character."""
        return cls(text=text, selection_start=len(text), selection_end=len(text))


ChangeListener = Callable[[str], None]


class TextBufferController:
    """Applies edits to a Buffer and notifies listeners of every new value.

    All edits go through replace_range; insert and wrap are thin
    wrappers around it.
    """

    def __init__(self, buffer: Optional[Buffer] = None):
        self._buffer = buffer or Buffer()
        self._listeners: List[ChangeListener] = []

    @property
    def buffer(self) -> Buffer:
        return self._buffer

    @property
    def text(self) -> str:
        return self._buffer.text

    def subscribe(self, listener: ChangeListener) -> None:
        """Register a value-changed callback."""
        self._listeners.append(listener)

    def _commit(self, buffer: Buffer) -> Buffer:
        self._buffer = buffer
        for listener in self._listeners:
            listener(buffer.text)
        return buffer

    def select(self, start: int, end: Optional[int] = None) -> Buffer:
        """Move the caret, or select [start, end). Does not notify."""
        end = start if end is None else end
        self._buffer = replace(self._buffer, selection_start=start, selection_end=end)
        return self._buffer

    def move_caret(self, delta: int) -> Buffer:
        """Collapse the selection and move the caret by delta, clamped to the text."""
        buf = self._buffer
        if buf.has_selection:
            pos = buf.selection_start if delta < 0 else buf.selection_end
        else:
            pos = max(0, min(len(buf.text), buf.caret + delta))
        return self.select(pos)

    def replace_range(
        self,
        start: int,
        end: int,
        text: str,
        caret: Optional[int] = None
    ) -> Buffer:
        """
        Replace text[start:end] with text.

        Args:
            start: First replaced index
            end: Index after the last replaced character
            text: Replacement text
            caret: Caret offset inside the replacement (defaults to its end)

        Returns:
            The new Buffer with a collapsed selection
        """
        current = self._buffer.text
        if not 0 <= start <= end <= len(current):
            raise ValueError(f"Invalid range [{start}, {end}) for text of length {len(current)}")

        offset = len(text) if caret is None else max(0, min(len(text), caret))
        pos = start + offset
        new_text = current[:start] + text + current[end:]
        return self._commit(Buffer(text=new_text, selection_start=pos, selection_end=pos))

    def insert_at_caret(self, text: str) -> Buffer:
        """Insert text over the selection and leave the caret after it."""
        buf = self._buffer
        return self.replace_range(buf.selection_start, buf.selection_end, text)

    def wrap_selection(self, prefix: str, suffix: str) -> Buffer:
        """Surround the selection with prefix and suffix.

        An empty selection leaves the caret between prefix and suffix,
        otherwise the caret lands after the suffix.
        """
        buf = self._buffer
        selected = buf.selected_text
        wrapped = f"{prefix}{selected}{suffix}"
        caret = len(prefix) if not selected else len(wrapped)
        return self.replace_range(buf.selection_start, buf.selection_end, wrapped, caret=caret)

    def delete_backward(self) -> Buffer:
        buf = self._buffer
        if buf.has_selection:
            return self.replace_range(buf.selection_start, buf.selection_end, "")
        if buf.caret == 0:
            return buf
        return self.replace_range(buf.caret - 1, buf.caret, "")

    def delete_forward(self) -> Buffer:
        buf = self._buffer
        if buf.has_selection:
            return self.replace_range(buf.selection_start, buf.selection_end, "")
        if buf.caret == len(buf.text):
            return buf
        return self.replace_range(buf.caret, buf.caret + 1, "")

    def set_text(self, text: str) -> Buffer:
        """Replace the whole value (host-driven), caret at the end."""
        return self._commit(Buffer.at_end(text))

    def clear(self) -> Buffer:
        logger.debug("Clearing buffer")
        return self.set_text("")
