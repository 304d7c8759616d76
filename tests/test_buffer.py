"""
Tests for the text buffer controller.
"""

import pytest
from editor.buffer import Buffer, TextBufferController


@pytest.fixture
def controller():
    return TextBufferController(Buffer.at_end("x+1"))


def test_invalid_selection_rejected():
    """Selections must lie inside the text with start <= end."""
    with pytest.raises(ValueError):
        Buffer(text="abc", selection_start=2, selection_end=1)
    with pytest.raises(ValueError):
        Buffer(text="abc", selection_start=0, selection_end=4)


def test_insert_at_caret(controller):
    """Insertion moves the caret after the inserted text."""
    buf = controller.insert_at_caret("=2")

    assert buf.text == "x+1=2"
    assert buf.caret == 5
    assert not buf.has_selection


def test_insert_replaces_selection(controller):
    """An active selection is replaced by the inserted text."""
    controller.select(0, 1)
    buf = controller.insert_at_caret("y")

    assert buf.text == "y+1"
    assert buf.caret == 1


def test_wrap_selection(controller):
    """Wrapping a selection puts the caret after the suffix."""
    controller.select(0, 3)
    buf = controller.wrap_selection("(", ")")

    assert buf.text == "(x+1)"
    assert buf.caret == 5


def test_wrap_empty_selection_places_caret_inside():
    """Wrapping nothing leaves the caret between prefix and suffix."""
    ctl = TextBufferController(Buffer.at_end("a"))
    buf = ctl.wrap_selection("{}^{", "}")

    assert buf.text == "a{}^{}"
    assert buf.caret == len("a{}^{")


def test_replace_range_bounds(controller):
    """Out-of-range replacements are rejected."""
    with pytest.raises(ValueError):
        controller.replace_range(2, 10, "z")


def test_replace_range_with_caret(controller):
    buf = controller.replace_range(0, 3, r"\frac{}{}", caret=6)

    assert buf.text == r"\frac{}{}"
    assert buf.caret == 6


def test_listeners_notified_on_every_mutation(controller):
    """Each edit emits the new value; caret moves do not."""
    seen = []
    controller.subscribe(seen.append)

    controller.insert_at_caret("=")
    controller.select(0)
    controller.wrap_selection("[", "]")
    controller.clear()

    assert seen == ["x+1=", "[]x+1=", ""]


def test_delete_and_move(controller):
    """Backspace, delete and caret movement stay inside the text."""
    controller.delete_backward()
    assert controller.text == "x+"

    controller.move_caret(-5)
    assert controller.buffer.caret == 0

    controller.delete_backward()
    assert controller.text == "x+"

    controller.delete_forward()
    assert controller.text == "+"

    controller.move_caret(10)
    assert controller.buffer.caret == 1


def test_set_text_puts_caret_at_end(controller):
    buf = controller.set_text("2x + 5 = 11")

    assert buf.caret == len("2x + 5 = 11")
