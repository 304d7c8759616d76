"""
Math Solver Editor - Symbol Palette
Categorised one-click symbol and template insertions.
"""

from dataclasses import dataclass
from typing import List

from editor.buffer import Buffer, TextBufferController
from editor.commands import render_command


@dataclass(frozen=True)
class PaletteItem:
    """A clickable palette entry."""
    label: str
    latex: str


@dataclass(frozen=True)
class PaletteCategory:
    """A named tab of palette entries."""
    category: str
    items: List[PaletteItem]


def _cmd(label: str, name: str, selected: str = "") -> PaletteItem:
    return PaletteItem(label=label, latex=render_command(name, selected))


PALETTE: List[PaletteCategory] = [
    PaletteCategory("Basic", [
        PaletteItem("=", "="),
        PaletteItem("+", "+"),
        PaletteItem("−", "-"),
        PaletteItem("×", r"\cdot"),
        PaletteItem("÷", r"\div"),
        PaletteItem("±", r"\pm"),
        PaletteItem("≠", r"\ne"),
        PaletteItem("≈", r"\approx"),
        PaletteItem("≤", r"\le"),
        PaletteItem("≥", r"\ge"),
    ]),
    PaletteCategory("Structures", [
        _cmd("a/b", 'frac'),
        _cmd("√", 'sqrt'),
        _cmd("^", 'pow'),
        _cmd("_", 'sub'),
        _cmd("|x|", 'abs'),
        _cmd("( )", 'paren'),
        _cmd("[ ]", 'bracket'),
        _cmd("{ }", 'brace'),
    ]),
    PaletteCategory("Calc", [
        _cmd("∫", 'int'),
        _cmd("∑", 'sum'),
        _cmd("∏", 'prod'),
        _cmd("lim", 'lim'),
        _cmd("d/dx", 'diff'),
        _cmd("∂/∂x", 'pdiff'),
    ]),
    PaletteCategory("Greek & Const", [
        PaletteItem("π", r"\pi"),
        PaletteItem("e", "e"),
        PaletteItem("∞", r"\infty"),
        PaletteItem("θ", r"\theta"),
        PaletteItem("λ", r"\lambda"),
        PaletteItem("φ", r"\varphi"),
    ]),
    PaletteCategory("Trig & Log", [
        _cmd("sin", 'sin'),
        _cmd("cos", 'cos'),
        _cmd("tan", 'tan'),
        _cmd("ln", 'ln'),
        _cmd("log", 'log'),
        _cmd("log_b", 'logb'),
    ]),
    PaletteCategory("Vectors & Matrix", [
        _cmd("→v", 'vec', "v"),
        _cmd("x̂", 'hat', "x"),
        _cmd("x̄", 'overline', "x"),
        _cmd("[2×2]", 'matrix2'),
        _cmd("[3×3]", 'matrix3'),
    ]),
]


def find_item(category: str, label: str) -> PaletteItem:
    """Look up a palette entry; raises KeyError when absent."""
    for cat in PALETTE:
        if cat.category != category:
            continue
        for item in cat.items:
            if item.label == label:
                return item
    raise KeyError(f"No palette item {label!r} in category {category!r}")


def apply_item(controller: TextBufferController, item: PaletteItem) -> Buffer:
    # Plain insertion: the selection is replaced, never wrapped
    return controller.insert_at_caret(item.latex)
