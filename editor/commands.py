"""
Math Solver Editor - Command Table
Slash-command names mapped to LaTeX snippet templates.
"""

import re
from typing import Callable, Dict, List, Optional

Template = Callable[..., str]


class UnknownCommandError(KeyError):
    """Raised when a command name is not in the command table."""

    def __init__(self, name: str):
        super().__init__(name)
        self.name = name

    def __str__(self) -> str:
        return f"Unknown command: /{self.name}"


def _matrix(size: int) -> str:
    row = " & ".join(["{}"] * size)
    rows = r" \\ ".join([row] * size)
    return rf"\begin{{bmatrix}} {rows} \end{{bmatrix}}"


# Declaration order is the ranking order of the suggestion list.
# Empty braces {} are slots the user types into next.
COMMAND_TEMPLATES: Dict[str, Template] = {
    # Arithmetic / structures
    'frac': lambda sel="": rf"\frac{{{sel}}}{{}}",
    'sqrt': lambda sel="": rf"\sqrt{{{sel}}}",
    'cbrt': lambda sel="": rf"\sqrt[3]{{{sel}}}",
    'nthroot': lambda sel="": rf"\sqrt[]{{{sel}}}",
    'pow': lambda sel="": rf"{{{sel}}}^{{}}",
    'sub': lambda sel="": rf"{{{sel}}}_{{}}",
    'abs': lambda sel="": rf"\left|{sel}\right|",
    'floor': lambda sel="": rf"\left\lfloor {sel} \right\rfloor",
    'ceil': lambda sel="": rf"\left\lceil {sel} \right\rceil",
    'paren': lambda sel="": rf"\left({sel}\right)",
    'bracket': lambda sel="": rf"\left[{sel}\right]",
    'brace': lambda sel="": rf"\left\{{{sel}\right\}}",

    # Calculus / sums
    'int': lambda sel="": rf"\int_{{}}^{{}} {sel} \, dx",
    'dint': lambda sel="": rf"\int\!\int_{{}}^{{}} {sel} \, dx \, dy",
    'sum': lambda sel="": rf"\sum_{{n={{}}}}^{{}} {sel}",
    'prod': lambda sel="": rf"\prod_{{n={{}}}}^{{}} {sel}",
    'lim': lambda sel="": rf"\lim_{{x \to {{}}}} {sel}",
    'diff': lambda sel="": rf"\frac{{d}}{{dx}}\left({sel}\right)",
    'pdiff': lambda sel="": rf"\frac{{\partial}}{{\partial x}}\left({sel}\right)",

    # Trig / logs
    'sin': lambda sel="": rf"\sin\left({sel}\right)",
    'cos': lambda sel="": rf"\cos\left({sel}\right)",
    'tan': lambda sel="": rf"\tan\left({sel}\right)",
    'ln': lambda sel="": rf"\ln\left({sel}\right)",
    'log': lambda sel="": rf"\log\left({sel}\right)",
    'logb': lambda sel="": rf"\log_{{}}\left({sel}\right)",

    # Vectors / matrices
    'vec': lambda sel="": rf"\vec{{{sel}}}",
    'hat': lambda sel="": rf"\hat{{{sel}}}",
    'overline': lambda sel="": rf"\overline{{{sel}}}",
    'matrix2': lambda sel="": _matrix(2),
    'matrix3': lambda sel="": _matrix(3),

    # Text
    'text': lambda sel="": rf"\text{{{sel}}}",
}

ALL_COMMANDS: List[str] = list(COMMAND_TEMPLATES)

# An empty group "{}" or an empty \left...\right pair
_SLOT_PATTERN = re.compile(r"\{(?=\})|\\left(?:[(\[|]|\\\{|\\lfloor |\\lceil )(?= ?\\right)")


def get_template(name: str) -> Template:
    """Look up a template by exact command name."""
    try:
        return COMMAND_TEMPLATES[name]
    except KeyError:
        raise UnknownCommandError(name) from None


def render_command(name: str, selected: str = "") -> str:
    """Produce the snippet for a command, embedding the selected text."""
    return get_template(name)(selected)


def first_slot(snippet: str) -> Optional[int]:
    """Offset of the first empty slot in a snippet, or None if it has none."""
    match = _SLOT_PATTERN.search(snippet)
    return match.end() if match else None
