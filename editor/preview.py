"""
Math Solver Editor - Preview Renderer
Renders the buffer through an injected LaTeX renderer, falling back to
the raw text whenever rendering fails.
"""

import re
import asyncio
import functools
import inspect
import logging
from dataclasses import dataclass
from typing import Any, Callable, Optional

from latex2mathml.converter import convert as latex2mathml_convert

from config import settings

logger = logging.getLogger(__name__)

RenderFunction = Callable[[str, bool], Any]


@dataclass
class PreviewResult:
    """What the preview pane shows for one buffer state."""
    raw: str                  # Buffer text as typed
    html: Optional[str]       # Rendered markup, None on failure
    ticket: int = 0           # Issuance order of the request

    @property
    def fallback(self) -> bool:
        return self.html is None


def clean_latex(latex: str) -> str:
    """Normalise whitespace before rendering."""
    clean = latex.replace("\n", " ")
    clean = re.sub(r"\s+", " ", clean)
    clean = clean.replace("\\,", " ")
    return clean


def _is_async(fn: Callable) -> bool:
    """True for coroutine functions, async callables and partials of either."""
    while isinstance(fn, functools.partial):
        fn = fn.func
    if inspect.iscoroutinefunction(fn):
        return True
    return inspect.iscoroutinefunction(getattr(fn, "__call__", None))


def render_mathml(latex: str, display_mode: bool = True) -> str:
    """Default renderer: LaTeX to MathML markup."""
    return latex2mathml_convert(latex, display="block" if display_mode else "inline")


class PreviewRenderer:
    """Last-writer-wins preview.

    Every request takes a ticket; a result is applied to `current` only
    if no newer request has been issued since, whatever order renders
    complete in.
    """

    def __init__(
        self,
        render: Optional[RenderFunction] = None,
        display_mode: Optional[bool] = None
    ):
        self._render = render or render_mathml
        self.display_mode = settings.preview_display_mode if display_mode is None else display_mode
        self._issued = 0
        self.current: Optional[PreviewResult] = None

    @property
    def issued(self) -> int:
        return self._issued

    async def _call_renderer(self, latex: str) -> Any:
        if _is_async(self._render):
            return await self._render(latex, self.display_mode)
        # Run in thread pool to not block event loop
        loop = asyncio.get_running_loop()
        result = await loop.run_in_executor(None, self._render, latex, self.display_mode)
        if inspect.isawaitable(result):
            result = await result
        return result

    async def render_once(self, latex: str) -> Optional[str]:
        """Render without touching `current`; None means use the fallback."""
        source = clean_latex(latex) or "\\,"
        try:
            html = await self._call_renderer(source)
        except Exception as e:
            logger.debug(f"Preview render failed, showing raw text: {e}")
            return None
        return html if html else None

    async def request(self, latex: str) -> PreviewResult:
        """
        Render latex and publish it if it is still the newest request.

        Returns:
            The PreviewResult for this request (published or not)
        """
        self._issued += 1
        ticket = self._issued

        html = await self.render_once(latex)
        result = PreviewResult(raw=latex, html=html, ticket=ticket)

        if ticket == self._issued:
            self.current = result
        else:
            logger.debug(f"Discarding stale preview #{ticket} (latest #{self._issued})")
        return result
