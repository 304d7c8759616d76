"""
Math Solver Editor - Suggestion List
Prefix matching of slash-command names for the command palette.
"""

from typing import Iterable, List, Optional

from config import settings
from editor.commands import ALL_COMMANDS


def suggest(
    query: str,
    limit: Optional[int] = None,
    commands: Iterable[str] = ALL_COMMANDS
) -> List[str]:
    """
    Command names starting with query, in declaration order.

    Args:
        query: Text typed after the slash
        limit: Maximum number of names (defaults to settings.suggestion_limit)
        commands: Names to search, in ranking order

    Returns:
        Matching names, empty when the query is empty
    """
    if not query:
        return []

    limit = settings.suggestion_limit if limit is None else limit
    prefix = query.lower()
    return [name for name in commands if name.startswith(prefix)][:limit]
