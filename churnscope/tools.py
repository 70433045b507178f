"""
Tool handlers.

Each handler validates and defaults its arguments, runs one analysis and
returns a ToolResult: either data, or an error flag with a readable
message. Failures never yield partial data.
"""
import logging
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Optional

from churnscope.analyzer import language_stats
from churnscope.exceptions import ChurnscopeError, InvalidInput
from churnscope.hotspots import find_hotspots

logger = logging.getLogger(__name__)


@dataclass
class ToolResult:
    """Outcome of a tool call."""

    is_error: bool = False
    message: str = ""
    data: dict[str, Any] = field(default_factory=dict)


def error_result(message: str) -> ToolResult:
    return ToolResult(is_error=True, message=message)


def handle_hotspot(path: str = "", since: str = "", limit: int = 0) -> ToolResult:
    """Rank hotspots; data is {"hotspots": [...]}."""
    try:
        hotspots = find_hotspots(path or ".", since=since or None, limit=limit)
    except ChurnscopeError as e:
        logger.debug("hotspot request failed: %s", e)
        return error_result(str(e))

    return ToolResult(data={"hotspots": [h.to_dict() for h in hotspots]})


def handle_stats(
    path: str = "",
    cocomo: Optional[bool] = None,
    complexity: Optional[bool] = None,
    exclude_dir: Optional[list[str]] = None,
    exclude_ext: Optional[list[str]] = None,
    include_ext: Optional[list[str]] = None,
) -> ToolResult:
    """Summarize a directory per language. Unset flags default to enabled."""
    root = Path(path or ".").resolve()
    try:
        if not root.is_dir():
            raise InvalidInput(f"invalid path: not a directory: {root}")
        report = language_stats(
            root,
            cocomo=cocomo is None or cocomo,
            complexity=complexity is None or complexity,
            exclude_dirs=exclude_dir,
            exclude_extensions=exclude_ext,
            include_extensions=include_ext,
        )
    except ChurnscopeError as e:
        logger.debug("stats request failed: %s", e)
        return error_result(str(e))

    return ToolResult(data=asdict(report))
