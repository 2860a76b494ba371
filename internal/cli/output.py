"""
Output rendering for Mapradar CLI: pretty JSON results and coloured error lines.
"""

import json
import os
from typing import Any, Dict, TextIO

from lib.mapradar import SerializationError

ERROR_LABEL = "Error:"
# Bold red
ANSI_ERROR_STYLE = "\033[1;31m"
ANSI_RESET = "\033[0m"


def useColor(stream: TextIO) -> bool:
    """Colour only interactive streams, and never when NO_COLOR is set."""
    if os.getenv("NO_COLOR"):
        return False
    isatty = getattr(stream, "isatty", None)
    return bool(isatty and isatty())


def formatError(message: str, stream: TextIO) -> str:
    """Build `Error: <message>` line, with bold red label if stream supports it"""
    label = ERROR_LABEL
    if useColor(stream):
        label = f"{ANSI_ERROR_STYLE}{ERROR_LABEL}{ANSI_RESET}"
    return f"{label} {message}"


def printError(message: str, stream: TextIO) -> None:
    print(formatError(message, stream), file=stream)


def renderJson(data: Dict[str, Any]) -> str:
    """Pretty-print data as JSON.

    Raises:
        SerializationError: If data contains NaN/Infinity or non-JSON types
    """
    try:
        return json.dumps(data, indent=2, ensure_ascii=False, allow_nan=False)
    except (TypeError, ValueError) as e:
        raise SerializationError(f"Failed to serialize result: {e}")
