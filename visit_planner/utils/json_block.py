from __future__ import annotations

import json
from typing import Any

from visit_planner.config.logger import get_logger

_logger = get_logger(__name__)


def extract_json_block(text: str | None) -> str | None:
    """Return the first balanced ``{...}`` span in ``text``, or ``None``.

    Scanning starts at the first ``{`` and stops as soon as the nesting depth
    returns to zero, so only the first top-level object is returned. Braces
    inside JSON string literals are counted like any other brace.
    """
    if not text:
        return None
    start = text.find("{")
    if start == -1:
        return None

    depth = 0
    for index in range(start, len(text)):
        char = text[index]
        if char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
            if depth == 0:
                return text[start : index + 1]
    return None


def _reject_constant(name: str) -> Any:
    raise ValueError(f"non-standard JSON constant: {name}")


def parse_json_block(text: str | None) -> dict[str, Any] | None:
    block = extract_json_block(text)
    if block is None:
        return None
    try:
        return json.loads(block, parse_constant=_reject_constant)
    except (ValueError, RecursionError) as exc:
        _logger.warning("[json_block] JSON parse failed: %s", exc)
        return None
