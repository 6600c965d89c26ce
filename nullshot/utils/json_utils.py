"""
Robust JSON extraction utilities for LLM responses.
"""

from __future__ import annotations

import json
import re
from typing import Any

from ..errors import UnparsableResponse

_FENCED = re.compile(r"```(?:json)?\s*\n?([\s\S]*?)\n?```", re.IGNORECASE)
_GREEDY_OBJECT = re.compile(r"\{[\s\S]*\}")
_TRAILING_COMMA = re.compile(r",\s*([}\]])")


def extract_json_object(text: str) -> Any:
    """Extract a JSON value from arbitrary model output.

    Strategies, first success wins:
    - the whole text as JSON
    - the interior of a fenced code block ```json ... ```
    - the greedy span from the first '{' to the last '}' (retried once with
      trailing commas removed)

    The result is not checked against any schema.

    Raises:
        UnparsableResponse: no strategy produced valid JSON
    """
    if not isinstance(text, str):
        raise UnparsableResponse(f"Expected text, got {type(text).__name__}")

    try:
        return json.loads(text)
    except ValueError:
        pass

    m = _FENCED.search(text)
    if m:
        try:
            return json.loads(m.group(1).strip())
        except ValueError:
            pass

    m = _GREEDY_OBJECT.search(text)
    if m:
        cand = m.group(0)
        try:
            return json.loads(cand)
        except ValueError:
            pass
        try:
            return json.loads(_TRAILING_COMMA.sub(r"\1", cand))
        except ValueError:
            pass

    preview = text.strip()[:80]
    raise UnparsableResponse(f"Could not parse JSON from response: {preview!r}")
