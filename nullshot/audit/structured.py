"""Shared remote-call plumbing: text -> JSON -> validated model."""
from __future__ import annotations

import logging
from typing import Any, Protocol, TypeVar

from pydantic import BaseModel, ValidationError

from ..errors import NoResponseContent, SchemaMismatch
from ..utils.json_utils import extract_json_object

logger = logging.getLogger(__name__)

T = TypeVar('T', bound=BaseModel)


class TextClient(Protocol):
    """Anything with the ``raw`` call of ``UnifiedLLMClient``."""

    def raw(self, *, system: str, user: str) -> str: ...


def request_json(client: TextClient, *, system: str, user: str) -> Any:
    """Call the model and recover a JSON value from its answer.

    Raises:
        NoResponseContent: the model returned empty text
        UnparsableResponse: no JSON could be extracted
    """
    text = client.raw(system=system, user=user)
    if not text or not text.strip():
        raise NoResponseContent("Model returned no content")
    return extract_json_object(text)


def decode(schema: type[T], data: Any) -> T:
    """Validate parsed model output against ``schema``.

    Raises:
        SchemaMismatch: required fields are missing or mistyped
    """
    if not isinstance(data, dict):
        raise SchemaMismatch(f"{schema.__name__}: expected a JSON object, got {type(data).__name__}")
    try:
        return schema.model_validate(data)
    except ValidationError as e:
        problems = "; ".join(
            f"{'.'.join(str(p) for p in err['loc']) or '<root>'}: {err['msg']}"
            for err in e.errors()
        )
        logger.debug("Schema mismatch for %s: %s", schema.__name__, problems)
        raise SchemaMismatch(f"{schema.__name__}: {problems}") from e
