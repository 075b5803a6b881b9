"""Identifier generation and validation.

Generated ids are random UUID4 strings. Callers may also supply their
own ids (``n1``, ``edge:a-b`` style keys are common in fixtures and
imports) as long as they match :data:`ID_PATTERN`.

INVARIANT: IDs are permanent. Once a row is written its id never changes.
"""

from __future__ import annotations

import re
import uuid

ID_PATTERN: re.Pattern[str] = re.compile(r"^[A-Za-z0-9][A-Za-z0-9_.:-]{0,127}$")


def generate_id() -> str:
    """Return a fresh random identifier."""
    return str(uuid.uuid4())


def validate_id(value: str) -> bool:
    """Check whether *value* is an acceptable node, edge, or instance id."""
    return ID_PATTERN.fullmatch(value) is not None
