"""Result envelope returned by every graph operation.

Services never raise for expected failures such as a missing node or a
duplicate id. They return ``ok=False`` with a :class:`ServiceError`
whose ``code`` is stable enough for scripts to branch on (``NOT_FOUND``,
``DUPLICATE_ID``, ``MISSING_REFERENCE``, ``CONCURRENT_WRITE``, ...).
The CLI prints the envelope as Rich text, bare ids, or JSON.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class ServiceError(BaseModel):
    """Why an operation was refused: machine code, human message, context."""

    model_config = {"frozen": True}

    code: str
    message: str
    detail: dict[str, Any] = Field(default_factory=dict)


class ServiceResult(BaseModel):
    """Outcome of one node or edge operation.

    Attributes:
        ok: False when the operation changed nothing.
        op: Operation name, e.g. ``"delete_node"`` or ``"outgoing"``;
            the renderers dispatch on it.
        data: Rows or fields the operation produced.
        warnings: Things the caller should know even though it succeeded,
            such as a value dropped because history is off.
        error: Set exactly when ``ok`` is False.
        meta: Extra context shown only in verbose output.
    """

    model_config = {"frozen": True}

    ok: bool
    op: str
    data: dict[str, Any] = Field(default_factory=dict)
    warnings: list[str] = Field(default_factory=list)
    error: ServiceError | None = None
    meta: dict[str, Any] | None = None
