"""Classification of constraint violations raised by the engine.

The store and repository layers let ``IntegrityError`` propagate as-is.
Services use :func:`classify_integrity_error` to turn it into one of the
error kinds below before building a ``ServiceError``.
"""

from __future__ import annotations

from enum import StrEnum

from sqlalchemy.exc import IntegrityError


class ConstraintViolation(StrEnum):
    """Kinds of constraint failure the schema can produce."""

    UNIQUE = "unique"
    SEQUENCE = "sequence"
    FOREIGN_KEY = "foreign_key"
    NOT_NULL = "not_null"
    CHECK = "check"
    UNKNOWN = "unknown"


# SQLite messages, checked in order. A ``seq`` collision means another
# writer appended to the same node first.
_MESSAGE_MARKERS: tuple[tuple[str, ConstraintViolation], ...] = (
    ("node_instance.node_id, node_instance.seq", ConstraintViolation.SEQUENCE),
    ("unique constraint failed", ConstraintViolation.UNIQUE),
    ("primary key must be unique", ConstraintViolation.UNIQUE),
    ("foreign key constraint failed", ConstraintViolation.FOREIGN_KEY),
    ("not null constraint failed", ConstraintViolation.NOT_NULL),
    ("check constraint failed", ConstraintViolation.CHECK),
)

ERROR_CODES: dict[ConstraintViolation, str] = {
    ConstraintViolation.UNIQUE: "DUPLICATE_ID",
    ConstraintViolation.SEQUENCE: "CONCURRENT_WRITE",
    ConstraintViolation.FOREIGN_KEY: "MISSING_REFERENCE",
    ConstraintViolation.NOT_NULL: "MISSING_FIELD",
    ConstraintViolation.CHECK: "INVALID_VALUE",
    ConstraintViolation.UNKNOWN: "INTEGRITY_ERROR",
}


def classify_integrity_error(exc: IntegrityError) -> ConstraintViolation:
    """Map an ``IntegrityError`` to the constraint kind that caused it."""
    message = str(exc.orig if exc.orig is not None else exc).lower()
    for marker, kind in _MESSAGE_MARKERS:
        if marker in message:
            return kind
    return ConstraintViolation.UNKNOWN


def error_code(exc: IntegrityError) -> str:
    """Service-level error code for an ``IntegrityError``."""
    return ERROR_CODES[classify_integrity_error(exc)]
