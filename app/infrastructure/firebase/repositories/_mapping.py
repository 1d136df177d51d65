"""Helpers shared by the Firestore repositories."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from typing import Any, TypeVar

from app.domain.exceptions import MalformedDocumentException, ValidationException

logger = logging.getLogger(__name__)

T = TypeVar("T")


def to_entities(
    docs: Iterable[dict[str, Any]],
    mapper: Callable[[dict[str, Any]], T],
    kind: str,
) -> list[T]:
    """Map documents to entities, skipping (and logging) malformed ones."""
    out: list[T] = []
    for doc in docs:
        try:
            out.append(mapper(doc))
        except (ValidationException, ValueError, TypeError) as e:
            logger.warning("Skipping malformed %s document %s: %s", kind, doc.get("id"), e)
    return out


def to_entity(doc: dict[str, Any], mapper: Callable[[dict[str, Any]], T], kind: str) -> T:
    """Map one document, raising MalformedDocumentException when it does not fit."""
    try:
        return mapper(doc)
    except (ValidationException, ValueError, TypeError) as e:
        raise MalformedDocumentException(kind, str(doc.get("id")), str(e)) from e


def to_int(value: Any, default: int = 0) -> int:
    """Coerce a stored number (int, float or numeric string) to int."""
    if value is None or value == "":
        return default
    return int(value)


def rename_fields(fields: dict[str, Any], mapping: dict[str, str], kind: str) -> dict[str, Any]:
    """Translate snake_case attribute names to document field names."""
    unknown = set(fields) - set(mapping)
    if unknown:
        raise ValueError(f"Unknown {kind} field(s): {', '.join(sorted(unknown))}")
    return {mapping[name]: value for name, value in fields.items()}
