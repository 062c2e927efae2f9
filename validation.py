"""Required-field checks for book frontmatter (the build gate)."""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from typing import Any

from models import ValidationResult

LOGGER = logging.getLogger(__name__)

ERROR_MESSAGES: dict[str, str] = {
    "MISSING_TITLE": "missing title",
    "MISSING_AUTHOR": "missing author",
    "MISSING_COVER": "missing cover",
    "MISSING_DOWNLOAD_LINKS": "missing downloadLinks",
    "EMPTY_DOWNLOAD_LINKS": "downloadLinks must have at least 1 item",
}

REQUIRED_FIELDS: tuple[str, ...] = ("title", "author", "cover", "downloadLinks")


class BuildError(RuntimeError):
    """Fatal build failure: one record is missing required frontmatter."""

    def __init__(self, source: str, errors: Sequence[str]) -> None:
        self.source = source
        self.errors = tuple(errors)
        lines = [f'Build Error in "{source}":', *self.errors]
        super().__init__("\n".join(lines))


def validate_book_data(data: Mapping[str, Any] | None) -> ValidationResult:
    """Check one frontmatter mapping against the required-field rules.

    Every rule runs; errors come back in declaration order
    (title, author, cover, downloadLinks).
    """
    data = data or {}
    errors: list[str] = []

    if not data.get("title"):
        errors.append(ERROR_MESSAGES["MISSING_TITLE"])
    if not data.get("author"):
        errors.append(ERROR_MESSAGES["MISSING_AUTHOR"])
    if not data.get("cover"):
        errors.append(ERROR_MESSAGES["MISSING_COVER"])

    links = data.get("downloadLinks")
    if not links:
        errors.append(ERROR_MESSAGES["MISSING_DOWNLOAD_LINKS"])
    elif not _is_sequence(links) or len(links) < 1:
        errors.append(ERROR_MESSAGES["EMPTY_DOWNLOAD_LINKS"])

    return ValidationResult(valid=not errors, errors=tuple(errors))


def ensure_valid(data: Mapping[str, Any] | None, source: str) -> None:
    """Raise BuildError listing every problem with the record at ``source``."""
    result = validate_book_data(data)
    if not result.valid:
        LOGGER.error("Validation failed for %s: %s", source, "; ".join(result.errors))
        raise BuildError(source, result.errors)


def _is_sequence(value: Any) -> bool:
    # Strings and mappings are truthy but are not a list of links.
    return isinstance(value, Sequence) and not isinstance(value, (str, bytes))
