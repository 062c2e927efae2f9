"""Discovery of book markdown files and their frontmatter."""

from __future__ import annotations

import logging
import re
import unicodedata
from pathlib import Path
from typing import Any

import markdown
import yaml

from models import Book
from validation import BuildError, ensure_valid

LOGGER = logging.getLogger(__name__)

BOOK_GLOB = "*.md"
MARKDOWN_EXTENSIONS = ["nl2br", "tables", "attr_list"]

_FRONT_MATTER_RE = re.compile(r"^---\s*\n(.*?)\n---\s*(?:\n(.*))?$", re.DOTALL)
_NON_SLUG_RE = re.compile(r"[^a-z0-9]+")


def slugify(text: str) -> str:
    """Lowercase ASCII slug with Vietnamese diacritics removed."""
    decomposed = unicodedata.normalize("NFD", text.lower())
    stripped = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    stripped = stripped.replace("đ", "d")
    return _NON_SLUG_RE.sub("-", stripped).strip("-")


def parse_front_matter(text: str) -> tuple[dict[str, Any], str]:
    """Split a markdown document into (frontmatter mapping, body).

    Documents without a leading ``---`` block have empty frontmatter.
    Invalid YAML propagates as ``yaml.YAMLError``.
    """
    clean = text.lstrip("\ufeff").replace("\r\n", "\n")
    match = _FRONT_MATTER_RE.match(clean)
    if not match:
        return {}, clean

    meta = yaml.safe_load(match.group(1))
    body = match.group(2) or ""
    if not isinstance(meta, dict):
        return {}, body
    return meta, body


def render_markdown(body: str) -> str:
    return markdown.markdown(body, extensions=MARKDOWN_EXTENSIONS)


def load_book(path: Path) -> Book:
    """Parse and validate one book file; invalid frontmatter is fatal."""
    source = str(path)
    try:
        meta, body = parse_front_matter(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        raise BuildError(source, [f"invalid frontmatter: {exc}"]) from exc

    ensure_valid(meta, source)
    return Book(
        slug=slugify(path.stem),
        data=meta,
        source_path=source,
        content_html=render_markdown(body),
    )


def load_books(content_dir: Path | str) -> list[Book]:
    """Load every book under ``content_dir`` in file-name order.

    The first record that fails validation aborts the whole load, and so
    does a file whose slug was already taken by an earlier file.
    """
    root = Path(content_dir)
    if not root.is_dir():
        LOGGER.warning("Content directory %s does not exist; no books loaded", root)
        return []

    books: list[Book] = []
    seen: dict[str, str] = {}
    for path in sorted(root.glob(BOOK_GLOB)):
        book = load_book(path)
        if book.slug in seen:
            raise BuildError(book.source_path, [f'duplicate slug "{book.slug}" (already used by {seen[book.slug]})'])
        seen[book.slug] = book.source_path
        books.append(book)
    LOGGER.info("Loaded %s books from %s", len(books), root)
    return books
