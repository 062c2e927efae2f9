"""Collection assembly: ordering, search-index projection, pagination, URLs."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import Any, TypeVar

from collation import vietnamese_sort_key
from models import Book, SearchIndexEntry

T = TypeVar("T")


def book_url(slug: str) -> str:
    """Collection-entry URL used by cards and the search index."""
    return f"/books/{slug or ''}/"


def generate_detail_page_url(slug: str | None) -> str:
    """Path of the generated static detail page for ``slug``."""
    if not slug or not isinstance(slug, str):
        return "/books//index.html"
    return f"/books/{slug}/index.html"


def sort_books_alphabetically(books: Iterable[Book]) -> list[Book]:
    """Return a new list ordered by Vietnamese title collation.

    ``sorted`` is stable, so books with equal titles keep their input order.
    The input is never reordered in place.
    """
    return sorted(books, key=lambda book: vietnamese_sort_key(book.title))


def generate_search_index(books: Iterable[Book]) -> list[SearchIndexEntry]:
    """Project each book to a flat search record, preserving input order."""
    return [
        SearchIndexEntry(
            title=book.title,
            author=book.author,
            description=book.description,
            tags=book.tags,
            url=book_url(book.slug),
        )
        for book in books
    ]


def paginate_items(items: Any, page_size: int) -> list[list[T]]:
    """Split ``items`` into contiguous pages of at most ``page_size``.

    A non-sequence or a page size below 1 gives no pages at all. An empty
    sequence gives exactly one empty page so listings always render.
    """
    if not _is_sequence(items) or page_size <= 0:
        return []

    pages = [list(items[i:i + page_size]) for i in range(0, len(items), page_size)]
    if not pages:
        pages.append([])
    return pages


def limit(items: Sequence[T], count: int) -> list[T]:
    return list(items[:count])


def _is_sequence(value: Any) -> bool:
    return isinstance(value, Sequence) and not isinstance(value, (str, bytes))
