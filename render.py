"""HTML fragment and JSON-LD renderers for a single book.

Frontmatter is author-controlled build input, so values are emitted as
written (the markdown body is rendered with raw HTML enabled too). The
completeness flags check that each value literally appears in the output.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from collection import book_url
from models import Book, CardRender, DetailRender, StructuredData

SCHEMA_CONTEXT = "https://schema.org"
HOME_LABEL = "Trang chủ"
COVER_ALT_PREFIX = "Bìa sách"


def render_book_card(book: Book) -> CardRender:
    """Render the listing card; the cover is deferred via ``data-src``."""
    title = book.title
    author = book.author
    cover = book.cover
    description = book.description

    parts = [
        f'<a href="{book_url(book.slug)}" class="book-card block">',
        '<div class="relative">',
        f'<img data-src="{cover}" alt="{COVER_ALT_PREFIX} {title}" '
        'class="book-card-image bg-gray-200 dark:bg-gray-700" loading="lazy">',
    ]
    if description:
        parts.append(f'<div class="book-card-overlay"><p>{description}</p></div>')
    parts.extend([
        "</div>",
        '<div class="book-card-content">',
        f'<h2 class="book-card-title">{title}</h2>',
        f'<p class="book-card-author">{author}</p>',
        "</div></a>",
    ])
    markup = "".join(parts)

    return CardRender(
        markup=markup,
        contains_title=_contains(markup, title),
        contains_author=_contains(markup, author),
        contains_cover=_contains(markup, cover),
    )


def render_detail_page_metadata(book: Book) -> DetailRender:
    """Render breadcrumb, eager cover and the info block of a detail page."""
    title = book.title
    author = book.author
    cover = book.cover
    description = book.description
    tags = book.tags

    parts = [
        '<div class="detail-container">',
        '<nav class="breadcrumb" aria-label="Breadcrumb">',
        f'<a href="/">{HOME_LABEL}</a>',
        '<span class="breadcrumb-separator">›</span>',
        f'<span class="text-light-text dark:text-dark-text">{title}</span>',
        "</nav>",
        '<div class="detail-header">',
        '<div class="detail-cover">',
        f'<img src="{cover}" alt="{COVER_ALT_PREFIX} {title}" class="w-full rounded-lg shadow-lg">',
        "</div>",
        '<div class="detail-info">',
        f'<h1 class="detail-title">{title}</h1>',
        f'<p class="detail-author">{author}</p>',
    ]
    if description:
        parts.append(f'<p class="text-light-secondary dark:text-dark-secondary mb-4">{description}</p>')
    if tags:
        parts.append('<div class="detail-tags">')
        parts.extend(f'<span class="tag">{tag}</span>' for tag in tags)
        parts.append("</div>")
    parts.append("</div></div></div>")
    markup = "".join(parts)

    return DetailRender(
        markup=markup,
        contains_cover=_contains(markup, cover),
        contains_title=_contains(markup, title),
        contains_author=_contains(markup, author),
        # No tags means nothing was left out.
        contains_tags=all(tag in markup for tag in tags),
        contains_breadcrumb=HOME_LABEL in markup and title in markup,
    )


def generate_json_ld(book: Book) -> StructuredData:
    """Build the schema.org ``Book`` payload embedded in detail pages."""
    title = book.title
    author = book.author
    cover = book.cover
    description = book.description
    raw_tags = book.data.get("tags")

    payload: dict[str, Any] = {
        "@context": SCHEMA_CONTEXT,
        "@type": "Book",
        "name": title,
        "author": {"@type": "Person", "name": author},
        "image": cover,
    }
    if description:
        payload["description"] = description
    if isinstance(raw_tags, Sequence) and len(raw_tags) > 0:
        # Passed through as written in the frontmatter, bare strings included.
        payload["genre"] = raw_tags

    return StructuredData(
        payload=payload,
        is_valid=is_valid_json_ld(payload),
        contains_title=payload["name"] == title,
        contains_author=payload["author"]["name"] == author,
        contains_image=payload["image"] == cover,
    )


def is_valid_json_ld(payload: dict[str, Any]) -> bool:
    person = payload.get("author")
    return bool(
        payload.get("@context") == SCHEMA_CONTEXT
        and payload.get("@type") == "Book"
        and payload.get("name")
        and isinstance(person, dict)
        and person.get("@type") == "Person"
        and person.get("name")
        and payload.get("image")
    )


def _contains(markup: str, value: str) -> bool:
    return bool(value) and value in markup
