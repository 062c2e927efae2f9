"""Static page output: listing pages, detail pages, search page and index."""

from __future__ import annotations

import json
import logging
import shutil
from pathlib import Path
from typing import Any

from jinja2 import DictLoader, Environment

from collection import (
    generate_detail_page_url,
    generate_search_index,
    limit,
    paginate_items,
    sort_books_alphabetically,
)
from models import Book
from render import generate_json_ld, render_book_card, render_detail_page_metadata
from seo import generate_seo_meta_tags
from site_config import SiteConfig

LOGGER = logging.getLogger(__name__)

SEARCH_INDEX_FILENAME = "search-index.json"
SEARCH_PAGE_FILENAME = "search.html"
CLIENT_SCRIPTS = ("/js/theme.js", "/js/lazyload.js", "/js/search.js")

BASE_TEMPLATE = """<!DOCTYPE html>
<html lang="vi">
<head>
<meta charset="utf-8">
<meta name="viewport" content="width=device-width, initial-scale=1">
<title>{{ meta["title"] }}</title>
<meta name="description" content="{{ meta["description"] or "" }}">
<link rel="canonical" href="{{ meta["canonical"] }}">
{%- for key in ["og:title", "og:description", "og:type", "og:url", "og:image"] %}
{%- if meta[key] %}
<meta property="{{ key }}" content="{{ meta[key] }}">
{%- endif %}
{%- endfor %}
{%- for key in ["twitter:card", "twitter:title", "twitter:description", "twitter:image"] %}
{%- if meta[key] %}
<meta name="{{ key }}" content="{{ meta[key] }}">
{%- endif %}
{%- endfor %}
{% block head %}{% endblock %}
</head>
<body data-search-index-url="{{ site["search_index_url"] }}">
<header class="site-header">
<a href="/" class="site-name">{{ site["name"] }}</a>
<form id="search-form" action="/search.html" role="search">
<input id="search-input" name="q" type="search" autocomplete="off">
<div id="search-results" class="hidden"></div>
</form>
<button id="theme-toggle" type="button" aria-label="Theme"></button>
</header>
<main>
{% block content %}{% endblock %}
</main>
{%- for src in scripts %}
<script src="{{ src }}" defer></script>
{%- endfor %}
{% block scripts %}{% endblock %}
</body>
</html>
"""

LISTING_TEMPLATE = """{% extends "base.html" %}
{% block content %}
<div class="book-grid">
{%- for card in cards %}
{{ card.markup | safe }}
{%- endfor %}
</div>
{%- if page_count > 1 %}
<nav class="pagination" aria-label="Pagination">
{%- if previous_url %}
<a href="{{ previous_url }}" rel="prev">‹</a>
{%- endif %}
<span class="pagination-current">{{ page_number }} / {{ page_count }}</span>
{%- if next_url %}
<a href="{{ next_url }}" rel="next">›</a>
{%- endif %}
</nav>
{%- endif %}
{% endblock %}
"""

DETAIL_TEMPLATE = """{% extends "base.html" %}
{% block head %}
{%- if tags %}
<meta name="keywords" content="{{ tags | limit(5) | join(", ") }}">
{%- endif %}
<script type="application/ld+json">{{ json_ld | tojson }}</script>
{% endblock %}
{% block content %}
{{ detail.markup | safe }}
<button id="download-btn" type="button" class="download-button" data-api-url="{{ site["download_api_url"] }}">Tải xuống</button>
<article class="detail-content">
{{ content_html | safe }}
</article>
{% endblock %}
{% block scripts %}
<script type="application/json" id="download-links">{{ download_links | tojson }}</script>
<script src="/js/download.js" defer></script>
{% endblock %}
"""

SEARCH_TEMPLATE = """{% extends "base.html" %}
{% block content %}
<form id="search-page-form" action="/search.html" role="search">
<input id="search-page-input" name="q" type="search" autocomplete="off">
</form>
<div id="search-page-results"></div>
{% endblock %}
"""

TEMPLATES: dict[str, str] = {
    "base.html": BASE_TEMPLATE,
    "listing.html": LISTING_TEMPLATE,
    "detail.html": DETAIL_TEMPLATE,
    "search.html": SEARCH_TEMPLATE,
}


def create_environment() -> Environment:
    env = Environment(loader=DictLoader(TEMPLATES), autoescape=True)
    env.filters["limit"] = limit
    return env


def listing_page_url(page_number: int) -> str:
    """URL of the n-th (1-based) listing page."""
    return "/" if page_number == 1 else f"/page/{page_number}/"


def build_site(books: list[Book], config: SiteConfig, output_dir: Path | str | None = None) -> dict[str, int]:
    """Write the full static site for already-validated ``books``.

    Returns counts of what was written, for logging by the caller.
    """
    out = Path(output_dir or config.output_dir)
    out.mkdir(parents=True, exist_ok=True)
    env = create_environment()
    site = config.as_site()

    ordered = sort_books_alphabetically(books)

    listing_pages = _write_listing_pages(env, ordered, config, site, out)
    detail_pages = sum(_write_detail_page(env, book, site, out) for book in ordered)
    _write_search_page(env, site, out)
    entries = write_search_index(ordered, out / SEARCH_INDEX_FILENAME)
    copied = _copy_static(Path(config.static_dir), out)

    LOGGER.info(
        "Site build complete: listing_pages=%s detail_pages=%s index_entries=%s static_files=%s output=%s",
        listing_pages,
        detail_pages,
        entries,
        copied,
        out,
    )
    return {
        "listing_pages": listing_pages,
        "detail_pages": detail_pages,
        "index_entries": entries,
        "static_files": copied,
    }


def write_search_index(books: list[Book], path: Path) -> int:
    """Serialize the search index as a JSON array; returns the entry count."""
    entries = [entry.to_dict() for entry in generate_search_index(books)]
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(entries, ensure_ascii=False, indent=2), encoding="utf-8")
    LOGGER.info("Wrote %s search index entries to %s", len(entries), path)
    return len(entries)


def _write_listing_pages(
    env: Environment,
    ordered: list[Book],
    config: SiteConfig,
    site: dict[str, str],
    out: Path,
) -> int:
    pages = paginate_items(ordered, config.page_size)
    template = env.get_template("listing.html")

    for number, page in enumerate(pages, start=1):
        url = listing_page_url(number)
        html = template.render(
            site=site,
            meta=generate_seo_meta_tags({"url": url}, site),
            scripts=CLIENT_SCRIPTS,
            cards=[render_book_card(book) for book in page],
            page_number=number,
            page_count=len(pages),
            previous_url=listing_page_url(number - 1) if number > 1 else None,
            next_url=listing_page_url(number + 1) if number < len(pages) else None,
        )
        _write(out / url.lstrip("/") / "index.html", html)

    LOGGER.info("Wrote %s listing pages (page_size=%s)", len(pages), config.page_size)
    return len(pages)


def _write_detail_page(env: Environment, book: Book, site: dict[str, str], out: Path) -> int:
    url = generate_detail_page_url(book.slug)
    page: dict[str, Any] = {
        "title": book.title,
        "description": book.description,
        "url": url,
        "layout": "detail",
        "cover": book.cover,
    }
    html = env.get_template("detail.html").render(
        site=site,
        meta=generate_seo_meta_tags(page, site),
        scripts=CLIENT_SCRIPTS,
        detail=render_detail_page_metadata(book),
        json_ld=generate_json_ld(book).payload,
        tags=book.tags,
        content_html=book.content_html,
        download_links=[{"url": link.url, "platform": link.platform} for link in book.download_links],
    )
    _write(out / url.lstrip("/"), html)
    return 1


def _write_search_page(env: Environment, site: dict[str, str], out: Path) -> None:
    html = env.get_template("search.html").render(
        site=site,
        meta=generate_seo_meta_tags({"title": "Tìm kiếm", "url": f"/{SEARCH_PAGE_FILENAME}"}, site),
        scripts=CLIENT_SCRIPTS,
    )
    _write(out / SEARCH_PAGE_FILENAME, html)


def _copy_static(static_dir: Path, out: Path) -> int:
    if not static_dir.is_dir():
        return 0
    copied = 0
    for source in static_dir.rglob("*"):
        if source.is_file():
            target = out / source.relative_to(static_dir)
            target.parent.mkdir(parents=True, exist_ok=True)
            shutil.copy2(source, target)
            copied += 1
    return copied


def _write(path: Path, content: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
