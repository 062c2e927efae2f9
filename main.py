"""CLI entrypoint for the ebook catalog site build."""

from __future__ import annotations

import argparse
import json
import logging
import os
from pathlib import Path

from dotenv import load_dotenv

from content_loader import load_books
from search_client import SearchClient
from site_config import SiteConfig, load_site_config
from site_writer import SEARCH_INDEX_FILENAME, build_site
from validation import BuildError


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line flags."""
    parser = argparse.ArgumentParser(description="Build the static ebook catalog site")
    parser.add_argument(
        "--mode",
        choices=["build", "search"],
        default="build",
        help=(
            "'build' (default): validate books and write the site. "
            "'search': query the search index of an already built site."
        ),
    )
    parser.add_argument("--content-dir", default=None, help="Directory of book markdown files (CONTENT_DIR)")
    parser.add_argument("--output", default=None, help="Output directory (OUTPUT_DIR)")
    parser.add_argument("--static-dir", default=None, help="Static assets copied verbatim (STATIC_DIR)")
    parser.add_argument("--page-size", type=int, default=None, help="Books per listing page (PAGE_SIZE)")
    parser.add_argument("--query", default="", help="Query for --mode search")
    parser.add_argument(
        "--no-fuzzy",
        action="store_true",
        help="Use plain substring matching in --mode search",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Validate and log what would be written, without writing files",
    )
    return parser.parse_args(argv)


def run(config: SiteConfig, dry_run: bool) -> dict[str, int]:
    """Run one full build; a validation failure aborts with BuildError."""
    books = load_books(config.content_dir)
    logging.info("Validated %s books from %s", len(books), config.content_dir)

    if dry_run:
        for book in books:
            logging.info("[dry-run] Would write: /books/%s/index.html (%s)", book.slug, book.title)
        return {"listing_pages": 0, "detail_pages": 0, "index_entries": 0, "static_files": 0}

    return build_site(books, config)


def run_search(config: SiteConfig, query: str, fuzzy: bool = True) -> list[dict]:
    """Query a built site's search index from disk and return result rows."""
    index_path = Path(config.output_dir) / SEARCH_INDEX_FILENAME
    client = SearchClient.from_config(config, fuzzy=fuzzy)
    try:
        raw = json.loads(index_path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        logging.error("Could not read search index %s: %s", index_path, exc)
        return []

    client.load_entries(raw if isinstance(raw, list) else [])
    rows = [
        {"title": r.item.title, "author": r.item.author, "url": r.item.url, "score": round(r.score, 3)}
        for r in client.search(query)
    ]
    for row in rows:
        logging.info("%.3f  %s by %s  %s", row["score"], row["title"], row["author"], row["url"])
    if not rows:
        logging.info("No results for %r", query)
    return rows


def main(argv: list[str] | None = None) -> int:
    """Initialize config and execute the selected mode."""
    load_dotenv()
    logging.basicConfig(
        level=os.getenv("LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s %(levelname)s %(message)s",
    )
    args = parse_args(argv)
    config = load_site_config().with_overrides(
        content_dir=args.content_dir,
        output_dir=args.output,
        static_dir=args.static_dir,
        page_size=args.page_size,
    )

    if args.mode == "search":
        run_search(config, args.query, fuzzy=not args.no_fuzzy)
        return 0

    try:
        run(config, dry_run=args.dry_run)
    except BuildError as exc:
        logging.error("%s", exc)
        raise
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
