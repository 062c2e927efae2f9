"""SEO meta tag generation for listing and detail pages."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

DETAIL_LAYOUT = "detail"

REQUIRED_TAGS: tuple[str, ...] = (
    "title",
    "description",
    "canonical",
    "og:title",
    "og:description",
    "og:url",
)


def generate_seo_meta_tags(page: Mapping[str, Any], site: Mapping[str, Any]) -> dict[str, Any]:
    """Build the meta tag values for one page.

    ``page`` carries ``title``, ``description``, ``url``, ``layout`` and
    ``cover`` (all optional); ``site`` carries ``name``, ``description`` and
    ``url``.
    """
    site_name = site.get("name") or ""
    page_title = page.get("title")
    title = f"{page_title} | {site_name}" if page_title else site_name
    description = page.get("description") or site.get("description")
    canonical = f"{site.get('url') or ''}{page.get('url') or ''}"
    og_type = "book" if page.get("layout") == DETAIL_LAYOUT else "website"
    image = page.get("cover") or None

    return {
        "title": title,
        "description": description,
        "canonical": canonical,
        "og:title": page_title or site_name,
        "og:description": description,
        "og:type": og_type,
        "og:url": canonical,
        "og:image": image,
        "twitter:card": "summary_large_image",
        "twitter:title": page_title or site_name,
        "twitter:description": description,
        "twitter:image": image,
    }


def validate_seo_meta_tags(meta_tags: Mapping[str, Any]) -> dict[str, Any]:
    """Report which required tags are missing or empty."""
    missing = [tag for tag in REQUIRED_TAGS if not meta_tags.get(tag)]
    return {"valid": not missing, "missing_tags": missing}
