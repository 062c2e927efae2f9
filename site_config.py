"""Environment-driven site configuration."""

from __future__ import annotations

import os
from dataclasses import dataclass, replace

_DEFAULT_CONTENT_DIR = "books"
_DEFAULT_OUTPUT_DIR = "_site"
_DEFAULT_STATIC_DIR = "static"
_DEFAULT_PAGE_SIZE = 12
_DEFAULT_SITE_NAME = "SSGEpub"
_DEFAULT_SITE_DESCRIPTION = "Thư viện ebook miễn phí"
DEFAULT_DOWNLOAD_API_URL = "https://your-worker.workers.dev/api/get-link-platform"
DEFAULT_SEARCH_INDEX_URL = "/search-index.json"


@dataclass(frozen=True, slots=True)
class SiteConfig:
    content_dir: str = _DEFAULT_CONTENT_DIR
    output_dir: str = _DEFAULT_OUTPUT_DIR
    static_dir: str = _DEFAULT_STATIC_DIR
    page_size: int = _DEFAULT_PAGE_SIZE
    site_name: str = _DEFAULT_SITE_NAME
    site_url: str = ""
    site_description: str = _DEFAULT_SITE_DESCRIPTION
    download_api_url: str = DEFAULT_DOWNLOAD_API_URL
    search_index_url: str = DEFAULT_SEARCH_INDEX_URL

    def as_site(self) -> dict[str, str]:
        """Mapping shape consumed by templates and the SEO generator."""
        return {
            "name": self.site_name,
            "url": self.site_url,
            "description": self.site_description,
            "search_index_url": self.search_index_url,
            "download_api_url": self.download_api_url,
        }

    def with_overrides(self, **overrides: object) -> SiteConfig:
        """Return a copy with every non-None override applied."""
        return replace(self, **{k: v for k, v in overrides.items() if v is not None})


def load_site_config() -> SiteConfig:
    """Read the site configuration from environment variables."""
    return SiteConfig(
        content_dir=os.getenv("CONTENT_DIR", _DEFAULT_CONTENT_DIR),
        output_dir=os.getenv("OUTPUT_DIR", _DEFAULT_OUTPUT_DIR),
        static_dir=os.getenv("STATIC_DIR", _DEFAULT_STATIC_DIR),
        page_size=int(os.getenv("PAGE_SIZE", str(_DEFAULT_PAGE_SIZE))),
        site_name=os.getenv("SITE_NAME", _DEFAULT_SITE_NAME),
        site_url=os.getenv("SITE_URL", "").rstrip("/"),
        site_description=os.getenv("SITE_DESCRIPTION", _DEFAULT_SITE_DESCRIPTION),
        download_api_url=os.getenv("DOWNLOAD_API_URL", DEFAULT_DOWNLOAD_API_URL),
        search_index_url=os.getenv("SEARCH_INDEX_URL", DEFAULT_SEARCH_INDEX_URL),
    )
