"""Mirror selection for the download button.

The preference service answers ``{"platformIndex": <int>}``; the first
successful answer is cached for the session and reused for every later
resolution. Any failure falls back to the first mirror without caching.
"""

from __future__ import annotations

import logging
import math
import os
import sys
import webbrowser
from collections.abc import Callable, Iterable, Mapping
from typing import Any

import requests

from dom import Document, Element
from models import DownloadLink
from site_config import DEFAULT_DOWNLOAD_API_URL, SiteConfig
from storage import Storage

LOGGER = logging.getLogger(__name__)

REQUEST_TIMEOUT_SECONDS = int(os.getenv("REQUEST_TIMEOUT_SECONDS", "10"))
STORAGE_KEY = "ssgepub_platform_index"
FALLBACK_INDEX = 0
LOADING_CLASS = "loading"

Opener = Callable[[str, str, str], Any]


def _open_in_new_tab(url: str, target: str, features: str) -> bool:
    return webbrowser.open_new_tab(url)


class DownloadClient:
    def __init__(
        self,
        session_storage: Storage,
        links: Iterable[DownloadLink | Mapping[str, Any]] = (),
        api_url: str = DEFAULT_DOWNLOAD_API_URL,
        session: Any = None,
        opener: Opener | None = None,
    ) -> None:
        self.session_storage = session_storage
        self.api_url = api_url
        self.session = session or requests
        self.opener = opener or _open_in_new_tab
        self.links: list[DownloadLink] = _normalize_links(links)
        self.button: Element | None = None

    @classmethod
    def from_config(cls, config: SiteConfig, session_storage: Storage, **kwargs: Any) -> DownloadClient:
        return cls(session_storage, api_url=config.download_api_url, **kwargs)

    def init(self, links: Iterable[DownloadLink | Mapping[str, Any]] | None, document: Document | None = None) -> None:
        self.links = _normalize_links(links or ())
        if document is None:
            return
        self.button = document.get_element_by_id("download-btn")
        if self.button is not None:
            self.button.add_event_listener("click", self.handle_download)
        else:
            LOGGER.warning("Download button not found; downloads disabled on this page")

    def get_platform_index(self) -> int:
        """Cached index if any, otherwise ask the service (0 on failure)."""
        cached = self._cached_index()
        if cached is not None:
            return cached

        try:
            self.set_loading(True)
            response = self.session.get(self.api_url, timeout=REQUEST_TIMEOUT_SECONDS)
            response.raise_for_status()
            index = _parse_platform_index(response.json())
        except (requests.RequestException, ValueError) as exc:
            LOGGER.warning("Platform index lookup failed, using fallback: %s", exc)
            return FALLBACK_INDEX
        finally:
            self.set_loading(False)

        self.session_storage.set_item(STORAGE_KEY, str(index))
        return index

    def get_download_link(self) -> DownloadLink | None:
        if not self.links:
            return None
        index = self.get_platform_index()
        # Out-of-range indexes degrade to the nearest available mirror.
        safe_index = max(0, min(index, len(self.links) - 1))
        return self.links[safe_index]

    def handle_download(self, *_: Any) -> DownloadLink | None:
        link = self.get_download_link()
        if link is None or not link.url:
            LOGGER.error("No download link available")
            return None
        self.opener(link.url, "_blank", "noopener,noreferrer")
        return link

    def set_loading(self, is_loading: bool) -> None:
        if self.button is not None:
            self.button.disabled = is_loading
            self.button.toggle_class(LOADING_CLASS, is_loading)

    def _cached_index(self) -> int | None:
        cached = self.session_storage.get_item(STORAGE_KEY)
        if cached is None:
            return None
        try:
            return int(cached)
        except ValueError:
            LOGGER.warning("Discarding unreadable cached platform index %r", cached)
            self.session_storage.remove_item(STORAGE_KEY)
            return None


def _parse_platform_index(body: Any) -> int:
    if not isinstance(body, Mapping):
        raise ValueError(f"Unexpected platform response shape: {body!r}")
    value = body.get("platformIndex") or 0
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"Non-numeric platformIndex: {value!r}")
    if isinstance(value, float) and not math.isfinite(value):
        if math.isnan(value):
            raise ValueError("platformIndex is NaN")
        # Infinite indexes clamp like any other out-of-range index.
        return sys.maxsize if value > 0 else -sys.maxsize
    return int(value)


def _normalize_links(links: Iterable[DownloadLink | Mapping[str, Any]]) -> list[DownloadLink]:
    normalized: list[DownloadLink] = []
    for link in links:
        if isinstance(link, DownloadLink):
            normalized.append(link)
        elif isinstance(link, Mapping):
            normalized.append(DownloadLink(url=str(link.get("url") or ""), platform=str(link.get("platform") or "")))
    return normalized
