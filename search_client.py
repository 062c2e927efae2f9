"""Search over the generated index: fuzzy ranking with a substring fallback."""

from __future__ import annotations

import enum
import html
import logging
from collections.abc import Iterable, Mapping, Sequence
from difflib import SequenceMatcher
from typing import Any
from urllib.parse import quote, urljoin

import requests

from dom import HIDDEN_CLASS, Document, Element
from models import SearchIndexEntry, SearchResult
from site_config import DEFAULT_SEARCH_INDEX_URL, SiteConfig

LOGGER = logging.getLogger(__name__)

REQUEST_TIMEOUT_SECONDS = 20
MAX_RESULTS = 5
MIN_QUERY_LENGTH = 2
FALLBACK_SCORE = 0.5
SEARCH_PAGE_URL = "/search.html"
NO_RESULTS_HTML = '<div class="p-4 text-light-secondary dark:text-dark-secondary">Không tìm thấy kết quả</div>'

SEARCH_KEYS: tuple[str, ...] = ("title", "author", "description", "tags")

# Characters encodeURIComponent leaves untouched besides alphanumerics.
_URI_COMPONENT_SAFE = "-_.!~*'()"


class SearchState(enum.Enum):
    UNINITIALIZED = "uninitialized"
    LOADING = "loading"
    READY = "ready"
    DEGRADED = "degraded"


class FuzzyMatcher:
    """Approximate matcher over the index fields.

    Each field gets a distance in [0, 1]: a substring hit scores by how far
    into the field it starts (always below 0.1), otherwise the best
    ``SequenceMatcher`` ratio over same-length windows is inverted. An entry
    matches when its best field distance is within ``threshold``.
    """

    def __init__(
        self,
        keys: Sequence[str] = SEARCH_KEYS,
        threshold: float = 0.4,
        min_match_char_length: int = MIN_QUERY_LENGTH,
    ) -> None:
        self.keys = tuple(keys)
        self.threshold = threshold
        self.min_match_char_length = min_match_char_length

    def search(self, entries: Iterable[SearchIndexEntry], query: str) -> list[SearchResult]:
        needle = query.strip().lower()
        if not needle:
            return []

        results: list[SearchResult] = []
        for entry in entries:
            score = min((self.distance(needle, text) for text in self._field_texts(entry)), default=1.0)
            if score <= self.threshold:
                results.append(SearchResult(item=entry, score=score))

        # Stable sort keeps index order between equal scores.
        results.sort(key=lambda result: result.score)
        return results

    def distance(self, needle: str, text: str) -> float:
        haystack = text.lower()
        if not haystack:
            return 1.0

        position = haystack.find(needle)
        if position >= 0:
            return 0.1 * position / len(haystack)

        if len(needle) < self.min_match_char_length:
            return 1.0

        return 1.0 - self._best_window_ratio(needle, haystack)

    def _field_texts(self, entry: SearchIndexEntry) -> list[str]:
        texts: list[str] = []
        for key in self.keys:
            value = getattr(entry, key, "")
            if isinstance(value, str):
                texts.append(value)
            else:
                texts.extend(str(item) for item in value)
        return texts

    @staticmethod
    def _best_window_ratio(needle: str, haystack: str) -> float:
        size = len(needle)
        if len(haystack) <= size:
            return SequenceMatcher(None, needle, haystack).ratio()

        best = 0.0
        for start in range(len(haystack) - size + 1):
            ratio = SequenceMatcher(None, needle, haystack[start:start + size]).ratio()
            if ratio > best:
                best = ratio
                if best == 1.0:
                    break
        return best


class SearchClient:
    """Loads the search index once and answers queries against it.

    With ``fuzzy=False`` there is no fuzzy engine; queries then use a
    case-insensitive substring match with a fixed score.
    """

    def __init__(
        self,
        index_url: str = DEFAULT_SEARCH_INDEX_URL,
        base_url: str = "",
        session: Any = None,
        matcher: FuzzyMatcher | None = None,
        fuzzy: bool = True,
        max_results: int = MAX_RESULTS,
    ) -> None:
        self.index_url = urljoin(base_url, index_url) if base_url else index_url
        self.session = session or requests
        if matcher is None and fuzzy:
            matcher = FuzzyMatcher()
        self.matcher = matcher
        self.max_results = max_results
        self.entries: list[SearchIndexEntry] = []
        self.state = SearchState.UNINITIALIZED

    @classmethod
    def from_config(cls, config: SiteConfig, **kwargs: Any) -> SearchClient:
        """Client for the index location configured for ``config``'s site."""
        return cls(index_url=config.search_index_url, base_url=config.site_url, **kwargs)

    @property
    def ready(self) -> bool:
        return self.state is SearchState.READY

    def init(self) -> SearchState:
        """Fetch the index; a failure is logged and leaves the client degraded."""
        self.state = SearchState.LOADING
        try:
            response = self.session.get(self.index_url, timeout=REQUEST_TIMEOUT_SECONDS)
            response.raise_for_status()
            payload = response.json()
        except (requests.RequestException, ValueError) as exc:
            LOGGER.error("Search initialization failed for %s: %s", self.index_url, exc)
            self.state = SearchState.DEGRADED
            return self.state

        if not isinstance(payload, list):
            LOGGER.error("Search initialization failed: index at %s is not a list", self.index_url)
            self.state = SearchState.DEGRADED
            return self.state

        self.load_entries(payload)
        return self.state

    def load_entries(self, raw_entries: Iterable[Mapping[str, Any] | SearchIndexEntry]) -> None:
        self.entries = [
            entry if isinstance(entry, SearchIndexEntry) else SearchIndexEntry.from_dict(entry)
            for entry in raw_entries
            if isinstance(entry, (SearchIndexEntry, Mapping))
        ]
        self.state = SearchState.READY
        LOGGER.info("Search index ready with %s entries", len(self.entries))

    def search(self, query: str | None) -> list[SearchResult]:
        """Return at most ``max_results`` hits, best first."""
        if not query or not query.strip():
            return []
        if self.matcher is None:
            return self.fallback_search(query.strip())
        return self.matcher.search(self.entries, query.strip())[: self.max_results]

    def fallback_search(self, query: str) -> list[SearchResult]:
        needle = query.lower()
        results = [
            SearchResult(item=entry, score=FALLBACK_SCORE)
            for entry in self.entries
            if _substring_match(entry, needle)
        ]
        return results[: self.max_results]

    def handle_input(self, value: str, container: Element | None) -> list[SearchResult]:
        """Live-input handler: short queries only hide the results."""
        query = (value or "").strip()
        if len(query) < MIN_QUERY_LENGTH:
            if container is not None:
                container.toggle_class(HIDDEN_CLASS, True)
            return []

        results = self.search(query)
        self.render_results(results, container)
        return results

    def render_results(self, results: Sequence[SearchResult], container: Element | None) -> str:
        if not results:
            markup = NO_RESULTS_HTML
        else:
            markup = "".join(
                f'<a href="{escape_html(result.item.url)}" class="block p-3 border-b last:border-b-0">'
                f'<div class="font-medium">{escape_html(result.item.title)}</div>'
                f'<div class="text-sm">{escape_html(result.item.author)}</div>'
                "</a>"
                for result in results
            )

        if container is not None:
            container.inner_html = markup
            container.toggle_class(HIDDEN_CLASS, False)
        return markup

    def bind(self, document: Document) -> None:
        """Attach live-search handlers to the inputs present on the page."""
        for input_id, results_id in (
            ("search-input", "search-results"),
            ("mobile-search-input", "mobile-search-results"),
        ):
            search_input = document.get_element_by_id(input_id)
            if search_input is None:
                continue
            results = document.get_element_by_id(results_id)
            search_input.add_event_listener("input", lambda value, r=results: self.handle_input(value, r))
            search_input.add_event_listener("focus", lambda value, r=results: self.handle_input(value, r))

        for form_id in ("search-form", "mobile-search-form"):
            form = document.get_element_by_id(form_id)
            if form is not None:
                form.add_event_listener("submit", submit_url)


def submit_url(query: str | None) -> str | None:
    """Search page URL for a submitted query, or None when it is blank."""
    query = (query or "").strip()
    if not query:
        return None
    return f"{SEARCH_PAGE_URL}?q={quote(query, safe=_URI_COMPONENT_SAFE)}"


def escape_html(value: Any) -> str:
    if not value:
        return ""
    return html.escape(str(value), quote=True)


def _substring_match(entry: SearchIndexEntry, needle: str) -> bool:
    return (
        needle in entry.title.lower()
        or needle in entry.author.lower()
        or needle in entry.description.lower()
        or any(needle in tag.lower() for tag in entry.tags)
    )
