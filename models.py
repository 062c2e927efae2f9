"""Shared typed models for the catalog build and the client components."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True, slots=True)
class DownloadLink:
    """One mirror a book can be downloaded from."""

    url: str
    platform: str = ""


@dataclass(frozen=True, slots=True)
class Book:
    """One catalog entry discovered at build time.

    ``data`` is the raw frontmatter mapping exactly as parsed; the properties
    below read from it and apply the empty defaults used by the projections.
    """

    slug: str
    data: Mapping[str, Any] = field(default_factory=dict)
    source_path: str = ""
    content_html: str = ""

    @property
    def title(self) -> str:
        return _as_text(self.data.get("title"))

    @property
    def author(self) -> str:
        return _as_text(self.data.get("author"))

    @property
    def cover(self) -> str:
        return _as_text(self.data.get("cover"))

    @property
    def description(self) -> str:
        return _as_text(self.data.get("description"))

    @property
    def tags(self) -> tuple[str, ...]:
        tags = self.data.get("tags")
        if not tags or isinstance(tags, (str, bytes)) or not isinstance(tags, Sequence):
            return ()
        return tuple(str(tag) for tag in tags)

    @property
    def download_links(self) -> tuple[DownloadLink, ...]:
        links = self.data.get("downloadLinks")
        if not links or isinstance(links, (str, bytes)) or not isinstance(links, Sequence):
            return ()
        parsed: list[DownloadLink] = []
        for link in links:
            if isinstance(link, Mapping):
                parsed.append(
                    DownloadLink(
                        url=_as_text(link.get("url")),
                        platform=_as_text(link.get("platform")),
                    )
                )
        return tuple(parsed)


@dataclass(frozen=True, slots=True)
class ValidationResult:
    valid: bool
    errors: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class SearchIndexEntry:
    """Flat search record consumed by the search client."""

    title: str
    author: str
    description: str
    tags: tuple[str, ...]
    url: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "title": self.title,
            "author": self.author,
            "description": self.description,
            "tags": list(self.tags),
            "url": self.url,
        }

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> SearchIndexEntry:
        tags = raw.get("tags")
        if not isinstance(tags, Sequence) or isinstance(tags, (str, bytes)):
            tags = ()
        return cls(
            title=_as_text(raw.get("title")),
            author=_as_text(raw.get("author")),
            description=_as_text(raw.get("description")),
            tags=tuple(str(tag) for tag in tags),
            url=_as_text(raw.get("url")),
        )


@dataclass(frozen=True, slots=True)
class CardRender:
    markup: str
    contains_title: bool
    contains_author: bool
    contains_cover: bool


@dataclass(frozen=True, slots=True)
class DetailRender:
    markup: str
    contains_cover: bool
    contains_title: bool
    contains_author: bool
    contains_tags: bool
    contains_breadcrumb: bool


@dataclass(frozen=True, slots=True)
class StructuredData:
    """schema.org Book payload plus its completeness checks."""

    payload: dict[str, Any]
    is_valid: bool
    contains_title: bool
    contains_author: bool
    contains_image: bool


@dataclass(frozen=True, slots=True)
class SearchResult:
    """One ranked hit; lower ``score`` is a closer match."""

    item: SearchIndexEntry
    score: float


def _as_text(value: Any) -> str:
    if not value:
        return ""
    return value if isinstance(value, str) else str(value)
