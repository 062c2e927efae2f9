"""Deferred cover loading for images rendered with ``data-src``."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import Any, Protocol

from dom import Document, Element

LOGGER = logging.getLogger(__name__)

DEFERRED_ATTRIBUTE = "data-src"
LOADED_CLASS = "loaded"


@dataclass(frozen=True, slots=True)
class IntersectionEntry:
    target: Element
    is_intersecting: bool


class Observer(Protocol):
    def observe(self, element: Element) -> None: ...

    def unobserve(self, element: Element) -> None: ...

    def disconnect(self) -> None: ...


ObserverCallback = Callable[[Iterable[IntersectionEntry], Observer], None]
ObserverFactory = Callable[[ObserverCallback, dict[str, Any]], Observer]


class LazyImageLoader:
    """Swaps ``data-src`` into ``src`` once an image comes into view.

    Without an ``observer_factory`` every deferred image is loaded at once.
    """

    def __init__(
        self,
        document: Document,
        observer_factory: ObserverFactory | None = None,
        root_margin: str = "50px",
        threshold: float = 0.01,
    ) -> None:
        self.document = document
        self.observer_factory = observer_factory
        self.options: dict[str, Any] = {"root": None, "root_margin": root_margin, "threshold": threshold}
        self.observer: Observer | None = None

    def init(self) -> None:
        if self.observer_factory is None:
            LOGGER.info("No intersection observer available; loading all images")
            self.load_all_images()
            return

        self.observer = self.observer_factory(self._on_intersection, self.options)
        self.observe_images()

    def observe_images(self) -> int:
        images = self.document.elements_with_attribute(DEFERRED_ATTRIBUTE)
        if self.observer is not None:
            for img in images:
                self.observer.observe(img)
        return len(images)

    def load_image(self, img: Element) -> bool:
        src = img.get_attribute(DEFERRED_ATTRIBUTE)
        if not src:
            return False
        img.set_attribute("src", src)
        img.remove_attribute(DEFERRED_ATTRIBUTE)
        img.toggle_class(LOADED_CLASS, True)
        return True

    def load_all_images(self) -> int:
        return sum(self.load_image(img) for img in self.document.elements_with_attribute(DEFERRED_ATTRIBUTE))

    def disconnect(self) -> None:
        if self.observer is not None:
            self.observer.disconnect()
            self.observer = None

    def _on_intersection(self, entries: Iterable[IntersectionEntry], observer: Observer) -> None:
        for entry in entries:
            if entry.is_intersecting:
                self.load_image(entry.target)
                observer.unobserve(entry.target)
