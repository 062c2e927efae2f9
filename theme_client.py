"""Light/dark theme preference with persistence."""

from __future__ import annotations

import logging
from collections.abc import Callable

from dom import Document, Element
from storage import Storage

LOGGER = logging.getLogger(__name__)

STORAGE_KEY = "ssgepub_theme"
VALID_THEMES: tuple[str, ...] = ("light", "dark")
DARK_CLASS = "dark"
DEFAULT_THEME = "light"


class ThemeClient:
    """Reads, applies and persists the theme.

    The theme is applied by toggling the ``dark`` class on ``root``.
    ``prefers_dark`` reports the system color-scheme preference and is only
    consulted when nothing valid is persisted.
    """

    def __init__(
        self,
        storage: Storage,
        root: Element | None = None,
        prefers_dark: Callable[[], bool] | None = None,
    ) -> None:
        self.storage = storage
        self.root = root or Element("html")
        self.prefers_dark = prefers_dark or (lambda: False)

    def init(self, document: Document | None = None) -> str:
        saved = self._saved_theme()
        if saved is not None:
            theme = saved
        else:
            theme = "dark" if self.prefers_dark() else DEFAULT_THEME
        self.apply_theme(theme)

        if document is not None:
            button = document.get_element_by_id("theme-toggle")
            if button is not None:
                button.add_event_listener("click", self.toggle)
            else:
                LOGGER.warning("Theme toggle button not found; toggle disabled")
        return theme

    def get_theme(self) -> str:
        saved = self._saved_theme()
        if saved is not None:
            return saved
        return "dark" if self.root.has_class(DARK_CLASS) else "light"

    def set_theme(self, theme: str) -> str:
        if theme not in VALID_THEMES:
            LOGGER.warning("Invalid theme: %s. Using '%s' as fallback.", theme, DEFAULT_THEME)
            theme = DEFAULT_THEME
        self.storage.set_item(STORAGE_KEY, theme)
        self.apply_theme(theme)
        return theme

    def toggle(self) -> str:
        return self.set_theme("light" if self.get_theme() == "dark" else "dark")

    def apply_theme(self, theme: str) -> None:
        self.root.toggle_class(DARK_CLASS, theme == "dark")

    def _saved_theme(self) -> str | None:
        saved = self.storage.get_item(STORAGE_KEY)
        return saved if saved in VALID_THEMES else None
