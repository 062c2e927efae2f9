"""Minimal page model the client components are wired against.

Only what the components touch is modelled: attributes, a class list,
``inner_html``/``value``/``disabled`` and event listeners.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from typing import Any

LOGGER = logging.getLogger(__name__)

HIDDEN_CLASS = "hidden"


class Element:
    def __init__(
        self,
        tag: str = "div",
        id: str | None = None,
        attributes: dict[str, str] | None = None,
        classes: Iterable[str] = (),
        value: str = "",
    ) -> None:
        self.tag = tag
        self.id = id
        self.attributes: dict[str, str] = dict(attributes or {})
        self.class_list: set[str] = set(classes)
        self.value = value
        self.inner_html = ""
        self.disabled = False
        self._listeners: dict[str, list[Callable[..., Any]]] = {}

    def get_attribute(self, name: str) -> str | None:
        return self.attributes.get(name)

    def set_attribute(self, name: str, value: str) -> None:
        self.attributes[name] = value

    def remove_attribute(self, name: str) -> None:
        self.attributes.pop(name, None)

    def has_class(self, name: str) -> bool:
        return name in self.class_list

    def toggle_class(self, name: str, force: bool | None = None) -> bool:
        """Add or remove ``name``; returns whether it is present afterwards."""
        present = name not in self.class_list if force is None else force
        if present:
            self.class_list.add(name)
        else:
            self.class_list.discard(name)
        return present

    @property
    def hidden(self) -> bool:
        return HIDDEN_CLASS in self.class_list

    def add_event_listener(self, event: str, handler: Callable[..., Any]) -> None:
        self._listeners.setdefault(event, []).append(handler)

    def dispatch(self, event: str, *args: Any) -> list[Any]:
        """Call every handler registered for ``event``; returns their results."""
        return [handler(*args) for handler in self._listeners.get(event, [])]

    def __repr__(self) -> str:
        return f"Element(tag={self.tag!r}, id={self.id!r})"


class Document:
    def __init__(self, elements: Iterable[Element] = (), root: Element | None = None) -> None:
        self.root = root or Element("html")
        self.elements: list[Element] = list(elements)

    def add(self, element: Element) -> Element:
        self.elements.append(element)
        return element

    def get_element_by_id(self, element_id: str) -> Element | None:
        for element in self.elements:
            if element.id == element_id:
                return element
        LOGGER.debug("No element with id=%s", element_id)
        return None

    def elements_with_attribute(self, name: str) -> list[Element]:
        return [element for element in self.elements if name in element.attributes]
