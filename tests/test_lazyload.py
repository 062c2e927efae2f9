from __future__ import annotations

from unittest.mock import MagicMock

from dom import Document, Element
from lazyload import IntersectionEntry, LazyImageLoader


def _img(src: str | None) -> Element:
    attributes = {"data-src": src} if src is not None else {}
    return Element("img", attributes=attributes)


def _document() -> Document:
    return Document([_img("https://example.com/a.jpg"), _img("https://example.com/b.jpg"), _img(None)])


def test_without_observer_loads_every_deferred_image() -> None:
    document = _document()
    loader = LazyImageLoader(document)

    loader.init()

    loaded = [img for img in document.elements if img.get_attribute("src")]
    assert [img.get_attribute("src") for img in loaded] == ["https://example.com/a.jpg", "https://example.com/b.jpg"]
    assert all(img.has_class("loaded") and img.get_attribute("data-src") is None for img in loaded)
    assert document.elements_with_attribute("data-src") == []


def test_observer_receives_options_and_every_deferred_image() -> None:
    observer = MagicMock()
    factory = MagicMock(return_value=observer)
    loader = LazyImageLoader(_document(), observer_factory=factory)

    loader.init()

    callback, options = factory.call_args.args
    assert callback == loader._on_intersection
    assert options == {"root": None, "root_margin": "50px", "threshold": 0.01}
    assert observer.observe.call_count == 2


def test_intersecting_image_is_loaded_and_unobserved() -> None:
    document = _document()
    observer = MagicMock()
    loader = LazyImageLoader(document, observer_factory=MagicMock(return_value=observer))
    loader.init()
    visible, offscreen, _ = document.elements

    loader._on_intersection(
        [IntersectionEntry(visible, True), IntersectionEntry(offscreen, False)],
        observer,
    )

    assert visible.get_attribute("src") == "https://example.com/a.jpg"
    assert offscreen.get_attribute("src") is None
    assert offscreen.get_attribute("data-src") == "https://example.com/b.jpg"
    observer.unobserve.assert_called_once_with(visible)


def test_load_image_without_source_is_noop() -> None:
    img = Element("img", attributes={"data-src": ""})
    assert LazyImageLoader(Document([img])).load_image(img) is False
    assert not img.has_class("loaded")


def test_load_all_images_returns_count() -> None:
    assert LazyImageLoader(_document()).load_all_images() == 2


def test_disconnect_releases_observer() -> None:
    observer = MagicMock()
    loader = LazyImageLoader(_document(), observer_factory=MagicMock(return_value=observer))
    loader.init()

    loader.disconnect()
    loader.disconnect()

    observer.disconnect.assert_called_once()
    assert loader.observer is None
