import math
import random

import pytest

from collation import compare_vi
from collection import (
    book_url,
    generate_detail_page_url,
    generate_search_index,
    limit,
    paginate_items,
    sort_books_alphabetically,
)
from models import Book, SearchIndexEntry

_TITLE_ALPHABET = "aăâbcdđeêghiklmnoôơpqrstuưvxyAĂÂĐÔƠƯàảãáạềểễếệ 0123456789"


def _book(title: str, slug: str = "", **extra) -> Book:
    data = {
        "title": title,
        "author": "Tác giả",
        "cover": "https://example.com/c.jpg",
        "downloadLinks": [{"url": "https://example.com/b.epub", "platform": "Drive"}],
    }
    data.update(extra)
    return Book(slug=slug or f"slug-{abs(hash(title))}", data=data)


def _random_books(rng: random.Random, count: int) -> list[Book]:
    books = []
    for i in range(count):
        length = rng.randint(0, 12)
        title = "".join(rng.choice(_TITLE_ALPHABET) for _ in range(length))
        books.append(_book(title, slug=f"book-{i}"))
    return books


# --- sorting -----------------------------------------------------------------


@pytest.mark.parametrize("seed", range(20))
def test_sort_is_ordered_permutation_and_non_mutating(seed: int) -> None:
    rng = random.Random(seed)
    books = _random_books(rng, rng.randint(0, 40))
    before = list(books)

    result = sort_books_alphabetically(books)

    assert books == before
    assert result is not books
    assert len(result) == len(books)
    assert sorted(map(id, result)) == sorted(map(id, books))
    for current, following in zip(result, result[1:]):
        assert compare_vi(current.title, following.title) <= 0


def test_sort_is_stable_for_duplicate_titles() -> None:
    books = [
        _book("Truyện Kiều", slug="kieu-1"),
        _book("Nhật ký trong tù", slug="nhat-ky"),
        _book("Truyện Kiều", slug="kieu-2"),
        _book("Truyện Kiều", slug="kieu-3"),
    ]

    result = sort_books_alphabetically(books)

    assert [b.slug for b in result] == ["nhat-ky", "kieu-1", "kieu-2", "kieu-3"]


def test_sort_treats_missing_title_as_empty() -> None:
    untitled = Book(slug="untitled", data={})
    result = sort_books_alphabetically([_book("Bến quê", slug="ben-que"), untitled])
    assert [b.slug for b in result] == ["untitled", "ben-que"]


def test_sort_uses_vietnamese_letter_order() -> None:
    books = [_book(t) for t in ["Ông già và biển cả", "Ơn trời", "Ăn mày dĩ vãng", "Ai", "Ốc đảo"]]
    assert [b.title for b in sort_books_alphabetically(books)] == [
        "Ai",
        "Ăn mày dĩ vãng",
        "Ốc đảo",
        "Ông già và biển cả",
        "Ơn trời",
    ]


# --- search index ------------------------------------------------------------


def test_search_index_projects_fields_in_input_order() -> None:
    books = [
        _book("Zorba", slug="zorba", description="Hy Lạp", tags=["Tiểu thuyết"]),
        _book("An", slug="an"),
    ]

    index = generate_search_index(books)

    assert index == [
        SearchIndexEntry(
            title="Zorba", author="Tác giả", description="Hy Lạp", tags=("Tiểu thuyết",), url="/books/zorba/"
        ),
        SearchIndexEntry(title="An", author="Tác giả", description="", tags=(), url="/books/an/"),
    ]


def test_search_index_defaults_missing_fields() -> None:
    entry = generate_search_index([Book(slug="bare", data={})])[0]
    assert entry.to_dict() == {"title": "", "author": "", "description": "", "tags": [], "url": "/books/bare/"}


def test_search_index_empty_input() -> None:
    assert generate_search_index([]) == []


# --- urls --------------------------------------------------------------------


def test_detail_page_url_uses_index_html() -> None:
    assert generate_detail_page_url("my-book") == "/books/my-book/index.html"


@pytest.mark.parametrize("slug", ["", None, 42])
def test_detail_page_url_degenerate_slug(slug) -> None:
    assert generate_detail_page_url(slug) == "/books//index.html"


def test_collection_url_uses_trailing_slash() -> None:
    assert book_url("my-book") == "/books/my-book/"


# --- pagination --------------------------------------------------------------


@pytest.mark.parametrize("count", [0, 1, 2, 5, 11, 12, 13, 24, 25, 100])
@pytest.mark.parametrize("page_size", [1, 2, 5, 12])
def test_paginate_page_shape(count: int, page_size: int) -> None:
    items = [object() for _ in range(count)]

    pages = paginate_items(items, page_size)

    expected_pages = math.ceil(count / page_size) if count else 1
    assert len(pages) == expected_pages
    assert sum(len(page) for page in pages) == count
    assert all(len(page) <= page_size for page in pages)
    assert all(len(page) == page_size for page in pages[:-1])
    flattened = [item for page in pages for item in page]
    assert len(flattened) == len(items)
    assert all(a is b for a, b in zip(flattened, items))


def test_paginate_empty_gives_one_empty_page() -> None:
    assert paginate_items([], 12) == [[]]


@pytest.mark.parametrize("page_size", [0, -1, -12])
def test_paginate_non_positive_page_size_gives_no_pages(page_size: int) -> None:
    assert paginate_items([1, 2, 3], page_size) == []


@pytest.mark.parametrize("items", [None, "abc", 42, {"a": 1}, {1, 2}])
def test_paginate_non_sequence_gives_no_pages(items) -> None:
    assert paginate_items(items, 2) == []


def test_paginate_accepts_tuples() -> None:
    assert paginate_items((1, 2, 3), 2) == [[1, 2], [3]]


def test_limit() -> None:
    assert limit([1, 2, 3, 4], 2) == [1, 2]
    assert limit([1], 5) == [1]
