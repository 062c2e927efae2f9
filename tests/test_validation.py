import pytest

from validation import ERROR_MESSAGES, REQUIRED_FIELDS, BuildError, ensure_valid, validate_book_data

KNOWN_ERRORS = set(ERROR_MESSAGES.values())


def _valid_data(**overrides) -> dict:
    data = {
        "title": "Dế Mèn Phiêu Lưu Ký",
        "author": "Tô Hoài",
        "cover": "https://example.com/cover.jpg",
        "downloadLinks": [{"url": "https://example.com/book.epub", "platform": "Drive"}],
    }
    data.update(overrides)
    return data


def test_valid_record_has_no_errors() -> None:
    result = validate_book_data(_valid_data())
    assert result.valid is True
    assert result.errors == ()


@pytest.mark.parametrize("optional", [
    {},
    {"description": "Truyện thiếu nhi"},
    {"tags": ["Thiếu nhi", "Kinh điển"]},
    {"description": "", "tags": []},
    {"description": "Mô tả", "tags": ["A"], "extra": 1},
])
def test_optional_fields_never_affect_validity(optional: dict) -> None:
    result = validate_book_data(_valid_data(**optional))
    assert result.valid is True
    assert result.errors == ()


@pytest.mark.parametrize("field, message", [
    ("title", "missing title"),
    ("author", "missing author"),
    ("cover", "missing cover"),
    ("downloadLinks", "missing downloadLinks"),
])
def test_missing_required_field_reports_its_error(field: str, message: str) -> None:
    data = _valid_data()
    del data[field]

    result = validate_book_data(data)

    assert result.valid is False
    assert result.errors == (message,)


@pytest.mark.parametrize("field", REQUIRED_FIELDS)
@pytest.mark.parametrize("falsy", [None, "", 0, False])
def test_falsy_required_field_is_missing(field: str, falsy) -> None:
    result = validate_book_data(_valid_data(**{field: falsy}))
    assert result.valid is False
    assert len(result.errors) >= 1
    assert set(result.errors) <= KNOWN_ERRORS


def test_all_errors_collected_in_declaration_order() -> None:
    result = validate_book_data({})
    assert result.valid is False
    assert result.errors == (
        "missing title",
        "missing author",
        "missing cover",
        "missing downloadLinks",
    )


def test_none_record_is_invalid() -> None:
    assert validate_book_data(None).valid is False


@pytest.mark.parametrize("links", ["https://example.com/book.epub", {"url": "x"}, 42])
def test_non_sequence_download_links_rejected(links) -> None:
    result = validate_book_data(_valid_data(downloadLinks=links))
    assert result.errors == ("downloadLinks must have at least 1 item",)


def test_empty_download_links_list_counts_as_missing() -> None:
    # An empty list is falsy, so only the "missing" rule fires.
    result = validate_book_data(_valid_data(downloadLinks=[]))
    assert result.errors == ("missing downloadLinks",)


def test_download_links_errors_are_mutually_exclusive() -> None:
    for links in (None, [], "text", {"a": 1}):
        errors = validate_book_data(_valid_data(downloadLinks=links)).errors
        link_errors = [e for e in errors if "downloadLinks" in e]
        assert len(link_errors) == 1


def test_ensure_valid_passes_silently_for_valid_record() -> None:
    ensure_valid(_valid_data(), "books/de-men.md")


def test_ensure_valid_raises_with_source_and_every_error() -> None:
    with pytest.raises(BuildError) as excinfo:
        ensure_valid({"title": "Only a title"}, "books/broken.md")

    exc = excinfo.value
    assert exc.source == "books/broken.md"
    assert exc.errors == ("missing author", "missing cover", "missing downloadLinks")
    message = str(exc)
    assert message.startswith('Build Error in "books/broken.md":')
    for error in exc.errors:
        assert error in message
