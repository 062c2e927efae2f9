import unicodedata

import pytest

from collation import compare_vi, vietnamese_sort_key


def _sorted(words: list[str]) -> list[str]:
    return sorted(words, key=vietnamese_sort_key)


def test_modified_letters_follow_their_base_letter() -> None:
    assert _sorted(["b", "â", "a", "ă"]) == ["a", "ă", "â", "b"]
    assert _sorted(["ơ", "p", "ô", "o"]) == ["o", "ô", "ơ", "p"]
    assert _sorted(["v", "ư", "u"]) == ["u", "ư", "v"]
    assert _sorted(["f", "ê", "e"]) == ["e", "ê", "f"]


def test_d_with_stroke_is_its_own_letter_between_d_and_e() -> None:
    assert _sorted(["e", "đa", "dz"]) == ["dz", "đa", "e"]


def test_tone_order() -> None:
    assert _sorted(["ạ", "á", "ã", "ả", "à", "a"]) == ["a", "à", "ả", "ã", "á", "ạ"]


def test_letters_outrank_tones() -> None:
    # "àb" vs "ac": base letters differ at the second position.
    assert _sorted(["ac", "àb"]) == ["àb", "ac"]


def test_tones_outrank_case() -> None:
    assert _sorted(["àn", "An", "an"]) == ["an", "An", "àn"]


def test_case_insensitive_on_letters() -> None:
    assert compare_vi("ĂN", "ăn") > 0
    assert compare_vi("Ăn", "b") < 0


def test_realistic_titles() -> None:
    titles = ["Bên kia sông", "Ăn mày dĩ vãng", "Ánh sáng", "Anh hùng", "Đất rừng phương Nam", "Dòng sông"]
    assert _sorted(titles) == [
        "Anh hùng",
        "Ánh sáng",
        "Ăn mày dĩ vãng",
        "Bên kia sông",
        "Dòng sông",
        "Đất rừng phương Nam",
    ]


def test_prefix_sorts_first() -> None:
    assert _sorted(["Số đỏ tập 2", "Số đỏ"]) == ["Số đỏ", "Số đỏ tập 2"]


def test_digits_before_letters_and_spaces_before_digits() -> None:
    assert _sorted(["A", "1984", " x"]) == [" x", "1984", "A"]


@pytest.mark.parametrize("left, right", [
    ("", ""),
    ("Truyện Kiều", "Truyện Kiều"),
    (None, ""),
])
def test_equal_strings_compare_zero(left, right) -> None:
    assert compare_vi(left, right) == 0


def test_precomposed_and_decomposed_forms_are_equal() -> None:
    precomposed = unicodedata.normalize("NFC", "Tiếng Việt")
    decomposed = unicodedata.normalize("NFD", precomposed)
    assert precomposed != decomposed
    assert compare_vi(precomposed, decomposed) == 0


def test_compare_is_antisymmetric() -> None:
    assert compare_vi("a", "b") == -1
    assert compare_vi("b", "a") == 1


@pytest.mark.parametrize("lower, higher", [
    ("-6", "'"),
    ("_a", "-a"),
    ("-", ","),
    (".", "'"),
    ("'", '"'),
    ("(", "@"),
    ("&", "%"),
    ("%", "`"),
    ("+", "$"),
])
def test_punctuation_follows_unicode_collation_order(lower: str, higher: str) -> None:
    assert compare_vi(lower, higher) < 0
    assert compare_vi(higher, lower) > 0


def test_unlisted_punctuation_sorts_after_listed() -> None:
    assert compare_vi("%", "¡") < 0
