"""Vietnamese collation for title ordering.

Titles are compared in three levels, the way locale-aware comparison does it
for the ``vi`` locale:

1. base letters of the Vietnamese alphabet (``a < ă < â < b ... < đ ...``),
2. tone marks (none < grave < hook < tilde < acute < dot below),
3. case (lowercase first).

A lower level only decides when every higher level is equal, so ``"an"``
sorts before ``"ăn"`` regardless of tones or case, and ``"an"`` before
``"An"`` before ``"àn"``.
"""

from __future__ import annotations

import unicodedata

# Letters that carry a modifier (breve, circumflex, horn, stroke) are distinct
# letters of the alphabet, not accented variants.
VIETNAMESE_ALPHABET: tuple[str, ...] = (
    "a", "ă", "â", "b", "c", "d", "đ", "e", "ê", "f", "g", "h", "i", "j", "k",
    "l", "m", "n", "o", "ô", "ơ", "p", "q", "r", "s", "t", "u", "ư", "v", "w",
    "x", "y", "z",
)
_LETTER_WEIGHTS: dict[str, int] = {
    unicodedata.normalize("NFC", letter): i for i, letter in enumerate(VIETNAMESE_ALPHABET)
}

_BREVE = "\u0306"
_CIRCUMFLEX = "\u0302"
_HORN = "\u031B"
_LETTER_MODIFIERS = {_BREVE, _CIRCUMFLEX, _HORN}

TONE_WEIGHTS: dict[str, int] = {
    "\u0300": 1,  # huyền
    "\u0309": 2,  # hỏi
    "\u0303": 3,  # ngã
    "\u0301": 4,  # sắc
    "\u0323": 5,  # nặng
}

_GROUP_SPACE = 0
_GROUP_PUNCT = 1
_GROUP_SYMBOL = 2
_GROUP_DIGIT = 3
_GROUP_LETTER = 4

_FOREIGN_LETTER_OFFSET = 1000

# Default Unicode collation order for common punctuation and symbols.
# Characters missing from these tables sort after them by code point.
_PUNCT_ORDER: dict[str, int] = {
    char: i
    for i, char in enumerate(
        "_-–—,;:!?.…'‘’\"“”«»()[]{}@*/\\&#%"
    )
}
_SYMBOL_ORDER: dict[str, int] = {char: i for i, char in enumerate("`^+<=>|~$")}

CollationKey = tuple[tuple[tuple[int, int], ...], tuple[tuple[int, ...], ...], tuple[int, ...]]


def vietnamese_sort_key(text: str | None) -> CollationKey:
    """Return a key whose natural ordering matches Vietnamese collation."""
    primary: list[tuple[int, int]] = []
    secondary: list[tuple[int, ...]] = []
    tertiary: list[int] = []

    for base, marks in _clusters(unicodedata.normalize("NFD", text or "")):
        is_upper = base != base.lower()
        letter = base.lower()

        modifiers = "".join(m for m in marks if m in _LETTER_MODIFIERS)
        composed = unicodedata.normalize("NFC", letter + modifiers) if modifiers else letter
        if composed in _LETTER_WEIGHTS:
            letter = composed
            marks = [m for m in marks if m not in _LETTER_MODIFIERS]

        for char in _fold(letter):
            primary.append(_primary_weight(char))
            secondary.append(_secondary_weight(marks))
            tertiary.append(1 if is_upper else 0)
            # Marks belong to the first folded character only.
            marks = []
            is_upper = False

    return tuple(primary), tuple(secondary), tuple(tertiary)


def compare_vi(left: str | None, right: str | None) -> int:
    """Three-way comparison: negative, zero or positive like ``localeCompare``."""
    left_key = vietnamese_sort_key(left)
    right_key = vietnamese_sort_key(right)
    if left_key < right_key:
        return -1
    if left_key > right_key:
        return 1
    return 0


def _clusters(text: str) -> list[tuple[str, list[str]]]:
    """Split decomposed text into (base character, combining marks) pairs."""
    clusters: list[tuple[str, list[str]]] = []
    for char in text:
        if unicodedata.combining(char) and clusters:
            clusters[-1][1].append(char)
        else:
            clusters.append((char, []))
    return clusters


def _fold(letter: str) -> str:
    if letter in _LETTER_WEIGHTS:
        return letter
    return letter.casefold() or letter


def _primary_weight(char: str) -> tuple[int, int]:
    if char in _LETTER_WEIGHTS:
        return (_GROUP_LETTER, _LETTER_WEIGHTS[char])

    category = unicodedata.category(char)
    if category.startswith("Z") or char.isspace():
        return (_GROUP_SPACE, ord(char))
    if category.startswith("P"):
        return (_GROUP_PUNCT, _table_weight(_PUNCT_ORDER, char))
    if category.startswith("N"):
        digit = unicodedata.digit(char, None)
        return (_GROUP_DIGIT, digit if digit is not None else 10 + ord(char))
    if category.startswith("L"):
        return (_GROUP_LETTER, _FOREIGN_LETTER_OFFSET + ord(char))
    return (_GROUP_SYMBOL, _table_weight(_SYMBOL_ORDER, char))


def _table_weight(table: dict[str, int], char: str) -> int:
    if char in table:
        return table[char]
    return len(table) + ord(char)


def _secondary_weight(marks: list[str]) -> tuple[int, ...]:
    tone = 0
    others: list[int] = []
    for mark in marks:
        if mark in TONE_WEIGHTS:
            tone = TONE_WEIGHTS[mark]
        else:
            others.append(ord(mark))
    return (tone, *others)
