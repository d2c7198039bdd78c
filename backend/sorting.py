# Sorting and searching helpers for record-like items (dataclasses or dicts)
from __future__ import annotations

import unicodedata
from typing import Any, List, Mapping, Sequence, Tuple

# Primary weight per character class: whitespace, punctuation, symbols, digits, letters
_WHITESPACE, _PUNCTUATION, _SYMBOL, _DIGIT, _LETTER = range(5)


def field_value(item: Any, key: str) -> Any:
    """Read a named field from a mapping or an attribute-bearing record"""
    if isinstance(item, Mapping):
        return item.get(key)
    return getattr(item, key, None)


def _char_class(ch: str) -> int:
    category = unicodedata.category(ch)
    if ch.isspace():
        return _WHITESPACE
    if category.startswith("P"):
        return _PUNCTUATION
    if category.startswith("S"):
        return _SYMBOL
    if category.startswith("N"):
        return _DIGIT
    return _LETTER


def locale_key(text: str) -> Tuple[Tuple[Tuple[int, str], ...], str, str]:
    """
    Collation key approximating a locale-aware comparison.

    Primary level ignores accents and case and orders character classes the
    way the root collation does (whitespace, punctuation, symbols, digits,
    letters). Then accents count, then lowercase sorts before uppercase.
    Scripts are not reordered and punctuation is never ignored, so this is
    an approximation, not a full collation.
    """
    decomposed = unicodedata.normalize("NFKD", text)
    base = "".join(ch for ch in decomposed if not unicodedata.combining(ch)).casefold()
    primary = tuple((_char_class(ch), ch) for ch in base)
    return (primary, text.casefold(), text.swapcase())


def _as_number(value: Any) -> Any:
    """Numeric strings become numbers, as subtraction would coerce them"""
    if isinstance(value, str):
        try:
            return float(value.strip() or 0)
        except ValueError:
            return None
    return value


def compare_values(a: Any, b: Any) -> int:
    """
    Three-way compare: locale-aware when both values are text, numeric
    difference otherwise. A numeric string compared with a number is read as
    a number. Values that can't be subtracted compare equal.
    """
    if isinstance(a, str) and isinstance(b, str):
        ka, kb = locale_key(a), locale_key(b)
        return (ka > kb) - (ka < kb)
    try:
        diff = _as_number(a) - _as_number(b)
    except TypeError:
        return 0
    if diff < 0:
        return -1
    if diff > 0:
        return 1
    return 0  # also NaN


def quick_sort(items: Sequence[Any], key: str, ascending: bool = True) -> List[Any]:
    """
    Three-way quicksort keyed by a named field.

    Each slice is split around its middle element into less / equal / greater
    buckets that keep input order, and only the outer buckets are split again,
    so items with equal keys keep their relative order. Descending order just
    swaps which outer bucket comes first. Uses an explicit stack of pending
    slices instead of recursion.
    """
    result: List[Any] = []
    # (settled, slice) pairs; popped in output order
    stack: List[Tuple[bool, List[Any]]] = [(False, list(items))]

    while stack:
        settled, chunk = stack.pop()
        if settled or len(chunk) <= 1:
            result.extend(chunk)
            continue

        pivot = field_value(chunk[len(chunk) // 2], key)
        before: List[Any] = []
        equal: List[Any] = []
        after: List[Any] = []
        for element in chunk:
            comparison = compare_values(field_value(element, key), pivot)
            if comparison < 0:
                (before if ascending else after).append(element)
            elif comparison > 0:
                (after if ascending else before).append(element)
            else:
                equal.append(element)

        stack.append((False, after))
        stack.append((True, equal))
        stack.append((False, before))

    return result


def binary_search(sorted_items: Sequence[Any], target: Any, key: str) -> int:
    """Position of target in items sorted by key, or -1"""
    left = 0
    right = len(sorted_items) - 1
    while left <= right:
        mid = (left + right) // 2
        comparison = compare_values(field_value(sorted_items[mid], key), target)
        if comparison == 0:
            return mid
        elif comparison < 0:
            left = mid + 1
        else:
            right = mid - 1
    return -1
