"""Normalization and set operations for the shared ingredient list.

Ingredients are compared after trimming, collapsing inner whitespace and
lower-casing. The stored form is the normalized one, so "  Red  Onion" and
"red onion" are the same entry.
"""

import re
from typing import Iterable, List

_SPLIT_RE = re.compile(r"[,\n]")


def normalize_ingredient(name: str) -> str:
    if not name:
        return ""
    return " ".join(name.split()).lower()


def parse_ingredient_input(text: str) -> List[str]:
    """Split a free-text entry such as "egg, milk" into trimmed parts."""
    if not text:
        return []
    parts = [part.strip() for part in _SPLIT_RE.split(text)]
    return [part for part in parts if part]


def merge_ingredients(current: Iterable[str], names: Iterable[str]) -> List[str]:
    merged: List[str] = []
    seen = set()
    for raw in list(current) + list(names):
        name = normalize_ingredient(raw)
        if not name or name in seen:
            continue
        seen.add(name)
        merged.append(name)
    return merged


def remove_ingredients(current: Iterable[str], names: Iterable[str]) -> List[str]:
    dropped = {normalize_ingredient(name) for name in names}
    return [name for name in merge_ingredients(current, []) if name not in dropped]


def count_distinct(names: Iterable[str]) -> int:
    return len(merge_ingredients([], names))
