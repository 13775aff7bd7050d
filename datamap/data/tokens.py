"""Numeric parsing of raw tokens and the per-batch majority vote."""

from __future__ import annotations

import math
from typing import Iterable, Sequence


def parse_numeric(token: str) -> float | None:
    """
    Return ``token`` as a float, or ``None`` when it is not a number.

    Surrounding whitespace is ignored; empty tokens and non-finite spellings
    such as ``nan`` or ``inf`` are never numeric.
    """
    text = str(token).strip()
    if not text or "_" in text:
        return None
    try:
        value = float(text)
    except ValueError:
        return None
    return value if math.isfinite(value) else None


def is_numeric(token: str) -> bool:
    return parse_numeric(token) is not None


def count_non_numeric(tokens: Iterable[str]) -> int:
    return sum(1 for token in tokens if not is_numeric(token))


def is_categorical_batch(tokens: Sequence[str]) -> bool:
    """
    Decide whether a dimension's tokens are predominantly categorical.

    A batch is categorical only when strictly more than half of its tokens fail
    to parse as numbers; an exact tie counts as numeric.
    """
    return count_non_numeric(tokens) > len(tokens) / 2
