#!/usr/bin/env python
# -*- coding: utf-8 -*-
# @Date    : 2026-10-19 08:12:31
# @Author  : Tom Brandherm (https://github.com/tombo92)
# @Link    : https://github.com/tombo92/TireStorageManager
"""
Dashboard table sorting
"""
# ========================================================
# IMPORTS
# ========================================================
import math
from dataclasses import dataclass
from datetime import date, datetime, timezone
from enum import Enum
from functools import cmp_to_key
from typing import Callable, Optional


# ========================================================
# CLASSES
# ========================================================
class SortKind(Enum):
    IDENTIFIER = "identifier"
    DATE = "date"
    NUMBER = "number"
    TEXT = "text"


class Direction(str, Enum):
    ASC = "asc"
    DESC = "desc"

    @classmethod
    def parse(cls, value) -> "Direction":
        if isinstance(value, cls):
            return value
        if str(value or "").strip().lower() == cls.DESC.value:
            return cls.DESC
        return cls.ASC


@dataclass(frozen=True)
class SortSpec:
    key: str
    direction: Direction = Direction.ASC


# ========================================================
# GLOABALS
# ========================================================
EPOCH = 0.0

SORT_KINDS = {
    "id": SortKind.IDENTIFIER,
    "cost_center": SortKind.IDENTIFIER,
    "replacement_date": SortKind.DATE,
    "created_at": SortKind.DATE,
    "updated_at": SortKind.DATE,
    "no_of_tires": SortKind.NUMBER,
    "no_of_tubes": SortKind.NUMBER,
    "present_km": SortKind.NUMBER,
    "previous_km": SortKind.NUMBER,
}


# ========================================================
# FUNCTIONS
# ========================================================
def _field(item, key):
    if isinstance(item, dict):
        return item.get(key)
    return getattr(item, key, None)


def _as_number(value) -> float:
    if isinstance(value, bool) or value is None:
        return 0.0
    try:
        number = float(str(value).strip())
    except ValueError:
        return 0.0
    return 0.0 if math.isnan(number) or math.isinf(number) else number


def _as_timestamp(value) -> float:
    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, date):
        dt = datetime(value.year, value.month, value.day)
    elif isinstance(value, str) and value.strip():
        try:
            dt = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
        except ValueError:
            return EPOCH
    else:
        return EPOCH
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.timestamp()


def _as_text(value) -> str:
    return "" if value is None else str(value).casefold()


SORT_VALUES: dict[SortKind, Callable] = {
    SortKind.IDENTIFIER: _as_number,
    SortKind.DATE: _as_timestamp,
    SortKind.NUMBER: _as_number,
    SortKind.TEXT: _as_text,
}


def sort_kind(key: str) -> SortKind:
    return SORT_KINDS.get(key, SortKind.TEXT)


def comparator(key: str, direction=Direction.ASC) -> Callable[..., int]:
    """Build a ``(a, b) -> -1|0|1`` comparator for one table column."""
    value_of = SORT_VALUES[sort_kind(key)]
    sign = -1 if Direction.parse(direction) is Direction.DESC else 1

    def compare(a, b) -> int:
        va, vb = value_of(_field(a, key)), value_of(_field(b, key))
        if va == vb:
            return 0
        return sign * (-1 if va < vb else 1)

    return compare


def sort_requests(items, spec: Optional[SortSpec]) -> list:
    """Return a new, stably sorted list; ``spec=None`` keeps the order."""
    items = list(items or [])
    if spec is None:
        return items
    return sorted(items, key=cmp_to_key(comparator(spec.key, spec.direction)))


def next_sort_spec(current: Optional[SortSpec], key: str) -> SortSpec:
    """Header click: same column toggles, another column starts ascending."""
    if current is not None and current.key == key:
        flipped = (Direction.ASC if current.direction is Direction.DESC
                   else Direction.DESC)
        return SortSpec(key, flipped)
    return SortSpec(key, Direction.ASC)
