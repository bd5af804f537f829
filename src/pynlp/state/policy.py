"""Scan policies.

This module holds the decisions a coordinator applies; it contains no
locking and no parsing.
"""

from __future__ import annotations

from collections.abc import Callable, Hashable, Iterable
from enum import StrEnum
from typing import TypeVar

T = TypeVar("T")


class UpdateAction(StrEnum):
    SKIP = "skip"
    DELIVER = "deliver"
    SCAN = "scan"


def decide_update(*, is_open: bool, cache_fresh: bool) -> UpdateAction:
    """Decide what a poll-driven ``update()`` should do.

    Policy:
    - A closed source does nothing.
    - Fresh data that was never delivered is delivered instead of scanning.
    - Otherwise a new scan is requested.
    """
    if not is_open:
        return UpdateAction.SKIP
    if cache_fresh:
        return UpdateAction.DELIVER
    return UpdateAction.SCAN


def merge_secondary(
    primary: Iterable[T],
    secondary: Iterable[T],
    key: Callable[[T], Hashable],
) -> set[T]:
    """Merge *secondary* into *primary*, skipping keys the primary already has."""
    merged = set(primary)
    seen = {key(item) for item in merged}
    for item in secondary:
        item_key = key(item)
        if item_key in seen:
            continue
        merged.add(item)
        seen.add(item_key)
    return merged
