"""Normalization helpers.

Centralizes tolerant field parsing and the per-element drop policy shared by all
scan parsers.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Callable, Iterable, Mapping
from typing import Any, TypeVar

from pynlp._redact import redact_for_log

T = TypeVar("T")

_logger = logging.getLogger(__name__)


def safe_float(value: Any) -> float | None:
    if value is None or value == "":
        return None
    try:
        result = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(result):
        return None
    return result


def safe_int(value: Any) -> int | None:
    parsed = safe_float(value)
    if parsed is None:
        return None
    return int(parsed)


def safe_str(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value)
    return text if text else None


def first_present(entry: Mapping[str, Any], *keys: str) -> Any:
    """Return the value of the first key present (and not ``None``) in *entry*."""
    for key in keys:
        value = entry.get(key)
        if value is not None:
            return value
    return None


def require_int(entry: Mapping[str, Any], *keys: str) -> int:
    """Like :func:`first_present` but coerced to ``int``; raises when absent."""
    value = safe_int(first_present(entry, *keys))
    if value is None:
        raise ValueError(f"missing integer field {'/'.join(keys)}")
    return value


def parse_batch(
    entries: Iterable[Any] | None,
    parse_one: Callable[[Any], T | None],
    *,
    label: str = "",
    redact: bool = True,
) -> set[T]:
    """Parse every entry, dropping the ones that fail.

    ``parse_one`` returns ``None`` to skip an entry on purpose and raises
    ``ValueError`` (which covers :class:`~pynlp.exceptions.InvalidObservation`),
    ``KeyError``, ``TypeError``, ``AttributeError`` (non-mapping entries) or
    ``OverflowError`` for malformed ones.  A malformed entry is logged and
    skipped; it never aborts the batch.
    """
    if entries is None:
        return set()
    parsed: set[T] = set()
    for entry in entries:
        try:
            item = parse_one(entry)
        except (ValueError, KeyError, TypeError, AttributeError, OverflowError) as err:
            _logger.debug(
                "Dropping malformed %s entry %s: %s",
                label or "scan",
                redact_for_log(entry) if redact else entry,
                err,
            )
            continue
        if item is not None:
            parsed.add(item)
    return parsed
