"""Bluetooth discovery parsing and batching."""

from __future__ import annotations

import threading
from collections.abc import Callable, Iterable, Mapping
from typing import Any

from pynlp.ingestion.normalize import first_present, parse_batch, safe_int, safe_str
from pynlp.models.observation import UNKNOWN_RSSI, Bluetooth


def parse_bluetooth_entry(entry: Mapping[str, Any]) -> Bluetooth:
    rssi = safe_int(entry.get("rssi"))
    return Bluetooth(
        address=first_present(entry, "address", "mac"),
        name=safe_str(entry.get("name")),
        rssi=UNKNOWN_RSSI if rssi is None else rssi,
    )


def parse_bluetooth_scan(
    entries: Iterable[Mapping[str, Any]] | None,
    *,
    redact: bool = True,
) -> set[Bluetooth]:
    """Parse discovered devices into :class:`Bluetooth` observations."""
    return parse_batch(entries, parse_bluetooth_entry, label="bluetooth", redact=redact)


class DiscoverySession:
    """Collects device reports of one discovery run into a single scan payload.

    Bluetooth discovery reports devices one at a time between a
    "discovery started" and a "discovery finished" event.  The session
    accumulates the raw device entries and hands the batch to *publish*
    when discovery finishes, so the coordinator sees one scan result per
    discovery run.
    """

    def __init__(self, publish: Callable[[list[dict[str, Any]]], None]) -> None:
        self._publish = publish
        self._lock = threading.Lock()
        self._devices: list[dict[str, Any]] = []

    def started(self) -> None:
        with self._lock:
            self._devices = []

    def found(self, device: Mapping[str, Any]) -> None:
        with self._lock:
            self._devices.append(dict(device))

    def finished(self) -> None:
        with self._lock:
            batch = self._devices
            self._devices = []
        self._publish(batch)

    @property
    def pending(self) -> int:
        with self._lock:
            return len(self._devices)
