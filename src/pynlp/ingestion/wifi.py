"""Wi-Fi scan parsing."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from pynlp.ingestion.normalize import first_present, parse_batch, require_int, safe_int, safe_str
from pynlp.models.observation import WiFi

NOMAP_SUFFIX = "_nomap"


def frequency_to_channel(frequency: int) -> int:
    """Map a center frequency in MHz to its Wi-Fi channel, ``-1`` if unknown."""
    if 2412 <= frequency <= 2484:
        return (frequency - 2412) // 5 + 1
    if 5170 <= frequency <= 5825:
        return (frequency - 5170) // 5 + 34
    return -1


def is_nomap(ssid: str | None) -> bool:
    return bool(ssid) and ssid.lower().endswith(NOMAP_SUFFIX)


def parse_wifi_entry(entry: Mapping[str, Any], *, ignore_nomap: bool = True) -> WiFi | None:
    ssid = safe_str(entry.get("ssid") or entry.get("SSID"))
    if ignore_nomap and is_nomap(ssid):
        return None
    frequency = safe_int(entry.get("frequency"))
    if frequency is None:
        frequency = -1
    return WiFi(
        bssid=first_present(entry, "bssid", "BSSID"),
        rssi=require_int(entry, "level", "rssi"),
        channel=frequency_to_channel(frequency),
        frequency=frequency,
        ssid=ssid,
    )


def parse_wifi_scan(
    entries: Iterable[Mapping[str, Any]] | None,
    *,
    ignore_nomap: bool = True,
    redact: bool = True,
) -> set[WiFi]:
    """Parse a Wi-Fi scan result list into :class:`WiFi` observations."""
    return parse_batch(
        entries,
        lambda entry: parse_wifi_entry(entry, ignore_nomap=ignore_nomap),
        label="wifi",
        redact=redact,
    )
