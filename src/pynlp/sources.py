"""Ready-made coordinators for Wi-Fi, cell and Bluetooth sources."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from typing import Any

from pynlp.channel import NotificationChannel
from pynlp.config import ScanConfig
from pynlp.coordinator import Listener, Radio, SourceCoordinator
from pynlp.ingestion.bluetooth import parse_bluetooth_scan
from pynlp.ingestion.cell import parse_cell_scan, parse_neighboring_cells
from pynlp.ingestion.wifi import parse_wifi_scan
from pynlp.models.observation import Bluetooth, Cell, SourceKind, WiFi


class PassiveRadio:
    """Radio for sources whose results are pushed without being asked for.

    Cell info arrives whenever the modem reports it; a scan request only
    arms the state machine so the next report is surfaced.
    """

    def is_enabled(self) -> bool:
        return True

    def start_scan(self) -> None:
        return None


NeighborLookup = Callable[[], tuple[Iterable[Mapping[str, Any]] | None, str | None]]


def _neighbor_source(lookup: NeighborLookup, *, redact: bool) -> Callable[[], set[Cell]]:
    def secondary() -> set[Cell]:
        entries, network_operator = lookup()
        return parse_neighboring_cells(entries, network_operator, redact=redact)

    return secondary


def create_wifi_coordinator(
    *,
    radio: Radio,
    channel: NotificationChannel,
    listener: Listener[WiFi],
    config: ScanConfig | None = None,
) -> SourceCoordinator[WiFi]:
    config = config or ScanConfig()

    def parser(raw: Iterable[Mapping[str, Any]] | None) -> set[WiFi]:
        return parse_wifi_scan(raw, ignore_nomap=config.ignore_nomap, redact=config.redact_logs)

    return SourceCoordinator(
        source=SourceKind.WIFI,
        radio=radio,
        channel=channel,
        parser=parser,
        listener=listener,
    )


def create_cell_coordinator(
    *,
    channel: NotificationChannel,
    listener: Listener[Cell],
    radio: Radio | None = None,
    neighbors: NeighborLookup | None = None,
    config: ScanConfig | None = None,
) -> SourceCoordinator[Cell]:
    """Build a cell coordinator.

    *neighbors* returns ``(neighboring_cell_entries, network_operator)``.
    Neighbors are merged into every scan unless their CID is already
    present, and only when ``config.merge_neighboring_cells`` is set.
    """
    config = config or ScanConfig()

    def parser(raw: Mapping[str, Any] | None) -> set[Cell]:
        return parse_cell_scan(raw, fix_mnc=config.fix_cell_mnc, redact=config.redact_logs)

    secondary: Callable[[], Iterable[Cell]] | None = None
    if neighbors is not None and config.merge_neighboring_cells:
        secondary = _neighbor_source(neighbors, redact=config.redact_logs)

    return SourceCoordinator(
        source=SourceKind.CELL,
        radio=radio or PassiveRadio(),
        channel=channel,
        parser=parser,
        listener=listener,
        secondary=secondary,
        dedupe_key=lambda cell: cell.cid,
    )


def create_bluetooth_coordinator(
    *,
    radio: Radio,
    channel: NotificationChannel,
    listener: Listener[Bluetooth],
    config: ScanConfig | None = None,
) -> SourceCoordinator[Bluetooth]:
    config = config or ScanConfig()

    def parser(raw: Iterable[Mapping[str, Any]] | None) -> set[Bluetooth]:
        return parse_bluetooth_scan(raw, redact=config.redact_logs)

    return SourceCoordinator(
        source=SourceKind.BLUETOOTH,
        radio=radio,
        channel=channel,
        parser=parser,
        listener=listener,
    )
