from __future__ import annotations

import threading
from typing import Any

import pytest
from conftest import FakeRadio, RecordingListener

from pynlp.channel import EventChannel
from pynlp.coordinator import SourceCoordinator
from pynlp.exceptions import AlreadyOpenError, NlpConfigError, NotOpenError, ReentrancyError
from pynlp.models import Cell, CellType, SourceKind, WiFi
from pynlp.sources import create_cell_coordinator, create_wifi_coordinator
from pynlp.state.machine import ScanState

SCAN = [
    {"bssid": "AA:BB:CC:DD:EE:FF", "ssid": "home", "level": -50, "frequency": 2437},
    {"bssid": "00-11-22-33-44-55", "ssid": "office", "level": -71, "frequency": 5180},
]
SECOND_SCAN = [{"bssid": "66:77:88:99:aa:bb", "ssid": "cafe", "level": -80, "frequency": 2412}]


def _wifi(radio: FakeRadio, channel: EventChannel, listener: RecordingListener) -> SourceCoordinator[WiFi]:
    return create_wifi_coordinator(radio=radio, channel=channel, listener=listener)


def test_request_scan_true_once_until_completion(
    radio: FakeRadio, channel: EventChannel, listener: RecordingListener
) -> None:
    coordinator = _wifi(radio, channel, listener)
    coordinator.open()

    assert coordinator.request_scan() is True
    assert coordinator.state == ScanState.SCANNING
    assert coordinator.request_scan() is False
    assert radio.scans == 1

    assert coordinator.complete_scan(SCAN) is True
    assert coordinator.request_scan() is True
    assert radio.scans == 2


def test_request_scan_before_open_is_a_noop(
    radio: FakeRadio, channel: EventChannel, listener: RecordingListener
) -> None:
    coordinator = _wifi(radio, channel, listener)

    assert coordinator.request_scan() is False
    coordinator.update()

    assert coordinator.state == ScanState.DISABLED
    assert radio.scans == 0
    assert listener.calls == []


def test_request_scan_skipped_when_radio_disabled(channel: EventChannel, listener: RecordingListener) -> None:
    radio = FakeRadio(enabled=False)
    coordinator = _wifi(radio, channel, listener)
    coordinator.open()

    assert coordinator.request_scan() is False
    assert coordinator.state == ScanState.WAITING
    assert radio.scans == 0


def test_completed_scan_is_delivered_and_consumed(
    radio: FakeRadio, channel: EventChannel, listener: RecordingListener
) -> None:
    coordinator = _wifi(radio, channel, listener)
    coordinator.open()
    coordinator.update()

    assert coordinator.complete_scan(SCAN) is True

    assert len(listener.calls) == 1
    source, observations = listener.calls[0]
    assert source == SourceKind.WIFI
    assert {wifi.bssid for wifi in observations} == {"aa:bb:cc:dd:ee:ff", "00:11:22:33:44:55"}
    assert coordinator.is_fresh is False


def test_discarded_scan_still_replaces_cache(
    radio: FakeRadio, channel: EventChannel, listener: RecordingListener
) -> None:
    coordinator = _wifi(radio, channel, listener)
    coordinator.open()
    coordinator.close()
    assert coordinator.state == ScanState.DISABLED

    assert coordinator.complete_scan(SCAN) is False

    assert len(coordinator.observations) == 2
    assert coordinator.is_fresh is True
    assert listener.calls == []


def test_close_during_scan_discards_late_result(
    radio: FakeRadio, channel: EventChannel, listener: RecordingListener
) -> None:
    coordinator = _wifi(radio, channel, listener)
    coordinator.open()
    assert coordinator.request_scan() is True
    coordinator.close()
    assert coordinator.state == ScanState.DISABLING

    assert coordinator.complete_scan(SCAN) is False
    assert coordinator.state == ScanState.DISABLED
    assert listener.calls == []


def test_update_never_requests_back_to_back_scans(
    radio: FakeRadio, channel: EventChannel, listener: RecordingListener
) -> None:
    coordinator = _wifi(radio, channel, listener)
    coordinator.open()

    for _ in range(5):
        coordinator.update()

    assert radio.scans == 1
    assert listener.calls == []


def test_update_delivers_unconsumed_data_instead_of_scanning(
    radio: FakeRadio, channel: EventChannel, listener: RecordingListener
) -> None:
    coordinator = _wifi(radio, channel, listener)
    coordinator.open()

    # Unsolicited result while waiting: cached and fresh, not surfaced.
    assert coordinator.complete_scan(SECOND_SCAN) is False
    assert coordinator.is_fresh is True

    coordinator.update()
    assert radio.scans == 0
    assert len(listener.calls) == 1
    assert {wifi.ssid for wifi in listener.last} == {"cafe"}

    coordinator.update()
    assert radio.scans == 1
    assert len(listener.calls) == 1


def test_lifecycle_misuse_raises(radio: FakeRadio, channel: EventChannel, listener: RecordingListener) -> None:
    coordinator = _wifi(radio, channel, listener)

    with pytest.raises(NotOpenError):
        coordinator.close()

    coordinator.open()
    with pytest.raises(AlreadyOpenError):
        coordinator.open()

    coordinator.close()
    coordinator.open()
    assert coordinator.state == ScanState.WAITING


def test_listener_is_required(radio: FakeRadio, channel: EventChannel) -> None:
    with pytest.raises(NlpConfigError):
        create_wifi_coordinator(radio=radio, channel=channel, listener=None)  # type: ignore[arg-type]


def test_channel_drives_completion_while_open(
    radio: FakeRadio, channel: EventChannel, listener: RecordingListener
) -> None:
    coordinator = _wifi(radio, channel, listener)
    coordinator.open()
    assert channel.subscriber_count == 1

    coordinator.update()
    assert channel.publish(SCAN) == 1
    assert len(listener.calls) == 1

    # Duplicate delivery of the same scan is not surfaced again.
    channel.publish(SCAN)
    assert len(listener.calls) == 1

    coordinator.close()
    assert channel.subscriber_count == 0
    assert channel.publish(SCAN) == 0


def test_listener_reentry_raises(radio: FakeRadio, channel: EventChannel) -> None:
    holder: dict[str, SourceCoordinator[Any]] = {}

    def reentrant(_source: str, _observations: set[Any]) -> None:
        holder["coordinator"].update()

    coordinator = create_wifi_coordinator(radio=radio, channel=channel, listener=reentrant)
    holder["coordinator"] = coordinator
    coordinator.open()
    coordinator.update()

    with pytest.raises(ReentrancyError):
        coordinator.complete_scan(SCAN)

    # The lock is released after the failed notification.
    assert coordinator.request_scan() is True


def test_radio_failure_leaves_source_waiting(channel: EventChannel, listener: RecordingListener) -> None:
    radio = FakeRadio(fail=True)
    coordinator = _wifi(radio, channel, listener)
    coordinator.open()

    with pytest.raises(RuntimeError):
        coordinator.request_scan()

    assert coordinator.state == ScanState.WAITING
    radio.fail = False
    assert coordinator.request_scan() is True


def test_malformed_entries_do_not_abort_scan(
    radio: FakeRadio, channel: EventChannel, listener: RecordingListener
) -> None:
    coordinator = _wifi(radio, channel, listener)
    coordinator.open()
    coordinator.update()

    coordinator.complete_scan([*SCAN, {"bssid": "garbage", "level": -40}, {"bssid": "aabbccddee00"}])

    assert len(listener.last) == 2


def test_infinite_level_does_not_abort_scan(
    radio: FakeRadio, channel: EventChannel, listener: RecordingListener
) -> None:
    coordinator = _wifi(radio, channel, listener)
    coordinator.open()
    coordinator.update()

    assert coordinator.complete_scan([SCAN[0], {"bssid": "00:11:22:33:44:55", "level": "inf"}]) is True

    assert coordinator.state == ScanState.WAITING
    assert {wifi.bssid for wifi in listener.last} == {"aa:bb:cc:dd:ee:ff"}


def test_failing_parser_still_replaces_cache_and_advances(
    radio: FakeRadio, channel: EventChannel, listener: RecordingListener
) -> None:
    def parser(raw: Any) -> set[WiFi]:
        if raw == "corrupt":
            raise RuntimeError("unreadable scan")
        return {WiFi(bssid="aa:bb:cc:dd:ee:ff", rssi=-50)}

    coordinator: SourceCoordinator[WiFi] = SourceCoordinator(
        source=SourceKind.WIFI, radio=radio, channel=channel, parser=parser, listener=listener
    )
    coordinator.open()
    coordinator.update()
    coordinator.complete_scan("ok")
    coordinator.update()
    assert coordinator.state == ScanState.SCANNING

    assert coordinator.complete_scan("corrupt") is True

    assert coordinator.state == ScanState.WAITING
    assert listener.last == set()
    assert coordinator.observations == set()
    assert coordinator.request_scan() is True


def test_concurrent_requests_dispatch_a_single_scan(
    radio: FakeRadio, channel: EventChannel, listener: RecordingListener
) -> None:
    coordinator = _wifi(radio, channel, listener)
    coordinator.open()
    results: list[bool] = []
    results_lock = threading.Lock()
    barrier = threading.Barrier(8)

    def worker() -> None:
        barrier.wait()
        for _ in range(50):
            dispatched = coordinator.request_scan()
            with results_lock:
                results.append(dispatched)

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert results.count(True) == 1
    assert radio.scans == 1


CELL_SCAN = {
    "network_operator": "26201",
    "cells": [
        {"type": "gsm", "registered": True, "mcc": 262, "mnc": 1, "lac": 100, "cid": 1000, "dbm": -70},
    ],
}


def test_cell_coordinator_merges_neighbors_by_cid(channel: EventChannel, listener: RecordingListener) -> None:
    def neighbors() -> tuple[list[dict[str, Any]], str]:
        return (
            [
                {"network_type": "edge", "lac": 100, "cid": 1000, "psc": 7, "rssi": -90},
                {"network_type": "gprs", "lac": 101, "cid": 2000, "rssi": -95},
                {"network_type": "lte", "lac": 102, "cid": 3000, "rssi": -99},
            ],
            "26201",
        )

    coordinator = create_cell_coordinator(channel=channel, listener=listener, neighbors=neighbors)
    coordinator.open()
    coordinator.update()
    assert coordinator.state == ScanState.SCANNING

    channel.publish(CELL_SCAN)

    cells: set[Cell] = listener.last
    assert {cell.cid for cell in cells} == {1000, 2000}
    registered = next(cell for cell in cells if cell.cid == 1000)
    assert registered.signal == -70
    assert all(cell.type == CellType.GSM for cell in cells)


def test_cell_coordinator_survives_failing_neighbor_lookup(
    channel: EventChannel, listener: RecordingListener
) -> None:
    def neighbors() -> tuple[list[dict[str, Any]], str]:
        raise OSError("modem gone")

    coordinator = create_cell_coordinator(channel=channel, listener=listener, neighbors=neighbors)
    coordinator.open()
    coordinator.update()

    assert coordinator.complete_scan(CELL_SCAN) is True
    assert {cell.cid for cell in listener.last} == {1000}


def test_cell_coordinator_keeps_valid_cells_next_to_junk(channel: EventChannel, listener: RecordingListener) -> None:
    coordinator = create_cell_coordinator(channel=channel, listener=listener)
    coordinator.open()
    coordinator.update()

    channel.publish({"network_operator": "26201", "cells": [*CELL_SCAN["cells"], None]})

    assert coordinator.state == ScanState.WAITING
    assert {cell.cid for cell in listener.last} == {1000}
