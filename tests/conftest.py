from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

import pytest

from pynlp.channel import EventChannel


@dataclass
class FakeRadio:
    enabled: bool = True
    fail: bool = False
    scans: int = 0

    def is_enabled(self) -> bool:
        return self.enabled

    def start_scan(self) -> None:
        if self.fail:
            raise RuntimeError("radio busy")
        self.scans += 1


@dataclass
class RecordingListener:
    calls: list[tuple[str, set[Any]]] = field(default_factory=list)

    def __call__(self, source: str, observations: set[Any]) -> None:
        self.calls.append((source, observations))

    @property
    def last(self) -> set[Any]:
        return self.calls[-1][1]


@pytest.fixture
def radio() -> FakeRadio:
    return FakeRadio()


@pytest.fixture
def listener() -> RecordingListener:
    return RecordingListener()


@pytest.fixture
def channel() -> EventChannel:
    return EventChannel("test")
