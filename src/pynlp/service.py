"""Aggregator driving several source coordinators together."""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterable
from typing import Any

from pynlp.config import ScanConfig
from pynlp.coordinator import SourceCoordinator
from pynlp.fusion import WeightPolicy, fuse, uniform
from pynlp.models.location import FusedLocation, LocationEstimate

_logger = logging.getLogger(__name__)


class LocationService:
    """Holds the coordinators of one location backend.

    Usage::

        service = LocationService()
        service.add_helper(create_wifi_coordinator(...))
        service.open()
        service.update()   # on every location request
        location = service.fuse(estimates_from_my_backend)
        service.close()

    Helpers added while the service is open are opened right away.
    """

    def __init__(self, config: ScanConfig | None = None) -> None:
        self._config = config or ScanConfig()
        self._lock = threading.Lock()
        self._helpers: list[SourceCoordinator[Any]] = []
        self._opened = False

    @property
    def is_open(self) -> bool:
        return self._opened

    @property
    def helpers(self) -> tuple[SourceCoordinator[Any], ...]:
        with self._lock:
            return tuple(self._helpers)

    def add_helper(self, helper: SourceCoordinator[Any]) -> None:
        with self._lock:
            if helper in self._helpers:
                return
            self._helpers.append(helper)
            if self._opened and not helper.is_open:
                helper.open()

    def remove_helpers(self) -> None:
        with self._lock:
            if self._opened:
                for helper in self._helpers:
                    if helper.is_open:
                        helper.close()
            self._helpers.clear()

    def open(self) -> None:
        with self._lock:
            for helper in self._helpers:
                if not helper.is_open:
                    helper.open()
            self._opened = True
            _logger.debug("Location service opened with %d helpers", len(self._helpers))

    def close(self) -> None:
        with self._lock:
            for helper in self._helpers:
                if helper.is_open:
                    helper.close()
            self._opened = False
            _logger.debug("Location service closed")

    def update(self) -> None:
        for helper in self.helpers:
            helper.update()

    def fuse(
        self,
        estimates: Iterable[LocationEstimate | None],
        weighting: WeightPolicy = uniform,
    ) -> FusedLocation | None:
        """Fuse *estimates* tagged with the configured fusion source."""
        return fuse(estimates, weighting, source=self._config.fusion_source)
