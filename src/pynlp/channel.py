"""Notification channel between the platform shell and coordinators."""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from typing import Any, Protocol

_logger = logging.getLogger(__name__)

RawScanCallback = Callable[[Any], None]


class NotificationChannel(Protocol):
    """Delivers raw scan results asynchronously to subscribers."""

    def subscribe(self, callback: RawScanCallback) -> None: ...

    def unsubscribe(self, callback: RawScanCallback) -> None: ...


class EventChannel:
    """Thread-safe in-process :class:`NotificationChannel`.

    The shell calls :meth:`publish` from whatever thread its platform
    delivers scan results on.  Callbacks run on that thread, one after
    another; an exception raised by a callback propagates to the publisher.
    """

    def __init__(self, name: str = "") -> None:
        self._name = name
        self._lock = threading.Lock()
        self._callbacks: list[RawScanCallback] = []

    def subscribe(self, callback: RawScanCallback) -> None:
        with self._lock:
            if callback not in self._callbacks:
                self._callbacks.append(callback)

    def unsubscribe(self, callback: RawScanCallback) -> None:
        with self._lock:
            if callback in self._callbacks:
                self._callbacks.remove(callback)

    def publish(self, raw: Any) -> int:
        """Deliver *raw* to every subscriber; returns how many were called."""
        with self._lock:
            callbacks = list(self._callbacks)
        if not callbacks:
            _logger.debug("No subscriber for scan result on channel %s", self._name)
        for callback in callbacks:
            callback(raw)
        return len(callbacks)

    @property
    def subscriber_count(self) -> int:
        with self._lock:
            return len(self._callbacks)
