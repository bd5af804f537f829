"""Scan coordination state machine.

One instance per sensor source.  The machine holds no lock of its own; its
owner drives it under a single mutual-exclusion scope so the
request-decide-mutate sequence is atomic.
"""

from __future__ import annotations

import logging
from enum import StrEnum

_logger = logging.getLogger(__name__)


class ScanState(StrEnum):
    DISABLED = "disabled"
    WAITING = "waiting"
    SCANNING = "scanning"
    DISABLING = "disabling"


class ScanStateMachine:
    """Tracks whether a scan may be dispatched and whether a result counts.

    Transitions::

        any        --open-->      WAITING
        WAITING    --request-->   SCANNING   (radio enabled)
        SCANNING   --complete-->  WAITING    (result surfaced)
        DISABLING  --complete-->  DISABLED
        SCANNING   --close-->     DISABLING
        WAITING    --close-->     DISABLED

    Calls made while ``DISABLED`` are no-ops, never errors.
    """

    def __init__(self, name: str = "") -> None:
        self._name = name
        self._state = ScanState.DISABLED

    @property
    def state(self) -> ScanState:
        return self._state

    def _set(self, state: ScanState) -> None:
        if state != self._state:
            _logger.debug("Scan state %s: %s -> %s", self._name, self._state, state)
        self._state = state

    def open(self) -> None:
        self._set(ScanState.WAITING)

    def close(self) -> None:
        if self._state == ScanState.SCANNING:
            self._set(ScanState.DISABLING)
        elif self._state != ScanState.DISABLING:
            self._set(ScanState.DISABLED)

    def request_scan(self, enabled: bool) -> bool:
        """Move to ``SCANNING`` if a new scan may be dispatched.

        Returns ``False`` without a state change when the radio is not
        enabled, a scan is already in flight, or the source is (being)
        disabled.
        """
        if self._state != ScanState.WAITING or not enabled:
            return False
        self._set(ScanState.SCANNING)
        return True

    def complete_scan(self) -> bool:
        """Record a finished scan.

        Returns ``True`` only when a requested scan completed while the
        source was still active, i.e. the result should be surfaced.
        """
        if self._state == ScanState.DISABLING:
            self._set(ScanState.DISABLED)
            return False
        if self._state == ScanState.SCANNING:
            self._set(ScanState.WAITING)
            return True
        return False

    def cancel_scan(self) -> None:
        """Forget a scan that was marked in flight but never dispatched."""
        if self._state == ScanState.SCANNING:
            self._set(ScanState.WAITING)
        elif self._state == ScanState.DISABLING:
            self._set(ScanState.DISABLED)
