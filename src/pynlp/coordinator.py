"""Per-source scan coordination.

Owns:
- the scan state machine and the latest-scan cache of one sensor source
- subscribing to / unsubscribing from the source's notification channel
- the poll-driven ``update()`` policy and the asynchronous completion path

Every read-then-write sequence runs under one lock per coordinator.  The
listener is called while that lock is held and must not call back into the
coordinator.
"""

from __future__ import annotations

import contextlib
import logging
import threading
from collections.abc import Callable, Hashable, Iterable, Iterator
from typing import Any, Generic, Protocol, TypeVar

from pynlp.channel import NotificationChannel
from pynlp.exceptions import AlreadyOpenError, NlpConfigError, NotOpenError, ReentrancyError
from pynlp.state.cache import ScanCache
from pynlp.state.machine import ScanState, ScanStateMachine
from pynlp.state.policy import UpdateAction, decide_update, merge_secondary

_logger = logging.getLogger(__name__)

T = TypeVar("T")

Listener = Callable[[str, set[T]], None]


class Radio(Protocol):
    """The physical sensor a coordinator dispatches scans to."""

    def is_enabled(self) -> bool: ...

    def start_scan(self) -> None: ...


def _identity_key(item: Any) -> Hashable:
    key: Hashable = getattr(item, "identity_key", item)
    return key


class SourceCoordinator(Generic[T]):
    """Binds a scan state machine and cache to one sensor source.

    Parameters
    ----------
    source : str
        Source id passed to the listener (e.g. a :class:`~pynlp.models.SourceKind`).
    radio : Radio
        Sensor to dispatch scans to.
    channel : NotificationChannel
        Channel delivering raw scan results; subscribed while open.
    parser : callable
        Turns a raw scan result into a set of observations.  Expected to
        drop malformed entries itself.
    listener : callable
        Called with ``(source, observations)`` whenever new data is surfaced.
    secondary : callable, optional
        Returns additional observations merged into every scan, e.g.
        neighboring cells.  Entries whose dedupe key is already present in
        the primary result are skipped.
    dedupe_key : callable, optional
        Key used for the secondary merge.  Defaults to the observation's
        ``identity_key``.
    """

    def __init__(
        self,
        *,
        source: str,
        radio: Radio,
        channel: NotificationChannel,
        parser: Callable[[Any], set[T]],
        listener: Listener[T],
        secondary: Callable[[], Iterable[T]] | None = None,
        dedupe_key: Callable[[T], Hashable] | None = None,
    ) -> None:
        if listener is None:
            raise NlpConfigError("listener must not be None")
        self._source = str(source)
        self._radio = radio
        self._channel = channel
        self._parser = parser
        self._listener = listener
        self._secondary = secondary
        self._dedupe_key: Callable[[T], Hashable] = dedupe_key or _identity_key
        self._machine = ScanStateMachine(self._source)
        self._cache: ScanCache[T] = ScanCache()
        self._lock = threading.Lock()
        self._owner: int | None = None
        self._open = False

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------

    @property
    def source(self) -> str:
        return self._source

    @property
    def state(self) -> ScanState:
        return self._machine.state

    @property
    def is_open(self) -> bool:
        return self._open

    @property
    def is_fresh(self) -> bool:
        return self._cache.is_fresh()

    @property
    def observations(self) -> set[T]:
        """Current cache contents, without marking them consumed."""
        return self._cache.peek()

    # ------------------------------------------------------------------
    # Locking
    # ------------------------------------------------------------------

    @contextlib.contextmanager
    def _locked(self) -> Iterator[None]:
        me = threading.get_ident()
        if self._owner == me:
            raise ReentrancyError(f"{self._source} coordinator re-entered from its listener")
        with self._lock:
            self._owner = me
            try:
                yield
            finally:
                self._owner = None

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def open(self) -> None:
        """Subscribe to scan results and start accepting scan requests."""
        with self._locked():
            if self._open:
                raise AlreadyOpenError(f"{self._source} coordinator is already open")
            self._channel.subscribe(self.on_raw_scan_result)
            self._open = True
            self._machine.open()

    def close(self) -> None:
        """Unsubscribe; a scan still in flight will be discarded."""
        with self._locked():
            if not self._open:
                raise NotOpenError(f"{self._source} coordinator is not open")
            self._channel.unsubscribe(self.on_raw_scan_result)
            self._open = False
            self._machine.close()

    def update(self) -> None:
        """Deliver unconsumed data, or request a new scan when there is none."""
        with self._locked():
            action = decide_update(is_open=self._open, cache_fresh=self._cache.is_fresh())
            if action == UpdateAction.DELIVER:
                self._notify()
            elif action == UpdateAction.SCAN:
                self._request_scan()

    # ------------------------------------------------------------------
    # Scans
    # ------------------------------------------------------------------

    def request_scan(self) -> bool:
        """Dispatch a physical scan if the radio and state machine allow it."""
        with self._locked():
            return self._request_scan()

    def _request_scan(self) -> bool:
        if not self._machine.request_scan(self._radio.is_enabled()):
            return False
        try:
            self._radio.start_scan()
        except Exception:
            self._machine.cancel_scan()
            raise
        _logger.debug("Scan dispatched for %s", self._source)
        return True

    def complete_scan(self, raw: Any) -> bool:
        """Store a finished scan; returns whether it was surfaced to the listener.

        The cache is replaced in every case, even when the result is
        discarded because it was unsolicited or arrived during shutdown.
        A result the parser cannot read is stored as an empty scan.
        """
        observations = self._collect(raw)
        with self._locked():
            self._cache.replace(observations)
            surfaced = self._machine.complete_scan()
            if surfaced:
                self._notify()
            else:
                _logger.debug(
                    "Scan result for %s cached but not surfaced (state=%s)",
                    self._source,
                    self._machine.state,
                )
        return surfaced

    def on_raw_scan_result(self, raw: Any) -> None:
        """Channel callback for a completed physical scan."""
        self.complete_scan(raw)

    def _collect(self, raw: Any) -> set[T]:
        try:
            observations = set(self._parser(raw))
        except Exception:
            _logger.debug("Parsing scan result failed for %s", self._source, exc_info=True)
            observations = set()
        if self._secondary is None:
            return observations
        try:
            extra = list(self._secondary())
        except Exception:
            _logger.debug("Secondary source lookup failed for %s", self._source, exc_info=True)
            return observations
        return merge_secondary(observations, extra, self._dedupe_key)

    def _notify(self) -> None:
        snapshot = self._cache.snapshot()
        _logger.debug("Delivering %d observations for %s", len(snapshot), self._source)
        self._listener(self._source, snapshot)
