"""Custom exception hierarchy for pynlp."""

from __future__ import annotations


class NlpError(Exception):
    """Base exception for all pynlp errors."""


class NlpConfigError(NlpError):
    """Invalid or missing configuration."""


class InvalidObservation(NlpError, ValueError):
    """An observation could not be built from the given fields.

    Raised at construction time when an identity field is out of range or
    the cell type tag is missing.  Batch parsers catch it per element, so
    one bad reading never discards a whole scan.
    """


class MalformedAddress(InvalidObservation):
    """Hardware address text matches none of the supported encodings."""

    def __init__(self, message: str, *, address: str = "") -> None:
        self.address = address
        super().__init__(message)


class LifecycleError(NlpError):
    """A coordinator lifecycle call was made in the wrong state."""


class AlreadyOpenError(LifecycleError):
    """``open()`` called on a coordinator that is already open."""


class NotOpenError(LifecycleError):
    """``close()`` called on a coordinator that was never opened."""


class DegenerateWeightError(NlpError, ArithmeticError):
    """Fusion weights sum to zero (or a weight is negative).

    A weighting policy returning ``0`` for every estimate is a caller error;
    the fused position would be a division by zero.
    """


class ReentrancyError(NlpError, RuntimeError):
    """A listener callback re-entered the coordinator that notified it."""
