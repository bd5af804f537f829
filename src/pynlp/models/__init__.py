"""Data models for sensor observations and location estimates."""

from pynlp.models._base import ObservationModel
from pynlp.models.location import FusedLocation, LocationEstimate
from pynlp.models.observation import UNKNOWN_RSSI, Bluetooth, Cell, CellType, SourceKind, WiFi

__all__ = [
    "UNKNOWN_RSSI",
    "Bluetooth",
    "Cell",
    "CellType",
    "FusedLocation",
    "LocationEstimate",
    "ObservationModel",
    "SourceKind",
    "WiFi",
]
