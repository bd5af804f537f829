"""Wi-Fi, cell and Bluetooth observation models."""

from __future__ import annotations

import enum
from collections.abc import Hashable

from pydantic import Field, field_validator, model_validator

from pynlp.mac import normalize_mac
from pynlp.models._base import ObservationModel

# Sentinel the platform reports for an unknown signal strength.
UNKNOWN_RSSI = -32768


class SourceKind(enum.StrEnum):
    """Sensor modality a coordinator is bound to."""

    WIFI = "wifi"
    CELL = "cell"
    BLUETOOTH = "bluetooth"


class CellType(enum.StrEnum):
    GSM = "gsm"
    UMTS = "umts"
    LTE = "lte"
    CDMA = "cdma"


class WiFi(ObservationModel):
    """A Wi-Fi access point seen in a scan.

    Parameters
    ----------
    bssid : str
        Hardware address, normalized to ``aa:bb:cc:dd:ee:ff``.
    rssi : int
        Received signal strength in dBm.
    channel : int
        Channel number, ``-1`` when unknown.
    frequency : int
        Center frequency in MHz, ``-1`` when unknown.
    ssid : str or None
        Network name, when reported.
    """

    bssid: str
    rssi: int
    channel: int = -1
    frequency: int = -1
    ssid: str | None = None

    @field_validator("bssid", mode="before")
    @classmethod
    def _normalize_bssid(cls, value: str) -> str:
        return normalize_mac(value)

    @property
    def identity_key(self) -> Hashable:
        return self.bssid


class Bluetooth(ObservationModel):
    """A Bluetooth device found during discovery."""

    address: str
    rssi: int = UNKNOWN_RSSI
    name: str | None = None

    @field_validator("address", mode="before")
    @classmethod
    def _normalize_address(cls, value: str) -> str:
        return normalize_mac(value)

    @property
    def identity_key(self) -> Hashable:
        return self.address


class Cell(ObservationModel):
    """A cell tower observation.

    ``lac`` carries the TAC for LTE cells and the network id for CDMA;
    ``mnc`` carries the system id for CDMA.  ``signal`` is RSCP for UMTS,
    RSRP for LTE and RSSI for GSM and CDMA.
    """

    type: CellType
    mcc: int = Field(ge=0, le=999)
    mnc: int
    lac: int = Field(ge=1)
    cid: int = Field(ge=0)
    psc: int = -1
    signal: int

    @model_validator(mode="after")
    def _check_ranges(self) -> Cell:
        cdma = self.type == CellType.CDMA
        if cdma and not 1 <= self.mnc <= 32767:
            raise ValueError(f"Invalid MNC: {self.mnc}")
        if not cdma and not 0 <= self.mnc <= 999:
            raise ValueError(f"Invalid MNC: {self.mnc}")
        if self.lac > (65534 if cdma else 65533):
            raise ValueError(f"Invalid LAC: {self.lac}")
        return self

    @property
    def identity_key(self) -> Hashable:
        return (self.type, self.mcc, self.mnc, self.lac, self.cid, self.psc)

    def __str__(self) -> str:
        psc = f", psc={self.psc}" if self.psc != -1 else ""
        return (
            f"Cell{{type={self.type.name}, mcc={self.mcc}, mnc={self.mnc}, "
            f"lac={self.lac}, cid={self.cid}{psc}, signal={self.signal}}}"
        )
