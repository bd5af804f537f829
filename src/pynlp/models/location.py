"""Location estimate models consumed and produced by fusion."""

from __future__ import annotations

from datetime import UTC, datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _utcnow() -> datetime:
    return datetime.now(UTC)


class LocationEstimate(BaseModel):
    """A single location estimate produced by some backend.

    Parameters
    ----------
    source : str
        Tag of the backend that produced the estimate.
    latitude : float
        Latitude in degrees.
    longitude : float
        Longitude in degrees.
    accuracy : float
        Estimated accuracy radius in meters.
    altitude : float or None
        Altitude in meters, when known.
    weight : float or None
        Explicit weight for :func:`pynlp.fusion.from_estimate_weight`.
    time : datetime
        When the estimate was produced (UTC).
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    source: str
    latitude: float
    longitude: float
    accuracy: float = Field(ge=0)
    altitude: float | None = None
    weight: float | None = Field(default=None, ge=0)
    time: datetime = Field(default_factory=_utcnow)

    @field_validator("time")
    @classmethod
    def _ensure_tz_aware(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=UTC)
        return value

    @property
    def has_altitude(self) -> bool:
        return self.altitude is not None


class FusedLocation(BaseModel):
    """Weighted average of several :class:`LocationEstimate` objects."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    source: str
    latitude: float
    longitude: float
    accuracy: float
    altitude: float | None = None
    time: datetime = Field(default_factory=_utcnow)
    averaged_of: int = Field(ge=1, description="Number of estimates fused")
    total_weight: float = Field(gt=0)
    total_altitude_weight: float | None = Field(
        default=None,
        description="Sum of weights of the estimates that carried an altitude.",
    )

    @property
    def has_altitude(self) -> bool:
        return self.altitude is not None
