"""Weighted fusion of location estimates.

Everything here is pure and stateless; it is safe to call from any number of
threads at once.
"""

from __future__ import annotations

import math
from collections.abc import Callable, Iterable
from datetime import datetime

from pynlp.exceptions import DegenerateWeightError
from pynlp.models.location import FusedLocation, LocationEstimate

WeightPolicy = Callable[[LocationEstimate], float]

DEFAULT_FUSED_SOURCE = "fused"


def uniform(estimate: LocationEstimate) -> float:
    """Every estimate counts the same."""
    return 1.0


def from_estimate_weight(estimate: LocationEstimate) -> float:
    """Use the estimate's explicit weight, ``1`` when it carries none."""
    return 1.0 if estimate.weight is None else estimate.weight


Uniform: WeightPolicy = uniform
FromEstimateWeight: WeightPolicy = from_estimate_weight


def create_estimate(
    source: str,
    latitude: float,
    longitude: float,
    accuracy: float,
    altitude: float | None = None,
    weight: float | None = None,
    *,
    time: datetime | None = None,
) -> LocationEstimate:
    """Build a :class:`LocationEstimate` stamped with the current time."""
    if time is None:
        return LocationEstimate(
            source=source,
            latitude=latitude,
            longitude=longitude,
            accuracy=accuracy,
            altitude=altitude,
            weight=weight,
        )
    return LocationEstimate(
        source=source,
        latitude=latitude,
        longitude=longitude,
        accuracy=accuracy,
        altitude=altitude,
        weight=weight,
        time=time,
    )


def fuse(
    estimates: Iterable[LocationEstimate | None],
    weighting: WeightPolicy = uniform,
    *,
    source: str = DEFAULT_FUSED_SOURCE,
) -> FusedLocation | None:
    """Combine *estimates* into their weighted mean.

    Latitude, longitude and accuracy are averaged over all estimates.
    Altitude is averaged only over the estimates that carry one, using
    their own weights, and is omitted when none does.

    Returns ``None`` when there is nothing to fuse.  ``None`` items in
    *estimates* are skipped.

    Raises
    ------
    DegenerateWeightError
        If *weighting* returns a negative or non-finite weight, or the weights
        sum to zero.
    """
    count = 0
    total = 0.0
    lat = 0.0
    lon = 0.0
    acc = 0.0
    alt_total = 0.0
    alt = 0.0
    for estimate in estimates:
        if estimate is None:
            continue
        weight = float(weighting(estimate))
        if not math.isfinite(weight) or weight < 0:
            raise DegenerateWeightError(f"invalid weight {weight} for estimate from {estimate.source!r}")
        count += 1
        total += weight
        lat += estimate.latitude * weight
        lon += estimate.longitude * weight
        acc += estimate.accuracy * weight
        if estimate.altitude is not None:
            alt += estimate.altitude * weight
            alt_total += weight

    if count == 0:
        return None
    if total <= 0:
        raise DegenerateWeightError(f"weights of {count} estimates sum to zero")

    if alt_total > 0:
        return FusedLocation(
            source=source,
            latitude=lat / total,
            longitude=lon / total,
            accuracy=acc / total,
            altitude=alt / alt_total,
            averaged_of=count,
            total_weight=total,
            total_altitude_weight=alt_total,
        )
    return FusedLocation(
        source=source,
        latitude=lat / total,
        longitude=lon / total,
        accuracy=acc / total,
        averaged_of=count,
        total_weight=total,
    )


def average(
    estimates: Iterable[LocationEstimate | None],
    *,
    source: str = DEFAULT_FUSED_SOURCE,
) -> FusedLocation | None:
    """Unweighted :func:`fuse`."""
    return fuse(estimates, uniform, source=source)
