"""Base model for sensor observations.

Every observation model inherits from :class:`ObservationModel` which
provides:

* ``frozen=True`` so instances are immutable and hashable, which lets
  scans be stored as plain ``set`` objects.
* Translation of pydantic's ``ValidationError`` into
  :class:`~pynlp.exceptions.InvalidObservation` so callers only ever
  deal with the pynlp error hierarchy.
* An ``identity_key`` hook used by the secondary-source merge policy.
"""

from __future__ import annotations

from collections.abc import Hashable
from typing import Any

from pydantic import BaseModel, ConfigDict, ValidationError

from pynlp.exceptions import InvalidObservation, MalformedAddress


def _unwrap(err: ValidationError) -> InvalidObservation:
    """Return the most specific pynlp error carried by *err*."""
    for detail in err.errors():
        ctx = detail.get("ctx") or {}
        cause = ctx.get("error")
        if isinstance(cause, MalformedAddress):
            return cause
    return InvalidObservation(str(err))


class ObservationModel(BaseModel):
    """Base for a single normalized reading from one scan."""

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        populate_by_name=True,
    )

    def __init__(self, **data: Any) -> None:
        try:
            super().__init__(**data)
        except ValidationError as err:
            raise _unwrap(err) from err

    @classmethod
    def model_validate(cls, obj: Any, *args: Any, **kwargs: Any) -> Any:
        try:
            return super().model_validate(obj, *args, **kwargs)
        except ValidationError as err:
            raise _unwrap(err) from err

    @property
    def identity_key(self) -> Hashable:
        """Key identifying the emitter, without signal strength."""
        raise NotImplementedError
