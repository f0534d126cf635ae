"""Pydantic schemas for the seismic data source payload."""

from __future__ import annotations

from typing import Any, List

from pydantic import BaseModel, ConfigDict, Field, model_validator

from models.records import Reading


class _ZeroValueModel(BaseModel):
    """Treats ``null`` objects and members as absent, leaving field defaults."""

    @model_validator(mode="before")
    @classmethod
    def _drop_nulls(cls, data: Any) -> Any:
        if data is None:
            return {}
        if isinstance(data, dict):
            return {key: value for key, value in data.items() if value is not None}
        return data


class GroundMotionItem(_ZeroValueModel):
    """One entry of ``request.GM.list``."""

    model_config = ConfigDict(frozen=True)

    id: str = ""
    acc: float = 0.0
    vel: float = 0.0
    disp: float = 0.0
    timestamp: int = Field(default=0, description="Epoch milliseconds.")

    def to_reading(self) -> Reading:
        return Reading(
            sensor_id=self.id,
            acceleration=self.acc,
            velocity=self.vel,
            displacement=self.disp,
            timestamp_ms=self.timestamp,
        )


class GroundMotion(_ZeroValueModel):
    items: List[GroundMotionItem] = Field(default_factory=list, alias="list")


class EnvelopeRequest(_ZeroValueModel):
    ground_motion: GroundMotion = Field(default_factory=GroundMotion, alias="GM")


class ResponseEnvelope(_ZeroValueModel):
    """Full document returned by one poll of the data source."""

    request: EnvelopeRequest = Field(default_factory=EnvelopeRequest)

    @property
    def items(self) -> List[GroundMotionItem]:
        return self.request.ground_motion.items
