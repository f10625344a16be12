"""Bookable slot models returned by the availability query."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_serializer

from booking_engine.scheduling.intervals import TimeInterval, to_iso


class Slot(BaseModel):
    """A single bookable slot.

    ``start_local`` is for display only; comparisons use ``start``/``end``.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    start: datetime
    end: datetime
    start_local: str = Field(alias="startLocal")

    @property
    def interval(self) -> TimeInterval:
        return TimeInterval(self.start, self.end)

    @field_serializer("start", "end")
    def _serialize_instant(self, value: datetime) -> str:
        return to_iso(value)


class SlotListing(BaseModel):
    """Availability query response: ``{slots: [...], count: n}``."""

    slots: list[Slot] = Field(default_factory=list)
    count: int = 0

    @classmethod
    def from_slots(cls, slots: list[Slot]) -> "SlotListing":
        return cls(slots=slots, count=len(slots))

    def to_response(self) -> dict:
        return self.model_dump(by_alias=True)
