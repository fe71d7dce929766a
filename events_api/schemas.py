"""Pydantic schemas for the Events API."""
from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator
from pydantic.alias_generators import to_camel

from events_api.models import ZIP_CODE_PATTERN, Event, format_local_datetime, parse_local_datetime


class EventBase(BaseModel):
    """Fields shared by event requests and responses (camelCase on the wire)."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    name: str = Field(..., min_length=1, description="Event title")
    description: Optional[str] = Field(default=None, description="Free-text summary")
    date_time: datetime = Field(..., description="Local date-time, YYYY-MM-DDTHH:MM:SS")
    location: str = Field(..., description="Venue or address")
    zip_code: str = Field(..., pattern=f"^{ZIP_CODE_PATTERN.pattern}$", description="Five-digit zip code")
    category: Optional[str] = Field(default=None, description="Classifier, e.g. 'Concert'")
    source_url: Optional[str] = Field(default=None, description="Link to the event source")

    @field_validator("date_time", mode="before")
    @classmethod
    def require_local_datetime(cls, value: Any) -> datetime:
        return parse_local_datetime(value)


class EventCreate(EventBase):
    """Request schema for creating or replacing an event."""

    id: Optional[str] = Field(default=None, min_length=1, description="Event id; generated when absent")

    def to_event(self) -> Event:
        return Event(
            id=self.id,
            name=self.name,
            description=self.description,
            date_time=self.date_time,
            location=self.location,
            zip_code=self.zip_code,
            category=self.category,
            source_url=self.source_url,
        )


class EventResponse(EventBase):
    """Response schema for a single event."""

    id: str = Field(..., description="Unique event identifier")
    zip_code: str = Field(..., description="Five-digit zip code")

    @field_serializer("date_time")
    def serialize_date_time(self, value: datetime) -> str:
        return format_local_datetime(value)

    @classmethod
    def from_event(cls, event: Event) -> "EventResponse":
        return cls(
            id=event.id,
            name=event.name,
            description=event.description,
            date_time=event.date_time,
            location=event.location,
            zip_code=event.zip_code,
            category=event.category,
            source_url=event.source_url,
        )
