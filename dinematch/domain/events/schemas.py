"""Event domain schemas - Pydantic models for validation"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from ...models import EventStatus
from ...shared.validators import to_naive_utc, validate_latitude, validate_longitude


class EventCreate(BaseModel):
    """Schema for creating a group dining event"""

    model_config = ConfigDict(use_enum_values=True)

    host_id: int
    restaurant_id: Optional[int] = None
    title: str
    description: str
    start_date: datetime
    end_date: datetime
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    address: Optional[str] = None
    ticket_price: float = Field(default=0, ge=0)
    no_of_attendees: int = Field(gt=0)
    is_public: bool = True
    status: Optional[EventStatus] = None

    @field_validator("start_date", "end_date")
    @classmethod
    def normalize_dates(cls, v):
        return to_naive_utc(v)

    @field_validator("latitude")
    @classmethod
    def check_latitude(cls, v):
        return validate_latitude(v)

    @field_validator("longitude")
    @classmethod
    def check_longitude(cls, v):
        return validate_longitude(v)

    @model_validator(mode="after")
    def check_dates(self):
        if self.end_date < self.start_date:
            raise ValueError("end_date must not be before start_date")
        return self


class EventUpdate(BaseModel):
    """Schema for updating an event, unset fields are left alone"""

    model_config = ConfigDict(use_enum_values=True)

    title: Optional[str] = None
    description: Optional[str] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    address: Optional[str] = None
    ticket_price: Optional[float] = Field(default=None, ge=0)
    no_of_attendees: Optional[int] = Field(default=None, gt=0)
    is_public: Optional[bool] = None
    status: Optional[EventStatus] = None

    @field_validator("start_date", "end_date")
    @classmethod
    def normalize_dates(cls, v):
        return to_naive_utc(v)


class EventFilters(BaseModel):
    """Listing filters, mirrors the query string of the events listing"""

    text: Optional[str] = None
    capacity: Optional[int] = None  # Minimum total capacity
    page: int = Field(default=1, ge=1)
    limit: int = Field(default=10, ge=1, le=100)


class JoinEventRequest(BaseModel):
    event_id: int
    profile_id: int


class EventReviewCreate(BaseModel):
    event_id: int
    profile_id: int
    rating: int = Field(ge=1, le=5)
    review: Optional[str] = None


class HostReview(BaseModel):
    """Flattened review row for a host's review listing"""

    rating: int
    review: Optional[str] = None
    reviewer_id: Optional[int] = None
    reviewer_name: Optional[str] = None
    event_name: str


class EventResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    host_id: int
    title: str
    description: str
    start_date: datetime
    end_date: datetime
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    ticket_price: float
    no_of_attendees: int
    slots: int
    status: str
