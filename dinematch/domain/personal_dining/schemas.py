"""Personal dining schemas - Pydantic models for validation"""

from datetime import date, datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from ...shared.validators import to_naive_utc, validate_time_of_day


class ResponseType(str, Enum):
    ACCEPT = "accept"
    DECLINE = "decline"


class PersonalDiningCreate(BaseModel):
    """Schema for creating a one-on-one dining invitation"""

    host_id: int
    guest_id: Optional[int] = None  # Set for a direct invitation
    restaurant_id: int
    title: str
    description: str
    dining_date: date
    dining_time: str
    estimated_duration: int = Field(ge=30, le=300)  # minutes
    special_requests: Optional[str] = None
    invitation_message: Optional[str] = None
    estimated_cost_per_person: float = Field(default=0, ge=0)
    host_pays_all: bool = False
    is_public: bool = False
    expires_at: Optional[datetime] = None
    tags: list[str] = []

    @field_validator("dining_time")
    @classmethod
    def validate_dining_time(cls, v):
        return validate_time_of_day(v)

    @field_validator("expires_at")
    @classmethod
    def normalize_expiry(cls, v):
        return to_naive_utc(v)

    @model_validator(mode="after")
    def check_guest(self):
        if self.guest_id is not None and self.guest_id == self.host_id:
            raise ValueError("Cannot invite yourself to dinner")
        if self.is_public and self.guest_id is not None:
            raise ValueError(
                "Public dining experiences cannot have pre-assigned guests. "
                "Either make it private or remove guest_id to allow join requests."
            )
        return self


class RespondToInvitation(BaseModel):
    guest_id: int
    response: ResponseType
    message: Optional[str] = None


class JoinRequestCreate(BaseModel):
    requester_id: int
    message: Optional[str] = None


class JoinRequestResponse(BaseModel):
    requester_id: int
    response: ResponseType


class CompletePersonalDining(BaseModel):
    personal_dining_id: int
    total_bill_amount: float = Field(ge=0)


class DiningReviewCreate(BaseModel):
    personal_dining_id: int
    reviewer_id: int
    rating: int = Field(ge=1, le=5)
    comment: Optional[str] = None


class JoinRequestResponseModel(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    requester_id: int
    status: str
    message: Optional[str] = None
    requested_at: datetime
    responded_at: Optional[datetime] = None


class PersonalDiningResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    host_id: int
    guest_id: Optional[int] = None
    restaurant_id: int
    title: str
    dining_date: date
    dining_time: str
    estimated_duration: int
    status: str
    invitation_type: str
    is_public: bool
    is_visible_on_map: bool
    expires_at: Optional[datetime] = None
    total_bill_amount: float
    platform_commission: float
    diner_discount: float
    join_requests: list[JoinRequestResponseModel] = []
