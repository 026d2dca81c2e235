"""Profile domain schemas - Pydantic models for validation"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, field_validator

from ...shared.validators import validate_latitude, validate_longitude


class ProfileCreate(BaseModel):
    """Schema for creating a profile"""

    full_name: str
    gender: Optional[str] = None
    bio: Optional[str] = None
    profession: Optional[str] = None
    industry: Optional[str] = None
    interests: list[str] = []
    goals: list[str] = []
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    address: Optional[str] = None

    @field_validator("latitude")
    @classmethod
    def check_latitude(cls, v):
        return validate_latitude(v)

    @field_validator("longitude")
    @classmethod
    def check_longitude(cls, v):
        return validate_longitude(v)


class ProfileUpdate(BaseModel):
    """Schema for updating a profile, unset fields are left alone"""

    full_name: Optional[str] = None
    gender: Optional[str] = None
    bio: Optional[str] = None
    profession: Optional[str] = None
    industry: Optional[str] = None
    interests: Optional[list[str]] = None
    goals: Optional[list[str]] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    address: Optional[str] = None

    @field_validator("latitude")
    @classmethod
    def check_latitude(cls, v):
        return validate_latitude(v)

    @field_validator("longitude")
    @classmethod
    def check_longitude(cls, v):
        return validate_longitude(v)


class ProfileResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    full_name: str
    gender: Optional[str] = None
    bio: Optional[str] = None
    profession: Optional[str] = None
    industry: Optional[str] = None
    interests: list[str]
    goals: list[str]
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    address: Optional[str] = None
    available_from: Optional[datetime] = None
    available_to: Optional[datetime] = None
