"""Restaurant domain schemas - Pydantic models for validation"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, field_validator

from ...shared.validators import validate_latitude, validate_longitude, validate_time_of_day

WEEKDAYS = ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday")


def validate_weekdays(value):
    if value is None:
        return value
    unknown = set(value) - set(WEEKDAYS)
    if unknown:
        raise ValueError(f"Unknown weekday(s): {', '.join(sorted(unknown))}")
    return value


class OpeningHours(BaseModel):
    open: Optional[str] = None
    close: Optional[str] = None
    closed: bool = False

    @field_validator("open", "close")
    @classmethod
    def validate_time(cls, v):
        return validate_time_of_day(v)


class RestaurantCreate(BaseModel):
    """Schema for registering a restaurant"""

    name: str
    description: Optional[str] = None
    latitude: float
    longitude: float
    address: str
    opening_hours: dict[str, OpeningHours] = {}
    is_active: bool = True

    @field_validator("latitude")
    @classmethod
    def check_latitude(cls, v):
        return validate_latitude(v)

    @field_validator("longitude")
    @classmethod
    def check_longitude(cls, v):
        return validate_longitude(v)

    @field_validator("opening_hours")
    @classmethod
    def check_weekdays(cls, v):
        return validate_weekdays(v)


class RestaurantUpdate(BaseModel):
    """Schema for updating a restaurant, unset fields are left alone"""

    name: Optional[str] = None
    description: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    address: Optional[str] = None
    opening_hours: Optional[dict[str, OpeningHours]] = None
    is_active: Optional[bool] = None

    @field_validator("latitude")
    @classmethod
    def check_latitude(cls, v):
        return validate_latitude(v)

    @field_validator("longitude")
    @classmethod
    def check_longitude(cls, v):
        return validate_longitude(v)

    @field_validator("opening_hours")
    @classmethod
    def check_weekdays(cls, v):
        return validate_weekdays(v)


class RestaurantResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    description: Optional[str] = None
    latitude: float
    longitude: float
    address: str
    opening_hours: dict = {}
    is_active: bool


class NearbyRestaurant(RestaurantResponse):
    distance_km: float
