"""Matching schemas - Pydantic models for validation"""

from datetime import datetime

from pydantic import BaseModel, field_validator, model_validator

from ...shared.validators import to_naive_utc


class SuggestEventRequest(BaseModel):
    """Availability window for an event suggestion"""

    profile_id: int
    available_from: datetime
    available_to: datetime

    @field_validator("available_from", "available_to")
    @classmethod
    def normalize_dates(cls, v):
        return to_naive_utc(v)

    @model_validator(mode="after")
    def check_window(self):
        if self.available_from > self.available_to:
            raise ValueError("available_from must not be after available_to")
        return self
