# receipt_desk/models/schedules.py

from datetime import datetime
from typing import Annotated, Any, Optional

from pydantic import BeforeValidator, ConfigDict, EmailStr, Field, field_validator, model_validator

from receipt_desk.models.enums import ExportFormat, Frequency
from receipt_desk.models.receipts import CamelModel, as_utc

TIME_OF_DAY_PATTERN = r"^([01]\d|2[0-3]):[0-5]\d$"


def _blank_is_none(value: Any) -> Any:
    # The export form posts "" when the e-mail box is left empty
    if isinstance(value, str) and not value.strip():
        return None
    return value


OptionalEmail = Annotated[Optional[EmailStr], BeforeValidator(_blank_is_none)]


class ScheduleCreate(CamelModel):
    frequency: Frequency
    time: str = Field(..., pattern=TIME_OF_DAY_PATTERN, description="HH:MM, 24h clock")
    format: ExportFormat
    email: OptionalEmail = None
    auto_download: bool = False
    is_active: bool = True


class ScheduleUpdate(CamelModel):
    """
    Partial update. Only the fields present in the payload are merged;
    ``id`` and ``createdAt`` are not accepted.
    """

    model_config = ConfigDict(extra="forbid")

    frequency: Optional[Frequency] = None
    time: Optional[str] = Field(default=None, pattern=TIME_OF_DAY_PATTERN)
    format: Optional[ExportFormat] = None
    email: OptionalEmail = None
    auto_download: Optional[bool] = None
    is_active: Optional[bool] = None

    @model_validator(mode="after")
    def _no_null_for_required(self) -> "ScheduleUpdate":
        for name in self.model_fields_set:
            if name != "email" and getattr(self, name) is None:
                raise ValueError(f"{name} cannot be null")
        return self


class Schedule(CamelModel):
    id: str
    frequency: Frequency
    time: str
    format: ExportFormat
    email: Optional[str] = None
    auto_download: bool
    is_active: bool
    created_at: datetime

    @field_validator("created_at")
    @classmethod
    def _utc(cls, value: datetime) -> datetime:
        return as_utc(value)
