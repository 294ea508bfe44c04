# receipt_desk/models/receipts.py

from datetime import datetime, timezone
from decimal import Decimal
from typing import Annotated, Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from receipt_desk.models.enums import ALL, ExportFormat, PaymentMethod, ReceiptStatus

# Non-negative, at most 10 digits with 2 after the point (NUMERIC(10, 2))
Amount = Annotated[Decimal, Field(ge=0, max_digits=10, decimal_places=2)]


def to_naive_utc(value: datetime) -> datetime:
    """Timestamps are stored naive; aware values are converted to UTC first."""
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


def as_utc(value: datetime) -> datetime:
    """Stored timestamps are naive UTC; mark them so clients see the offset."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value


def plain_decimal(value: Decimal) -> Decimal:
    # "1E+3" becomes 1000 and "-0" becomes 0
    if value.is_zero():
        value = abs(value)
    return Decimal(format(value, "f"))


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ReceiptCreate(CamelModel):
    receipt_number: str = Field(..., min_length=1)
    issued_at: Optional[datetime] = Field(default=None, alias="datetime")
    entity: str = Field(..., min_length=1)
    vehicle: Optional[str] = None
    staff: str = Field(..., min_length=1)
    branch: str = Field(..., min_length=1)
    payment_method: PaymentMethod
    credit_amount: Amount = Decimal("0")
    recovery_amount: Amount = Decimal("0")
    total_amount: Amount
    outstanding_amount: Amount = Decimal("0")
    status: ReceiptStatus = ReceiptStatus.COMPLETED
    salesman_name: str = Field(..., min_length=1)
    salesman_photo: Optional[str] = None
    salesman_message: Optional[str] = None
    receipt_photos: List[str] = Field(default_factory=list)

    @field_validator("issued_at")
    @classmethod
    def _naive_utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        return to_naive_utc(value) if value is not None else None

    @field_validator("credit_amount", "recovery_amount", "outstanding_amount", mode="before")
    @classmethod
    def _null_amount_is_zero(cls, value: Any) -> Any:
        return "0" if value is None or value == "" else value

    @field_validator("credit_amount", "recovery_amount", "total_amount", "outstanding_amount")
    @classmethod
    def _plain_amount(cls, value: Decimal) -> Decimal:
        return plain_decimal(value)


class Receipt(CamelModel):
    id: str
    receipt_number: str
    issued_at: datetime = Field(..., alias="datetime")
    entity: str
    vehicle: Optional[str] = None
    staff: str
    branch: str
    payment_method: PaymentMethod
    credit_amount: Decimal
    recovery_amount: Decimal
    total_amount: Decimal
    outstanding_amount: Decimal
    status: ReceiptStatus
    salesman_name: str
    salesman_photo: Optional[str] = None
    salesman_message: Optional[str] = None
    receipt_photos: List[str] = Field(default_factory=list)

    @field_validator("issued_at")
    @classmethod
    def _utc(cls, value: datetime) -> datetime:
        return as_utc(value)


class ReceiptStatusUpdate(CamelModel):
    status: ReceiptStatus


class ReceiptFilters(CamelModel):
    """
    Optional predicates for a receipt query, combined with AND.

    Blank values and the sentinel "all" mean "no constraint", which is what
    the filter panel sends for untouched controls.
    """

    search: Optional[str] = None
    date_from: Optional[datetime] = None
    date_to: Optional[datetime] = None
    payment_method: Optional[PaymentMethod] = None
    status: Optional[ReceiptStatus] = None
    entity: Optional[str] = None

    @field_validator("search", mode="before")
    @classmethod
    def _blank_is_none(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("payment_method", "status", "entity", mode="before")
    @classmethod
    def _all_is_none(cls, value: Any) -> Any:
        if value is None or value == "" or value == ALL:
            return None
        return value

    @field_validator("date_from", "date_to", mode="before")
    @classmethod
    def _parse_iso(cls, value: Any) -> Any:
        # A bare date means midnight of that day
        if isinstance(value, str):
            if not value.strip():
                return None
            return datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
        return value

    @field_validator("date_from", "date_to")
    @classmethod
    def _naive_utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        return to_naive_utc(value) if value is not None else None


class ExportRequest(CamelModel):
    format: ExportFormat
    filters: Optional[ReceiptFilters] = None


class ExportResponse(BaseModel):
    message: str
    count: int
    format: ExportFormat
