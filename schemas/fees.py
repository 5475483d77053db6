from datetime import datetime, timezone
from typing import Optional
from pydantic import Field, field_validator
from config import settings
from models.fees import FeeStatus
from schemas.common import CamelModel


def _naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    # SQLite keeps naive timestamps, everything is stored as UTC
    if value is not None and value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


class FeeRecordCreate(CamelModel):
    month: int = Field(ge=1, le=12)
    year: int
    amount: float = Field(ge=0)
    payment_date: Optional[datetime] = None
    status: FeeStatus = FeeStatus.UNPAID

    @field_validator("year")
    @classmethod
    def check_year(cls, v: int) -> int:
        if v < settings.MIN_FEE_YEAR or v > settings.MAX_FEE_YEAR:
            raise ValueError(f"Year must be between {settings.MIN_FEE_YEAR} and {settings.MAX_FEE_YEAR}")
        return v

    @field_validator("payment_date")
    @classmethod
    def normalize_payment_date(cls, v):
        return _naive_utc(v)


class FeeRecordUpdate(CamelModel):
    """Only these fields may change on an existing record, anything else is ignored."""
    amount: Optional[float] = Field(None, ge=0)
    payment_date: Optional[datetime] = None
    # Plain string so an unknown status maps to INVALID_STATUS instead of a schema error
    status: Optional[str] = None

    @field_validator("payment_date")
    @classmethod
    def normalize_payment_date(cls, v):
        return _naive_utc(v)


class FeeRecordOut(CamelModel):
    id: int
    student_id: int
    month: int
    year: int
    amount: float
    status: FeeStatus
    payment_date: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime
