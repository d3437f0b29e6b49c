from datetime import date
from typing import Optional, List
from pydantic import BaseModel, Field, ValidationInfo, field_validator

from core.utils import today_utc
from .enums import PromotionType, DayOfWeek
from .venue import TIME_PATTERN


def _minutes(value: str) -> int:
    hours, minutes = value.split(":")
    return int(hours) * 60 + int(minutes)


class PromotionForm(BaseModel):
    """
    Club-owner promotion form. Field order matters: the cross-field
    validators read earlier fields from info.data.
    """

    title: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None
    promotion_type: PromotionType

    discount_amount: Optional[float] = Field(None, ge=0)
    discount_percentage: Optional[float] = Field(None, ge=0, le=100, validate_default=True)
    promo_code: Optional[str] = Field(None, max_length=50)

    start_date: date
    end_date: date
    start_time: Optional[str] = Field(None, pattern=TIME_PATTERN)
    end_time: Optional[str] = Field(None, pattern=TIME_PATTERN)
    days_of_week: Optional[List[DayOfWeek]] = None

    max_uses: Optional[int] = Field(None, gt=0)
    terms_conditions: Optional[str] = None
    image_url: Optional[str] = None

    @field_validator("title", mode="before")
    def strip_title(cls, v):
        return v.strip() if isinstance(v, str) else v

    @field_validator("description", "promo_code", "start_time", "end_time",
                     "terms_conditions", "image_url", mode="before")
    def blank_as_none(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v

    # -------------------------------------------------
    # Discount promotions need a percentage or an amount
    # -------------------------------------------------
    @field_validator("discount_percentage")
    def require_discount_value(cls, v, info: ValidationInfo):
        if info.data.get("promotion_type") == PromotionType.discount:
            if v is None and info.data.get("discount_amount") is None:
                raise ValueError("Discount percentage or amount is required for discount promotions")
        return v

    @field_validator("start_date")
    def start_not_in_past(cls, v: date):
        if v < today_utc():
            raise ValueError("Start date cannot be in the past")
        return v

    @field_validator("end_date")
    def end_after_start(cls, v: date, info: ValidationInfo):
        start = info.data.get("start_date")
        if start is not None and v < start:
            raise ValueError("End date must be after or equal to start date")
        return v

    @field_validator("end_time")
    def end_time_after_start(cls, v, info: ValidationInfo):
        start = info.data.get("start_time")
        if v and start and _minutes(v) <= _minutes(start):
            raise ValueError("End time must be after start time")
        return v
