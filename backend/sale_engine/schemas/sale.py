from pydantic import BaseModel, Field, field_validator
from typing import Optional, List, Dict
from datetime import datetime, timezone
from decimal import Decimal
from sale_engine.models.sale import DiscountType


class SaleResponse(BaseModel):
    id: int
    name: str
    description: Optional[str] = None
    date_from: Optional[datetime] = None
    date_to: Optional[datetime] = None
    discount_type: DiscountType
    discount_amount: Decimal
    all_groups: bool
    all_categories: bool
    all_purchasables: bool
    enabled: bool
    purchasable_ids: List[int] = []
    category_ids: List[int] = []
    user_group_ids: List[int] = []

    class Config:
        from_attributes = True


class SaleSave(BaseModel):
    name: str
    description: Optional[str] = None
    date_from: Optional[datetime] = None
    date_to: Optional[datetime] = None
    discount_type: DiscountType = DiscountType.PERCENT
    # -0.10 = -10% для percent, -20.00 для flat
    discount_amount: Decimal = Field(max_digits=14, decimal_places=4)
    enabled: bool = True

    # Пустой список = на все
    user_group_ids: List[int] = Field(default_factory=list)
    category_ids: List[int] = Field(default_factory=list)
    purchasable_ids: List[int] = Field(default_factory=list)

    @field_validator("date_from", "date_to")
    @classmethod
    def to_naive_utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        # В базе даты хранятся в UTC без таймзоны
        if value is not None and value.tzinfo is not None:
            return value.astimezone(timezone.utc).replace(tzinfo=None)
        return value


class SaleErrorsResponse(BaseModel):
    message: str
    errors: Dict[str, List[str]]
