from sqlmodel import SQLModel, Field
from typing import Optional, Set, Dict, List, Iterable
from datetime import datetime
from decimal import Decimal
from enum import Enum


class DiscountType(str, Enum):
    PERCENT = "percent"
    FLAT = "flat"


class SaleBase(SQLModel):
    name: str = ""
    description: Optional[str] = None

    date_from: Optional[datetime] = None
    date_to: Optional[datetime] = None

    discount_type: DiscountType = Field(default=DiscountType.PERCENT)
    # Процент хранится долей со знаком (-0.10 = -10%), фикс. сумма в валюте (-20.00)
    discount_amount: Decimal = Field(default=Decimal("0"), max_digits=14, decimal_places=4)

    all_groups: bool = Field(default=True)
    all_categories: bool = Field(default=True)
    all_purchasables: bool = Field(default=True)
    enabled: bool = Field(default=True)


class SaleRecord(SaleBase, table=True):
    __tablename__ = "sales"

    id: Optional[int] = Field(default=None, primary_key=True)

    date_created: datetime = Field(default_factory=datetime.utcnow)
    date_updated: datetime = Field(default_factory=datetime.utcnow)


class SalePurchasable(SQLModel, table=True):
    __tablename__ = "sale_purchasables"

    sale_id: int = Field(foreign_key="sales.id", primary_key=True, ondelete="CASCADE")
    purchasable_id: int = Field(foreign_key="products.id", primary_key=True, ondelete="CASCADE")
    purchasable_type: Optional[str] = None


class SaleCategory(SQLModel, table=True):
    __tablename__ = "sale_categories"

    sale_id: int = Field(foreign_key="sales.id", primary_key=True, ondelete="CASCADE")
    category_id: int = Field(foreign_key="categories.id", primary_key=True, ondelete="CASCADE")


class SaleUserGroup(SQLModel, table=True):
    __tablename__ = "sale_usergroups"

    sale_id: int = Field(foreign_key="sales.id", primary_key=True, ondelete="CASCADE")
    user_group_id: int = Field(foreign_key="user_groups.id", primary_key=True, ondelete="CASCADE")


class Sale(SaleBase):
    """Правило скидки вместе с наборами привязок (не таблица)"""

    id: Optional[int] = None

    purchasable_ids: Set[int] = Field(default_factory=set)
    category_ids: Set[int] = Field(default_factory=set)
    user_group_ids: Set[int] = Field(default_factory=set)

    errors: Dict[str, List[str]] = Field(default_factory=dict)

    @classmethod
    def from_record(
        cls,
        record: SaleRecord,
        purchasable_ids: Iterable[int] = (),
        category_ids: Iterable[int] = (),
        user_group_ids: Iterable[int] = (),
    ) -> "Sale":
        return cls(
            id=record.id,
            name=record.name,
            description=record.description,
            date_from=record.date_from,
            date_to=record.date_to,
            discount_type=record.discount_type,
            discount_amount=record.discount_amount,
            all_groups=record.all_groups,
            all_categories=record.all_categories,
            all_purchasables=record.all_purchasables,
            enabled=record.enabled,
            purchasable_ids=set(purchasable_ids),
            category_ids=set(category_ids),
            user_group_ids=set(user_group_ids),
        )

    def calculate_takeoff(self, price: Decimal) -> Decimal:
        """Изменение цены от скидки: всегда <= 0"""
        if self.discount_type == DiscountType.FLAT:
            takeoff = Decimal(self.discount_amount)
        else:
            takeoff = Decimal(self.discount_amount) * Decimal(price)
        return min(takeoff, Decimal("0"))

    def add_error(self, field: str, message: str) -> None:
        self.errors.setdefault(field, []).append(message)

    def add_errors(self, errors: Dict[str, List[str]]) -> None:
        for field, messages in errors.items():
            for message in messages:
                self.add_error(field, message)

    def has_errors(self) -> bool:
        return bool(self.errors)


def copy_sale_to_record(sale: Sale, record: SaleRecord) -> SaleRecord:
    """Перенести скалярные поля правила в запись таблицы"""
    record.name = sale.name
    record.description = sale.description
    record.date_from = sale.date_from
    record.date_to = sale.date_to
    record.discount_type = sale.discount_type
    record.discount_amount = sale.discount_amount
    record.enabled = sale.enabled
    return record
