from sqlmodel import SQLModel, Field, Relationship
from typing import Optional, TYPE_CHECKING
from datetime import datetime
from decimal import Decimal

if TYPE_CHECKING:
    from .category import Category


class Product(SQLModel, table=True):
    """Товар каталога; это и есть purchasable для распродаж"""
    __tablename__ = "products"
    
    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(index=True)
    slug: str = Field(unique=True, index=True)
    sku: Optional[str] = Field(default=None, unique=True)
    
    price: Decimal = Field(max_digits=10, decimal_places=2)
    
    # Можно ли применять распродажи к товару
    is_promotable: bool = Field(default=True)
    is_active: bool = Field(default=True)
    
    category_id: Optional[int] = Field(default=None, foreign_key="categories.id")
    
    created_at: datetime = Field(default_factory=datetime.utcnow)
    
    # Relationships
    category: Optional["Category"] = Relationship(back_populates="products")
    
    @property
    def purchasable_id(self) -> Optional[int]:
        return self.id
    
    @property
    def promotion_relation_source(self) -> Optional[int]:
        # Категории привязаны к самому товару
        return self.id
