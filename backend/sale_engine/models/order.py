from sqlmodel import SQLModel, Field, Relationship
from typing import Optional, TYPE_CHECKING
from datetime import datetime

if TYPE_CHECKING:
    from .user import User


class Order(SQLModel, table=True):
    """Заказ нужен только как контекст: покупатель и дата оформления"""
    __tablename__ = "orders"
    
    id: Optional[int] = Field(default=None, primary_key=True)
    order_number: str = Field(unique=True, index=True)
    
    user_id: Optional[int] = Field(default=None, foreign_key="users.id", index=True)
    
    # Корзина остаётся незавершённой, пока заказ не оформлен
    is_completed: bool = Field(default=False)
    date_ordered: Optional[datetime] = None
    
    created_at: datetime = Field(default_factory=datetime.utcnow)
    
    # Relationships
    user: Optional["User"] = Relationship(back_populates="orders")
