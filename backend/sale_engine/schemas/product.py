from pydantic import BaseModel
from typing import Optional, List
from decimal import Decimal


class ProductPriceResponse(BaseModel):
    id: int
    name: str
    slug: str
    sku: Optional[str] = None
    price: Decimal
    sale_price: Decimal
    discount_percent: Optional[int] = None
    currency: str
    is_promotable: bool
    sale_ids: List[int] = []
