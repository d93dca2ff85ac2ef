from fastapi import APIRouter, Depends, HTTPException, Query
from sqlmodel import Session
from typing import Optional
from sale_engine.api.deps import get_db, get_current_user_optional, get_sales_service
from sale_engine.models.order import Order
from sale_engine.models.product import Product
from sale_engine.models.user import User
from sale_engine.schemas.product import ProductPriceResponse
from sale_engine.services.pricing import build_product_response, calculate_sale_price
from sale_engine.services.sales import SalesService

router = APIRouter(prefix="/api/products", tags=["products"])


@router.get("/{product_id}/price", response_model=ProductPriceResponse)
def get_product_price(
    product_id: int,
    order_id: Optional[int] = Query(None, description="Order context"),
    db: Session = Depends(get_db),
    service: SalesService = Depends(get_sales_service),
    current_user: Optional[User] = Depends(get_current_user_optional),
):
    """Цена товара с учётом распродаж"""
    product = db.get(Product, product_id)
    if not product or not product.is_active:
        raise HTTPException(status_code=404, detail="Product not found")

    order = None
    if order_id is not None:
        order = db.get(Order, order_id)
        if not order:
            raise HTTPException(status_code=404, detail="Order not found")
        # Чужой заказ не даёт контекста
        if order.user_id is not None and (current_user is None or order.user_id != current_user.id):
            raise HTTPException(status_code=404, detail="Order not found")

    sales = service.get_sales_for_purchasable(product, order=order, user=current_user)
    sale_price = calculate_sale_price(product.price, sales)

    return build_product_response(product, sale_price, sales)
