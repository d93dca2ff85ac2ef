from decimal import Decimal, ROUND_HALF_UP
from typing import Optional, List, Sequence
from sale_engine.core.config import settings
from sale_engine.models.product import Product
from sale_engine.models.sale import Sale


def round_currency(value: Decimal, places: Optional[int] = None) -> Decimal:
    """Округлить до минимальной единицы валюты (половина - от нуля)"""
    if places is None:
        places = settings.CURRENCY_DECIMAL_PLACES
    return Decimal(value).quantize(Decimal(1).scaleb(-places), rounding=ROUND_HALF_UP)


def calculate_sale_price(original_price: Decimal, sales: Sequence[Sale]) -> Decimal:
    """
    Применить распродажи по очереди.
    Скидка каждой считается от исходной цены, но вычитается из текущей.
    """
    original_price = Decimal(original_price)
    sale_price = original_price

    for sale in sales:
        sale_price = round_currency(sale_price + sale.calculate_takeoff(original_price))

        # Распродажа не может сделать цену отрицательной
        if sale_price < 0:
            sale_price = Decimal("0")

    return sale_price


def discount_percent(original_price: Decimal, sale_price: Decimal) -> Optional[int]:
    """Процент скидки для витрины"""
    if not original_price or sale_price >= original_price:
        return None
    return int(((original_price - sale_price) / original_price) * 100)


def build_product_response(product: Product, sale_price: Decimal, sales: List[Sale]) -> dict:
    """Построить ответ с ценой товара и применёнными распродажами"""
    return {
        "id": product.id,
        "name": product.name,
        "slug": product.slug,
        "sku": product.sku,
        "price": product.price,
        "sale_price": sale_price,
        "discount_percent": discount_percent(product.price, sale_price),
        "currency": settings.CURRENCY,
        "is_promotable": product.is_promotable,
        "sale_ids": [sale.id for sale in sales],
    }
