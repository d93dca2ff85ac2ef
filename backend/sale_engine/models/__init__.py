from .user import User, UserRole, UserGroup, UserGroupMember
from .category import Category
from .product import Product
from .order import Order
from .sale import (
    DiscountType, Sale, SaleRecord,
    SalePurchasable, SaleCategory, SaleUserGroup,
)

__all__ = [
    "User", "UserRole", "UserGroup", "UserGroupMember",
    "Category",
    "Product",
    "Order",
    "DiscountType", "Sale", "SaleRecord",
    "SalePurchasable", "SaleCategory", "SaleUserGroup",
]
