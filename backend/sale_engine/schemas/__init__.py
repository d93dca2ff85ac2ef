from .product import ProductPriceResponse
from .sale import SaleResponse, SaleSave, SaleErrorsResponse

__all__ = [
    "ProductPriceResponse",
    "SaleResponse", "SaleSave", "SaleErrorsResponse",
]
