"""Exceptions raised by the sale engine services."""


class SaleEngineError(Exception):
    """Base exception for structural and storage problems."""

    def __init__(self, message="An internal error occurred", status_code=500):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class SaleNotFoundError(SaleEngineError):
    """Raised when an update references a sale id that does not exist."""

    def __init__(self, sale_id):
        super().__init__(f"No sale exists with the ID '{sale_id}'", 404)
        self.sale_id = sale_id


class PurchasableNotFoundError(SaleEngineError):
    """Raised when a sale is scoped to a purchasable that cannot be resolved."""

    def __init__(self, purchasable_id):
        super().__init__(f"No purchasable exists with the ID '{purchasable_id}'", 404)
        self.purchasable_id = purchasable_id
