"""Rejections raised by the inventory context."""

from shared.errors import Conflict, NotFound, RequestRejected


class MissingField(RequestRejected):
    def __init__(self, field_name: str):
        super().__init__(f"Missing required field: {field_name}", field=field_name)


class InvalidReference(RequestRejected):
    def __init__(self, field_name: str):
        super().__init__(f"Invalid {field_name} format", field=field_name)


class InvalidMovementType(RequestRejected):
    def __init__(self, movement_type):
        super().__init__(
            f"Invalid movement type: {movement_type}. Must be one of: in, out, adjustment, transfer",
            field="movementType",
        )


class InvalidQuantity(RequestRejected):
    def __init__(self, message: str = "Quantity must be a positive whole number"):
        super().__init__(message, field="quantity")


class DestinationRequired(RequestRejected):
    def __init__(self):
        super().__init__("Destination location is required for transfers", field="destinationLocationId")


class SameLocationTransfer(RequestRejected):
    def __init__(self):
        super().__init__("Destination location must differ from the source location", field="destinationLocationId")


class InsufficientStock(RequestRejected):
    def __init__(self, available: int, requested: int):
        super().__init__(
            f"Insufficient stock at location. Available: {available}, Requested: {requested}",
            field="quantity",
        )
        self.available = available
        self.requested = requested


class AllocationRejected(RequestRejected):
    """A shelf allocation change that the product's stock cannot cover."""


class ProductNotFound(NotFound):
    def __init__(self):
        super().__init__("Product not found", field="productId")


class LocationNotFound(NotFound):
    def __init__(self):
        super().__init__("Location not found", field="locationId")


class DestinationNotFound(NotFound):
    def __init__(self):
        super().__init__("Destination location not found", field="destinationLocationId")


class SkuTaken(Conflict):
    def __init__(self, sku: str):
        super().__init__(f"A product with SKU {sku} already exists", field="sku")


class LocationCodeTaken(Conflict):
    def __init__(self, code: str):
        super().__init__(f"A location with code {code} already exists", field="code")


class LocationInUse(Conflict):
    def __init__(self, message: str = "Location still holds stock"):
        super().__init__(message, field="location")
