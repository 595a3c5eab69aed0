from inventory.api.routes import location_router, movement_router, product_router

__all__ = ["movement_router", "location_router", "product_router"]
