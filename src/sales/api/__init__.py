from sales.api.routes import invoice_router, order_router, tracking_router

__all__ = ["order_router", "invoice_router", "tracking_router"]
