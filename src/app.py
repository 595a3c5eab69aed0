"""Stockroom FastAPI application.

Serves the inventory and sales contexts over one HTTP API. Each request is
wrapped in the correct domain context based on its URL prefix.

Usage:
    uvicorn app:app --app-dir src --host 0.0.0.0 --port 8000 --reload
"""

# ---------------------------------------------------------------------------
# Logging and domain initialization
# ---------------------------------------------------------------------------
# Domains are initialized at module level so uvicorn workers share them.
# PROTEAN_ENV selects the domain.toml overlay (e.g. "production" → PostgreSQL).
from shared.logging import configure_logging

configure_logging()

from fastapi import FastAPI, Request  # noqa: E402
from fastapi.middleware.cors import CORSMiddleware  # noqa: E402
from fastapi.responses import JSONResponse  # noqa: E402
from inventory.domain import inventory  # noqa: E402
from sales.domain import sales  # noqa: E402

from shared.http import register_error_handlers  # noqa: E402
from shared.logging import bind_request_context, clear_request_context  # noqa: E402

inventory.init()
sales.init()

# ---------------------------------------------------------------------------
# Route-to-domain mapping
# ---------------------------------------------------------------------------
_ROUTE_DOMAIN_MAP = {
    "/stock-movements": inventory,
    "/locations": inventory,
    "/products": inventory,
    "/orders": sales,
    "/invoices": sales,
    "/tracking": sales,
}


def _resolve_domain(path: str):
    """Return the domain for the given request path, or None."""
    for prefix, domain in _ROUTE_DOMAIN_MAP.items():
        if path.startswith(prefix):
            return domain
    return None


# ---------------------------------------------------------------------------
# FastAPI app
# ---------------------------------------------------------------------------
app = FastAPI(
    title="Stockroom API",
    description="Inventory, warehouse allocation and order management",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_error_handlers(app)


@app.middleware("http")
async def domain_context_middleware(request: Request, call_next):
    """Push the correct Protean domain context for each request."""
    clear_request_context()
    bind_request_context(method=request.method, path=request.url.path)

    domain = _resolve_domain(request.url.path)
    if domain is not None:
        with domain.domain_context():
            response = await call_next(request)
        return response
    # No domain match: pass through (health check, docs, etc.)
    return await call_next(request)


# ---------------------------------------------------------------------------
# Routers
# ---------------------------------------------------------------------------
from inventory.api import location_router, movement_router, product_router  # noqa: E402
from sales.api import invoice_router, order_router, tracking_router  # noqa: E402

app.include_router(movement_router)
app.include_router(location_router)
app.include_router(product_router)
app.include_router(order_router)
app.include_router(invoice_router)
app.include_router(tracking_router)


# ---------------------------------------------------------------------------
# Health
# ---------------------------------------------------------------------------
@app.get("/health")
async def health():
    return JSONResponse(
        content={
            "status": "ok",
            "domains": {
                "inventory": {"name": inventory.name},
                "sales": {"name": sales.name},
            },
        }
    )
