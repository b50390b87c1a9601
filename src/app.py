"""Checkout engine FastAPI application.

Web server that processes ordering commands synchronously via HTTP. Every
request runs inside the ordering domain context.

Usage:
    uvicorn app:app --host 0.0.0.0 --port 8000 --reload
"""

import uuid

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from ordering.api.errors import install_error_handlers
from ordering.domain import ordering
from ordering.utils.logging import add_context, clear_context, configure_logging

# ---------------------------------------------------------------------------
# Domain initialization
# ---------------------------------------------------------------------------
# Initialized at module level so uvicorn workers share it.
configure_logging(log_file_prefix="checkout")
ordering.init()

# ---------------------------------------------------------------------------
# FastAPI app
# ---------------------------------------------------------------------------
app = FastAPI(
    title="Checkout Engine API",
    description="Checkout pricing, promo codes, delivery fees and the order lifecycle",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

install_error_handlers(app)


@app.middleware("http")
async def domain_context_middleware(request: Request, call_next):
    """Push the ordering domain context and bind request details to the log context."""
    add_context(request_id=request.headers.get("x-request-id", str(uuid.uuid4())), path=request.url.path)
    try:
        with ordering.domain_context():
            return await call_next(request)
    finally:
        clear_context()


# ---------------------------------------------------------------------------
# Routers
# ---------------------------------------------------------------------------
from ordering.api.routes import (  # noqa: E402
    checkout_router,
    customer_router,
    delivery_zone_router,
    guest_router,
    order_router,
    promo_router,
)

app.include_router(checkout_router)
app.include_router(order_router)
app.include_router(customer_router)
app.include_router(guest_router)
app.include_router(delivery_zone_router)
app.include_router(promo_router)

# ---------------------------------------------------------------------------
# Health / root
# ---------------------------------------------------------------------------
@app.get("/health")
async def health():
    return JSONResponse(content={"status": "ok", "domains": {"ordering": {"name": ordering.name}}})
