"""The Wizard's Bag FastAPI application.

Web server for the storefront domain. Commands are processed synchronously
within each request, inside the storefront domain context.

Usage:
    uvicorn src.app:app --host 0.0.0.0 --port 8000 --reload
"""

# ---------------------------------------------------------------------------
# Domain initialization
# ---------------------------------------------------------------------------
# The domain is initialized at module level so uvicorn workers share it.
import structlog
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from storefront.config import settings
from storefront.domain import storefront
from storefront.utils.logging import bind_request_context, configure_logging

configure_logging()
storefront.init()

logger = structlog.get_logger(__name__)

if settings.seed_catalogue:
    from storefront.catalogue.seed import seed_catalogue

    with storefront.domain_context():
        seed_catalogue()

# ---------------------------------------------------------------------------
# FastAPI app
# ---------------------------------------------------------------------------
app = FastAPI(
    title="The Wizard's Bag API",
    description="TTRPG accessories storefront: catalogue, cart and checkout",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def domain_context_middleware(request: Request, call_next):
    """Push the storefront domain context and a fresh log context for each request."""
    request_id = bind_request_context(
        method=request.method,
        path=request.url.path,
        session_id=request.cookies.get(settings.session_cookie_name),
    )
    with storefront.domain_context():
        response = await call_next(request)
    response.headers["X-Request-ID"] = request_id
    return response


# ---------------------------------------------------------------------------
# Routers
# ---------------------------------------------------------------------------
from storefront.api import (  # noqa: E402
    account_router,
    cart_router,
    checkout_router,
    product_router,
    register_error_handlers,
)

app.include_router(product_router)
app.include_router(cart_router)
app.include_router(checkout_router)
app.include_router(account_router)
register_error_handlers(app)


# ---------------------------------------------------------------------------
# Health / root
# ---------------------------------------------------------------------------
@app.get("/health")
async def health():
    return JSONResponse(
        content={
            "status": "ok",
            "shop": settings.shop_name,
            "domains": {"storefront": {"name": storefront.name}},
        }
    )
