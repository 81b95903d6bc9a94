# reefcultures/main.py

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from reefcultures.core.exceptions import ShippingError
from reefcultures.core.logging_config import configure_logging
from reefcultures.core.security import require_auth
from reefcultures.routes import health, shipping

configure_logging()

logger = logging.getLogger(__name__)

app = FastAPI(title="ReefCultures Shipping")


# Add middleware to handle HTTPS behind proxy
@app.middleware("http")
async def proxy_headers_middleware(request: Request, call_next):
    forwarded_proto = request.headers.get("x-forwarded-proto")
    if forwarded_proto == "https":
        request.scope["scheme"] = "https"
    response = await call_next(request)
    return response


@app.exception_handler(ShippingError)
async def shipping_error_handler(request: Request, exc: ShippingError):
    """Every shipping failure reaches the caller as {"error": message} with its status."""
    if exc.status_code >= 500:
        logger.error(f"{type(exc).__name__} on {request.url.path}: {exc.message}")
    else:
        logger.info(f"{type(exc).__name__} on {request.url.path}: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


app.include_router(shipping.router)  # Storefront quoting is public
app.include_router(shipping.admin_router, dependencies=[require_auth()])
app.include_router(health.router)  # Health check should be accessible without auth
