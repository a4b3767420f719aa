"""
FastAPI Application Entry Point

Private Cafe Orders - spreadsheet proxy.
Forwards menu and order calls to the configured sheets gateway and
normalizes whatever the upstream answers into one JSON envelope.

Endpoints:
    - GET  /api/menu: Menu rows
    - GET  /api/orders: Order rows
    - POST /api/orders: Append one order unit
    - POST /api/orders/update: Set an order's completed flag
    - GET  /health: System health check

Author: Khalil Bannouri
Version: 4.0.0
"""

import logging
from datetime import datetime
from typing import Any
from contextlib import asynccontextmanager

from fastapi import FastAPI, Depends, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware

from cafe.core.config import get_settings, setup_logging
from cafe.core.envelope import Decoded
from cafe.core.exceptions import CafeError, DecodeError
from cafe.schemas import (
    OrderCreate,
    OrderStatusUpdate,
    ReadEnvelope,
    WriteEnvelope,
    ErrorResponse,
    HealthResponse,
)
from cafe.services.sheets import BaseSheetsGateway, get_sheets_gateway

# Initialize configuration and logging
settings = get_settings()
setup_logging()
logger = logging.getLogger(__name__)


# =============================================================================
# APPLICATION LIFECYCLE
# =============================================================================

@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Manage application startup and shutdown events.
    """
    # Startup
    logger.info("=" * 60)
    logger.info(f"🚀 Starting {settings.app_name}")
    logger.info(f"   Version: {settings.app_version}")
    logger.info(f"   Environment: {settings.env_mode.value}")
    logger.info(f"   Debug: {settings.debug}")
    logger.info("=" * 60)

    gateway_factory = app.dependency_overrides.get(get_sheets_gateway, get_sheets_gateway)
    gateway = gateway_factory()
    logger.info(f"✅ Sheets Gateway: {gateway.provider_name}")

    # Validate production config
    if settings.use_real_services:
        missing = settings.validate_production_config()
        if missing:
            logger.warning(f"⚠️ Missing production config: {missing}")

    logger.info("=" * 60)
    logger.info("✅ Application ready!")
    logger.info("=" * 60)

    yield  # Application runs

    # Shutdown
    logger.info("Shutting down...")
    await gateway.aclose()
    logger.info("✅ Cleanup complete")


# =============================================================================
# APPLICATION INSTANCE
# =============================================================================

app = FastAPI(
    title=settings.app_name,
    description=(
        "Ordering proxy for a private cafe. Menu and orders live in a "
        "spreadsheet; this service forwards and normalizes the calls."
    ),
    version=settings.app_version,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["GET", "POST"],
    allow_headers=["*"],
)


# =============================================================================
# HELPER FUNCTIONS
# =============================================================================

def error_response(message: str, status_code: int = 500) -> JSONResponse:
    """Build the failure envelope."""
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "error": message},
    )


def read_result(decoded: Decoded) -> dict[str, Any]:
    """
    Turn a decoded upstream read into the read envelope.

    Raises:
        DecodeError: Upstream body was not an envelope
    """
    if not decoded.ok:
        raise DecodeError(decoded.reason or "Unreadable upstream response", status_code=502)

    envelope = decoded.value
    if not envelope.get("success"):
        return ReadEnvelope(
            success=False,
            error=str(envelope.get("error") or "Unknown upstream error"),
        ).model_dump(exclude_none=True)

    data = envelope.get("data")
    rows = [row for row in data if isinstance(row, list)] if isinstance(data, list) else []
    return ReadEnvelope(success=True, data=rows).model_dump(exclude_none=True)


def write_result(decoded: Decoded) -> dict[str, Any]:
    """Turn a decoded upstream write into the write envelope."""
    if not decoded.ok:
        raise DecodeError(decoded.reason or "Unreadable upstream response", status_code=502)

    envelope = decoded.value
    return WriteEnvelope(
        success=bool(envelope.get("success")),
        message=envelope.get("message"),
        data=envelope.get("data"),
        error=envelope.get("error"),
    ).model_dump(exclude_none=True)


# =============================================================================
# ROOT & HEALTH ENDPOINTS
# =============================================================================

@app.get("/", tags=["Root"])
async def root() -> dict[str, str]:
    """API root with navigation links."""
    return {
        "message": f"☕ Welcome to {settings.app_name}",
        "version": settings.app_version,
        "environment": settings.env_mode.value,
        "documentation": "/docs",
        "health": "/health",
    }


@app.get(
    "/health",
    response_model=HealthResponse,
    tags=["Health"],
    summary="System Health Check",
)
async def health_check(
    gateway: BaseSheetsGateway = Depends(get_sheets_gateway),
) -> HealthResponse:
    """Verify the spreadsheet backend is reachable."""
    missing = settings.validate_production_config()
    upstream_ok = await gateway.health_check()

    return HealthResponse(
        status="operational" if upstream_ok and not missing else "degraded",
        environment=settings.env_mode.value,
        sheets_gateway=gateway.provider_name,
        upstream="healthy" if upstream_ok else "unhealthy",
        missing_config=missing,
        timestamp=datetime.now(),
    )


# =============================================================================
# MENU API ENDPOINTS
# =============================================================================

@app.get(
    "/api/menu",
    response_model=ReadEnvelope,
    response_model_exclude_none=True,
    responses={500: {"model": ErrorResponse}},
    tags=["Menu"],
    summary="List Menu Rows",
)
async def get_menu(
    gateway: BaseSheetsGateway = Depends(get_sheets_gateway),
) -> Any:
    """Rows are ``[name, price, stock, category, creator]``."""
    try:
        return read_result(await gateway.get_menu())
    except CafeError as e:
        logger.error(f"Failed to fetch menu: {e}")
        return error_response(e.message, e.status_code or 500)


# =============================================================================
# ORDER API ENDPOINTS
# =============================================================================

@app.get(
    "/api/orders",
    response_model=ReadEnvelope,
    response_model_exclude_none=True,
    responses={500: {"model": ErrorResponse}},
    tags=["Orders"],
    summary="List Order Rows",
)
async def list_orders(
    gateway: BaseSheetsGateway = Depends(get_sheets_gateway),
) -> Any:
    """Rows are ``[orderId, timestamp, userId, nickname, animal, item, price, completed]``."""
    try:
        return read_result(await gateway.get_orders())
    except CafeError as e:
        logger.error(f"Failed to fetch orders: {e}")
        return error_response(e.message, e.status_code or 500)


@app.post(
    "/api/orders",
    response_model=WriteEnvelope,
    response_model_exclude_none=True,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
    tags=["Orders"],
    summary="Add One Order Unit",
)
async def create_order(
    order_data: OrderCreate,
    gateway: BaseSheetsGateway = Depends(get_sheets_gateway),
) -> Any:
    """
    Append a single order unit.

    A cart line with quantity N is posted N times by the client;
    there is no batching and no transaction.
    """
    logger.info(f"Adding order {order_data.order_id}: {order_data.item} for {order_data.user_id}")

    try:
        result = write_result(await gateway.add_order(order_data.to_wire()))
    except CafeError as e:
        logger.error(f"Failed to add order {order_data.order_id}: {e}")
        return error_response(e.message, e.status_code or 500)

    if not result["success"]:
        logger.warning(f"Upstream rejected order {order_data.order_id}: {result.get('error')}")
    return result


@app.post(
    "/api/orders/update",
    response_model=WriteEnvelope,
    response_model_exclude_none=True,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
    tags=["Orders"],
    summary="Update Order Completion",
)
async def update_order_status(
    update: OrderStatusUpdate,
    gateway: BaseSheetsGateway = Depends(get_sheets_gateway),
) -> Any:
    """Set ``completed`` on the order identified by ``orderId``."""
    if not update.order_id:
        return error_response("orderId is required", 400)

    try:
        decoded = await gateway.update_order_status(update.order_id, update.completed)
        result = write_result(decoded)
    except CafeError as e:
        logger.error(f"Failed to update order {update.order_id}: {e}")
        return error_response(e.message, e.status_code or 500)

    logger.info(f"Order {update.order_id} completed={update.completed} -> success={result['success']}")
    return result


# =============================================================================
# ERROR HANDLERS
# =============================================================================

@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Report malformed bodies in the envelope shape."""
    problems = "; ".join(
        f"{'.'.join(str(p) for p in err.get('loc', ())[1:]) or 'body'}: {err.get('msg')}"
        for err in exc.errors()
    )
    logger.warning(f"Invalid request to {request.url.path}: {problems}")
    return error_response(f"Invalid request: {problems}", 400)


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Catch-all exception handler."""
    logger.exception(f"Unhandled exception: {exc}")

    return JSONResponse(
        status_code=500,
        content={
            "success": False,
            "error": "Internal Server Error",
            "detail": str(exc) if settings.debug else "An unexpected error occurred",
        },
    )
