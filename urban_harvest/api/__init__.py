# urban_harvest/api/__init__.py
import os

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from urban_harvest.api.routers import (
    auth,
    bookings,
    cart,
    catalog,
    event_reviews,
    events,
    favorites,
    health,
    notifications,
    orders,
    product_reviews,
    products,
    subscription_boxes,
    subscription_reviews,
    subscriptions,
    upload,
    workshop_reviews,
    workshops,
)
from urban_harvest.utils.settings import CORS_ORIGINS, UPLOAD_DIR
from urban_harvest.utils.logging import get_logger

logger = get_logger(__name__)

API_ROUTERS = (
    health,
    auth,
    events,
    workshops,
    products,
    bookings,
    orders,
    catalog,
    upload,
    product_reviews,
    event_reviews,
    workshop_reviews,
    subscription_boxes,
    subscriptions,
    subscription_reviews,
    favorites,
    notifications,
    cart,
)


def _validation_message(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    first = errors[0]
    field = ".".join(str(p) for p in first.get("loc", ()) if p not in ("body", "query", "path"))
    return f"{field}: {first['msg']}" if field else first["msg"]


def register_error_handlers(app: FastAPI):
    @app.exception_handler(StarletteHTTPException)
    async def http_error(request: Request, exc: StarletteHTTPException):
        return JSONResponse({"error": exc.detail}, status_code=exc.status_code, headers=exc.headers)

    @app.exception_handler(RequestValidationError)
    async def validation_error(request: Request, exc: RequestValidationError):
        return JSONResponse({"error": _validation_message(exc)}, status_code=400)

    @app.exception_handler(Exception)
    async def unhandled_error(request: Request, exc: Exception):
        logger.exception(f"Unhandled error on {request.method} {request.url.path}")
        return JSONResponse({"error": "Internal server error"}, status_code=500)


def create_app() -> FastAPI:
    app = FastAPI(title="Urban Harvest Hub API", version="1.0.0")

    app.add_middleware(
        CORSMiddleware,
        allow_origins=CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        if request.url.path.startswith("/api") or request.url.path == "/":
            logger.info(f"{request.method} {request.url.path}")
        return await call_next(request)

    register_error_handlers(app)

    for module in API_ROUTERS:
        app.include_router(module.router, prefix="/api")

    os.makedirs(UPLOAD_DIR, exist_ok=True)
    app.mount("/uploads", StaticFiles(directory=UPLOAD_DIR), name="uploads")

    @app.get("/")
    def root():
        return {
            "message": "Welcome to Urban Harvest Hub API",
            "version": "1.0.0",
            "endpoints": {
                "auth": "/api/auth (signup, login, me)",
                "events": "/api/events",
                "workshops": "/api/workshops",
                "products": "/api/products",
                "bookings": "/api/bookings",
                "orders": "/api/orders",
                "subscription_boxes": "/api/subscription-boxes",
                "subscriptions": "/api/subscriptions",
                "reviews": "/api/product-reviews, /api/event-reviews, /api/workshop-reviews, /api/subscription-reviews",
                "favorites": "/api/favorites",
                "notifications": "/api/notifications",
                "upload": "/api/upload",
                "health": "/api/health",
            },
        }

    return app
