"""Main FastAPI application"""
import logging
import logging.config
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import JSONResponse

from config import Settings, get_settings
from routes import error_response, router as api_router
from services.expense_store import ExpenseStore
from services.summary_service import SpendingSummarizer

# --- Rate limiting ---
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.util import get_remote_address
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware


def build_logging_config(level: str = "INFO") -> dict:
    """Unified logging configuration: app and uvicorn loggers go through RichHandler."""
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "default": {
                "format": "%(name)s - %(message)s",
                "datefmt": "%Y-%m-%d %H:%M:%S",
            },
        },
        "handlers": {
            "default": {
                "class": "rich.logging.RichHandler",
                "formatter": "default",
                "level": "DEBUG",
                "rich_tracebacks": True,
                "show_time": True,
                "show_path": False,
                "log_time_format": "%Y-%m-%d %H:%M:%S",
                "markup": False,
            },
        },
        "loggers": {
            "uvicorn": {"handlers": ["default"], "level": "INFO", "propagate": False},
            "uvicorn.error": {"handlers": ["default"], "level": "INFO", "propagate": False},
            "uvicorn.access": {"handlers": ["default"], "level": "INFO", "propagate": False},
            "": {"handlers": ["default"], "level": level},
        },
    }


def configure_logging(level: str = "INFO") -> None:
    logging.config.dictConfig(build_logging_config(level))


logger = logging.getLogger(__name__)

EXPENSES_PATH = "/expenses"


# --- Middleware for Request Body Size Limit ---
class LimitBodySizeMiddleware(BaseHTTPMiddleware):
    def __init__(self, app, path: str, max_size: int):
        super().__init__(app)
        self.path = path
        self.max_size = max_size

    async def dispatch(self, request: Request, call_next):
        if request.method == "POST" and request.url.path == self.path:
            content_length_header = request.headers.get("content-length")
            if content_length_header:
                try:
                    content_length = int(content_length_header)
                except ValueError:
                    logger.warning("Request rejected: Invalid Content-Length header.")
                    return error_response("Invalid Content-Length header", status_code=400)
                if content_length > self.max_size:
                    logger.warning(f"Request rejected: body size {content_length} exceeds limit {self.max_size}.")
                    return error_response(f"Request body exceeds {self.max_size} bytes", status_code=413)

        return await call_next(request)


# --- Exception Handlers ---
async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    logger.warning(f"Malformed request to {request.url.path}: {exc.errors()}")
    return error_response("Invalid request body", status_code=400)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return error_response(str(exc.detail), status_code=exc.status_code)


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"Unexpected error handling {request.method} {request.url.path}: {exc}")
    return error_response("Internal server error", status_code=500)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings: Settings = app.state.settings
    summarizer: SpendingSummarizer = app.state.summarizer
    if settings.summary_enabled:
        summarizer.start()
    else:
        logger.info("Periodic summaries disabled (SUMMARY_ENABLED=false).")
    logger.info(f"Server is running on port {settings.port}")

    yield # Application runs here

    await summarizer.stop()
    logger.info(f"Shutting down; discarding {len(app.state.store)} in-memory expenses.")


def create_app(settings: Optional[Settings] = None, store: Optional[ExpenseStore] = None) -> FastAPI:
    """Builds an application with its own store, summarizer and rate limiter."""
    settings = settings or get_settings()

    app = FastAPI(
        title="Expense Tracker API",
        description="API for recording expenses and analyzing spending by category.",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.store = store if store is not None else ExpenseStore()
    app.state.summarizer = SpendingSummarizer(app.state.store, interval=settings.summary_interval_seconds)

    # --- Rate Limiter State and Handler ---
    limiter = Limiter(
        key_func=get_remote_address,
        default_limits=[settings.rate_limit],
        enabled=settings.rate_limit_enabled,
    )
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    # --- Middleware (Order Matters) ---
    # 1. Rate Limiter
    app.add_middleware(SlowAPIMiddleware)
    # 2. CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials="*" not in settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    # 3. Body Size Limit
    app.add_middleware(LimitBodySizeMiddleware, path=EXPENSES_PATH, max_size=settings.max_body_size)

    app.include_router(api_router, tags=["expenses"])
    return app


settings = get_settings()
configure_logging(settings.log_level)
app = create_app(settings)

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        app,
        host=settings.host,
        port=settings.port,
        log_config=build_logging_config(settings.log_level),
    )
