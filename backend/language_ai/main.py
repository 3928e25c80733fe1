"""FastAPI application entry point."""

import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from starlette.middleware.base import BaseHTTPMiddleware

from language_ai.api.routes import characters, chat, speech
from language_ai.config import settings
from language_ai.middleware.rate_limiter import limiter
from language_ai.middleware.request_id import RequestIDMiddleware
from language_ai.models.envelope import ApiError, error_response
from language_ai.services.llm_client import get_provider_config

logger = logging.getLogger(__name__)

# Configure logging format based on dev_mode
if not settings.dev_mode:
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format='{"time":"%(asctime)s","level":"%(levelname)s","name":"%(name)s","message":"%(message)s"}',
    )
else:
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)-8s %(name)s: %(message)s",
    )

app = FastAPI(
    title="language.ai API",
    description="Conversation practice with AI language partners",
    version="0.1.0",
    openapi_url="/api/v1/openapi.json",
    docs_url="/docs" if settings.dev_mode else None,
    redoc_url="/redoc" if settings.dev_mode else None,
)

# ---------------------------------------------------------------------------
# Middleware
# ---------------------------------------------------------------------------

app.state.limiter = limiter


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        response = await call_next(request)
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        if not settings.dev_mode:
            response.headers["Strict-Transport-Security"] = (
                "max-age=63072000; includeSubDomains"
            )
        return response


app.add_middleware(SecurityHeadersMiddleware)
app.add_middleware(RequestIDMiddleware)


# ---------------------------------------------------------------------------
# Global exception handlers
# ---------------------------------------------------------------------------

@app.exception_handler(RateLimitExceeded)
async def _rate_limit_handler(_request: Request, exc: RateLimitExceeded) -> JSONResponse:
    return JSONResponse(
        status_code=429,
        content=error_response(ApiError(code="RATE_LIMITED", message=str(exc.detail))),
    )


@app.exception_handler(Exception)
async def _global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error("Unhandled exception on %s %s", request.method, request.url.path, exc_info=True)
    detail = str(exc) if settings.dev_mode else "Internal server error"
    return JSONResponse(
        status_code=500,
        content=error_response(ApiError(code="INTERNAL_ERROR", message=detail)),
    )


# ---------------------------------------------------------------------------
# CORS
# ---------------------------------------------------------------------------

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type", "Accept", "X-Request-ID"],
    expose_headers=["X-Request-ID", "X-Vercel-AI-Data-Stream"],
)


# ---------------------------------------------------------------------------
# Routers
# ---------------------------------------------------------------------------

app.include_router(chat.stream_router, prefix="/api", tags=["chat"])
app.include_router(chat.router, prefix="/api/v1/chat", tags=["chat"])
app.include_router(characters.router, prefix="/api/v1/characters", tags=["characters"])
app.include_router(speech.router, prefix="/api/v1/speech", tags=["speech"])

# ---------------------------------------------------------------------------
# System endpoints
# ---------------------------------------------------------------------------


@app.get("/health")
async def health_check() -> dict:
    """Liveness check. Verifies the API process is alive."""
    provider = get_provider_config()
    configured = bool(provider.api_key) or not provider.requires_api_key
    return {
        "status": "healthy",
        "services": {
            "llm": "ok" if configured else "not_configured",
            "llm_provider": provider.provider.value,
        },
    }


@app.get("/api/v1/version")
async def version() -> dict:
    """Return build / version metadata."""
    return {
        "version": app.version,
        "title": app.title,
        "api_prefix": "/api/v1",
    }


@app.get("/")
async def root() -> dict:
    """Root endpoint."""
    return {"message": "language.ai API", "docs": "/docs"}
