from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from vdf_gateway.config import settings
from vdf_gateway.logging_config import get_logger, setup_logging
from vdf_gateway.middleware.logging import CORRELATION_ID_HEADER, LoggingMiddleware
from vdf_gateway.middleware.rate_limit import limiter
from vdf_gateway.routers import challenges, vdf

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Configure logging before the first request is served."""
    setup_logging()
    logger.info("vdf_gateway_started", log_format=settings.log_format)
    yield


app = FastAPI(
    title="VDF Gateway",
    description="Verification of Wesolowski and Pietrzak VDF proofs",
    version="0.1.0",
    lifespan=lifespan,
)

# Rate limiting
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    """Return a bare 500 that still carries the request's correlation ID."""
    correlation_id = getattr(request.state, "correlation_id", None)
    headers = {CORRELATION_ID_HEADER: correlation_id} if correlation_id else None
    return JSONResponse(
        status_code=500,
        content={"detail": "Internal Server Error"},
        headers=headers,
    )


# Middleware (last added runs first)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(LoggingMiddleware)

# Routers
app.include_router(vdf.router, prefix="/api/v1", tags=["vdf"])
app.include_router(challenges.router, prefix="/api/v1", tags=["challenges"])


@app.get("/health")
async def health_check():
    return {"status": "healthy"}
