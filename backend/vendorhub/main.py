"""VendorHub - FastAPI Backend"""
import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware

from vendorhub.api import auth, group_buys, health, predictions, rescue, vendors
from vendorhub.core.config import settings
from vendorhub.core.database import engine
from vendorhub.core.errors import VendorHubError
from vendorhub.core.rate_limit import limiter

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger("vendorhub")


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup - initialize database
    from vendorhub.core.database import init_db
    await init_db()

    if settings.SEED_DEMO_DATA:
        from vendorhub.services.seed_service import seed_data
        await seed_data()

    yield
    # Shutdown
    await engine.dispose()


app = FastAPI(
    title="VendorHub API",
    description="Group buys, food rescue and purchasing forecasts for street food vendors",
    version="1.0.0",
    lifespan=lifespan,
)

# Rate limiting
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
app.add_middleware(SlowAPIMiddleware)

# CORS for frontend
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(VendorHubError)
async def vendorhub_error_handler(request: Request, exc: VendorHubError):
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.to_detail()})


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=500,
        content={"detail": {"error": "internal_error", "message": "Internal server error"}},
    )


# Routes
app.include_router(health.router, tags=["Health"])
app.include_router(auth.router, prefix="/api/v1/auth", tags=["Auth"])
app.include_router(group_buys.router, prefix="/api/v1/group-buys", tags=["Group Buys"])
app.include_router(rescue.router, prefix="/api/v1/rescue", tags=["Rescue"])
app.include_router(vendors.router, prefix="/api/v1/vendors", tags=["Vendors"])
app.include_router(vendors.reviews_router, prefix="/api/v1/reviews", tags=["Reviews"])
app.include_router(predictions.router, prefix="/api/v1/predictions", tags=["Predictions"])
