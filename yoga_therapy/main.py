import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from .config import settings
from .database import engine, async_session, Base
from .errors import YogaTherapyError
from .rate_limit import limiter
from .services.seed_service import ensure_default_catalog

from .api import auth, catalog, patients, series, portal, sessions

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger("yoga_therapy")


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup: create tables + seed catalog
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    if settings.SEED_DEFAULT_DATA:
        async with async_session() as db:
            await ensure_default_catalog(db)

    yield

    # Shutdown
    await engine.dispose()


app = FastAPI(
    title="Yoga Therapy API",
    version="1.0.0",
    lifespan=lifespan,
)

app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)


@app.exception_handler(YogaTherapyError)
async def domain_error_handler(request: Request, exc: YogaTherapyError):
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=400,
        content={"detail": "Validation error", "errors": jsonable_encoder(exc.errors())},
    )


# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Register routers
app.include_router(auth.router)
app.include_router(catalog.router)
app.include_router(patients.router)
app.include_router(series.router)
app.include_router(portal.router)
app.include_router(sessions.router)


@app.get("/api/health")
async def health():
    return {"status": "ok"}
