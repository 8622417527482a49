import asyncio
import logging
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from core.config import settings
from core.database import engine
from core.errors import PlaneTrackerError, StoreFailure
from models.base import Base

from routers.auth import router as auth_router
from routers.photos import router as photo_router
from routers.airports import router as airport_router
from routers.aircraft_types import router as aircraft_type_router
from routers.aircraft import router as aircraft_router
from routers.airlines import router as airline_router
from routers.health import router as health_router

logger = logging.getLogger("uvicorn.error")


@asynccontextmanager
async def lifespan(_: FastAPI):
    # Create any missing tables once per process
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    try:
        yield
    finally:
        # Close every pooled connection
        await engine.dispose()


app = FastAPI(
    title="Plane Tracker API",
    version="0.1.0",
    description="Backend for logging aircraft spotting photos",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def log_request_time(request: Request, call_next):
    start_time = time.perf_counter()
    try:
        response = await asyncio.wait_for(call_next(request), timeout=settings.REQUEST_TIMEOUT_SECONDS)
    except asyncio.TimeoutError:
        logger.warning(
            f"{request.method} {request.url.path} timed out after {settings.REQUEST_TIMEOUT_SECONDS}s"
        )
        return JSONResponse(
            status_code=503,
            content={"detail": "Request timed out, please retry"},
            headers={"Retry-After": "1"},
        )
    process_time = (time.perf_counter() - start_time) * 1000
    logger.info(
        f"{request.method} {request.url.path} completed in {process_time:.2f} ms"
    )
    return response


@app.exception_handler(PlaneTrackerError)
async def plane_tracker_error_handler(request: Request, exc: PlaneTrackerError):
    if isinstance(exc, StoreFailure):
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.detail)
        return JSONResponse(status_code=exc.status_code, content={"detail": StoreFailure.default_detail})
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})


@app.exception_handler(RequestValidationError)
async def request_validation_error_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(status_code=400, content={"detail": jsonable_encoder(exc.errors())})


app.include_router(auth_router, prefix="/api")
app.include_router(photo_router, prefix="/api")
app.include_router(airport_router, prefix="/api")
app.include_router(aircraft_type_router, prefix="/api")
app.include_router(aircraft_router, prefix="/api")
app.include_router(airline_router, prefix="/api")
app.include_router(health_router)


@app.get("/")
async def root():
    return {"message": "Plane Tracker API is running"}
