import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from devflow.endpoints.router import api_router, ws_router
from devflow.database.session import engine
from devflow.database.base import Base
from devflow.config.settings import settings
from devflow.utils.db_utils import create_default_admin, check_database_health
from devflow.exceptions import register_exception_handlers
from devflow.utils.logger import get_logger

# Registers every table on Base.metadata
import devflow.models  # noqa: F401

logger = get_logger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Execute startup tasks.
    Creates missing tables and the default admin user.
    """
    Base.metadata.create_all(bind=engine)
    create_default_admin()
    logger.info(f"{settings.PROJECT_NAME} {settings.PROJECT_VERSION} started ({settings.ENVIRONMENT})")
    yield
    logger.info("Shutting down")

app = FastAPI(
    title=settings.PROJECT_NAME,
    version=settings.PROJECT_VERSION,
    lifespan=lifespan
)

register_exception_handlers(app)

# CORS Middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

@app.middleware("http")
async def log_requests(request: Request, call_next):
    started = time.perf_counter()
    response = await call_next(request)
    duration_ms = (time.perf_counter() - started) * 1000
    logger.info(f"{request.method} {request.url.path} {response.status_code} {duration_ms:.1f}ms")
    return response

# Include API Router
app.include_router(api_router)
app.include_router(ws_router)

@app.get("/health")
def health():
    """
    Liveness plus database connectivity.
    """
    database_ok = check_database_health()
    return {
        "status": "ok" if database_ok else "degraded",
        "message": f"{settings.PROJECT_NAME} is running",
        "database": "connected" if database_ok else "disconnected",
    }

if __name__ == "__main__":
    import uvicorn
    uvicorn.run("devflow.main:app", host="0.0.0.0", port=settings.PORT, reload=settings.is_development)
