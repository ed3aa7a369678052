from contextlib import asynccontextmanager

import structlog
from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from trl_engine.config import settings
from trl_engine.core.logging_config import configure_logging
from trl_engine.routers.errors import validation_exception_handler
from trl_engine.routers.health import router as health_router
from trl_engine.routers.scale import router as scale_router
from trl_engine.routers.workflows import router as workflows_router

load_dotenv()

logger = structlog.get_logger(__name__)


# SWAGGER UI - tag display order
_OPENAPI_TAGS = [
    {"name": "Root"},
    {"name": "Health"},
    {"name": "Workflows"},
    {"name": "TRL Scale"},
]


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging(settings)
    logger.info("app_starting", service=settings.APP_NAME, env=settings.APP_ENV)
    yield
    logger.info("app_stopping", service=settings.APP_NAME)


# FASTAPI APPLICATION CONFIGURATION
app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
    openapi_tags=_OPENAPI_TAGS,
    lifespan=lifespan,
)

app.add_middleware(CORSMiddleware, allow_origins=["*"], allow_methods=["*"], allow_headers=["*"])

# REGISTER EXCEPTION HANDLERS
app.add_exception_handler(RequestValidationError, validation_exception_handler)

# REGISTER ROUTERS (order matches _OPENAPI_TAGS / Swagger UI display order)
app.include_router(health_router)      # Health
app.include_router(workflows_router)   # Workflows
app.include_router(scale_router)       # TRL Scale


# ROOT ENDPOINT
@app.get("/", tags=["Root"], summary="Root endpoint")
async def root():
    return {
        "service": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "docs": {
            "swagger": "/docs",
            "redoc": "/redoc"
        },
        "status": "running"
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("trl_engine.main:app", host="0.0.0.0", port=8000, reload=settings.DEBUG)
