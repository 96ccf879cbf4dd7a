
"""
FastAPI application initialization
"""

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from api.routes import health, imports
from core.config import settings
from core.database import (
    SUPABASE_BACKEND,
    create_engine,
    create_supabase_client,
    describe_database,
)
from core.exceptions import InvalidImportRequestError
from core.logging import setup_logging
from ingestion.runner import ImportLocks, describe_validation_errors
from schemas.api import ImportFailure
import logging
from api.middleware import RequestContextMiddleware

# Configure logging
setup_logging(settings)

logger = logging.getLogger(__name__)

# Create FastAPI app
app = FastAPI(
    title="Buyback Import API",
    description="Admin backend for replacing buyback staging tables from CSV uploads",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc"
)

app.add_middleware(RequestContextMiddleware)


# Include routers
app.include_router(health.router)
app.include_router(imports.router)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    """Missing or unreadable bodies get the same failure shape as every import error"""
    problems = describe_validation_errors(exc.errors())
    failure = ImportFailure(
        error=f"Invalid import request: {'; '.join(problems)}",
        error_type=InvalidImportRequestError.__name__,
        details={"errors": problems},
    )
    logger.warning(f"Request rejected: {request.method} {request.url.path} - {failure.error}")
    return JSONResponse(status_code=422, content=failure.model_dump(mode="json"))


@app.on_event("startup")
async def startup_event():
    """Application startup event"""
    logger.info("Starting Buyback Import API")
    logger.info(f"Environment: {settings.ENVIRONMENT}")
    logger.info(f"Backend: {settings.STAGING_BACKEND} ({describe_database(settings) or 'configured'})")

    app.state.engine = None
    app.state.supabase = None
    app.state.import_locks = ImportLocks()

    if settings.STAGING_BACKEND == SUPABASE_BACKEND:
        try:
            app.state.supabase = await create_supabase_client(settings)
        except RuntimeError as e:
            # /health reports the missing configuration
            logger.error(str(e))
    else:
        app.state.engine = create_engine(settings)


@app.on_event("shutdown")
async def shutdown_event():
    """Application shutdown event"""
    logger.info("Shutting down Buyback Import API")
    if app.state.engine is not None:
        await app.state.engine.dispose()


@app.get("/")
async def root():
    """Root endpoint"""
    return {
        "message": "Buyback Import API",
        "version": "1.0.0",
        "docs": "/docs",
        "health": "/health",
        "endpoints": {
            "imports": "/imports"
        }
    }
