from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import logging
from datetime import datetime
from contextlib import asynccontextmanager

from store_dashboard.config import settings, is_development, is_production
from store_dashboard.exceptions import ConfigurationError, DataFormatError, FetchFailure
from store_dashboard.models.schemas import ErrorResponse
from store_dashboard.api.routes import router

# Configure logging
logging.basicConfig(
    level=settings.LOG_LEVEL,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Application starting up...")
    try:
        from store_dashboard.models.database import create_tables
        create_tables()
        logger.info("Database tables initialized successfully")
    except Exception as e:
        logger.error(f"Failed to initialize database: {e}")

    yield
    logger.info("Application shutting down...")

app = FastAPI(
    title=settings.API_TITLE,
    description=settings.API_DESCRIPTION,
    version=settings.API_VERSION,
    docs_url=None if is_production() else "/docs",
    redoc_url=None if is_production() else "/redoc",
    openapi_url="/openapi.json",
    lifespan=lifespan
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include API routes with prefix
app.include_router(router, prefix="/api/v1", tags=["Stores"])


@app.get("/", tags=["Root"])
async def root():
    """Root endpoint with API information"""
    return {
        "message": "Multi-Store Dashboard API",
        "version": settings.API_VERSION,
        "documentation": {
            "swagger_ui": "/docs",
            "redoc": "/redoc",
            "openapi_json": "/openapi.json"
        },
        "endpoints": {
            "fetch_store": "/api/v1/shopify",
            "stores": "/api/v1/stores",
            "dashboard": "/api/v1/dashboard",
            "analytics": "/api/v1/analytics",
            "health": "/api/v1/health"
        },
        "status": "active"
    }


@app.get("/health", tags=["Health"])
async def health_check():
    """Health check endpoint"""
    return {
        "status": "healthy",
        "timestamp": datetime.now(),
        "version": settings.API_VERSION,
        "service": settings.API_TITLE
    }


def _error(status_code: int, error: str, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(
            error=error,
            message=message,
            status_code=status_code
        ).model_dump(mode="json")
    )


# Global exception handlers
@app.exception_handler(FetchFailure)
async def fetch_failure_handler(request: Request, exc: FetchFailure):
    return _error(502, "Fetch Failed", f"Failed to fetch Shopify data for store {exc.store_url}")


@app.exception_handler(DataFormatError)
async def data_format_error_handler(request: Request, exc: DataFormatError):
    logger.error(f"Malformed store data: {exc}")
    return _error(502, "Invalid Store Data", str(exc))


@app.exception_handler(ConfigurationError)
async def configuration_error_handler(request: Request, exc: ConfigurationError):
    return _error(400, "Invalid Configuration", str(exc))


@app.exception_handler(404)
async def not_found_handler(request, exc):
    message = getattr(exc, "detail", None) or "The requested resource was not found"
    return _error(404, "Not Found", message)


@app.exception_handler(500)
async def internal_server_error_handler(request, exc):
    logger.error(f"Internal server error: {exc}")
    return _error(500, "Internal Server Error", "An internal server error occurred")


@app.exception_handler(HTTPException)
async def http_exception_handler(request, exc: HTTPException):
    return _error(exc.status_code, "HTTP Error", exc.detail)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("store_dashboard.main:app", host=settings.HOST, port=settings.PORT, reload=settings.DEBUG or is_development())
