from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.exceptions import RequestValidationError
from contextlib import asynccontextmanager
import uvicorn
import logging
from dotenv import load_dotenv

# Load environment variables from .env file FIRST, before any other imports
# This ensures all modules that use os.getenv() will get values from .env
load_dotenv()

# Set SQLAlchemy engine logging to WARNING level to reduce query log noise
logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
logging.getLogger("sqlalchemy.pool").setLevel(logging.WARNING)
# Keep our application logs at INFO level
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)

from config import settings
from database import create_tables
from app.api.endpoints import auth, users, health, history
from app.core.error_handling import (
    AppException,
    app_exception_handler,
    validation_exception_handler,
    general_exception_handler,
)
from app.core.monitoring import init_sentry
from app.services.diagnosis_service import get_diagnosis_service

logger = logging.getLogger(__name__)


def get_cors_origins():
    """Get CORS origins from settings, always including local development origins"""
    origins = [origin.strip() for origin in settings.BACKEND_CORS_ORIGINS.split(",") if origin.strip()]

    default_origins = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ]

    return list(dict.fromkeys(origins + default_origins))


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan event handler for startup and shutdown"""
    logger.info(f"{settings.APP_NAME} starting up...")

    if init_sentry():
        logger.info("Sentry monitoring initialized")

    # Fail fast when the vocabulary does not fit the deployed model
    service = get_diagnosis_service()
    logger.info(f"Diagnosis vocabulary {service.vocabulary.version} ready")

    if settings.DB_AUTO_CREATE:
        await create_tables()
        logger.info("Database tables ensured")

    yield

    logger.info(f"{settings.APP_NAME} shutting down...")


# Initialize FastAPI app
app = FastAPI(
    title=settings.APP_NAME,
    description="Health diagnosis and history API",
    version=settings.APP_VERSION,
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=get_cors_origins(),
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "OPTIONS"],
    allow_headers=["*"],
    max_age=3600,  # Cache preflight requests for 1 hour
)

app.add_exception_handler(AppException, app_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(Exception, general_exception_handler)

# API Version 1 - All endpoints under /api/v1
app.include_router(auth.router, prefix=settings.API_V1_PREFIX, tags=["Authentication"])
app.include_router(users.router, prefix=settings.API_V1_PREFIX, tags=["Users"])
app.include_router(health.router, prefix=settings.API_V1_PREFIX, tags=["Health"])
app.include_router(history.router, prefix=settings.API_V1_PREFIX, tags=["Health History"])


@app.get("/")
async def root():
    """Health check endpoint"""
    return {"status": "healthy"}

@app.get("/health")
async def health_check_simple():
    """Simple health check endpoint for mobile apps and monitoring"""
    return {"status": "healthy"}

@app.get("/api/health")
async def health_check():
    """Detailed health check endpoint"""
    return {
        "status": "healthy",
        "service": settings.APP_NAME,
        "version": settings.APP_VERSION
    }

if __name__ == "__main__":
    uvicorn.run(
        "main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG
    )
