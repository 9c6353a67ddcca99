"""
Main FastAPI application entry point.
Configures the application, middleware, and includes routers.
"""
from dotenv import load_dotenv

# Load environment variables from .env file first
load_dotenv()

from fastapi import FastAPI
import logging
from .auth.router import router as auth_router
from .users.router import router as users_router
from .database import Base, engine
# Import all models here for creating tables
from .auth import models as auth_models  # noqa: F401
from .appointments import models as appointment_models  # noqa: F401
from .exceptions import register_exception_handlers
from .core.middleware import setup_middlewares

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

# Create database tables if they don't exist
Base.metadata.create_all(bind=engine)

logger.info("Starting MedCare API...")

# Create FastAPI application
app = FastAPI(
    title="MedCare API",
    description="Accounts, patient and doctor profiles, requests and appointments",
    version="1.0.0"
)

# Register exception handlers
register_exception_handlers(app)

# Setup custom middleware
setup_middlewares(app)

# Include routers
app.include_router(auth_router)
app.include_router(users_router)

# Root endpoint
@app.get("/")
def root():
    """
    Root endpoint for API health check.

    Returns:
        dict: Simple welcome message
    """
    return {"message": "Welcome to MedCare API", "version": app.version}

# Health check endpoint
@app.get("/health")
async def health_check():
    """
    Health check endpoint for monitoring.

    Returns:
        dict: Health status information
    """
    return {"status": "healthy", "database": "connected"}
