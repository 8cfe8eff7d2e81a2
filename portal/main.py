"""
Main FastAPI application entry point.
Configures the application, middleware, and includes routers.
"""
from dotenv import load_dotenv

# Load environment variables from .env file first
load_dotenv()

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import logging
from .config import settings
from .database import Base, engine
from .auth.router import router as auth_router
from .cards.router import router as cards_router
from .addresses.router import router as addresses_router
from .visits.router import router as visits_router
# Import all models here for creating tables
from .auth import models as auth_models  # noqa: F401
from .cards import models as card_models  # noqa: F401
from .addresses import models as address_models  # noqa: F401
from .visits import models as visit_models  # noqa: F401
from .exceptions import register_exception_handlers
from .core.middleware import setup_middlewares

API_VERSION = "1.0.0"

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

# Create database tables if they don't exist
Base.metadata.create_all(bind=engine)

logger.info("Starting Patient Portal API...")

# Create FastAPI application
app = FastAPI(
    title="Patient Portal API",
    description="Identity, session and saved-record API for the patient portal",
    version=API_VERSION
)

# Register exception handlers
register_exception_handlers(app)

# Session cookies need credentialed CORS from the frontend origin
app.add_middleware(
    CORSMiddleware,
    allow_origins=[settings.frontend_url],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Setup custom middleware
setup_middlewares(app)

# Include routers
app.include_router(auth_router, prefix="/api/v1/auth", tags=["Authentication"])
app.include_router(cards_router, prefix="/api/v1/cards", tags=["Credit Cards"])
app.include_router(addresses_router, prefix="/api/v1/addresses", tags=["Addresses"])
app.include_router(visits_router, prefix="/api/v1/visits", tags=["Visits"])

# Root endpoint
@app.get("/")
def root():
    """
    Root endpoint for API health check.

    Returns:
        dict: Simple welcome message
    """
    return {"message": "Welcome to Patient Portal API", "version": API_VERSION}

# Health check endpoint
@app.get("/health")
async def health_check():
    """
    Health check endpoint for monitoring.

    Returns:
        dict: Health status information
    """
    return {"status": "healthy", "database": "connected"}
