import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from sqlmodel import SQLModel

import sys
import os

sys.path.append(os.path.dirname(__file__))

from app.core.config import settings
from app.api import api_router

# Import all models to register them with SQLModel metadata
from app.models import User, Partner, PublicKey  # noqa: F401

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

# --- App Initialization ---
app = FastAPI(
    title="Storage Bridge API",
    description="Account management front end for a decentralized storage network",
    version="1.0.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include API routes
app.include_router(api_router)


# --- Error Handlers ---
@app.exception_handler(RequestValidationError)
async def bad_request_handler(request: Request, exc: RequestValidationError):
    """Malformed request bodies are client errors (400), not 422."""
    logger.warning(f"{request.method} {request.url.path}: invalid request body: {exc.errors()}")
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": "Invalid request body"},
    )


# --- Event Handlers ---
@app.on_event("startup")
async def startup_event():
    logger.info("Starting up Storage Bridge API...")

    from app.core.database import get_engine

    # Create database tables if database is available
    if settings.AUTO_CREATE_TABLES:
        engine = get_engine()
        if engine:
            try:
                logger.info("Auto-creating database tables...")
                SQLModel.metadata.create_all(engine)
                logger.info("Database tables created successfully!")
            except Exception as e:
                logger.error(f"Failed to create database tables: {e}")
                logger.error("Database functionality may not work properly.")
        else:
            logger.warning("Database engine not available. Skipping table creation.")
            logger.warning("Please check database connection and restart the service.")


@app.on_event("shutdown")
async def shutdown_event():
    logger.info("Shutting down Storage Bridge API...")


# --- API Endpoints ---
@app.get("/health", response_class=PlainTextResponse)
async def health_check():
    """Liveness probe."""
    return "OK"
