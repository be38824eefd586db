"""
NexusMail Engine Application

FastAPI application fronting the messaging and support-chat engine.
"""
import logging
from contextlib import asynccontextmanager

from dotenv import load_dotenv

# Load environment variables
load_dotenv()

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .config import Config
from .services.engine_service import get_engine_service, init_engine_service
from .routes import (
    health_router,
    users_router,
    messages_router,
    templates_router,
    chat_router,
    assistant_router,
)

# Configure logging
logging.basicConfig(
    level=Config.LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger("nexusmail.app")

# Suppress noisy loggers
logging.getLogger("httpx").setLevel(logging.WARNING)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Initialize services on startup, cleanup on shutdown"""
    logger.info("Starting NexusMail Engine...")

    try:
        await init_engine_service()
        logger.info("NexusMail Engine started successfully")
    except Exception as e:
        logger.error(f"Failed to start NexusMail Engine: {e}")
        raise

    yield

    logger.info("Shutting down NexusMail Engine...")
    try:
        await get_engine_service().close()
        logger.info("NexusMail Engine shutdown complete")
    except Exception as e:
        logger.error(f"Error during shutdown: {e}")


# Create FastAPI application
app = FastAPI(
    title="NexusMail Engine API",
    description="Internal mailbox, broadcast and live support chat",
    version="0.1.0",
    lifespan=lifespan,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Configure for production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Include routers
app.include_router(health_router, prefix="/api/v1", tags=["health"])
app.include_router(users_router, prefix="/api/v1", tags=["users"])
app.include_router(messages_router, prefix="/api/v1", tags=["messages"])
app.include_router(templates_router, prefix="/api/v1", tags=["templates"])
app.include_router(chat_router, prefix="/api/v1", tags=["chat"])
app.include_router(assistant_router, prefix="/api/v1", tags=["assistant"])


@app.get("/")
async def root():
    """Root endpoint"""
    return {
        "service": "NexusMail Engine",
        "version": "0.1.0",
        "status": "running"
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        app,
        host=Config.API_HOST,
        port=Config.API_PORT
    )
