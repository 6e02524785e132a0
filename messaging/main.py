"""FastAPI main application."""

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager

from . import __version__
from .config import settings
from .db import DatabaseConnection
from .services.messaging import MessagingService
from .utils.logger import init_app_logger
from .api.v1 import conversations, profiles


# Initialize logger
logger = init_app_logger(settings)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for startup and shutdown events.

    Args:
        app: FastAPI application instance
    """
    # Startup
    logger.info("=" * 70)
    logger.info("Starting Messaging Aggregator...")
    logger.info("=" * 70)

    logger.info("")
    logger.info("Server Configuration:")
    logger.info(f"  Host: {settings.host}")
    logger.info(f"  Port: {settings.port}")
    logger.info(f"  Debug: {settings.debug}")
    logger.info(f"  Log Level: {settings.log_level}")
    logger.info(f"  Log File: {settings.log_file}")

    logger.info("")
    logger.info("Messaging Configuration:")
    logger.info(f"  Database: {settings.database_path}")
    logger.info(f"  Page Size: {settings.message_page_size}")
    logger.info(f"  Pagination Lookahead: {settings.pagination_lookahead}")
    logger.info(f"  Conversation Cache: {settings.conversation_stale_seconds}s")

    db_conn = DatabaseConnection(settings.database_path)
    service = MessagingService(db_conn, settings)
    service.start()

    # Inject the service into routers
    conversations.messaging_service = service

    logger.info("")
    logger.info(f"Messaging Aggregator started at http://{settings.host}:{settings.port}")
    logger.info("=" * 70)

    yield

    # Shutdown
    logger.info("Shutting down Messaging Aggregator...")
    await service.shutdown()
    conversations.messaging_service = None
    db_conn.close()
    logger.info("Messaging Aggregator shut down successfully")


# Create FastAPI application
app = FastAPI(
    title="Messaging Aggregator",
    description="Conversation lists, message paging and unread tracking",
    version=__version__,
    lifespan=lifespan
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # In production, specify allowed origins
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include API routers
app.include_router(conversations.router)
app.include_router(profiles.router)


@app.get("/health")
async def health():
    """
    Simple health check endpoint.

    Returns:
        Health status
    """
    return {
        "status": "healthy",
        "service": "Messaging Aggregator",
        "version": __version__
    }


@app.get("/health/cache")
async def cache_health():
    """Query cache counters and live realtime subscriptions."""
    service = conversations.messaging_service
    if service is None:
        raise HTTPException(status_code=503, detail="Messaging service not initialized")

    return {
        "cache": service.cache.metrics(),
        "realtime": {
            "invalidator_running": service.invalidator.running,
            "global_subscribers": service.hub.subscriber_count(),
        },
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "messaging.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug
    )
