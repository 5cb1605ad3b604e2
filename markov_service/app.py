"""
Markov Text Service
Main application entry point
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from markov_service.config import settings
from markov_service.services.chain_generator import get_rng
from markov_service.services.errors import ChainResourceError
from markov_service.services.markov import get_registry
from markov_service.utils.logger import setup_logger

# Setup logging
logger = setup_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifecycle manager for service initialization"""
    logger.info("[BOOT] Starting Markov service...")
    logger.info(f"[BOOT] Default prefix order: {settings.PREFIX_ORDER}")

    try:
        # Seed the process random source once, before any request samples
        get_rng()
        app.state.registry = get_registry()
        logger.info("[BOOT] Markov service ready!")
        yield
    except Exception as e:
        logger.error(f"[ERR] Failed to initialize: {e}", exc_info=True)
        raise
    finally:
        logger.info("[SHUTDOWN] Cleaning up...")
        get_registry().clear()
        logger.info("[SHUTDOWN] Markov service stopped")


# Create FastAPI app
app = FastAPI(
    title="Markov Text Service",
    description="Fixed-order Markov chain text generation",
    version=settings.SERVICE_VERSION,
    lifespan=lifespan,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(ChainResourceError)
async def resource_exception_handler(request: Request, exc: ChainResourceError):
    logger.error(f"[ERR] Resource exhaustion: {exc}", exc_info=True)
    return JSONResponse(
        status_code=507,
        content={
            "ok": False,
            "error": {
                "code": "RESOURCE_EXHAUSTED",
                "message": str(exc),
                "details": {"type": type(exc).__name__},
            },
        },
    )


# Global exception handler
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.error(f"[ERR] Unhandled exception: {exc}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content={
            "ok": False,
            "error": {
                "code": "MARKOV_SERVICE_ERROR",
                "message": "Internal server error occurred",
                "details": {"type": type(exc).__name__},
            },
        },
    )


# Health check
@app.get("/health")
async def health_check():
    """Health check endpoint"""
    return {
        "ok": True,
        "data": {
            "status": "healthy",
            "models": len(get_registry()),
            "prefix_order": settings.PREFIX_ORDER,
        },
    }


@app.get("/")
async def root():
    """Root endpoint"""
    return {
        "service": settings.SERVICE_NAME,
        "version": settings.SERVICE_VERSION,
        "endpoints": {
            "health": "/health",
            "docs": "/docs",
            "markov": "/markov/*",
        },
    }


from markov_service.api.routers import markov_router

app.include_router(markov_router.router, prefix="/markov", tags=["Markov"])


def main():
    import uvicorn

    uvicorn.run(
        "markov_service.app:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
        log_level=settings.LOG_LEVEL.lower(),
    )


if __name__ == "__main__":
    main()
