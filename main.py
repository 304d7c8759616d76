"""
Math Solver Editor - FastAPI Backend
Main application entry point with CORS, routers, and health checks.
"""

from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import logging

from config import settings
from routers import authoring, sessions, solve
from services.session_store import get_session_store

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup/shutdown."""
    # Startup
    logger.info("Starting Math Solver Editor Backend...")
    logger.info(f"Solver endpoint: {settings.solver_url}")

    yield

    # Shutdown
    logger.info("Shutting down Math Solver Editor Backend...")
    get_session_store().close_all()


# Create FastAPI application
app = FastAPI(
    title="Math Solver Editor API",
    description="LaTeX authoring engine with slash commands and a step-by-step math solver proxy",
    version="1.0.0",
    lifespan=lifespan
)

# Configure CORS for the browser client
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(authoring.router, tags=["Authoring"])
app.include_router(solve.router, tags=["Solve"])
app.include_router(sessions.router, prefix="/sessions", tags=["Sessions"])


@app.get("/health")
async def health_check():
    """Health check endpoint for the browser client."""
    return {
        "status": "healthy",
        "solver_url": settings.solver_url,
        "active_sessions": len(get_session_store().list_sessions()),
        "version": "1.0.0"
    }


@app.get("/")
async def root():
    """Root endpoint with API information."""
    return {
        "name": "Math Solver Editor API",
        "version": "1.0.0",
        "docs": "/docs",
        "endpoints": [
            {"path": "/health", "method": "GET", "description": "Health check"},
            {"path": "/commands", "method": "GET", "description": "List slash commands"},
            {"path": "/suggestions", "method": "GET", "description": "Suggest commands for a prefix"},
            {"path": "/palette", "method": "GET", "description": "Symbol palette"},
            {"path": "/preview", "method": "POST", "description": "Render LaTeX preview"},
            {"path": "/solve", "method": "POST", "description": "Solve a formula"},
            {"path": "/sessions", "method": "POST", "description": "Open an editor session"},
            {"path": "/sessions/{id}/keys", "method": "POST", "description": "Send a key press"},
            {"path": "/sessions/{id}/solve", "method": "POST", "description": "Solve the session buffer"}
        ]
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug
    )
