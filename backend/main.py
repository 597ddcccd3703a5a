"""
Contextual Diff Backend - FastAPI Application Entry Point
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from routers import config, diff
from services.config_manager import ConfigManager
from services.logging_config import setup_logging

logger = logging.getLogger("contextual_diff")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager - startup and shutdown logic"""
    setup_logging()
    logger.info("Starting Contextual Diff Backend...")
    config_manager = ConfigManager.get_instance()
    logger.info(
        f"ConfigManager initialized from {config_manager.config_file} "
        f"(context limit: {config_manager.get_context_limit()})"
    )

    yield
    logger.info("Shutting down Contextual Diff Backend...")


app = FastAPI(
    title="Contextual Diff Backend",
    description="Word-level contextual diffs between document revisions",
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(diff.router, prefix="/api/diff", tags=["diff"])
app.include_router(config.router, prefix="/api/config", tags=["config"])


@app.get("/health")
async def health_check():
    """Health check endpoint"""
    return {"status": "healthy", "service": "contextual-diff-backend"}


if __name__ == "__main__":
    import uvicorn

    server = ConfigManager.get_instance().get("server", {})
    uvicorn.run(app, host=server.get("host", "0.0.0.0"), port=server.get("port", 8000))
