"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from storefront.config import settings

# Configure logging
logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
from storefront.models.database import create_tables
from storefront.api import categories, products


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup/shutdown events."""
    # Startup
    create_tables()

    yield

    # Shutdown (nothing needed for now)


app = FastAPI(
    title="Storefront Catalog API",
    description="Hierarchical product categories and product catalog",
    version="1.0.0",
    lifespan=lifespan,
)

# Include routers
app.include_router(categories.router, prefix="/categories", tags=["Categories"])
app.include_router(products.router, prefix="/products", tags=["Products"])


@app.get("/health", tags=["Health"])
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "version": "1.0.0"}


@app.get("/", tags=["Health"])
async def root():
    """Root endpoint with API information."""
    return {
        "name": "Storefront Catalog API",
        "version": "1.0.0",
        "docs": "/docs",
        "health": "/health",
    }
