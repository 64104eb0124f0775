"""
Sales API - Main Application.

FastAPI application exposing sale creation, status updates and search.
"""

import logging
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api import __version__
from api.dependencies import build_sales_service
from api.settings import Settings, load_settings
from services.sales_service import SalesService


def create_app(
    service: Optional[SalesService] = None,
    settings: Optional[Settings] = None,
) -> FastAPI:
    """
    Build the application.

    Args:
        service: Pre-built SalesService (tests); built from settings otherwise
        settings: Configuration; read from the environment when omitted
    """
    settings = settings or load_settings()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = FastAPI(
        title="Sales API",
        description="REST API for creating, approving and searching sales",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
    )

    # Configure CORS - Allow all origins for development
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.state.sales_service = service or build_sales_service(settings)

    @app.get("/health", tags=["Health"])
    def health_check():
        """
        Health check endpoint.

        Returns the API status and version.
        """
        return {
            "status": "healthy",
            "version": __version__,
            "service": "sales-api"
        }

    @app.get("/ping", tags=["Health"])
    def ping():
        return {"message": "pong"}

    # Import and include routers
    from api.routers import sales

    app.include_router(sales.router, tags=["Sales"])

    return app


app = create_app()
