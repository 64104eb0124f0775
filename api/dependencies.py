"""
Service wiring for the API.

Builds the SalesService from settings and exposes it to routers through a
FastAPI dependency.
"""

from __future__ import annotations

import logging

from fastapi import Request

from api.settings import Settings
from repositories.sale_storage import InMemorySaleStorage, SaleStorage
from services.sales_service import INITIAL_STATUS_POLICIES, SalesService
from services.user_client import HttpUserClient

logger = logging.getLogger(__name__)


def build_storage(settings: Settings) -> SaleStorage:
    """Pick the storage backend named by settings."""

    if settings.storage_backend == "supabase":
        from repositories.client import create_supabase_client
        from repositories.supabase_sale_storage import SupabaseSaleStorage

        client = create_supabase_client(settings.supabase_url, settings.supabase_key)
        return SupabaseSaleStorage(client)

    return InMemorySaleStorage()


def build_sales_service(settings: Settings) -> SalesService:
    """Assemble storage, user client and policy into a SalesService."""

    storage = build_storage(settings)
    user_client = HttpUserClient(
        settings.user_service_url,
        timeout=settings.user_service_timeout,
    )

    logger.info(
        "sales service configured",
        extra={
            "storage_backend": settings.storage_backend,
            "user_service_url": settings.user_service_url,
            "initial_status_policy": settings.initial_status_policy,
        },
    )
    return SalesService(
        storage=storage,
        user_validator=user_client,
        logger=logging.getLogger("services.sales_service"),
        initial_status_policy=INITIAL_STATUS_POLICIES[settings.initial_status_policy],
    )


def get_sales_service(request: Request) -> SalesService:
    """FastAPI dependency returning the application's SalesService."""

    return request.app.state.sales_service
