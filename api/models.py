"""
API Request and Response Models.

Pydantic models for validating API requests and serializing responses.
"""

from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, Field

from domain.sale import Sale
from domain.sales_metadata import SalesMetadata


# ============================================================================
# Sale Models
# ============================================================================

class CreateSaleRequest(BaseModel):
    """Request to create a sale. Amount positivity is checked by the service."""
    user_id: str = Field(
        ...,
        description="Id of the user the sale belongs to"
    )
    amount: Decimal = Field(
        ...,
        description="Sale amount, must be greater than zero"
    )

    class Config:
        json_schema_extra = {
            "example": {
                "user_id": "user123",
                "amount": 150.75
            }
        }


class UpdateSaleStatusRequest(BaseModel):
    """Request to move a pending sale to a final status."""
    status: str = Field(
        ...,
        description="Target status: 'approved' or 'rejected'"
    )

    class Config:
        json_schema_extra = {
            "example": {
                "status": "approved"
            }
        }


class SaleResponse(BaseModel):
    """Single sale in API responses."""
    id: str
    user_id: str
    amount: Decimal
    status: str
    created_at: datetime
    updated_at: datetime
    version: int

    @classmethod
    def from_domain(cls, sale: Sale) -> "SaleResponse":
        return cls(
            id=sale.id,
            user_id=sale.user_id,
            amount=sale.amount,
            status=sale.status.value,
            created_at=sale.created_at,
            updated_at=sale.updated_at,
            version=sale.version,
        )

    class Config:
        json_schema_extra = {
            "example": {
                "id": "123e4567-e89b-12d3-a456-426614174000",
                "user_id": "user123",
                "amount": "150.75",
                "status": "pending",
                "created_at": "2025-01-01T12:00:00Z",
                "updated_at": "2025-01-01T12:00:00Z",
                "version": 1
            }
        }


class SalesMetadataResponse(BaseModel):
    """Aggregates over the sales returned by a search."""
    quantity: int
    approved: int
    rejected: int
    pending: int
    total_amount: Decimal

    @classmethod
    def from_domain(cls, metadata: SalesMetadata) -> "SalesMetadataResponse":
        return cls(
            quantity=metadata.quantity,
            approved=metadata.approved,
            rejected=metadata.rejected,
            pending=metadata.pending,
            total_amount=metadata.total_amount,
        )


class SearchSalesResponse(BaseModel):
    """Response for sales search."""
    results: List[SaleResponse]
    metadata: SalesMetadataResponse

    class Config:
        json_schema_extra = {
            "example": {
                "results": [],
                "metadata": {
                    "quantity": 0,
                    "approved": 0,
                    "rejected": 0,
                    "pending": 0,
                    "total_amount": "0"
                }
            }
        }


# ============================================================================
# Error Models
# ============================================================================

class ErrorResponse(BaseModel):
    """Standard error response."""
    detail: str
    status_code: Optional[int] = None

    class Config:
        json_schema_extra = {
            "example": {
                "detail": "invalid status transition",
                "status_code": 409
            }
        }
