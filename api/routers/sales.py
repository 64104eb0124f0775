"""
Sales API Endpoints.

Endpoints for creating sales, moving them out of pending, and searching
them with aggregate metadata.
"""

from typing import NoReturn, Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from api.dependencies import get_sales_service
from api.models import (
    CreateSaleRequest,
    ErrorResponse,
    SaleResponse,
    SalesMetadataResponse,
    SearchSalesResponse,
    UpdateSaleStatusRequest,
)
from domain.errors import (
    InvalidAmountError,
    InvalidStatusError,
    InvalidTransitionError,
    SaleNotFoundError,
    SalesError,
    UserNotFoundError,
    UserValidationError,
)
from services.sales_service import SalesService

router = APIRouter()

# Domain error -> HTTP status. Unlisted SalesErrors (storage) are 500s.
_ERROR_STATUS = {
    InvalidAmountError: 400,
    InvalidStatusError: 400,
    UserNotFoundError: 404,
    SaleNotFoundError: 404,
    InvalidTransitionError: 409,
    UserValidationError: 502,
}


def _raise_http(error: SalesError, action: str) -> NoReturn:
    status_code = _ERROR_STATUS.get(type(error), 500)
    if status_code == 500:
        raise HTTPException(status_code=500, detail=f"Failed to {action}: {error}")
    raise HTTPException(status_code=status_code, detail=str(error))


_ERROR_RESPONSES = {
    400: {"model": ErrorResponse},
    404: {"model": ErrorResponse},
    409: {"model": ErrorResponse},
    502: {"model": ErrorResponse},
}


@router.post(
    "/sales",
    response_model=SaleResponse,
    status_code=201,
    responses=_ERROR_RESPONSES,
    summary="Create Sale",
    description="Create a sale for a user confirmed by the user service."
)
def create_sale(
    request: CreateSaleRequest,
    service: SalesService = Depends(get_sales_service),
):
    """
    Create a sale.

    **Process:**
    1. Rejects amounts that are not greater than zero (400)
    2. Confirms the user exists via the user service (404 if not, 502 if the
       user service cannot be reached)
    3. Stores the sale with version 1

    **Example request:**
    ```json
    {"user_id": "user123", "amount": 150.75}
    ```
    """
    try:
        sale = service.create_sale(request.user_id, request.amount)
        return SaleResponse.from_domain(sale)

    except SalesError as e:
        _raise_http(e, "create sale")
    except HTTPException:
        raise
    except Exception as e:
        raise HTTPException(
            status_code=500,
            detail=f"Failed to create sale: {str(e)}"
        )


@router.patch(
    "/sales/{sale_id}",
    response_model=SaleResponse,
    responses=_ERROR_RESPONSES,
    summary="Update Sale Status",
    description="Move a pending sale to 'approved' or 'rejected'. Allowed once per sale."
)
def update_sale_status(
    sale_id: str,
    request: UpdateSaleStatusRequest,
    service: SalesService = Depends(get_sales_service),
):
    """
    Update the status of a sale.

    **Rules:**
    - Only `approved` and `rejected` are accepted (400 otherwise)
    - Only pending sales can change (409 otherwise)
    - Each accepted change bumps `version` by one
    """
    try:
        sale = service.update_sale_status(sale_id, request.status)
        return SaleResponse.from_domain(sale)

    except SalesError as e:
        _raise_http(e, "update sale")
    except HTTPException:
        raise
    except Exception as e:
        raise HTTPException(
            status_code=500,
            detail=f"Failed to update sale: {str(e)}"
        )


@router.get(
    "/sales",
    response_model=SearchSalesResponse,
    responses=_ERROR_RESPONSES,
    summary="Search Sales",
    description="Search sales by user and/or status, with counts and total amount."
)
def search_sales(
    user_id: Optional[str] = Query(None, description="Only sales of this user (must exist)"),
    status: Optional[str] = Query(None, description="Only sales in this status ('pending', 'approved', 'rejected')"),
    service: SalesService = Depends(get_sales_service),
):
    """
    Search sales.

    **Example usage:**
    - All sales: `GET /sales`
    - One user: `GET /sales?user_id=user123`
    - Approved only: `GET /sales?status=approved`
    """
    try:
        result = service.search_sales(user_id=user_id, status=status)
        return SearchSalesResponse(
            results=[SaleResponse.from_domain(sale) for sale in result.sales],
            metadata=SalesMetadataResponse.from_domain(result.metadata),
        )

    except SalesError as e:
        _raise_http(e, "search sales")
    except HTTPException:
        raise
    except Exception as e:
        raise HTTPException(
            status_code=500,
            detail=f"Failed to search sales: {str(e)}"
        )
