"""Customer API endpoints.

Customer lookups by email or Stripe customer ID. Requires the admin API key.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, status

from storefront.api.dependencies import get_customer_repository
from storefront.api.schemas import CustomerSchema, ErrorResponse, customer_to_schema
from storefront.catalog.models import Customer
from storefront.catalog.repository import CustomerRepository

router = APIRouter(prefix="/customers", tags=["Customers"])


def _found(customer: Customer | None, lookup: str) -> CustomerSchema:
    if customer is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail={
                "error_code": "CUSTOMER_NOT_FOUND",
                "message": f"Customer not found for {lookup}",
            },
        )
    return customer_to_schema(customer)


@router.get(
    "/by-email",
    response_model=CustomerSchema,
    responses={404: {"model": ErrorResponse}},
    summary="Customer by email",
)
async def get_customer_by_email(
    repository: Annotated[CustomerRepository, Depends(get_customer_repository)],
    email: Annotated[str, Query(description="Customer email")],
) -> CustomerSchema:
    """Get a customer by email."""
    return _found(await repository.get_by_email(email), "email")


@router.get(
    "/by-stripe-id/{stripe_customer_id}",
    response_model=CustomerSchema,
    responses={404: {"model": ErrorResponse}},
    summary="Customer by Stripe ID",
)
async def get_customer_by_stripe_id(
    stripe_customer_id: str,
    repository: Annotated[CustomerRepository, Depends(get_customer_repository)],
) -> CustomerSchema:
    """Get a customer by Stripe customer ID."""
    return _found(await repository.get_by_stripe_id(stripe_customer_id), "Stripe customer ID")
