"""
PetSitter Connect Backend — Listing Route Handlers
===================================================

What:  POST/GET endpoints for listings.
How:   Thin handlers: bind the request, call ListingService, convert the ORM
       result to the response model. Errors are raised as PetSitterError
       subclasses and formatted by the global handlers in main.py.

Route order matters: /listings/owner/{owner_id} is declared before
/listings/{listing_id} so "owner" is never parsed as an integer id.
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, Request

from petsitter.exceptions import NotFoundError
from petsitter.schemas.application import ListingWithApplicationsResponse
from petsitter.schemas.common import ErrorResponse
from petsitter.schemas.listing import ListingCreate, ListingFilters, ListingResponse
from petsitter.services.listing_service import listing_service
from petsitter.store import PetSitterStore, get_store

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Listings"])


@router.post(
    "/listings",
    status_code=201,
    response_model=ListingResponse,
    responses={
        201: {"description": "Listing created", "model": ListingResponse},
        400: {"description": "Invalid listing data", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Create a care listing",
)
async def create_listing(
    payload: ListingCreate,
    store: PetSitterStore = Depends(get_store),
) -> ListingResponse:
    """
    Create a listing.

    startDate must not be before today and endDate must be strictly after
    startDate; both violations answer 400 with a descriptive message.
    """
    listing = await listing_service.create(store, payload)
    return ListingResponse.model_validate(listing)


@router.get(
    "/listings",
    response_model=List[ListingResponse],
    summary="List listings with optional filters",
    description=(
        "Filters by any listing field given as a query parameter (ownerId, species, "
        "listingType, sitterVerified, price, age, startDate, ...). Values that cannot "
        "be parsed and unknown parameters are ignored. listingType matches listings "
        "whose type list contains the value. Newest first, at most 100 results."
    ),
)
async def find_listings(
    request: Request,
    store: PetSitterStore = Depends(get_store),
) -> List[ListingResponse]:
    filters = ListingFilters.from_query(request.query_params)
    listings = await listing_service.find_all(store, filters)
    return [ListingResponse.model_validate(listing) for listing in listings]


@router.get(
    "/listings/owner/{owner_id}",
    response_model=List[ListingResponse],
    summary="List an owner's listings",
)
async def find_listings_by_owner(
    owner_id: str,
    store: PetSitterStore = Depends(get_store),
) -> List[ListingResponse]:
    listings = await listing_service.find_by_owner(store, owner_id)
    return [ListingResponse.model_validate(listing) for listing in listings]


@router.get(
    "/listings/{listing_id}",
    response_model=ListingResponse,
    responses={404: {"description": "Listing not found", "model": ErrorResponse}},
    summary="Get a listing",
)
async def find_listing(
    listing_id: int,
    store: PetSitterStore = Depends(get_store),
) -> ListingResponse:
    listing = await listing_service.find_one(store, listing_id)
    if listing is None:
        raise NotFoundError(resource="Listing", resource_id=listing_id)
    return ListingResponse.model_validate(listing)


@router.get(
    "/listings/{listing_id}/with-applications",
    response_model=ListingWithApplicationsResponse,
    responses={404: {"description": "Listing not found", "model": ErrorResponse}},
    summary="Get a listing together with all of its applications",
)
async def find_listing_with_applications(
    listing_id: int,
    store: PetSitterStore = Depends(get_store),
) -> ListingWithApplicationsResponse:
    listing = await listing_service.find_one_with_applications(store, listing_id)
    if listing is None:
        raise NotFoundError(resource="Listing", resource_id=listing_id)
    return ListingWithApplicationsResponse.model_validate(listing)
