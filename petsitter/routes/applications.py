"""
PetSitter Connect Backend — Application Route Handlers
=======================================================

What:  Apply to a listing, change an application's status, list applications
       by listing or by sitter.
How:   Thin handlers over ApplicationService. Status codes of domain errors
       come from the global handlers: validation/conflict 400, not found 404,
       internal 500.
"""

import logging
from typing import List

from fastapi import APIRouter, Depends

from petsitter.schemas.application import (
    ApplicationCreate,
    ApplicationResponse,
    ApplicationStatusUpdate,
    ApplicationWithListingResponse,
)
from petsitter.schemas.common import ErrorResponse
from petsitter.services.application_service import application_service
from petsitter.store import PetSitterStore, get_store

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Applications"])


@router.post(
    "/listings/{listing_id}/applications",
    status_code=201,
    response_model=ApplicationResponse,
    responses={
        201: {"description": "Application created (status pending)", "model": ApplicationResponse},
        400: {"description": "Empty sitterId or sitter already applied", "model": ErrorResponse},
        404: {"description": "Listing not found", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Apply to a listing as a sitter",
)
async def apply_to_listing(
    listing_id: int,
    payload: ApplicationCreate,
    store: PetSitterStore = Depends(get_store),
) -> ApplicationResponse:
    application = await application_service.apply(
        store, sitter_id=payload.sitter_id, listing_id=listing_id
    )
    return ApplicationResponse.model_validate(application)


@router.patch(
    "/applications/{application_id}",
    response_model=ApplicationResponse,
    responses={
        400: {"description": "Invalid status or listing already started", "model": ErrorResponse},
        404: {"description": "Application not found", "model": ErrorResponse},
        500: {
            "description": "Accepted, but other applications could not be rejected",
            "model": ErrorResponse,
        },
    },
    summary="Accept or reject an application",
    description=(
        "Sets the status of an application. Accepting one application rejects every "
        "other non-rejected application of the same listing."
    ),
)
async def update_application_status(
    application_id: int,
    payload: ApplicationStatusUpdate,
    store: PetSitterStore = Depends(get_store),
) -> ApplicationResponse:
    application = await application_service.update_status(
        store, application_id, payload.status
    )
    return ApplicationResponse.model_validate(application)


@router.get(
    "/listings/{listing_id}/applications",
    response_model=List[ApplicationResponse],
    summary="List the applications of a listing",
)
async def applications_by_listing(
    listing_id: int,
    store: PetSitterStore = Depends(get_store),
) -> List[ApplicationResponse]:
    applications = await application_service.applications_by_listing(store, listing_id)
    return [ApplicationResponse.model_validate(app) for app in applications]


@router.get(
    "/sitters/{sitter_id}/applications",
    response_model=List[ApplicationWithListingResponse],
    summary="List a sitter's applications with their listings",
)
async def applications_by_sitter(
    sitter_id: str,
    store: PetSitterStore = Depends(get_store),
) -> List[ApplicationWithListingResponse]:
    applications = await application_service.applications_by_sitter(store, sitter_id)
    return [ApplicationWithListingResponse.model_validate(app) for app in applications]
