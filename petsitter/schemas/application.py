"""
PetSitter Connect Backend — Application Request/Response Schemas
=================================================================

What:  Pydantic models for applying to listings and changing application status,
       plus the two joined views (application + listing, listing + applications).
"""

from typing import List, Optional

from pydantic import Field

from petsitter.models.enums import ApplicationStatus
from petsitter.schemas.common import CamelModel
from petsitter.schemas.listing import ListingResponse


class ApplicationCreate(CamelModel):
    """Body of POST /listings/{id}/applications: {"sitterId": "sitter-7"}"""

    sitter_id: str = Field(min_length=1, description="Opaque id of the applying sitter")


class ApplicationStatusUpdate(CamelModel):
    """Body of PATCH /applications/{id}: {"status": "accepted"}"""

    status: ApplicationStatus


class ApplicationResponse(CamelModel):
    id: int
    listing_id: int
    sitter_id: str
    status: ApplicationStatus


class ApplicationWithListingResponse(ApplicationResponse):
    """GET /sitters/{sitterId}/applications items: each application with its listing."""

    listing: Optional[ListingResponse] = None


class ListingWithApplicationsResponse(ListingResponse):
    """GET /listings/{id}/with-applications: the listing plus every application."""

    applications: List[ApplicationResponse] = Field(default_factory=list)
