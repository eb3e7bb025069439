# Schemas package init
"""
API contract models. Schemas are separate from the SQLAlchemy models so the
wire format (camelCase, enums) can evolve independently of the table layout.
"""

from petsitter.schemas.application import (
    ApplicationCreate,
    ApplicationResponse,
    ApplicationStatusUpdate,
    ApplicationWithListingResponse,
    ListingWithApplicationsResponse,
)
from petsitter.schemas.common import CamelModel, ErrorResponse, HealthResponse
from petsitter.schemas.listing import ListingCreate, ListingFilters, ListingResponse

__all__ = [
    "ApplicationCreate",
    "ApplicationResponse",
    "ApplicationStatusUpdate",
    "ApplicationWithListingResponse",
    "CamelModel",
    "ErrorResponse",
    "HealthResponse",
    "ListingCreate",
    "ListingFilters",
    "ListingResponse",
    "ListingWithApplicationsResponse",
]
