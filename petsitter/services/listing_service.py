"""
PetSitter Connect Backend — Listing Service
============================================

What:  Creates listings (with date rules) and answers listing queries.
Why:   Keeps business rules out of the routes and out of the store.
How:   Stateless; every method receives the PetSitterStore it should use.
Who:   Called by the listing route handlers.

Failure semantics:
    ValidationError   → the request broke a date rule (400)
    PersistenceError  → the database failed; generic message, cause logged (500)
    find_one / find_one_with_applications return None for a missing listing;
    the route turns that into NotFoundError.
"""

import logging
from datetime import date
from typing import List, Optional

from petsitter.config import settings
from petsitter.exceptions import PersistenceError, PetSitterError, ValidationError
from petsitter.models import Listing
from petsitter.schemas.listing import ListingCreate, ListingFilters
from petsitter.store import PetSitterStore

logger = logging.getLogger(__name__)


class ListingService:
    """
    Business logic for listings.

    Responsibilities:
        - create(): validate dates, persist
        - find_all(): filtered, newest-first, capped listing query
        - find_by_owner(), find_one(), find_one_with_applications()
    """

    async def create(self, store: PetSitterStore, data: ListingCreate) -> Listing:
        """
        Validate and persist a new listing.

        Date rules (date-only comparison against today):
            start_date < today          → "Start date cannot be in the past"
            end_date <= start_date      → "End date must be after start date"

        Raises:
            ValidationError: a date rule failed (nothing is written)
            PersistenceError: the insert failed
        """
        today = date.today()
        if data.start_date < today:
            raise ValidationError(
                message="Start date cannot be in the past",
                field="startDate",
                context={"start_date": data.start_date.isoformat(), "today": today.isoformat()},
            )
        if data.end_date <= data.start_date:
            raise ValidationError(
                message="End date must be after start date",
                field="endDate",
                context={
                    "start_date": data.start_date.isoformat(),
                    "end_date": data.end_date.isoformat(),
                },
            )

        try:
            listing = await store.create_listing(data.model_dump())
        except PersistenceError as e:
            raise PersistenceError(
                message="Failed to create listing. Please try again.",
                context=e.context,
            ) from e
        except PetSitterError:
            raise
        except Exception as e:
            logger.error("Unexpected error creating listing: %s", str(e), exc_info=True)
            raise PersistenceError(
                message="Failed to create listing. Please try again.",
                context={"error_type": type(e).__name__},
            ) from e

        logger.info(
            "Listing %s created by owner %s (%s, %s → %s)",
            listing.id, listing.owner_id, listing.species, listing.start_date, listing.end_date,
        )
        return listing

    async def find_all(
        self,
        store: PetSitterStore,
        filters: Optional[ListingFilters] = None,
    ) -> List[Listing]:
        """
        Listings matching `filters`, ordered by id descending, capped at
        settings.listing_query_limit (100). No filters returns the capped full list.
        """
        try:
            return await store.query_listings(filters, limit=settings.listing_query_limit)
        except PersistenceError as e:
            raise PersistenceError(
                message="Failed to retrieve listings. Please try again.",
                context=e.context,
            ) from e

    async def find_by_owner(self, store: PetSitterStore, owner_id: str) -> List[Listing]:
        return await store.query_listings_by_owner(owner_id)

    async def find_one(self, store: PetSitterStore, listing_id: int) -> Optional[Listing]:
        return await store.get_listing_by_id(listing_id)

    async def find_one_with_applications(
        self, store: PetSitterStore, listing_id: int
    ) -> Optional[Listing]:
        return await store.get_listing_with_applications(listing_id)


listing_service = ListingService()
