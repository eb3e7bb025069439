"""
PetSitter Connect Backend — Listing Service Unit Tests
=======================================================

What:  Date rules on create, failure wrapping, and the query cap.
How:   The store is an AsyncMock; dates are relative to today.
"""

from datetime import date, timedelta

import pytest

from petsitter.config import settings
from petsitter.exceptions import PersistenceError, ValidationError
from petsitter.schemas.listing import ListingCreate, ListingFilters
from petsitter.services.listing_service import ListingService


def _create(start: date, end: date, **overrides) -> ListingCreate:
    data = {
        "ownerId": "owner1",
        "title": "Rabbit care",
        "description": "Two rabbits, garden hutch",
        "species": "exotic",
        "listingType": ["feeding"],
        "startDate": start.isoformat(),
        "endDate": end.isoformat(),
        "price": 15,
    }
    data.update(overrides)
    return ListingCreate.model_validate(data)


class TestCreateListing:
    def setup_method(self):
        self.service = ListingService()
        self.today = date.today()

    @pytest.mark.asyncio
    async def test_start_date_in_past_rejected(self, mock_store):
        payload = _create(self.today - timedelta(days=1), self.today + timedelta(days=3))

        with pytest.raises(ValidationError) as exc_info:
            await self.service.create(mock_store, payload)

        assert exc_info.value.message == "Start date cannot be in the past"
        assert exc_info.value.context["field"] == "startDate"
        mock_store.create_listing.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_end_date_equal_to_start_rejected(self, mock_store):
        start = self.today + timedelta(days=2)
        payload = _create(start, start)

        with pytest.raises(ValidationError) as exc_info:
            await self.service.create(mock_store, payload)

        assert exc_info.value.message == "End date must be after start date"
        mock_store.create_listing.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_end_date_before_start_rejected(self, mock_store):
        payload = _create(self.today + timedelta(days=5), self.today + timedelta(days=4))

        with pytest.raises(ValidationError, match="End date must be after start date"):
            await self.service.create(mock_store, payload)

    @pytest.mark.asyncio
    async def test_start_today_is_accepted(self, mock_store, listing_row):
        mock_store.create_listing.return_value = listing_row(id=11, start_in_days=0)
        payload = _create(self.today, self.today + timedelta(days=1))

        listing = await self.service.create(mock_store, payload)

        assert listing.id == 11
        values = mock_store.create_listing.await_args.args[0]
        assert values["owner_id"] == "owner1"
        assert values["start_date"] == self.today
        assert values["sitter_verified"] is False

    @pytest.mark.asyncio
    async def test_persistence_failure_gets_create_message(self, mock_store):
        mock_store.create_listing.side_effect = PersistenceError()
        payload = _create(self.today + timedelta(days=1), self.today + timedelta(days=2))

        with pytest.raises(PersistenceError) as exc_info:
            await self.service.create(mock_store, payload)

        assert exc_info.value.message == "Failed to create listing. Please try again."


class TestFindListings:
    def setup_method(self):
        self.service = ListingService()

    @pytest.mark.asyncio
    async def test_find_all_passes_filters_and_cap(self, mock_store):
        mock_store.query_listings.return_value = []
        filters = ListingFilters.model_validate({"species": "dog"})

        await self.service.find_all(mock_store, filters)

        mock_store.query_listings.assert_awaited_once_with(
            filters, limit=settings.listing_query_limit
        )

    @pytest.mark.asyncio
    async def test_find_one_returns_none_for_missing(self, mock_store):
        mock_store.get_listing_by_id.return_value = None

        assert await self.service.find_one(mock_store, 404) is None
