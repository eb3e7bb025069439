"""
PetSitter Connect Backend — Demo Seeding Tests
===============================================

What:  seed_demo_data fills an empty database once and is a no-op afterwards.
"""

import pytest

from petsitter.seed import DEMO_APPLICATIONS, seed_demo_data


class TestSeedDemoData:
    @pytest.mark.asyncio
    async def test_seeds_empty_database(self, store):
        await seed_demo_data(store)

        assert await store.count_listings() == 3
        assert await store.count_applications() == len(DEMO_APPLICATIONS)
        rows = [
            app
            for sitter in ("sitter1", "sitter2", "sitter3")
            for app in await store.query_applications_by_sitter(sitter)
        ]
        statuses = sorted(app.status for app in rows)
        assert statuses == ["accepted", "pending", "rejected", "rejected"]

    @pytest.mark.asyncio
    async def test_second_run_adds_nothing(self, store):
        await seed_demo_data(store)
        await seed_demo_data(store)

        assert await store.count_listings() == 3
        assert await store.count_applications() == len(DEMO_APPLICATIONS)

    @pytest.mark.asyncio
    async def test_existing_listings_are_left_alone(self, store, listing_values):
        await store.create_listing(listing_values(owner_id="real-owner"))

        await seed_demo_data(store)

        assert await store.count_listings() == 1
        assert await store.count_applications() == 2
