"""
PetSitter Connect Backend — Demo Data Seeding
==============================================

What:  Inserts a small demo data set into an empty database.
When:  On startup, only when SEED_DEMO_DATA=true.
How:   Goes through PetSitterStore like any other caller. Listings are seeded
       only if the listings table is empty, applications only if the
       applications table is empty. Dates are relative to today so the demo
       listings never start in the past.

Seeded applications mirror a realistic history:
    listing 1: sitter1 rejected, sitter2 accepted
    listing 2: sitter3 pending
    listing 3: sitter1 rejected

Failures are logged and swallowed: a broken demo seed must not stop the API.
"""

import logging
from datetime import date, timedelta
from typing import Any, Dict, List

from petsitter.exceptions import PetSitterError
from petsitter.models.enums import ApplicationStatus
from petsitter.store import PetSitterStore

logger = logging.getLogger(__name__)


def demo_listings(today: date) -> List[Dict[str, Any]]:
    return [
        {
            "owner_id": "owner1",
            "title": "Loving care for a Golden Retriever",
            "description": (
                "Looking for an experienced dog sitter for my 3 year old Golden "
                "Retriever Max while I am on holiday. He is friendly and well trained."
            ),
            "species": "dog",
            "listing_type": ["house-sitting", "walks"],
            "start_date": today + timedelta(days=14),
            "end_date": today + timedelta(days=24),
            "sitter_verified": True,
            "price": 35.0,
            "breed": "Golden Retriever",
            "age": 3,
            "size": "Large",
            "feeding": "Twice daily, dry food",
            "medication": "None",
        },
        {
            "owner_id": "owner2",
            "title": "Cat sitting for a cuddly Maine Coon",
            "description": (
                "My Maine Coon Luna needs loving care. She is very affectionate "
                "and needs a lot of attention."
            ),
            "species": "cat",
            "listing_type": ["drop-in-visit", "feeding"],
            "start_date": today + timedelta(days=19),
            "end_date": today + timedelta(days=29),
            "sitter_verified": False,
            "price": 25.0,
            "breed": "Maine Coon",
            "age": 5,
            "size": "Large",
            "feeding": "Three times daily, wet food",
            "medication": "None",
        },
        {
            "owner_id": "owner3",
            "title": "Care for a pair of budgies",
            "description": (
                "Looking for someone to look after my two budgies Pippo and Pippi. "
                "They are very social and need daily attention."
            ),
            "species": "bird",
            "listing_type": ["drop-in-visit", "feeding"],
            "start_date": today + timedelta(days=31),
            "end_date": today + timedelta(days=40),
            "sitter_verified": True,
            "price": 15.0,
            "breed": "Budgerigar",
            "age": 2,
            "size": "Small",
            "feeding": "Once daily, seed mix",
            "medication": "None",
        },
    ]


# (listing index, sitter, final status)
DEMO_APPLICATIONS = [
    (0, "sitter1", ApplicationStatus.REJECTED),
    (0, "sitter2", ApplicationStatus.ACCEPTED),
    (1, "sitter3", ApplicationStatus.PENDING),
    (2, "sitter1", ApplicationStatus.REJECTED),
]


async def seed_demo_data(store: PetSitterStore) -> None:
    """Seed listings, then applications; each step is skipped if its table has rows."""
    try:
        await _seed_listings(store)
        await _seed_applications(store)
    except PetSitterError as e:
        logger.error("Error during seeding: %s", e.message, exc_info=True)


async def _seed_listings(store: PetSitterStore) -> None:
    if await store.count_listings() > 0:
        logger.info("Listings already exist, skipping seeding")
        return

    created = 0
    for data in demo_listings(date.today()):
        await store.create_listing(data)
        created += 1
    logger.info("Successfully seeded %d listings", created)


async def _seed_applications(store: PetSitterStore) -> None:
    if await store.count_applications() > 0:
        logger.info("Applications already exist, skipping seeding")
        return

    listings = sorted(await store.query_listings(), key=lambda listing: listing.id)
    if not listings:
        logger.info("No listings found, skipping application seeding")
        return

    created = 0
    for index, sitter_id, status in DEMO_APPLICATIONS:
        if index >= len(listings):
            continue
        application = await store.create_application(listings[index].id, sitter_id)
        if status is not ApplicationStatus.PENDING:
            await store.update_application_status(application.id, status)
        created += 1
    logger.info("Successfully seeded %d applications", created)
