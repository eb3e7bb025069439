"""
PetSitter Connect Backend — Persistence Gateway
================================================

What:  PetSitterStore, the only component that talks to SQLAlchemy: CRUD and
       filtered queries over the `listings` and `applications` tables.
Why:   Keeps the services free of query code and gives tests one seam to mock.
How:   Every method opens its own short transaction (`session_scope`) from a
       session factory, so calls are independent units of work and may run
       concurrently (ApplicationService rejects siblings with asyncio.gather).
Who:   Constructed per request by the `get_store` FastAPI dependency (or by
       tests with a throwaway engine) and passed to the services.

Contract:
    - No business rules live here. Missing rows come back as None, never as
      NotFoundError; the caller decides what "absent" means.
    - Any SQLAlchemyError is logged with its traceback and re-raised as
      PersistenceError; raw driver errors never leave this module.
    - The one exception is the (listing_id, sitter_id) unique constraint:
      a concurrent duplicate apply surfaces as ConflictError, the same error
      the service raises for a sequential duplicate.
"""

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, Dict, List, Optional

from sqlalchemy import String, cast, desc, func, select, text
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy.orm import selectinload

from petsitter.database import async_session_factory, session_scope
from petsitter.exceptions import ConflictError, PersistenceError
from petsitter.models import Application, Listing
from petsitter.models.enums import ApplicationStatus
from petsitter.schemas.listing import ListingFilters

logger = logging.getLogger(__name__)

DEFAULT_LISTING_LIMIT = 100

# Filter fields compared with plain equality (column name == attribute name)
_EQUALITY_FILTERS = (
    "id", "owner_id", "title", "description", "species", "start_date", "end_date",
    "sitter_verified", "price", "breed", "age", "size", "feeding", "medication",
)


def _plain(value: Any) -> Any:
    """Enum members → their string value for binding."""
    return getattr(value, "value", value)


class PetSitterStore:
    """
    Data-access layer over listings and applications.

    Usage:
        store = PetSitterStore(async_session_factory)
        listing = await store.get_listing_by_id(7)
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self._session_factory = session_factory

    @asynccontextmanager
    async def _scope(self, operation: str) -> AsyncGenerator[AsyncSession, None]:
        """Transaction scope that converts SQLAlchemy failures into PersistenceError."""
        try:
            async with session_scope(self._session_factory) as session:
                yield session
        except SQLAlchemyError as e:
            logger.error("Database error during %s: %s", operation, str(e), exc_info=True)
            raise PersistenceError(
                context={"operation": operation, "error_type": type(e).__name__},
            ) from e

    # ══════════════════════════════════════════════════════════════════════
    # Listings
    # ══════════════════════════════════════════════════════════════════════

    async def create_listing(self, data: Dict[str, Any]) -> Listing:
        """Insert a listing; `data` holds column values, the id is assigned by the database."""
        values = {key: _plain(value) for key, value in data.items()}
        if "listing_type" in values:
            values["listing_type"] = [_plain(v) for v in values["listing_type"]]

        async with self._scope("create_listing") as session:
            listing = Listing(**values)
            session.add(listing)
            await session.flush()
            logger.debug("Listing %s created for owner %s", listing.id, listing.owner_id)
            return listing

    async def get_listing_by_id(self, listing_id: int) -> Optional[Listing]:
        async with self._scope("get_listing_by_id") as session:
            return await session.get(Listing, listing_id)

    async def query_listings(
        self,
        filters: Optional[ListingFilters] = None,
        limit: int = DEFAULT_LISTING_LIMIT,
    ) -> List[Listing]:
        """
        Filtered listing query, newest first, capped at `limit` rows.

        Query plan (typical):
            SELECT * FROM listings
            WHERE species = :species AND sitter_verified = :verified
              AND CAST(listing_type AS VARCHAR) LIKE '%"walks"%'
            ORDER BY id DESC LIMIT 100

        listing_type containment:
            The column holds a JSON array such as ["feeding", "walks"]. Enum
            values contain no quotes or LIKE wildcards, so matching the quoted
            value against the JSON text is an exact membership test that works
            the same on SQLite and PostgreSQL, and the cap is applied after it.
        """
        query = select(Listing)

        active = filters.active() if filters else {}
        for field_name in _EQUALITY_FILTERS:
            if field_name in active:
                query = query.where(getattr(Listing, field_name) == _plain(active[field_name]))

        for listing_type in active.get("listing_type", []):
            query = query.where(
                cast(Listing.listing_type, String).like(f'%"{_plain(listing_type)}"%')
            )

        query = query.order_by(desc(Listing.id)).limit(limit)

        async with self._scope("query_listings") as session:
            result = await session.execute(query)
            return list(result.scalars().all())

    async def query_listings_by_owner(self, owner_id: str) -> List[Listing]:
        async with self._scope("query_listings_by_owner") as session:
            result = await session.execute(
                select(Listing)
                .where(Listing.owner_id == owner_id)
                .order_by(desc(Listing.id))
            )
            return list(result.scalars().all())

    async def get_listing_with_applications(self, listing_id: int) -> Optional[Listing]:
        """The listing with `applications` eagerly loaded (ordered by application id)."""
        async with self._scope("get_listing_with_applications") as session:
            result = await session.execute(
                select(Listing)
                .where(Listing.id == listing_id)
                .options(selectinload(Listing.applications))
            )
            return result.scalar_one_or_none()

    async def count_listings(self) -> int:
        async with self._scope("count_listings") as session:
            result = await session.execute(select(func.count(Listing.id)))
            return result.scalar() or 0

    # ══════════════════════════════════════════════════════════════════════
    # Applications
    # ══════════════════════════════════════════════════════════════════════

    async def create_application(self, listing_id: int, sitter_id: str) -> Application:
        """
        Insert a new application. Status is always 'pending' on creation.

        Raises:
            ConflictError: the (listing_id, sitter_id) pair already exists
            PersistenceError: any other database failure
        """
        try:
            async with self._scope("create_application") as session:
                application = Application(
                    listing_id=listing_id,
                    sitter_id=sitter_id,
                    status=ApplicationStatus.PENDING.value,
                )
                session.add(application)
                await session.flush()
                return application
        except PersistenceError as e:
            if not isinstance(e.__cause__, IntegrityError):
                raise
            if await self._find_application(listing_id, sitter_id) is None:
                raise
            raise ConflictError(
                message=f"Sitter {sitter_id} has already applied to listing {listing_id}",
                context={"listing_id": listing_id, "sitter_id": sitter_id},
            ) from e

    async def _find_application(self, listing_id: int, sitter_id: str) -> Optional[Application]:
        async with self._scope("find_application") as session:
            result = await session.execute(
                select(Application).where(
                    Application.listing_id == listing_id,
                    Application.sitter_id == sitter_id,
                )
            )
            return result.scalar_one_or_none()

    async def get_application_by_id(self, application_id: int) -> Optional[Application]:
        async with self._scope("get_application_by_id") as session:
            return await session.get(Application, application_id)

    async def update_application_status(
        self,
        application_id: int,
        status: ApplicationStatus,
    ) -> Optional[Application]:
        """Set one application's status in its own transaction; None if the row is absent."""
        async with self._scope("update_application_status") as session:
            application = await session.get(Application, application_id)
            if application is None:
                return None
            application.status = _plain(status)
            await session.flush()
            return application

    async def query_applications_by_sitter(self, sitter_id: str) -> List[Application]:
        async with self._scope("query_applications_by_sitter") as session:
            result = await session.execute(
                select(Application)
                .where(Application.sitter_id == sitter_id)
                .order_by(desc(Application.id))
            )
            return list(result.scalars().all())

    async def query_applications_by_listing(self, listing_id: int) -> List[Application]:
        """All applications of a listing in insertion (id) order."""
        async with self._scope("query_applications_by_listing") as session:
            result = await session.execute(
                select(Application)
                .where(Application.listing_id == listing_id)
                .order_by(Application.id)
            )
            return list(result.scalars().all())

    async def query_applications_with_listing(self, sitter_id: str) -> List[Application]:
        """A sitter's applications, newest first, each with its parent listing loaded."""
        async with self._scope("query_applications_with_listing") as session:
            result = await session.execute(
                select(Application)
                .where(Application.sitter_id == sitter_id)
                .options(selectinload(Application.listing))
                .order_by(desc(Application.id))
            )
            return list(result.scalars().all())

    async def count_applications(self) -> int:
        async with self._scope("count_applications") as session:
            result = await session.execute(select(func.count(Application.id)))
            return result.scalar() or 0

    # ══════════════════════════════════════════════════════════════════════
    # Health
    # ══════════════════════════════════════════════════════════════════════

    async def ping(self) -> bool:
        """SELECT 1 against the database; False instead of raising."""
        try:
            async with self._scope("ping") as session:
                await session.execute(text("SELECT 1"))
            return True
        except PersistenceError:
            return False


# ── FastAPI Dependency ────────────────────────────────────────────────────
def get_store() -> PetSitterStore:
    """
    Provide the store bound to the application's session factory.

    Tests replace it via `app.dependency_overrides[get_store]`.
    """
    return PetSitterStore(async_session_factory)
