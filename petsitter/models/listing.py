"""
PetSitter Connect Backend — Listing SQLAlchemy Model
=====================================================

What:  ORM model for the `listings` table: a care request posted by an owner.
Why:   Maps Python objects to rows for type-safe queries in PetSitterStore.
Who:   Used by the store for CRUD/filter queries and by Alembic for schema management.

Table Design Rationale:
    - Integer primary key: assigned by the database, doubles as "recency"
      (GET /listings orders by id DESC).
    - listing_type: JSON array of ListingType values. JSON instead of a
      PostgreSQL ARRAY so the same model runs on SQLite; containment filters
      match against the JSON text (see PetSitterStore.query_listings).
    - price: NUMERIC(10, 2) read back as float for JSON responses.
    - Pet-detail columns (breed, age, size, feeding, medication) are optional.
    - applications: one-to-many; deleting a listing deletes its applications
      (ORM cascade + ON DELETE CASCADE on the foreign key).
"""

from datetime import date
from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import JSON, Boolean, Date, Index, Integer, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from petsitter.database import Base

if TYPE_CHECKING:
    from petsitter.models.application import Application


class Listing(Base):
    """
    A pet-care request.

    Lifecycle:
        Created by POST /listings and never mutated afterwards. Removed only
        by hard deletion, which cascades to its applications.

    Query Patterns:
        - List recent listings: ORDER BY id DESC LIMIT 100 (primary key index)
        - By owner: WHERE owner_id = :owner → idx_listings_owner_id
    """

    __tablename__ = "listings"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    owner_id: Mapped[str] = mapped_column(String(255), nullable=False)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)

    # One of Species; stored as its string value
    species: Mapped[str] = mapped_column(String(20), nullable=False)

    # Non-empty, duplicate-free list of ListingType values
    listing_type: Mapped[List[str]] = mapped_column(JSON, nullable=False)

    start_date: Mapped[date] = mapped_column(Date, nullable=False)
    end_date: Mapped[date] = mapped_column(Date, nullable=False)

    sitter_verified: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    price: Mapped[float] = mapped_column(Numeric(10, 2, asdecimal=False), nullable=False)

    # ── Optional pet details ──────────────────────────────────────────────
    breed: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    age: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    size: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    feeding: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    medication: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    applications: Mapped[List["Application"]] = relationship(
        back_populates="listing",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="Application.id",
    )

    __table_args__ = (
        Index("idx_listings_owner_id", "owner_id"),
    )

    def __repr__(self) -> str:
        return (
            f"<Listing(id={self.id}, owner_id='{self.owner_id}', "
            f"species='{self.species}', start_date='{self.start_date}')>"
        )
