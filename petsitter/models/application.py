"""
PetSitter Connect Backend — Application SQLAlchemy Model
=========================================================

What:  ORM model for the `applications` table: a sitter's bid on a listing.
Who:   Used by PetSitterStore; status changes only through
       ApplicationService.update_status (and its accept cascade).

Constraints:
    - listing_id → listings.id ON DELETE CASCADE
    - UNIQUE (listing_id, sitter_id): a sitter holds at most one application
      per listing, whatever its status. ApplicationService checks this first
      for a descriptive error; the constraint catches concurrent duplicates.
"""

from typing import TYPE_CHECKING, Optional

from sqlalchemy import ForeignKey, Index, Integer, String, UniqueConstraint, text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from petsitter.database import Base
from petsitter.models.enums import ApplicationStatus

if TYPE_CHECKING:
    from petsitter.models.listing import Listing


class Application(Base):
    """
    A sitter's application to a listing.

    Lifecycle:
        1. Created in status 'pending'
        2. Owner accepts → 'accepted'; every other non-rejected sibling → 'rejected'
        3. Owner rejects → 'rejected'
        Never deleted except through its listing's cascade.
    """

    __tablename__ = "applications"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    listing_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("listings.id", ondelete="CASCADE"),
        nullable=False,
    )

    sitter_id: Mapped[str] = mapped_column(String(255), nullable=False)

    status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=ApplicationStatus.PENDING.value,
        server_default=text("'pending'"),
    )

    listing: Mapped[Optional["Listing"]] = relationship(back_populates="applications")

    __table_args__ = (
        UniqueConstraint("listing_id", "sitter_id", name="uq_applications_listing_sitter"),
        Index("idx_applications_sitter_id", "sitter_id"),
    )

    def __repr__(self) -> str:
        return (
            f"<Application(id={self.id}, listing_id={self.listing_id}, "
            f"sitter_id='{self.sitter_id}', status='{self.status}')>"
        )
