"""
PetSitter Connect Backend — Application Service (Status State Machine)
=======================================================================

What:  Owns the application lifecycle: applying, status changes, and the
       rule that accepting one application rejects its siblings.
Why:   "First acceptance wins". Once an owner commits to one sitter every
       other open bid on that listing is moot, and two accepted applications
       on one listing (a double booking) is the worst failure this system has.
How:   Stateless; each method receives the PetSitterStore to use. Each store
       call is its own transaction, so the cascade is explicit service logic
       rather than a database constraint.

State Machine:
              apply()                update_status(id, accepted)
     [none] ─────────▶ [pending] ─────────────────────────────────▶ [accepted]
                          │  └──── update_status(id, rejected) ────▶ [rejected]
                          └─ sibling accepted (cascade) ───────────▶ [rejected]

Accept flow (update_status with 'accepted'):
    1. Load the application              → NotFoundError if absent (no write)
    2. Write the new status
    3. Date guard: listing already started → revert to 'pending', ValidationError
    4. Cascade: every other non-rejected application of the same listing is
       set to 'rejected', all writes launched concurrently
    5. Cascade failure after step 2 succeeded → InternalError asking the caller
       to verify the listing. The acceptance itself is NOT rolled back.

Known limitation:
    Two concurrent accepts on different applications of the same listing are
    not serialized; both can succeed under adversarial timing.
"""

import asyncio
import logging
from datetime import date
from typing import List

from petsitter.exceptions import (
    ConflictError,
    InternalError,
    NotFoundError,
    ValidationError,
)
from petsitter.models import Application
from petsitter.models.enums import ApplicationStatus
from petsitter.store import PetSitterStore

logger = logging.getLogger(__name__)

CASCADE_FAILURE_MESSAGE = (
    "Application accepted but failed to reject other applications. "
    "Please verify listing status."
)


class ApplicationService:
    """
    Business logic for applications.

    Error Handling Strategy:
        Business-rule failures (ValidationError, NotFoundError, ConflictError)
        propagate unchanged. Anything else raised while applying or updating
        (including PersistenceError) becomes a generic InternalError; the
        cause is logged and chained, never shown to the client.
    """

    async def apply(
        self,
        store: PetSitterStore,
        sitter_id: str,
        listing_id: int,
    ) -> Application:
        """
        Create a pending application of `sitter_id` to `listing_id`.

        Steps:
            1. Trim sitter_id; empty → ValidationError
            2. Listing must exist → NotFoundError
            3. The sitter must not hold ANY application on this listing
               (pending, accepted or rejected) → ConflictError
            4. Persist with status 'pending'

        Raises:
            ValidationError, NotFoundError, ConflictError, InternalError
        """
        sanitized_sitter_id = (sitter_id or "").strip()
        if not sanitized_sitter_id:
            raise ValidationError(message="sitterId cannot be empty", field="sitterId")

        try:
            listing = await store.get_listing_by_id(listing_id)
            if listing is None:
                raise NotFoundError(resource="Listing", resource_id=listing_id)

            existing = await store.query_applications_by_listing(listing_id)
            if any(app.sitter_id == sanitized_sitter_id for app in existing):
                raise ConflictError(
                    message=(
                        f"Sitter {sanitized_sitter_id} has already applied "
                        f"to listing {listing_id}"
                    ),
                    context={"listing_id": listing_id, "sitter_id": sanitized_sitter_id},
                )

            application = await store.create_application(listing_id, sanitized_sitter_id)

        except (ValidationError, NotFoundError, ConflictError):
            raise
        except Exception as e:
            logger.error(
                "Failed to create application (listing=%s, sitter=%s): %s",
                listing_id, sanitized_sitter_id, str(e),
                exc_info=True,
            )
            raise InternalError(
                message="Failed to create application. Please try again.",
                context={"error_type": type(e).__name__},
            ) from e

        logger.info(
            "Application %s created: sitter %s → listing %s",
            application.id, sanitized_sitter_id, listing_id,
        )
        return application

    async def update_status(
        self,
        store: PetSitterStore,
        application_id: int,
        status: ApplicationStatus,
    ) -> Application:
        """
        Change an application's status, cascading rejections on accept.

        Returns:
            The updated application (accepted, rejected or pending).

        Raises:
            NotFoundError: no application with this id (nothing is written)
            ValidationError: accepting for a listing whose start date has passed
                             (the status is reverted to 'pending')
            InternalError: unexpected failure, or the partial-cascade case
        """
        status = ApplicationStatus(status)

        try:
            current = await store.get_application_by_id(application_id)
            if current is None:
                raise NotFoundError(resource="Application", resource_id=application_id)

            application = await store.update_application_status(application_id, status)
            if application is None:
                raise NotFoundError(resource="Application", resource_id=application_id)

            if status is ApplicationStatus.ACCEPTED:
                await self._ensure_listing_not_started(store, application)
                await self._reject_siblings(store, application)

        except (ValidationError, NotFoundError, InternalError):
            raise
        except Exception as e:
            logger.error(
                "Failed to update application %s to %s: %s",
                application_id, status.value, str(e),
                exc_info=True,
            )
            raise InternalError(
                message="Failed to update application status. Please try again.",
                context={"error_type": type(e).__name__},
            ) from e

        logger.info(
            "Application %s (listing %s) is now %s",
            application.id, application.listing_id, application.status,
        )
        return application

    async def _ensure_listing_not_started(
        self, store: PetSitterStore, application: Application
    ) -> None:
        """
        Compensating check after the accept write.

        A listing whose start_date is before today can no longer take a
        sitter: the status just written is set back to 'pending' and the
        accept fails.
        """
        listing = await store.get_listing_by_id(application.listing_id)
        if listing is None:
            return

        today = date.today()
        if listing.start_date < today:
            await store.update_application_status(application.id, ApplicationStatus.PENDING)
            application.status = ApplicationStatus.PENDING.value
            logger.warning(
                "Reverted acceptance of application %s: listing %s started on %s",
                application.id, listing.id, listing.start_date,
            )
            raise ValidationError(
                message="Cannot accept applications for listings that have already started",
                field="status",
                context={"listing_id": listing.id, "start_date": listing.start_date.isoformat()},
            )

    async def _reject_siblings(self, store: PetSitterStore, accepted: Application) -> None:
        """
        Reject every other non-rejected application of the accepted one's listing.

        All rejections are launched together and awaited together; they touch
        disjoint rows so their order does not matter. Applications of other
        listings are never selected. Already-rejected siblings are skipped.

        Raises:
            InternalError: any sibling query or write failed. The acceptance
                           stays in place; the listing must be verified.
        """
        try:
            siblings = await store.query_applications_by_listing(accepted.listing_id)
            to_reject = [
                app for app in siblings
                if app.id != accepted.id and app.status != ApplicationStatus.REJECTED.value
            ]
            if not to_reject:
                return

            logger.info(
                "Auto-rejecting %d other applications for listing %s",
                len(to_reject), accepted.listing_id,
            )

            results = await asyncio.gather(
                *(
                    store.update_application_status(app.id, ApplicationStatus.REJECTED)
                    for app in to_reject
                ),
                return_exceptions=True,
            )
            failures = [r for r in results if isinstance(r, BaseException)]
            if failures:
                raise failures[0]

            logger.info("Successfully auto-rejected %d applications", len(to_reject))

        except Exception as e:
            logger.error(
                "Failed to auto-reject other applications for listing %s "
                "after accepting application %s: %s",
                accepted.listing_id, accepted.id, str(e),
                exc_info=True,
            )
            raise InternalError(
                message=CASCADE_FAILURE_MESSAGE,
                context={
                    "listing_id": accepted.listing_id,
                    "accepted_application_id": accepted.id,
                },
            ) from e

    async def applications_by_sitter(
        self, store: PetSitterStore, sitter_id: str
    ) -> List[Application]:
        """A sitter's applications, newest first, each with its listing attached."""
        return await store.query_applications_with_listing(sitter_id)

    async def applications_by_listing(
        self, store: PetSitterStore, listing_id: int
    ) -> List[Application]:
        return await store.query_applications_by_listing(listing_id)


application_service = ApplicationService()
