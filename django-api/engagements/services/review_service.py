"""Review service - one-time organizer rating of a completed engagement."""

import logging
from typing import Any

from django.utils import timezone

from engagements.context import RequestContext
from engagements.domain import Booking, BookingId, BookingStatus, Review, ReviewId, SpeakerId
from engagements.domain.errors import AlreadyReviewedError, InvalidStateError
from engagements.services.common import (
    Clock,
    clean_text,
    rating as validated_rating,
    require_owned_booking,
    require_speaker,
)
from engagements.stores.interfaces import EngagementStore

logger = logging.getLogger(__name__)


class ReviewService:
    """Service for recording reviews."""

    def __init__(self, store: EngagementStore, clock: Clock = timezone.now) -> None:
        self._store = store
        self._clock = clock

    def submit_review(
        self,
        ctx: RequestContext,
        booking_id: BookingId,
        rating: Any,
        feedback: str | None = None,
    ) -> Booking:
        """Attach the organizer's rating and feedback to a completed booking.

        Rating and feedback are written in one update; feedback may be empty.

        Raises:
            ValidationError: If the rating is not a whole number from 1 to 5.
            BookingNotFoundError: If the booking does not exist or is not the caller's.
            InvalidStateError: If the booking is not completed.
            AlreadyReviewedError: If the booking was already reviewed.
        """
        stars = validated_rating(rating)
        booking = require_owned_booking(self._store, ctx, booking_id)
        if booking.status is not BookingStatus.COMPLETED:
            raise InvalidStateError(
                "Only completed bookings can be reviewed", current=booking.status.value
            )
        if booking.is_reviewed:
            raise AlreadyReviewedError(booking_id)

        now = self._clock()
        updated = self._store.update_booking(
            booking.id,
            booking.version,
            now,
            organizer_rating=stars,
            organizer_feedback=clean_text(feedback),
            reviewed_at=now,
        )
        if updated is None:
            current = self._store.get_booking(booking.id)
            if current is not None and current.is_reviewed:
                raise AlreadyReviewedError(booking_id)
            raise InvalidStateError("Booking was modified concurrently; reload and retry")
        logger.info(f"Booking {booking.id} reviewed with {stars.value} stars")
        return updated

    def add_review(
        self, ctx: RequestContext, speaker_id: SpeakerId, rating: Any, comment: str | None = None
    ) -> Review:
        """Record a standalone review of a speaker by the caller."""
        stars = validated_rating(rating)
        speaker = require_speaker(self._store, speaker_id)
        review = Review(
            id=ReviewId.new(),
            rating=stars,
            comment=clean_text(comment),
            reviewer_id=ctx.profile_id,
            reviewee_id=speaker.id,
            created_at=self._clock(),
        )
        return self._store.insert_review(review)
