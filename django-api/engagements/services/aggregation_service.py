"""Aggregation service - counts and ratings derived from bookings on every read.

Nothing here is stored: application counts, confirmed-speaker counts and
speaker ratings are recomputed from the bookings and reviews each time.
"""

import logging
from collections import defaultdict
from collections.abc import Iterable
from dataclasses import dataclass

from engagements.domain import (
    Booking,
    BookingStatus,
    Event,
    EventSummary,
    ReviewEntry,
    ReviewSource,
    SpeakerId,
    SpeakerStats,
)
from engagements.domain.feedback import parse_reviewer_notes
from engagements.domain.status import is_confirmed
from engagements.services.common import require_speaker
from engagements.stores.interfaces import EngagementStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EventCounts:
    application_count: int
    pending_count: int
    confirmed_count: int


def event_counts(bookings: Iterable[Booking]) -> EventCounts:
    """Count one event's bookings.

    ``application_count`` is every booking referencing the event, ``pending_count``
    those awaiting a decision and ``confirmed_count`` those accepted or paid.
    """
    application = pending = confirmed = 0
    for booking in bookings:
        application += 1
        if booking.status is BookingStatus.PENDING:
            pending += 1
        if is_confirmed(booking):
            confirmed += 1
    return EventCounts(application, pending, confirmed)


def _booking_review_entry(booking: Booking) -> ReviewEntry | None:
    if booking.organizer_rating is not None:
        rating, comment = booking.organizer_rating.value, booking.organizer_feedback
    elif booking.reviewer_notes:
        parsed = parse_reviewer_notes(booking.reviewer_notes)
        if parsed.rating is None:
            logger.warning(f"Booking {booking.id} has notes without a rating; excluded from averages")
        rating, comment = parsed.rating, parsed.comment
    else:
        return None
    return ReviewEntry(
        id=f"booking-{booking.id}",
        rating=rating,
        comment=comment,
        created_at=booking.reviewed_at or booking.updated_at,
        source=ReviewSource.BOOKINGS,
        event_id=booking.event_id,
        reviewer_id=booking.organizer_id,
    )


class AggregationService:
    """Service for derived counts and ratings."""

    def __init__(self, store: EngagementStore) -> None:
        self._store = store

    def event_summaries(self, events: list[Event]) -> list[EventSummary]:
        """Attach booking counts to events with a single bookings read."""
        if not events:
            return []
        by_event: dict = defaultdict(list)
        for booking in self._store.list_bookings(event_ids=[event.id for event in events]):
            by_event[booking.event_id].append(booking)
        summaries = []
        for event in events:
            counts = event_counts(by_event[event.id])
            summaries.append(
                EventSummary(
                    event=event,
                    application_count=counts.application_count,
                    pending_count=counts.pending_count,
                    confirmed_count=counts.confirmed_count,
                )
            )
        return summaries

    def speaker_review_feed(self, speaker_id: SpeakerId) -> list[ReviewEntry]:
        """Merge standalone reviews and booking feedback, newest first.

        Raises:
            SpeakerNotFoundError: If the speaker does not exist.
        """
        require_speaker(self._store, speaker_id)
        entries = [
            ReviewEntry(
                id=str(review.id),
                rating=review.rating.value,
                comment=review.comment,
                created_at=review.created_at,
                source=ReviewSource.REVIEWS,
                reviewer_id=review.reviewer_id,
            )
            for review in self._store.list_reviews(speaker_id)
        ]
        for booking in self._store.list_bookings(speaker_id=speaker_id):
            entry = _booking_review_entry(booking)
            if entry is not None:
                entries.append(entry)
        entries.sort(key=lambda entry: entry.created_at, reverse=True)
        return entries

    def speaker_stats(self, speaker_id: SpeakerId) -> SpeakerStats:
        """Average rating over rated feed entries and the number of completed talks.

        Raises:
            SpeakerNotFoundError: If the speaker does not exist.
        """
        ratings = [
            entry.rating for entry in self.speaker_review_feed(speaker_id) if entry.rating is not None
        ]
        total_talks = len(
            self._store.list_bookings(speaker_id=speaker_id, statuses=[BookingStatus.COMPLETED])
        )
        average = round(sum(ratings) / len(ratings), 2) if ratings else 0.0
        return SpeakerStats(
            speaker_id=speaker_id,
            average_rating=average,
            rating_count=len(ratings),
            total_talks=total_talks,
        )
