"""In-process EngagementStore.

Used by the test suite and by tooling that needs the lifecycle rules without
a database. All access goes through one lock, so version checks behave like
the database's conditional UPDATE.
"""

import threading
from collections.abc import Iterable
from dataclasses import replace
from datetime import datetime
from typing import Any

from engagements.domain import (
    Booking,
    BookingId,
    BookingStatus,
    Event,
    EventId,
    EventStatus,
    Invitation,
    InvitationId,
    ProfileId,
    Review,
    Speaker,
    SpeakerId,
)
from engagements.notifications import ChangeFeed
from engagements.stores.interfaces import (
    BOOKING_UPDATE_FIELDS,
    EngagementStore,
    UniqueConflictError,
)


class InMemoryEngagementStore(EngagementStore):
    """Dictionary-backed store that publishes writes to an optional change feed."""

    def __init__(self, feed: ChangeFeed | None = None) -> None:
        self._lock = threading.RLock()
        self._feed = feed
        self._events: dict[EventId, Event] = {}
        self._speakers: dict[SpeakerId, Speaker] = {}
        self._bookings: dict[BookingId, Booking] = {}
        self._invitations: dict[InvitationId, Invitation] = {}
        self._reviews: dict[Any, Review] = {}

    def atomic(self) -> threading.RLock:
        return self._lock

    def _publish(self, table: str, record_id: Any, **fields: Any) -> None:
        if self._feed is not None:
            self._feed.publish(table, record_id, **fields)

    # Events

    def get_event(self, event_id: EventId) -> Event | None:
        with self._lock:
            return self._events.get(event_id)

    def list_events(
        self,
        organizer_id: ProfileId | None = None,
        statuses: Iterable[EventStatus] | None = None,
    ) -> list[Event]:
        wanted = frozenset(statuses) if statuses is not None else None
        with self._lock:
            events = [
                event
                for event in self._events.values()
                if (organizer_id is None or event.organizer_id == organizer_id)
                and (wanted is None or event.status in wanted)
            ]
        return sorted(events, key=lambda event: event.date_time)

    def insert_event(self, event: Event) -> Event:
        with self._lock:
            self._events[event.id] = event
        self._publish("events", event.id, organizer_id=event.organizer_id, status=event.status.value)
        return event

    def update_event_status(
        self, event_id: EventId, expected_version: int, status: EventStatus, updated_at: datetime
    ) -> Event | None:
        with self._lock:
            current = self._events.get(event_id)
            if current is None or current.version != expected_version:
                return None
            updated = replace(current, status=status, updated_at=updated_at, version=current.version + 1)
            self._events[event_id] = updated
        self._publish("events", event_id, organizer_id=updated.organizer_id, status=status.value)
        return updated

    # Speakers

    def get_speaker(self, speaker_id: SpeakerId) -> Speaker | None:
        with self._lock:
            return self._speakers.get(speaker_id)

    def insert_speaker(self, speaker: Speaker) -> Speaker:
        with self._lock:
            self._speakers[speaker.id] = speaker
        self._publish("speakers", speaker.id)
        return speaker

    # Bookings

    def get_booking(self, booking_id: BookingId) -> Booking | None:
        with self._lock:
            return self._bookings.get(booking_id)

    def list_bookings(
        self,
        event_ids: Iterable[EventId] | None = None,
        speaker_id: SpeakerId | None = None,
        organizer_id: ProfileId | None = None,
        statuses: Iterable[BookingStatus] | None = None,
    ) -> list[Booking]:
        wanted_events = frozenset(event_ids) if event_ids is not None else None
        wanted_statuses = frozenset(statuses) if statuses is not None else None
        with self._lock:
            bookings = [
                booking
                for booking in self._bookings.values()
                if (wanted_events is None or booking.event_id in wanted_events)
                and (speaker_id is None or booking.speaker_id == speaker_id)
                and (organizer_id is None or booking.organizer_id == organizer_id)
                and (wanted_statuses is None or booking.status in wanted_statuses)
            ]
        return sorted(bookings, key=lambda booking: booking.created_at, reverse=True)

    def insert_booking(self, booking: Booking) -> Booking:
        with self._lock:
            if booking.status is not BookingStatus.REJECTED and any(
                existing.event_id == booking.event_id
                and existing.speaker_id == booking.speaker_id
                and existing.status is not BookingStatus.REJECTED
                for existing in self._bookings.values()
            ):
                raise UniqueConflictError("unique_active_booking")
            self._bookings[booking.id] = booking
        self._publish_booking(booking)
        return booking

    def update_booking(
        self, booking_id: BookingId, expected_version: int, updated_at: datetime, **changes: Any
    ) -> Booking | None:
        unknown = set(changes) - BOOKING_UPDATE_FIELDS
        if unknown:
            raise ValueError(f"Cannot update booking fields: {sorted(unknown)}")
        with self._lock:
            current = self._bookings.get(booking_id)
            if current is None or current.version != expected_version:
                return None
            updated = replace(current, updated_at=updated_at, version=current.version + 1, **changes)
            self._bookings[booking_id] = updated
        self._publish_booking(updated)
        return updated

    def _publish_booking(self, booking: Booking) -> None:
        self._publish(
            "bookings",
            booking.id,
            event_id=booking.event_id,
            speaker_id=booking.speaker_id,
            organizer_id=booking.organizer_id,
            status=booking.status.value,
        )

    # Invitations

    def get_invitation(self, invitation_id: InvitationId) -> Invitation | None:
        with self._lock:
            return self._invitations.get(invitation_id)

    def find_invitation(
        self, event_id: EventId, speaker_id: SpeakerId, organizer_id: ProfileId
    ) -> Invitation | None:
        with self._lock:
            return self._matching_invitation(event_id, speaker_id, organizer_id)

    def _matching_invitation(
        self, event_id: EventId, speaker_id: SpeakerId, organizer_id: ProfileId
    ) -> Invitation | None:
        for invitation in self._invitations.values():
            if (
                invitation.event_id == event_id
                and invitation.speaker_id == speaker_id
                and invitation.organizer_id == organizer_id
            ):
                return invitation
        return None

    def list_invitations(self, speaker_id: SpeakerId) -> list[Invitation]:
        with self._lock:
            invitations = [i for i in self._invitations.values() if i.speaker_id == speaker_id]
        return sorted(invitations, key=lambda invitation: invitation.created_at, reverse=True)

    def insert_invitation(self, invitation: Invitation) -> Invitation:
        with self._lock:
            if self._matching_invitation(invitation.event_id, invitation.speaker_id, invitation.organizer_id):
                raise UniqueConflictError("unique_speaker_event_invitation")
            self._invitations[invitation.id] = invitation
        self._publish("invitations", invitation.id, speaker_id=invitation.speaker_id)
        return invitation

    def delete_invitation(self, invitation_id: InvitationId) -> bool:
        with self._lock:
            invitation = self._invitations.pop(invitation_id, None)
        if invitation is None:
            return False
        self._publish("invitations", invitation_id, speaker_id=invitation.speaker_id)
        return True

    # Reviews

    def list_reviews(self, reviewee_id: SpeakerId) -> list[Review]:
        with self._lock:
            reviews = [r for r in self._reviews.values() if r.reviewee_id == reviewee_id]
        return sorted(reviews, key=lambda review: review.created_at, reverse=True)

    def insert_review(self, review: Review) -> Review:
        with self._lock:
            self._reviews[review.id] = review
        self._publish("reviews", review.id, reviewee_id=review.reviewee_id)
        return review
