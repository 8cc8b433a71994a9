"""Store interfaces (repository pattern).

Stores must be swappable and return domain models. Transient I/O failures
surface as StoreUnavailableError; unique-key violations as UniqueConflictError
so services can map them to domain errors.
"""

from abc import ABC, abstractmethod
from collections.abc import Iterable
from contextlib import AbstractContextManager, nullcontext
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

# Fields a booking update may touch.
BOOKING_UPDATE_FIELDS = frozenset(
    {"status", "organizer_rating", "organizer_feedback", "reviewer_notes", "reviewed_at"}
)


class UniqueConflictError(Exception):
    """Raised by a store when an insert collides with a unique constraint."""

    def __init__(self, constraint: str) -> None:
        super().__init__(constraint)
        self.constraint = constraint


class EngagementStore(ABC):
    """Interface for event, booking, speaker, invitation and review persistence."""

    def atomic(self) -> AbstractContextManager:
        """Group several writes so they commit together where the backend allows."""
        return nullcontext()

    # Events

    @abstractmethod
    def get_event(self, event_id: EventId) -> Event | None:
        """Return an event by ID, or None if not found."""
        ...

    @abstractmethod
    def list_events(
        self,
        organizer_id: ProfileId | None = None,
        statuses: Iterable[EventStatus] | None = None,
    ) -> list[Event]:
        """Return events ordered by date_time ascending."""
        ...

    @abstractmethod
    def insert_event(self, event: Event) -> Event:
        ...

    @abstractmethod
    def update_event_status(
        self, event_id: EventId, expected_version: int, status: EventStatus, updated_at: datetime
    ) -> Event | None:
        """Write a new status if the stored version still matches.

        Returns the updated event, or None when the row changed since it was read.
        """
        ...

    # Speakers

    @abstractmethod
    def get_speaker(self, speaker_id: SpeakerId) -> Speaker | None:
        ...

    @abstractmethod
    def insert_speaker(self, speaker: Speaker) -> Speaker:
        ...

    # Bookings

    @abstractmethod
    def get_booking(self, booking_id: BookingId) -> Booking | None:
        ...

    @abstractmethod
    def list_bookings(
        self,
        event_ids: Iterable[EventId] | None = None,
        speaker_id: SpeakerId | None = None,
        organizer_id: ProfileId | None = None,
        statuses: Iterable[BookingStatus] | None = None,
    ) -> list[Booking]:
        """Return bookings matching every given filter, newest first."""
        ...

    @abstractmethod
    def insert_booking(self, booking: Booking) -> Booking:
        """Raises UniqueConflictError if the pair already has an active booking."""
        ...

    @abstractmethod
    def update_booking(
        self, booking_id: BookingId, expected_version: int, updated_at: datetime, **changes: Any
    ) -> Booking | None:
        """Apply ``changes`` atomically if the stored version still matches.

        Returns the updated booking, or None when the row changed since it was read.
        """
        ...

    # Invitations

    @abstractmethod
    def get_invitation(self, invitation_id: InvitationId) -> Invitation | None:
        ...

    @abstractmethod
    def find_invitation(
        self, event_id: EventId, speaker_id: SpeakerId, organizer_id: ProfileId
    ) -> Invitation | None:
        ...

    @abstractmethod
    def list_invitations(self, speaker_id: SpeakerId) -> list[Invitation]:
        """Return a speaker's invitations, newest first."""
        ...

    @abstractmethod
    def insert_invitation(self, invitation: Invitation) -> Invitation:
        """Raises UniqueConflictError on a duplicate (event, speaker, organizer)."""
        ...

    @abstractmethod
    def delete_invitation(self, invitation_id: InvitationId) -> bool:
        ...

    # Reviews

    @abstractmethod
    def list_reviews(self, reviewee_id: SpeakerId) -> list[Review]:
        """Return reviews of a speaker, newest first."""
        ...

    @abstractmethod
    def insert_review(self, review: Review) -> Review:
        ...
