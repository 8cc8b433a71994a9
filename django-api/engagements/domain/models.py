"""Domain models representing persisted state.

These are pure domain objects with no API input rules.
Django ORM models are in engagements/models.py (persistence layer).
"""

from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum

from engagements.domain.value_objects import (
    BookingId,
    Duration,
    EventId,
    InvitationId,
    Money,
    ProfileId,
    Rating,
    ReviewId,
    SpeakerId,
)


class EventType(Enum):
    LECTURE = "lecture"
    SEMINAR = "seminar"
    WORKSHOP = "workshop"
    WEBINAR = "webinar"
    CONFERENCE = "conference"
    OTHER = "other"


class EventFormat(Enum):
    IN_PERSON = "in-person"
    VIRTUAL = "virtual"
    HYBRID = "hybrid"


class EventStatus(Enum):
    OPEN = "open"
    IN_PROGRESS = "in_progress"
    FINISHED = "finished"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class BookingStatus(Enum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    REJECTED = "rejected"
    PAID = "paid"
    COMPLETED = "completed"


class ExperienceLevel(Enum):
    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    EXPERT = "expert"


class ReviewSource(Enum):
    REVIEWS = "reviews"
    BOOKINGS = "bookings"


@dataclass(frozen=True)
class Event:
    """Domain representation of an Event posted by an organizer."""

    id: EventId
    organizer_id: ProfileId
    title: str
    description: str
    event_type: EventType
    format: EventFormat
    location: str | None
    date_time: datetime
    duration: Duration
    budget_min: Money | None
    budget_max: Money | None
    required_topics: frozenset[str]
    status: EventStatus
    created_at: datetime
    updated_at: datetime
    version: int = 1

    @property
    def ends_at(self) -> datetime:
        return self.date_time + timedelta(hours=float(self.duration.hours))


@dataclass(frozen=True)
class Speaker:
    """Domain representation of a bookable Speaker profile."""

    id: SpeakerId
    profile_id: ProfileId
    experience_level: ExperienceLevel
    hourly_rate: Money | None
    available: bool
    verified: bool
    total_talks: int
    average_rating: float
    topics: frozenset[str]
    primary_topic: str | None
    created_at: datetime


@dataclass(frozen=True)
class Booking:
    """Domain representation of one Speaker's engagement on one Event."""

    id: BookingId
    event_id: EventId
    speaker_id: SpeakerId
    organizer_id: ProfileId
    status: BookingStatus
    agreed_rate: Money | None
    message: str | None
    organizer_rating: Rating | None
    organizer_feedback: str | None
    reviewer_notes: str | None
    reviewed_at: datetime | None
    created_at: datetime
    updated_at: datetime
    version: int = 1

    @property
    def is_reviewed(self) -> bool:
        return self.organizer_rating is not None


@dataclass(frozen=True)
class Invitation:
    """Domain representation of an organizer's outreach to a speaker."""

    id: InvitationId
    event_id: EventId
    speaker_id: SpeakerId
    organizer_id: ProfileId
    message: str | None
    proposed_rate: Money | None
    created_at: datetime


@dataclass(frozen=True)
class Review:
    """Domain representation of a standalone review of a speaker."""

    id: ReviewId
    rating: Rating
    comment: str | None
    reviewer_id: ProfileId
    reviewee_id: SpeakerId
    created_at: datetime


@dataclass(frozen=True)
class ReviewEntry:
    """One item in a speaker's merged review feed.

    ``rating`` is None for booking notes that could not be parsed; those are
    listed but left out of averages.
    """

    id: str
    rating: int | None
    comment: str | None
    created_at: datetime
    source: ReviewSource
    event_id: EventId | None = None
    reviewer_id: ProfileId | None = None


@dataclass(frozen=True)
class EventSummary:
    """An event together with booking counts derived at read time."""

    event: Event
    application_count: int
    pending_count: int
    confirmed_count: int


@dataclass(frozen=True)
class SpeakerStats:
    """Rating and talk aggregates derived from bookings and reviews."""

    speaker_id: SpeakerId
    average_rating: float
    rating_count: int
    total_talks: int
