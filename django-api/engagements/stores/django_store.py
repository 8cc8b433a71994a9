"""Django ORM implementation of the EngagementStore.

Conditional updates use ``UPDATE ... WHERE id = %s AND version = %s`` so two
writers racing on the same row cannot both win. Queryset ``update()`` does not
fire model signals, so this store publishes those writes to the change feed
itself; inserts and deletes are published by engagements.signals. Notices are
deferred until the surrounding transaction commits.
"""

import functools
import logging
from collections.abc import Callable, Iterable
from datetime import datetime
from decimal import Decimal
from typing import Any, TypeVar

from django.db import DatabaseError, IntegrityError, transaction
from django.db.models import F

from engagements import models as orm
from engagements.domain import (
    Booking,
    BookingId,
    BookingStatus,
    Duration,
    Event,
    EventFormat,
    EventId,
    EventStatus,
    EventType,
    ExperienceLevel,
    Invitation,
    InvitationId,
    Money,
    ProfileId,
    Rating,
    Review,
    ReviewId,
    Speaker,
    SpeakerId,
)
from engagements.domain.errors import StoreUnavailableError
from engagements.notifications import ChangeFeed, change_feed
from engagements.stores.interfaces import (
    BOOKING_UPDATE_FIELDS,
    EngagementStore,
    UniqueConflictError,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _translate_errors(method: Callable[..., T]) -> Callable[..., T]:
    """Surface database failures as StoreUnavailableError."""

    @functools.wraps(method)
    def wrapper(*args: Any, **kwargs: Any) -> T:
        try:
            return method(*args, **kwargs)
        except IntegrityError:
            raise
        except DatabaseError as e:
            logger.error(f"Store operation {method.__name__} failed: {e}")
            raise StoreUnavailableError(method.__name__) from e

    return wrapper


def _money(value: Decimal | None) -> Money | None:
    return Money(value) if value is not None else None


def _amount(value: Money | None) -> Decimal | None:
    return value.amount if value is not None else None


def _event_to_domain(row: orm.Event) -> Event:
    return Event(
        id=EventId(row.id),
        organizer_id=ProfileId(row.organizer_id),
        title=row.title,
        description=row.description,
        event_type=EventType(row.event_type),
        format=EventFormat(row.format),
        location=row.location,
        date_time=row.date_time,
        duration=Duration(row.duration_hours),
        budget_min=_money(row.budget_min),
        budget_max=_money(row.budget_max),
        required_topics=frozenset(row.required_topics or ()),
        status=EventStatus(row.status),
        created_at=row.created_at,
        updated_at=row.updated_at,
        version=row.version,
    )


def _speaker_to_domain(row: orm.Speaker) -> Speaker:
    return Speaker(
        id=SpeakerId(row.id),
        profile_id=ProfileId(row.profile_id),
        experience_level=ExperienceLevel(row.experience_level),
        hourly_rate=_money(row.hourly_rate),
        available=row.available,
        verified=row.verified,
        total_talks=row.total_talks,
        average_rating=row.average_rating,
        topics=frozenset(row.topics or ()),
        primary_topic=row.primary_topic,
        created_at=row.created_at,
    )


def _booking_to_domain(row: orm.Booking) -> Booking:
    return Booking(
        id=BookingId(row.id),
        event_id=EventId(row.event_id),
        speaker_id=SpeakerId(row.speaker_id),
        organizer_id=ProfileId(row.organizer_id),
        status=BookingStatus(row.status),
        agreed_rate=_money(row.agreed_rate),
        message=row.message,
        organizer_rating=Rating(row.organizer_rating) if row.organizer_rating is not None else None,
        organizer_feedback=row.organizer_feedback,
        reviewer_notes=row.reviewer_notes,
        reviewed_at=row.reviewed_at,
        created_at=row.created_at,
        updated_at=row.updated_at,
        version=row.version,
    )


def _invitation_to_domain(row: orm.Invitation) -> Invitation:
    return Invitation(
        id=InvitationId(row.id),
        event_id=EventId(row.event_id),
        speaker_id=SpeakerId(row.speaker_id),
        organizer_id=ProfileId(row.organizer_id),
        message=row.message,
        proposed_rate=_money(row.proposed_rate),
        created_at=row.created_at,
    )


def _review_to_domain(row: orm.Review) -> Review:
    return Review(
        id=ReviewId(row.id),
        rating=Rating(row.rating),
        comment=row.comment,
        reviewer_id=ProfileId(row.reviewer_id),
        reviewee_id=SpeakerId(row.reviewee_id),
        created_at=row.created_at,
    )


def _booking_columns(changes: dict[str, Any]) -> dict[str, Any]:
    columns = {}
    for name, value in changes.items():
        if isinstance(value, BookingStatus):
            value = value.value
        elif isinstance(value, Rating):
            value = value.value
        columns[name] = value
    return columns


class DjangoEngagementStore(EngagementStore):
    """PostgreSQL-backed engagement store using Django ORM."""

    def __init__(self, feed: ChangeFeed | None = None) -> None:
        self._feed = feed if feed is not None else change_feed

    def atomic(self):
        return transaction.atomic()

    # Events

    @_translate_errors
    def get_event(self, event_id: EventId) -> Event | None:
        row = orm.Event.objects.filter(pk=event_id.value).first()
        return _event_to_domain(row) if row else None

    @_translate_errors
    def list_events(
        self,
        organizer_id: ProfileId | None = None,
        statuses: Iterable[EventStatus] | None = None,
    ) -> list[Event]:
        queryset = orm.Event.objects.all()
        if organizer_id is not None:
            queryset = queryset.filter(organizer_id=organizer_id.value)
        if statuses is not None:
            queryset = queryset.filter(status__in=[status.value for status in statuses])
        return [_event_to_domain(row) for row in queryset.order_by("date_time")]

    @_translate_errors
    def insert_event(self, event: Event) -> Event:
        row = orm.Event.objects.create(
            id=event.id.value,
            organizer_id=event.organizer_id.value,
            title=event.title,
            description=event.description,
            event_type=event.event_type.value,
            format=event.format.value,
            location=event.location,
            date_time=event.date_time,
            duration_hours=event.duration.hours,
            budget_min=_amount(event.budget_min),
            budget_max=_amount(event.budget_max),
            required_topics=sorted(event.required_topics),
            status=event.status.value,
            version=event.version,
            created_at=event.created_at,
            updated_at=event.updated_at,
        )
        return _event_to_domain(row)

    @_translate_errors
    def update_event_status(
        self, event_id: EventId, expected_version: int, status: EventStatus, updated_at: datetime
    ) -> Event | None:
        updated = orm.Event.objects.filter(pk=event_id.value, version=expected_version).update(
            status=status.value, updated_at=updated_at, version=F("version") + 1
        )
        if not updated:
            return None
        event = self.get_event(event_id)
        self._feed.publish_on_commit(
            "events", event_id, organizer_id=event.organizer_id, status=event.status.value
        )
        return event

    # Speakers

    @_translate_errors
    def get_speaker(self, speaker_id: SpeakerId) -> Speaker | None:
        row = orm.Speaker.objects.filter(pk=speaker_id.value).first()
        return _speaker_to_domain(row) if row else None

    @_translate_errors
    def insert_speaker(self, speaker: Speaker) -> Speaker:
        row = orm.Speaker.objects.create(
            id=speaker.id.value,
            profile_id=speaker.profile_id.value,
            experience_level=speaker.experience_level.value,
            hourly_rate=_amount(speaker.hourly_rate),
            available=speaker.available,
            verified=speaker.verified,
            total_talks=speaker.total_talks,
            average_rating=speaker.average_rating,
            topics=sorted(speaker.topics),
            primary_topic=speaker.primary_topic,
            created_at=speaker.created_at,
        )
        return _speaker_to_domain(row)

    # Bookings

    @_translate_errors
    def get_booking(self, booking_id: BookingId) -> Booking | None:
        row = orm.Booking.objects.filter(pk=booking_id.value).first()
        return _booking_to_domain(row) if row else None

    @_translate_errors
    def list_bookings(
        self,
        event_ids: Iterable[EventId] | None = None,
        speaker_id: SpeakerId | None = None,
        organizer_id: ProfileId | None = None,
        statuses: Iterable[BookingStatus] | None = None,
    ) -> list[Booking]:
        queryset = orm.Booking.objects.all()
        if event_ids is not None:
            queryset = queryset.filter(event_id__in=[event_id.value for event_id in event_ids])
        if speaker_id is not None:
            queryset = queryset.filter(speaker_id=speaker_id.value)
        if organizer_id is not None:
            queryset = queryset.filter(organizer_id=organizer_id.value)
        if statuses is not None:
            queryset = queryset.filter(status__in=[status.value for status in statuses])
        return [_booking_to_domain(row) for row in queryset.order_by("-created_at")]

    @_translate_errors
    def insert_booking(self, booking: Booking) -> Booking:
        try:
            with transaction.atomic():
                row = orm.Booking.objects.create(
                    id=booking.id.value,
                    event_id=booking.event_id.value,
                    speaker_id=booking.speaker_id.value,
                    organizer_id=booking.organizer_id.value,
                    status=booking.status.value,
                    agreed_rate=_amount(booking.agreed_rate),
                    message=booking.message,
                    organizer_rating=booking.organizer_rating.value if booking.organizer_rating else None,
                    organizer_feedback=booking.organizer_feedback,
                    reviewer_notes=booking.reviewer_notes,
                    reviewed_at=booking.reviewed_at,
                    version=booking.version,
                    created_at=booking.created_at,
                    updated_at=booking.updated_at,
                )
        except IntegrityError as e:
            raise UniqueConflictError("unique_active_booking") from e
        return _booking_to_domain(row)

    @_translate_errors
    def update_booking(
        self, booking_id: BookingId, expected_version: int, updated_at: datetime, **changes: Any
    ) -> Booking | None:
        unknown = set(changes) - BOOKING_UPDATE_FIELDS
        if unknown:
            raise ValueError(f"Cannot update booking fields: {sorted(unknown)}")
        updated = orm.Booking.objects.filter(pk=booking_id.value, version=expected_version).update(
            updated_at=updated_at, version=F("version") + 1, **_booking_columns(changes)
        )
        if not updated:
            return None
        booking = self.get_booking(booking_id)
        self._feed.publish_on_commit(
            "bookings",
            booking_id,
            event_id=booking.event_id,
            speaker_id=booking.speaker_id,
            organizer_id=booking.organizer_id,
            status=booking.status.value,
        )
        return booking

    # Invitations

    @_translate_errors
    def get_invitation(self, invitation_id: InvitationId) -> Invitation | None:
        row = orm.Invitation.objects.filter(pk=invitation_id.value).first()
        return _invitation_to_domain(row) if row else None

    @_translate_errors
    def find_invitation(
        self, event_id: EventId, speaker_id: SpeakerId, organizer_id: ProfileId
    ) -> Invitation | None:
        row = orm.Invitation.objects.filter(
            event_id=event_id.value,
            speaker_id=speaker_id.value,
            organizer_id=organizer_id.value,
        ).first()
        return _invitation_to_domain(row) if row else None

    @_translate_errors
    def list_invitations(self, speaker_id: SpeakerId) -> list[Invitation]:
        rows = orm.Invitation.objects.filter(speaker_id=speaker_id.value).order_by("-created_at")
        return [_invitation_to_domain(row) for row in rows]

    @_translate_errors
    def insert_invitation(self, invitation: Invitation) -> Invitation:
        try:
            with transaction.atomic():
                row = orm.Invitation.objects.create(
                    id=invitation.id.value,
                    event_id=invitation.event_id.value,
                    speaker_id=invitation.speaker_id.value,
                    organizer_id=invitation.organizer_id.value,
                    message=invitation.message,
                    proposed_rate=_amount(invitation.proposed_rate),
                    created_at=invitation.created_at,
                )
        except IntegrityError as e:
            raise UniqueConflictError("unique_speaker_event_invitation") from e
        return _invitation_to_domain(row)

    @_translate_errors
    def delete_invitation(self, invitation_id: InvitationId) -> bool:
        row = orm.Invitation.objects.filter(pk=invitation_id.value).first()
        if row is None:
            return False
        row.delete()
        return True

    # Reviews

    @_translate_errors
    def list_reviews(self, reviewee_id: SpeakerId) -> list[Review]:
        rows = orm.Review.objects.filter(reviewee_id=reviewee_id.value).order_by("-created_at")
        return [_review_to_domain(row) for row in rows]

    @_translate_errors
    def insert_review(self, review: Review) -> Review:
        row = orm.Review.objects.create(
            id=review.id.value,
            rating=review.rating.value,
            comment=review.comment,
            reviewer_id=review.reviewer_id.value,
            reviewee_id=review.reviewee_id.value,
            created_at=review.created_at,
        )
        return _review_to_domain(row)
