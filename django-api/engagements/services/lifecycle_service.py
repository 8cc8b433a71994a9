"""Lifecycle service - owns event and booking status transitions.

Services:
- Depend only on interfaces (stores)
- Validate domain invariants before any write
- Perform orchestration and error mapping
- Return domain models or raise domain errors

Time-driven transitions piggyback on reads: listing an organizer's events
sweeps them first. ``sweep()`` does the same for every open event and is what
the periodic sweeper calls.
"""

import logging
from datetime import datetime, timedelta
from typing import Any

from django.utils import timezone

from engagements import conf
from engagements.context import RequestContext
from engagements.domain import (
    Booking,
    BookingId,
    BookingStatus,
    Duration,
    Event,
    EventFormat,
    EventId,
    EventStatus,
    EventSummary,
    EventType,
    SpeakerId,
)
from engagements.domain.errors import InvalidStateError, ValidationError
from engagements.domain.status import (
    SWEEPABLE_EVENT_STATUSES,
    can_mark_finished,
    can_start,
    check_booking_transition,
    check_event_transition,
    completion_window_open,
    evaluate_event_status,
    is_active,
    is_application,
    is_confirmed,
)
from engagements.services.aggregation_service import AggregationService
from engagements.services.common import (
    Clock,
    clean_text,
    optional_money,
    require_caller_speaker,
    require_event,
    require_owned_booking,
    require_owned_event,
    require_speaker,
    validated,
)
from engagements.stores.interfaces import EngagementStore, UniqueConflictError

logger = logging.getLogger(__name__)


class LifecycleService:
    """Service for event and booking lifecycle operations."""

    def __init__(
        self,
        store: EngagementStore,
        aggregation: AggregationService,
        clock: Clock = timezone.now,
        completion_grace: timedelta | None = None,
    ) -> None:
        self._store = store
        self._aggregation = aggregation
        self._clock = clock
        self._grace = completion_grace if completion_grace is not None else conf.completion_grace()

    # Events

    def create_event(
        self,
        ctx: RequestContext,
        *,
        title: str,
        event_type: str,
        format: str,
        date_time: datetime,
        duration_hours: Any,
        description: str = "",
        location: str | None = None,
        budget_min: Any = None,
        budget_max: Any = None,
        required_topics: list[str] | tuple[str, ...] = (),
    ) -> Event:
        """Post a new open event.

        Raises:
            ValidationError: Naming the first malformed field.
        """
        title = clean_text(title)
        if not title:
            raise ValidationError("title", "is required")
        kind = validated("event_type", EventType, event_type)
        event_format = validated("format", EventFormat, format)
        if not isinstance(date_time, datetime) or timezone.is_naive(date_time):
            raise ValidationError("date_time", "must be a timezone-aware datetime")
        duration = validated("duration_hours", Duration, duration_hours)
        low = optional_money("budget_min", budget_min)
        high = optional_money("budget_max", budget_max)
        if low is not None and high is not None and low.amount > high.amount:
            raise ValidationError("budget_min", "must not exceed budget_max")

        now = self._clock()
        event = Event(
            id=EventId.new(),
            organizer_id=ctx.profile_id,
            title=title,
            description=description or "",
            event_type=kind,
            format=event_format,
            location=clean_text(location),
            date_time=date_time,
            duration=duration,
            budget_min=low,
            budget_max=high,
            required_topics=frozenset(topic.strip() for topic in required_topics if topic.strip()),
            status=EventStatus.OPEN,
            created_at=now,
            updated_at=now,
        )
        event = self._store.insert_event(event)
        logger.info(f"Event {event.id} created by organizer {ctx.profile_id}")
        return event

    def list_my_events(
        self, ctx: RequestContext, status: EventStatus | None = None, search: str | None = None
    ) -> list[EventSummary]:
        """Sweep the caller's events, then return them with booking counts."""
        now = self._clock()
        events = self._store.list_events(organizer_id=ctx.profile_id)
        if self._sweep_events(events, now):
            events = self._store.list_events(organizer_id=ctx.profile_id)

        if status is not None:
            events = [event for event in events if event.status is status]
        if search:
            needle = search.casefold()
            events = [
                event
                for event in events
                if needle in event.title.casefold() or needle in event.description.casefold()
            ]
        return self._aggregation.event_summaries(events)

    def list_inviteable_events(self, ctx: RequestContext) -> list[Event]:
        """The caller's open events that have not started yet, soonest first."""
        now = self._clock()
        events = self._store.list_events(organizer_id=ctx.profile_id, statuses=[EventStatus.OPEN])
        return [event for event in events if event.date_time > now]

    def sweep(self, now: datetime | None = None) -> list[Event]:
        """Finish every open or in-progress event whose end time has passed."""
        now = now or self._clock()
        events = self._store.list_events(statuses=SWEEPABLE_EVENT_STATUSES)
        return self._sweep_events(events, now)

    def _sweep_events(self, events: list[Event], now: datetime) -> list[Event]:
        transitioned = []
        for event in events:
            target = evaluate_event_status(now, event)
            if target is None:
                continue
            updated = self._store.update_event_status(event.id, event.version, target, now)
            if updated is None:
                # Another writer got there first; the next read sees its result.
                logger.warning(f"Event {event.id} changed during sweep; skipped")
                continue
            logger.info(f"Event {event.id}: {event.status.value} -> {target.value} (ended {event.ends_at})")
            transitioned.append(updated)
        return transitioned

    def mark_event_finished(self, ctx: RequestContext, event_id: EventId) -> Event:
        """Finish an event by hand once its end time has passed.

        Raises:
            EventNotFoundError: If the event does not exist or is not the caller's.
            InvalidStateError: If the event has not ended or is already past open/in progress.
        """
        event = require_owned_event(self._store, ctx, event_id)
        now = self._clock()
        if not can_mark_finished(now, event):
            if event.status in SWEEPABLE_EVENT_STATUSES:
                raise InvalidStateError(
                    "Event cannot be finished before it ends",
                    current=event.status.value,
                    target=EventStatus.FINISHED.value,
                )
            raise InvalidStateError.transition("event", event.status.value, EventStatus.FINISHED.value)
        return self._write_event_status(event, EventStatus.FINISHED, now)

    def start_event(self, ctx: RequestContext, event_id: EventId) -> Event:
        event = require_owned_event(self._store, ctx, event_id)
        now = self._clock()
        check_event_transition(event.status, EventStatus.IN_PROGRESS)
        if not can_start(now, event):
            raise InvalidStateError(
                "Event can only be started while it is running",
                current=event.status.value,
                target=EventStatus.IN_PROGRESS.value,
            )
        return self._write_event_status(event, EventStatus.IN_PROGRESS, now)

    def cancel_event(self, ctx: RequestContext, event_id: EventId) -> Event:
        event = require_owned_event(self._store, ctx, event_id)
        return self._write_event_status(event, EventStatus.CANCELLED, self._clock())

    def _write_event_status(self, event: Event, target: EventStatus, now: datetime) -> Event:
        check_event_transition(event.status, target)
        updated = self._store.update_event_status(event.id, event.version, target, now)
        if updated is None:
            logger.warning(f"Event {event.id} was modified concurrently")
            raise InvalidStateError("Event was modified concurrently; reload and retry")
        logger.info(f"Event {event.id}: {event.status.value} -> {target.value}")
        return updated

    # Bookings

    def apply_to_event(
        self,
        ctx: RequestContext,
        event_id: EventId,
        message: str | None = None,
        proposed_rate: Any = None,
    ) -> Booking:
        """Create a pending booking for the calling speaker.

        Raises:
            ValidationError: If the caller has no speaker profile or the rate is malformed.
            EventNotFoundError / SpeakerNotFoundError: For unknown references.
            InvalidStateError: If the event is not open or the speaker already has
                an active booking for it.
        """
        speaker_id = require_caller_speaker(ctx)
        rate = optional_money("proposed_rate", proposed_rate)
        event = require_event(self._store, event_id)
        speaker = require_speaker(self._store, speaker_id)
        if event.status is not EventStatus.OPEN:
            raise InvalidStateError(
                "Event is not accepting applications", current=event.status.value
            )
        if not speaker.available:
            raise InvalidStateError("Speaker is not available for bookings")
        self._ensure_no_active_booking(event.id, speaker.id)

        now = self._clock()
        booking = Booking(
            id=BookingId.new(),
            event_id=event.id,
            speaker_id=speaker.id,
            organizer_id=event.organizer_id,
            status=BookingStatus.PENDING,
            agreed_rate=rate,
            message=clean_text(message),
            organizer_rating=None,
            organizer_feedback=None,
            reviewer_notes=None,
            reviewed_at=None,
            created_at=now,
            updated_at=now,
        )
        booking = self._insert_booking(booking)
        logger.info(f"Speaker {speaker.id} applied to event {event.id} (booking {booking.id})")
        return booking

    def _insert_booking(self, booking: Booking) -> Booking:
        """Store a new booking, mapping a unique-key race to InvalidStateError."""
        try:
            return self._store.insert_booking(booking)
        except UniqueConflictError as e:
            raise InvalidStateError("Speaker already has an active booking for this event") from e

    def _ensure_no_active_booking(self, event_id: EventId, speaker_id: SpeakerId) -> None:
        existing = self._store.list_bookings(event_ids=[event_id], speaker_id=speaker_id)
        if any(is_active(booking) for booking in existing):
            raise InvalidStateError("Speaker already has an active booking for this event")

    def accept_booking(self, ctx: RequestContext, booking_id: BookingId) -> Booking:
        return self._transition_booking(ctx, booking_id, BookingStatus.ACCEPTED)

    def reject_booking(self, ctx: RequestContext, booking_id: BookingId) -> Booking:
        return self._transition_booking(ctx, booking_id, BookingStatus.REJECTED)

    def confirm_payment(self, ctx: RequestContext, booking_id: BookingId) -> Booking:
        """Record a successful payment for an accepted booking."""
        return self._transition_booking(ctx, booking_id, BookingStatus.PAID)

    def _transition_booking(
        self, ctx: RequestContext, booking_id: BookingId, target: BookingStatus
    ) -> Booking:
        booking = require_owned_booking(self._store, ctx, booking_id)
        check_booking_transition(booking.status, target)
        return self._write_booking(booking, self._clock(), status=target)

    def _write_booking(self, booking: Booking, now: datetime, **changes: Any) -> Booking:
        updated = self._store.update_booking(booking.id, booking.version, now, **changes)
        if updated is None:
            logger.warning(f"Booking {booking.id} was modified concurrently")
            raise InvalidStateError("Booking was modified concurrently; reload and retry")
        if "status" in changes:
            logger.info(f"Booking {booking.id}: {booking.status.value} -> {updated.status.value}")
        return updated

    def complete_engagement(
        self, ctx: RequestContext, booking_id: BookingId, reviewer_notes: str | None = None
    ) -> Booking:
        """Complete a paid engagement once the event has ended and the grace period passed.

        The event is finished first if the sweep has not done so yet, then moved
        to completed; an already-completed event is left as is.

        Raises:
            BookingNotFoundError: If the booking does not exist or is not the caller's.
            InvalidStateError: If the booking is not paid, the grace period has not
                elapsed, or this speaker's engagement on the event is already completed.
        """
        booking = require_owned_booking(self._store, ctx, booking_id)
        check_booking_transition(booking.status, BookingStatus.COMPLETED)
        event = require_event(self._store, booking.event_id)
        now = self._clock()
        if event.status is EventStatus.CANCELLED:
            raise InvalidStateError("Cancelled events cannot be completed", current=event.status.value)
        if not completion_window_open(now, event, self._grace):
            raise InvalidStateError(
                f"Event can be completed {self._grace} after it ends ({event.ends_at.isoformat()})"
            )
        already_completed = self._store.list_bookings(
            event_ids=[event.id], speaker_id=booking.speaker_id, statuses=[BookingStatus.COMPLETED]
        )
        if already_completed:
            raise InvalidStateError("This engagement has already been completed")

        with self._store.atomic():
            if event.status in SWEEPABLE_EVENT_STATUSES:
                event = self._write_event_status(event, EventStatus.FINISHED, now)
            if event.status is EventStatus.FINISHED:
                event = self._write_event_status(event, EventStatus.COMPLETED, now)
            return self._write_booking(
                booking, now, status=BookingStatus.COMPLETED, reviewer_notes=clean_text(reviewer_notes)
            )

    # Booking views

    def list_bookings_for_organizer(self, ctx: RequestContext) -> list[Booking]:
        """Applications view: every booking of the caller's events except paid ones."""
        bookings = self._store.list_bookings(organizer_id=ctx.profile_id)
        return [booking for booking in bookings if is_application(booking)]

    def list_confirmed_speakers(
        self, ctx: RequestContext, event_id: EventId | None = None
    ) -> list[Booking]:
        """Confirmed view: accepted and paid bookings, optionally for one event."""
        event_ids = None
        if event_id is not None:
            event_ids = [require_owned_event(self._store, ctx, event_id).id]
        bookings = self._store.list_bookings(
            event_ids=event_ids,
            organizer_id=ctx.profile_id,
            statuses=[BookingStatus.ACCEPTED, BookingStatus.PAID],
        )
        return [booking for booking in bookings if is_confirmed(booking)]

    def list_event_bookings(
        self, ctx: RequestContext, event_id: EventId
    ) -> tuple[list[Booking], list[Booking]]:
        """Return ``(applications, confirmed)`` for one event from a single read."""
        event = require_owned_event(self._store, ctx, event_id)
        bookings = self._store.list_bookings(event_ids=[event.id])
        applications = [booking for booking in bookings if is_application(booking)]
        confirmed = [booking for booking in bookings if is_confirmed(booking)]
        return applications, confirmed

    def list_speaker_past_events(
        self, speaker_id: SpeakerId, limit: int | None = None
    ) -> list[Booking]:
        """A speaker's completed bookings, newest first."""
        require_speaker(self._store, speaker_id)
        limit = limit if limit is not None else conf.past_events_limit()
        bookings = self._store.list_bookings(
            speaker_id=speaker_id, statuses=[BookingStatus.COMPLETED]
        )
        return bookings[:limit]
