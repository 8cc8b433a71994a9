"""Status rules for events and bookings.

Everything here is pure: callers pass the current time and the record, and
get back a decision. Nothing reads from or writes to a store.
"""

from datetime import datetime, timedelta

from engagements.domain.errors import InvalidStateError
from engagements.domain.models import Booking, BookingStatus, Event, EventStatus

# Statuses the time rule may move to FINISHED.
SWEEPABLE_EVENT_STATUSES = frozenset({EventStatus.OPEN, EventStatus.IN_PROGRESS})

EVENT_TRANSITIONS: dict[EventStatus, frozenset[EventStatus]] = {
    EventStatus.OPEN: frozenset(
        {EventStatus.IN_PROGRESS, EventStatus.FINISHED, EventStatus.CANCELLED}
    ),
    EventStatus.IN_PROGRESS: frozenset({EventStatus.FINISHED, EventStatus.CANCELLED}),
    EventStatus.FINISHED: frozenset({EventStatus.COMPLETED}),
    EventStatus.COMPLETED: frozenset(),
    EventStatus.CANCELLED: frozenset(),
}

BOOKING_TRANSITIONS: dict[BookingStatus, frozenset[BookingStatus]] = {
    BookingStatus.PENDING: frozenset({BookingStatus.ACCEPTED, BookingStatus.REJECTED}),
    BookingStatus.ACCEPTED: frozenset({BookingStatus.PAID}),
    BookingStatus.PAID: frozenset({BookingStatus.COMPLETED}),
    BookingStatus.REJECTED: frozenset(),
    BookingStatus.COMPLETED: frozenset(),
}

CONFIRMED_BOOKING_STATUSES = frozenset({BookingStatus.ACCEPTED, BookingStatus.PAID})


def evaluate_event_status(now: datetime, event: Event) -> EventStatus | None:
    """Return the status the clock says this event should have, or None.

    Only open and in-progress events whose end time has passed move, and
    they always move to FINISHED. Re-evaluating a finished event is a no-op.
    """
    if event.status in SWEEPABLE_EVENT_STATUSES and event.ends_at <= now:
        return EventStatus.FINISHED
    return None


def can_mark_finished(now: datetime, event: Event) -> bool:
    """Whether the organizer may finish the event by hand."""
    return event.ends_at <= now and event.status in SWEEPABLE_EVENT_STATUSES


def can_start(now: datetime, event: Event) -> bool:
    """Whether an open event is running and may be marked in progress."""
    return event.status is EventStatus.OPEN and event.date_time <= now < event.ends_at


def completion_window_open(now: datetime, event: Event, grace: timedelta) -> bool:
    """Whether the post-event grace period has elapsed."""
    return event.ends_at + grace <= now


def check_event_transition(current: EventStatus, target: EventStatus) -> None:
    """Raise InvalidStateError unless the event may move from current to target."""
    if target not in EVENT_TRANSITIONS[current]:
        raise InvalidStateError.transition("event", current.value, target.value)


def check_booking_transition(current: BookingStatus, target: BookingStatus) -> None:
    """Raise InvalidStateError unless the booking may move from current to target."""
    if target not in BOOKING_TRANSITIONS[current]:
        raise InvalidStateError.transition("booking", current.value, target.value)


def is_active(booking: Booking) -> bool:
    """Non-rejected bookings count against the one-per-(event, speaker) rule."""
    return booking.status is not BookingStatus.REJECTED


def is_application(booking: Booking) -> bool:
    """Bookings shown in the applications view (everything except paid)."""
    return booking.status is not BookingStatus.PAID


def is_confirmed(booking: Booking) -> bool:
    return booking.status in CONFIRMED_BOOKING_STATUSES
