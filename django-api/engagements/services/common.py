"""Helpers shared by the services: input validation and ownership lookups."""

from collections.abc import Callable
from datetime import datetime
from typing import Any, TypeVar

from engagements.context import RequestContext
from engagements.domain import Booking, BookingId, Event, EventId, Money, Rating, Speaker, SpeakerId
from engagements.domain.errors import (
    BookingNotFoundError,
    EventNotFoundError,
    SpeakerNotFoundError,
    ValidationError,
)
from engagements.stores.interfaces import EngagementStore

Clock = Callable[[], datetime]

T = TypeVar("T")


def validated(field: str, factory: Callable[[Any], T], value: Any) -> T:
    """Build a value object, reporting failures against ``field``."""
    try:
        return factory(value)
    except (TypeError, ValueError, ArithmeticError) as e:
        raise ValidationError(field, str(e) or "is invalid") from e


def optional_money(field: str, value: Any) -> Money | None:
    if value is None or value == "":
        return None
    return validated(field, Money, value)


def rating(value: Any) -> Rating:
    return validated("rating", Rating, value)


def clean_text(value: str | None) -> str | None:
    if value is None:
        return None
    value = value.strip()
    return value or None


def require_event(store: EngagementStore, event_id: EventId) -> Event:
    event = store.get_event(event_id)
    if event is None:
        raise EventNotFoundError(event_id)
    return event


def require_owned_event(store: EngagementStore, ctx: RequestContext, event_id: EventId) -> Event:
    """Events of other organizers are reported as missing."""
    event = store.get_event(event_id)
    if event is None or event.organizer_id != ctx.profile_id:
        raise EventNotFoundError(event_id)
    return event


def require_owned_booking(
    store: EngagementStore, ctx: RequestContext, booking_id: BookingId
) -> Booking:
    booking = store.get_booking(booking_id)
    if booking is None or booking.organizer_id != ctx.profile_id:
        raise BookingNotFoundError(booking_id)
    return booking


def require_speaker(store: EngagementStore, speaker_id: SpeakerId) -> Speaker:
    speaker = store.get_speaker(speaker_id)
    if speaker is None:
        raise SpeakerNotFoundError(speaker_id)
    return speaker


def require_caller_speaker(ctx: RequestContext) -> SpeakerId:
    if ctx.speaker_id is None:
        raise ValidationError("speaker_id", "caller has no speaker profile")
    return ctx.speaker_id
