"""Pytest configuration and shared fixtures."""

from datetime import UTC, datetime, timedelta
from decimal import Decimal

import pytest
from django.dispatch import Signal
from rest_framework.test import APIClient

from engagements.context import RequestContext
from engagements.domain import (
    Booking,
    BookingId,
    BookingStatus,
    Event,
    ExperienceLevel,
    Money,
    ProfileId,
    Speaker,
    SpeakerId,
)
from engagements.notifications import ChangeFeed
from engagements.services import Services, build_services
from engagements.stores.memory_store import InMemoryEngagementStore

# Monday morning; events in tests start from here.
T0 = datetime(2025, 3, 3, 9, 0, tzinfo=UTC)


class FakeClock:
    """Callable clock the tests move by hand."""

    def __init__(self, now: datetime = T0) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> datetime:
        self.now += timedelta(**kwargs)
        return self.now


@pytest.fixture
def api_client() -> APIClient:
    return APIClient()


@pytest.fixture(autouse=True)
def clear_cache():
    from django.core.cache import cache
    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def feed() -> ChangeFeed:
    """A feed on a private signal, isolated from the app-wide subscribers."""
    return ChangeFeed(Signal())


@pytest.fixture
def store(feed) -> InMemoryEngagementStore:
    return InMemoryEngagementStore(feed=feed)


@pytest.fixture
def services(store, clock) -> Services:
    return build_services(store=store, clock=clock)


@pytest.fixture
def organizer() -> RequestContext:
    return RequestContext(profile_id=ProfileId.new())


@pytest.fixture
def other_organizer() -> RequestContext:
    return RequestContext(profile_id=ProfileId.new())


@pytest.fixture
def speaker(store) -> Speaker:
    return add_speaker(store)


@pytest.fixture
def speaker_ctx(speaker) -> RequestContext:
    return RequestContext(profile_id=speaker.profile_id, speaker_id=speaker.id)


def add_speaker(store, available: bool = True) -> Speaker:
    return store.insert_speaker(
        Speaker(
            id=SpeakerId.new(),
            profile_id=ProfileId.new(),
            experience_level=ExperienceLevel.INTERMEDIATE,
            hourly_rate=Money(Decimal("150")),
            available=available,
            verified=True,
            total_talks=0,
            average_rating=0.0,
            topics=frozenset({"python"}),
            primary_topic="python",
            created_at=T0 - timedelta(days=30),
        )
    )


def create_event(services: Services, ctx: RequestContext, **overrides) -> Event:
    fields = {
        "title": "Intro to Django",
        "event_type": "workshop",
        "format": "virtual",
        "date_time": T0 + timedelta(days=1),
        "duration_hours": Decimal("2"),
    }
    fields.update(overrides)
    return services.lifecycle.create_event(ctx, **fields)


def add_booking(store, event: Event, speaker: Speaker, status: BookingStatus, created_at=None) -> Booking:
    """Insert a booking directly, bypassing the lifecycle rules."""
    created_at = created_at or T0
    return store.insert_booking(
        Booking(
            id=BookingId.new(),
            event_id=event.id,
            speaker_id=speaker.id,
            organizer_id=event.organizer_id,
            status=status,
            agreed_rate=None,
            message=None,
            organizer_rating=None,
            organizer_feedback=None,
            reviewer_notes=None,
            reviewed_at=None,
            created_at=created_at,
            updated_at=created_at,
        )
    )
