"""Service tests for event and booking lifecycle.

Run against the in-memory store with a hand-driven clock.
"""

from datetime import timedelta
from decimal import Decimal

import pytest
from conftest import T0, add_booking, add_speaker, create_event

from engagements.context import RequestContext
from engagements.domain import BookingStatus, EventId, EventStatus
from engagements.domain.errors import (
    AlreadyReviewedError,
    BookingNotFoundError,
    EventNotFoundError,
    InvalidStateError,
    ValidationError,
)
from engagements.services.sweeper import Sweeper
from engagements.stores.interfaces import UniqueConflictError

EVENT_START = T0 + timedelta(days=1)


def sweep_on_read(services, organizer):
    services.lifecycle.list_my_events(organizer)


def sweep_periodically(services, organizer):
    Sweeper(services.lifecycle, interval_seconds=60).run_once()


SWEEP_TRIGGERS = pytest.mark.parametrize(
    "trigger", [sweep_on_read, sweep_periodically], ids=["on-read", "periodic"]
)


@pytest.fixture
def event(services, organizer):
    return create_event(services, organizer, date_time=EVENT_START, duration_hours=Decimal("2"))


class TestCreateEvent:
    """Tests for LifecycleService.create_event"""

    def test_creates_open_event(self, services, organizer, clock, store):
        event = create_event(
            services,
            organizer,
            title="  Async Python  ",
            budget_min="100",
            budget_max="500",
            required_topics=["python", " asyncio ", ""],
        )
        assert event.status is EventStatus.OPEN
        assert event.organizer_id == organizer.profile_id
        assert event.title == "Async Python"
        assert event.required_topics == frozenset({"python", "asyncio"})
        assert event.created_at == clock.now
        assert store.get_event(event.id) == event

    @pytest.mark.parametrize(
        "overrides,field",
        [
            ({"title": "   "}, "title"),
            ({"event_type": "party"}, "event_type"),
            ({"format": "telepathy"}, "format"),
            ({"date_time": T0.replace(tzinfo=None)}, "date_time"),
            ({"date_time": "tomorrow"}, "date_time"),
            ({"duration_hours": Decimal("-1")}, "duration_hours"),
            ({"duration_hours": 0}, "duration_hours"),
            ({"duration_hours": Decimal("Infinity")}, "duration_hours"),
            ({"duration_hours": Decimal("10000")}, "duration_hours"),
            ({"duration_hours": "1.005"}, "duration_hours"),
            ({"budget_max": Decimal("Infinity")}, "budget_max"),
            ({"budget_min": "-5"}, "budget_min"),
            ({"budget_min": "600", "budget_max": "500"}, "budget_min"),
        ],
    )
    def test_rejects_malformed_input(self, services, organizer, store, overrides, field):
        with pytest.raises(ValidationError) as exc_info:
            create_event(services, organizer, **overrides)
        assert exc_info.value.field == field
        assert store.list_events() == []


class TestSweep:
    """Tests for the time-driven event transition."""

    @SWEEP_TRIGGERS
    def test_ended_events_are_finished(self, services, organizer, event, clock, store, trigger):
        clock.now = event.ends_at
        trigger(services, organizer)
        assert store.get_event(event.id).status is EventStatus.FINISHED

    @SWEEP_TRIGGERS
    def test_running_events_are_left_open(self, services, organizer, event, clock, store, trigger):
        clock.now = EVENT_START + timedelta(hours=1)
        trigger(services, organizer)
        assert store.get_event(event.id).status is EventStatus.OPEN

    def test_sweep_is_idempotent(self, services, event, clock, store):
        clock.now = event.ends_at + timedelta(minutes=1)
        first = services.lifecycle.sweep()
        version = store.get_event(event.id).version
        second = services.lifecycle.sweep()
        assert [e.id for e in first] == [event.id]
        assert second == []
        assert store.get_event(event.id).version == version

    def test_sweep_never_touches_cancelled_events(self, services, organizer, event, clock, store):
        services.lifecycle.cancel_event(organizer, event.id)
        clock.now = event.ends_at + timedelta(days=1)
        assert services.lifecycle.sweep() == []
        assert store.get_event(event.id).status is EventStatus.CANCELLED

    def test_sweep_covers_every_organizer(self, services, organizer, other_organizer, clock, store):
        mine = create_event(services, organizer, date_time=EVENT_START)
        theirs = create_event(services, other_organizer, date_time=EVENT_START)
        clock.now = EVENT_START + timedelta(hours=3)
        moved = services.lifecycle.sweep()
        assert {e.id for e in moved} == {mine.id, theirs.id}

    def test_on_read_sweep_only_touches_callers_events(
        self, services, organizer, other_organizer, clock, store
    ):
        theirs = create_event(services, other_organizer, date_time=EVENT_START)
        clock.now = EVENT_START + timedelta(hours=3)
        services.lifecycle.list_my_events(organizer)
        assert store.get_event(theirs.id).status is EventStatus.OPEN

    def test_lost_race_is_skipped(self, services, event, clock, store, monkeypatch):
        """A concurrent writer winning the version check is not an error for the sweep."""
        clock.now = event.ends_at
        monkeypatch.setattr(store, "update_event_status", lambda *args, **kwargs: None)
        assert services.lifecycle.sweep() == []


class TestEventTransitions:
    """Tests for organizer-driven event transitions."""

    def test_finish_before_end_is_rejected(self, services, organizer, event, clock):
        clock.now = EVENT_START + timedelta(hours=1)
        with pytest.raises(InvalidStateError):
            services.lifecycle.mark_event_finished(organizer, event.id)

    def test_finish_after_end(self, services, organizer, event, clock):
        clock.now = event.ends_at + timedelta(minutes=5)
        finished = services.lifecycle.mark_event_finished(organizer, event.id)
        assert finished.status is EventStatus.FINISHED
        assert finished.version == event.version + 1

    def test_finish_twice_is_rejected(self, services, organizer, event, clock):
        clock.now = event.ends_at
        services.lifecycle.mark_event_finished(organizer, event.id)
        with pytest.raises(InvalidStateError):
            services.lifecycle.mark_event_finished(organizer, event.id)

    def test_other_organizers_event_is_not_found(self, services, other_organizer, event, clock):
        clock.now = event.ends_at
        with pytest.raises(EventNotFoundError):
            services.lifecycle.mark_event_finished(other_organizer, event.id)

    def test_unknown_event_is_not_found(self, services, organizer):
        with pytest.raises(EventNotFoundError):
            services.lifecycle.cancel_event(organizer, EventId.new())

    def test_start_only_once_running(self, services, organizer, event, clock):
        with pytest.raises(InvalidStateError):
            services.lifecycle.start_event(organizer, event.id)
        clock.now = EVENT_START + timedelta(minutes=10)
        started = services.lifecycle.start_event(organizer, event.id)
        assert started.status is EventStatus.IN_PROGRESS

    def test_in_progress_event_is_swept_to_finished(self, services, organizer, event, clock, store):
        clock.now = EVENT_START
        services.lifecycle.start_event(organizer, event.id)
        clock.now = event.ends_at
        services.lifecycle.sweep()
        assert store.get_event(event.id).status is EventStatus.FINISHED

    def test_cancel_is_terminal(self, services, organizer, event):
        cancelled = services.lifecycle.cancel_event(organizer, event.id)
        assert cancelled.status is EventStatus.CANCELLED
        with pytest.raises(InvalidStateError):
            services.lifecycle.cancel_event(organizer, event.id)

    def test_concurrent_modification_is_reported(self, services, organizer, event, store, monkeypatch):
        monkeypatch.setattr(store, "update_event_status", lambda *args, **kwargs: None)
        with pytest.raises(InvalidStateError, match="modified concurrently"):
            services.lifecycle.cancel_event(organizer, event.id)


class TestApplyToEvent:
    """Tests for LifecycleService.apply_to_event"""

    def test_creates_pending_booking(self, services, speaker_ctx, speaker, event):
        booking = services.lifecycle.apply_to_event(
            speaker_ctx, event.id, message="  Happy to help  ", proposed_rate="200"
        )
        assert booking.status is BookingStatus.PENDING
        assert booking.speaker_id == speaker.id
        assert booking.organizer_id == event.organizer_id
        assert booking.message == "Happy to help"
        assert booking.agreed_rate.amount == Decimal("200")

    def test_caller_without_speaker_profile(self, services, organizer, event):
        with pytest.raises(ValidationError) as exc_info:
            services.lifecycle.apply_to_event(organizer, event.id)
        assert exc_info.value.field == "speaker_id"

    def test_negative_rate_is_rejected(self, services, speaker_ctx, event):
        with pytest.raises(ValidationError) as exc_info:
            services.lifecycle.apply_to_event(speaker_ctx, event.id, proposed_rate="-10")
        assert exc_info.value.field == "proposed_rate"

    def test_event_must_be_open(self, services, organizer, speaker_ctx, event):
        services.lifecycle.cancel_event(organizer, event.id)
        with pytest.raises(InvalidStateError):
            services.lifecycle.apply_to_event(speaker_ctx, event.id)

    def test_unavailable_speaker_is_rejected(self, services, store, event):
        busy = add_speaker(store, available=False)
        ctx = RequestContext(profile_id=busy.profile_id, speaker_id=busy.id)
        with pytest.raises(InvalidStateError):
            services.lifecycle.apply_to_event(ctx, event.id)

    def test_one_active_booking_per_event_and_speaker(self, services, speaker_ctx, event, store):
        services.lifecycle.apply_to_event(speaker_ctx, event.id)
        with pytest.raises(InvalidStateError):
            services.lifecycle.apply_to_event(speaker_ctx, event.id)
        assert len(store.list_bookings(event_ids=[event.id])) == 1

    def test_reapply_after_rejection(self, services, organizer, speaker_ctx, event, clock, store):
        first = services.lifecycle.apply_to_event(speaker_ctx, event.id)
        services.lifecycle.reject_booking(organizer, first.id)
        clock.advance(minutes=1)
        second = services.lifecycle.apply_to_event(speaker_ctx, event.id)
        statuses = [b.status for b in store.list_bookings(event_ids=[event.id])]
        assert second.status is BookingStatus.PENDING
        assert statuses == [BookingStatus.PENDING, BookingStatus.REJECTED]

    def test_store_enforces_uniqueness(self, store, event, speaker):
        add_booking(store, event, speaker, BookingStatus.ACCEPTED)
        with pytest.raises(UniqueConflictError):
            add_booking(store, event, speaker, BookingStatus.PENDING)
        add_booking(store, event, speaker, BookingStatus.REJECTED)


class TestBookingTransitions:
    """Tests for accept/reject/payment."""

    @pytest.fixture
    def booking(self, services, speaker_ctx, event):
        return services.lifecycle.apply_to_event(speaker_ctx, event.id)

    def test_accept_then_pay(self, services, organizer, booking):
        accepted = services.lifecycle.accept_booking(organizer, booking.id)
        paid = services.lifecycle.confirm_payment(organizer, booking.id)
        assert accepted.status is BookingStatus.ACCEPTED
        assert paid.status is BookingStatus.PAID
        assert paid.version == booking.version + 2

    def test_pending_cannot_be_paid(self, services, organizer, booking, store):
        with pytest.raises(InvalidStateError):
            services.lifecycle.confirm_payment(organizer, booking.id)
        assert store.get_booking(booking.id).status is BookingStatus.PENDING

    def test_pending_cannot_be_completed(self, services, organizer, booking, clock):
        clock.now = EVENT_START + timedelta(hours=5)
        with pytest.raises(InvalidStateError):
            services.lifecycle.complete_engagement(organizer, booking.id)

    def test_decisions_are_final(self, services, organizer, booking):
        services.lifecycle.reject_booking(organizer, booking.id)
        with pytest.raises(InvalidStateError):
            services.lifecycle.accept_booking(organizer, booking.id)
        with pytest.raises(InvalidStateError):
            services.lifecycle.reject_booking(organizer, booking.id)

    def test_accepting_twice_is_rejected(self, services, organizer, booking):
        services.lifecycle.accept_booking(organizer, booking.id)
        with pytest.raises(InvalidStateError):
            services.lifecycle.accept_booking(organizer, booking.id)

    def test_other_organizer_cannot_decide(self, services, other_organizer, booking):
        with pytest.raises(BookingNotFoundError):
            services.lifecycle.accept_booking(other_organizer, booking.id)

    def test_concurrent_decision_is_reported(self, services, organizer, booking, store, monkeypatch):
        monkeypatch.setattr(store, "update_booking", lambda *args, **kwargs: None)
        with pytest.raises(InvalidStateError, match="modified concurrently"):
            services.lifecycle.accept_booking(organizer, booking.id)


class TestCompleteEngagement:
    """Tests for the completion workflow."""

    @pytest.fixture
    def paid(self, services, organizer, speaker_ctx, event):
        booking = services.lifecycle.apply_to_event(speaker_ctx, event.id)
        services.lifecycle.accept_booking(organizer, booking.id)
        return services.lifecycle.confirm_payment(organizer, booking.id)

    def test_waits_for_grace_period(self, services, organizer, event, paid, clock, store):
        clock.now = event.ends_at + timedelta(hours=1, minutes=59)
        with pytest.raises(InvalidStateError):
            services.lifecycle.complete_engagement(organizer, paid.id)
        assert store.get_booking(paid.id).status is BookingStatus.PAID
        assert store.get_event(event.id).status is EventStatus.OPEN

    def test_completes_event_and_booking(self, services, organizer, event, paid, clock, store):
        clock.now = event.ends_at + timedelta(hours=2)
        booking = services.lifecycle.complete_engagement(
            organizer, paid.id, reviewer_notes="Rating: 4/5 stars. Feedback: Solid"
        )
        assert booking.status is BookingStatus.COMPLETED
        assert booking.reviewer_notes == "Rating: 4/5 stars. Feedback: Solid"
        assert store.get_event(event.id).status is EventStatus.COMPLETED

    def test_cancelled_event_cannot_be_completed(self, services, organizer, event, paid, clock):
        services.lifecycle.cancel_event(organizer, event.id)
        clock.now = event.ends_at + timedelta(hours=3)
        with pytest.raises(InvalidStateError):
            services.lifecycle.complete_engagement(organizer, paid.id)

    def test_second_speaker_on_completed_event(
        self, services, organizer, event, paid, clock, store
    ):
        other = add_speaker(store)
        other_ctx = RequestContext(profile_id=other.profile_id, speaker_id=other.id)
        second = services.lifecycle.apply_to_event(other_ctx, event.id)
        services.lifecycle.accept_booking(organizer, second.id)
        services.lifecycle.confirm_payment(organizer, second.id)

        clock.now = event.ends_at + timedelta(hours=3)
        services.lifecycle.complete_engagement(organizer, paid.id)
        completed = services.lifecycle.complete_engagement(organizer, second.id)
        assert completed.status is BookingStatus.COMPLETED
        assert store.get_event(event.id).status is EventStatus.COMPLETED

    def test_completed_booking_cannot_complete_again(self, services, organizer, event, paid, clock):
        clock.now = event.ends_at + timedelta(hours=3)
        services.lifecycle.complete_engagement(organizer, paid.id)
        with pytest.raises(InvalidStateError):
            services.lifecycle.complete_engagement(organizer, paid.id)


class TestWorkedExample:
    """The end-to-end engagement from application to review."""

    @SWEEP_TRIGGERS
    def test_engagement_lifecycle(self, services, organizer, speaker_ctx, event, clock, store, trigger):
        booking = services.lifecycle.apply_to_event(speaker_ctx, event.id)
        services.lifecycle.accept_booking(organizer, booking.id)

        booking = services.lifecycle.confirm_payment(organizer, booking.id)
        assert booking.status is BookingStatus.PAID

        clock.now = EVENT_START + timedelta(hours=2, minutes=1)
        trigger(services, organizer)
        assert store.get_event(event.id).status is EventStatus.FINISHED

        clock.now = EVENT_START + timedelta(hours=4)
        booking = services.lifecycle.complete_engagement(organizer, booking.id)
        assert booking.status is BookingStatus.COMPLETED
        assert store.get_event(event.id).status is EventStatus.COMPLETED

        reviewed = services.reviews.submit_review(organizer, booking.id, 5, "Great talk")
        assert reviewed.organizer_rating.value == 5
        assert reviewed.organizer_feedback == "Great talk"
        with pytest.raises(AlreadyReviewedError):
            services.reviews.submit_review(organizer, booking.id, 5, "Great talk")


class TestEventViews:
    """Tests for list_my_events and list_inviteable_events."""

    def test_lists_own_events_with_counts(self, services, organizer, other_organizer, store):
        later = create_event(services, organizer, title="Later", date_time=EVENT_START + timedelta(days=2))
        sooner = create_event(services, organizer, title="Sooner", date_time=EVENT_START)
        create_event(services, other_organizer, title="Not mine")
        for status in (BookingStatus.PENDING, BookingStatus.ACCEPTED, BookingStatus.REJECTED):
            add_booking(store, sooner, add_speaker(store), status)

        summaries = services.lifecycle.list_my_events(organizer)

        assert [s.event.id for s in summaries] == [sooner.id, later.id]
        counts = summaries[0]
        assert (counts.application_count, counts.pending_count, counts.confirmed_count) == (3, 1, 1)
        assert (summaries[1].application_count, summaries[1].confirmed_count) == (0, 0)

    def test_filters_by_status_and_search(self, services, organizer):
        workshop = create_event(services, organizer, title="Django Workshop")
        talk = create_event(services, organizer, title="Keynote", description="All about DJANGO")
        services.lifecycle.cancel_event(organizer, talk.id)

        open_ids = [s.event.id for s in services.lifecycle.list_my_events(organizer, status=EventStatus.OPEN)]
        found = [s.event.id for s in services.lifecycle.list_my_events(organizer, search="django")]
        assert open_ids == [workshop.id]
        assert set(found) == {workshop.id, talk.id}

    def test_inviteable_events_are_future_and_open(self, services, organizer, clock):
        future = create_event(services, organizer, date_time=EVENT_START)
        create_event(services, organizer, date_time=T0 - timedelta(hours=1))
        cancelled = create_event(services, organizer, date_time=EVENT_START + timedelta(days=1))
        services.lifecycle.cancel_event(organizer, cancelled.id)
        assert [e.id for e in services.lifecycle.list_inviteable_events(organizer)] == [future.id]


class TestBookingViews:
    """Tests for the applications, confirmed and past-events views."""

    def test_applications_and_confirmed_split(self, services, organizer, event, store):
        statuses = [
            BookingStatus.PENDING,
            BookingStatus.ACCEPTED,
            BookingStatus.PAID,
            BookingStatus.REJECTED,
        ]
        for minutes, status in enumerate(statuses):
            add_booking(store, event, add_speaker(store), status, created_at=T0 + timedelta(minutes=minutes))

        applications, confirmed = services.lifecycle.list_event_bookings(organizer, event.id)
        assert {b.status for b in applications} == {
            BookingStatus.PENDING,
            BookingStatus.ACCEPTED,
            BookingStatus.REJECTED,
        }
        assert {b.status for b in confirmed} == {BookingStatus.ACCEPTED, BookingStatus.PAID}
        assert {b.id for b in services.lifecycle.list_bookings_for_organizer(organizer)} == {
            b.id for b in applications
        }
        assert {b.id for b in services.lifecycle.list_confirmed_speakers(organizer, event.id)} == {
            b.id for b in confirmed
        }

    def test_views_are_scoped_to_the_organizer(self, services, other_organizer, event, speaker, store):
        add_booking(store, event, speaker, BookingStatus.ACCEPTED)
        assert services.lifecycle.list_bookings_for_organizer(other_organizer) == []
        assert services.lifecycle.list_confirmed_speakers(other_organizer) == []
        with pytest.raises(EventNotFoundError):
            services.lifecycle.list_event_bookings(other_organizer, event.id)

    def test_past_events_newest_first_and_limited(self, services, organizer, speaker, store):
        events = [
            create_event(services, organizer, date_time=EVENT_START + timedelta(days=day))
            for day in range(3)
        ]
        for day, event in enumerate(events):
            add_booking(store, event, speaker, BookingStatus.COMPLETED, created_at=T0 + timedelta(days=day))
        add_booking(store, create_event(services, organizer), speaker, BookingStatus.PAID)

        past = services.lifecycle.list_speaker_past_events(speaker.id, limit=2)
        assert [b.event_id for b in past] == [events[2].id, events[1].id]
