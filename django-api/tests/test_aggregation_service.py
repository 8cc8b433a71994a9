"""Service tests for derived counts, review feeds and speaker stats."""

import logging
from datetime import timedelta

import pytest
from conftest import T0, add_booking, add_speaker, create_event

from engagements.domain import BookingStatus, Rating, ReviewSource, SpeakerId
from engagements.domain.errors import SpeakerNotFoundError
from engagements.services.aggregation_service import event_counts


def booking_with(store, services, organizer, speaker, status=BookingStatus.COMPLETED, at=T0, **changes):
    """A booking on a fresh event, updated with ``changes`` at time ``at``."""
    booking = add_booking(store, create_event(services, organizer), speaker, status)
    if changes:
        booking = store.update_booking(booking.id, booking.version, at, **changes)
    return booking


class TestEventCounts:
    """Tests for event_counts"""

    def test_counts_example(self, services, organizer, store):
        event = create_event(services, organizer)
        bookings = [
            add_booking(store, event, add_speaker(store), status)
            for status in (BookingStatus.PENDING, BookingStatus.ACCEPTED, BookingStatus.REJECTED)
        ]
        counts = event_counts(bookings)
        assert counts.application_count == 3
        assert counts.pending_count == 1
        assert counts.confirmed_count == 1

    def test_paid_counts_as_confirmed(self, services, organizer, store):
        event = create_event(services, organizer)
        bookings = [
            add_booking(store, event, add_speaker(store), status)
            for status in (BookingStatus.PAID, BookingStatus.COMPLETED)
        ]
        counts = event_counts(bookings)
        assert (counts.application_count, counts.pending_count, counts.confirmed_count) == (2, 0, 1)

    def test_no_bookings(self):
        counts = event_counts([])
        assert (counts.application_count, counts.pending_count, counts.confirmed_count) == (0, 0, 0)


class TestEventSummaries:
    """Tests for AggregationService.event_summaries"""

    def test_reads_bookings_once(self, services, organizer, store, monkeypatch):
        events = [create_event(services, organizer) for _ in range(3)]
        for event in events:
            add_booking(store, event, add_speaker(store), BookingStatus.PENDING)

        calls = []
        list_bookings = store.list_bookings

        def counting(*args, **kwargs):
            calls.append(kwargs)
            return list_bookings(*args, **kwargs)

        monkeypatch.setattr(store, "list_bookings", counting)
        summaries = services.aggregation.event_summaries(events)

        assert len(calls) == 1
        assert [s.pending_count for s in summaries] == [1, 1, 1]

    def test_empty_input_skips_the_store(self, services):
        assert services.aggregation.event_summaries([]) == []


class TestSpeakerReviewFeed:
    """Tests for AggregationService.speaker_review_feed"""

    def test_merges_reviews_and_booking_feedback_newest_first(
        self, services, organizer, speaker, store, clock
    ):
        clock.now = T0 + timedelta(hours=1)
        review = services.reviews.add_review(organizer, speaker.id, 4, "Nice session")
        structured = booking_with(
            store,
            services,
            organizer,
            speaker,
            at=T0 + timedelta(hours=2),
            organizer_rating=Rating(5),
            organizer_feedback="Great talk",
            reviewed_at=T0 + timedelta(hours=2),
        )
        noted = booking_with(
            store,
            services,
            organizer,
            speaker,
            at=T0 + timedelta(minutes=30),
            reviewer_notes="Rating: 3/5 stars. Feedback: Good pacing",
        )
        booking_with(store, services, organizer, speaker, status=BookingStatus.PAID)

        feed = services.aggregation.speaker_review_feed(speaker.id)

        assert [(e.rating, e.comment) for e in feed] == [
            (5, "Great talk"),
            (4, "Nice session"),
            (3, "Good pacing"),
        ]
        assert [e.source for e in feed] == [
            ReviewSource.BOOKINGS,
            ReviewSource.REVIEWS,
            ReviewSource.BOOKINGS,
        ]
        assert feed[0].id == f"booking-{structured.id}"
        assert feed[0].event_id == structured.event_id
        assert feed[1].id == str(review.id)
        assert feed[2].created_at == noted.updated_at

    def test_structured_rating_wins_over_notes(self, services, organizer, speaker, store):
        booking_with(
            store,
            services,
            organizer,
            speaker,
            reviewer_notes="Rating: 1/5 stars.",
            organizer_rating=Rating(4),
            organizer_feedback=None,
        )
        [entry] = services.aggregation.speaker_review_feed(speaker.id)
        assert entry.rating == 4
        assert entry.comment is None

    def test_unparseable_note_is_listed_without_rating(
        self, services, organizer, speaker, store, caplog
    ):
        booking_with(store, services, organizer, speaker, reviewer_notes="Arrived late, still fine")
        with caplog.at_level(logging.WARNING, logger="engagements"):
            [entry] = services.aggregation.speaker_review_feed(speaker.id)
        assert entry.rating is None
        assert entry.comment == "Arrived late, still fine"
        assert "excluded from averages" in caplog.text

    def test_unknown_speaker(self, services):
        with pytest.raises(SpeakerNotFoundError):
            services.aggregation.speaker_review_feed(SpeakerId.new())


class TestSpeakerStats:
    """Tests for AggregationService.speaker_stats"""

    def test_average_excludes_unrated_notes(self, services, organizer, speaker, store):
        services.reviews.add_review(organizer, speaker.id, 4)
        booking_with(store, services, organizer, speaker, organizer_rating=Rating(5))
        booking_with(store, services, organizer, speaker, reviewer_notes="Rating: 2/5 stars.")
        booking_with(store, services, organizer, speaker, reviewer_notes="No score given")
        booking_with(store, services, organizer, speaker, status=BookingStatus.ACCEPTED)

        stats = services.aggregation.speaker_stats(speaker.id)

        assert stats.rating_count == 3
        assert stats.average_rating == pytest.approx(3.67)
        assert stats.total_talks == 3

    def test_no_ratings_yet(self, services, speaker):
        stats = services.aggregation.speaker_stats(speaker.id)
        assert stats.average_rating == 0.0
        assert stats.rating_count == 0
        assert stats.total_talks == 0

    def test_other_speakers_are_ignored(self, services, organizer, speaker, store):
        other = add_speaker(store)
        booking_with(store, services, organizer, other, organizer_rating=Rating(1))
        services.reviews.add_review(organizer, speaker.id, 5)
        stats = services.aggregation.speaker_stats(speaker.id)
        assert (stats.average_rating, stats.rating_count, stats.total_talks) == (5.0, 1, 0)
