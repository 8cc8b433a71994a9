"""Cache keys for speaker read views and their invalidation from the change feed."""

import logging

from django.core.cache import cache

from engagements.notifications import ChangeFeed, ChangeNotice, Subscription

logger = logging.getLogger(__name__)


def speaker_reviews_key(speaker_id: object) -> str:
    return f"speakers:{speaker_id}:reviews"


def speaker_stats_key(speaker_id: object) -> str:
    return f"speakers:{speaker_id}:stats"


def invalidate_speaker(speaker_id: str) -> None:
    cache.delete_many([speaker_reviews_key(speaker_id), speaker_stats_key(speaker_id)])
    logger.debug(f"Invalidated cached views for speaker {speaker_id}")


def _on_booking_change(notice: ChangeNotice) -> None:
    speaker_id = notice.fields.get("speaker_id")
    if speaker_id:
        invalidate_speaker(speaker_id)


def _on_review_change(notice: ChangeNotice) -> None:
    speaker_id = notice.fields.get("reviewee_id")
    if speaker_id:
        invalidate_speaker(speaker_id)


def register_invalidation(feed: ChangeFeed) -> list[Subscription]:
    """Drop a speaker's cached reviews and stats whenever their bookings or reviews change."""
    return [
        feed.subscribe("bookings", _on_booking_change),
        feed.subscribe("reviews", _on_review_change),
    ]
