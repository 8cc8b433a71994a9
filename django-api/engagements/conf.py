"""Typed access to the ``ENGAGEMENTS`` settings dict."""

from datetime import timedelta

from django.conf import settings

DEFAULTS = {
    "COMPLETION_GRACE_HOURS": 2,
    "SWEEP_INTERVAL_SECONDS": 60,
    "PAST_EVENTS_LIMIT": 10,
    "REVIEW_CACHE_TIMEOUT": 300,
}


def _get(name: str):
    return getattr(settings, "ENGAGEMENTS", {}).get(name, DEFAULTS[name])


def completion_grace() -> timedelta:
    return timedelta(hours=float(_get("COMPLETION_GRACE_HOURS")))


def sweep_interval_seconds() -> float:
    return float(_get("SWEEP_INTERVAL_SECONDS"))


def past_events_limit() -> int:
    return int(_get("PAST_EVENTS_LIMIT"))


def review_cache_timeout() -> int:
    return int(_get("REVIEW_CACHE_TIMEOUT"))
