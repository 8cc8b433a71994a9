"""Service wiring.

Handlers build services over the Django store; tests pass an in-memory store
and a fixed clock.
"""

from dataclasses import dataclass

from django.utils import timezone

from engagements.services.aggregation_service import AggregationService
from engagements.services.common import Clock
from engagements.services.invitation_service import InvitationService
from engagements.services.lifecycle_service import LifecycleService
from engagements.services.review_service import ReviewService
from engagements.stores.interfaces import EngagementStore


@dataclass(frozen=True)
class Services:
    lifecycle: LifecycleService
    aggregation: AggregationService
    invitations: InvitationService
    reviews: ReviewService


def build_services(store: EngagementStore | None = None, clock: Clock = timezone.now) -> Services:
    if store is None:
        from engagements.stores.django_store import DjangoEngagementStore

        store = DjangoEngagementStore()
    aggregation = AggregationService(store)
    return Services(
        lifecycle=LifecycleService(store, aggregation, clock=clock),
        aggregation=aggregation,
        invitations=InvitationService(store, clock=clock),
        reviews=ReviewService(store, clock=clock),
    )


__all__ = [
    "AggregationService",
    "InvitationService",
    "LifecycleService",
    "ReviewService",
    "Services",
    "build_services",
]
