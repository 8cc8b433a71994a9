"""Django signals feeding the change-notification feed.

Model saves and deletes (inserts through the store, admin edits) are
published here. Conditional updates issued by DjangoEngagementStore bypass
model signals and are published by the store directly. Both publish on commit.
"""

from django.db.models.signals import post_delete, post_save
from django.dispatch import receiver

from engagements.models import Booking, Event, Invitation, Review, Speaker
from engagements.notifications import change_feed


@receiver([post_save, post_delete], sender=Event)
def publish_event_change(sender, instance, **kwargs):
    """Publish when an event is saved or deleted."""
    change_feed.publish_on_commit(
        "events", instance.pk, organizer_id=instance.organizer_id, status=instance.status
    )


@receiver([post_save, post_delete], sender=Speaker)
def publish_speaker_change(sender, instance, **kwargs):
    """Publish when a speaker profile is saved or deleted."""
    change_feed.publish_on_commit("speakers", instance.pk, profile_id=instance.profile_id)


@receiver([post_save, post_delete], sender=Booking)
def publish_booking_change(sender, instance, **kwargs):
    """Publish when a booking is saved or deleted."""
    change_feed.publish_on_commit(
        "bookings",
        instance.pk,
        event_id=instance.event_id,
        speaker_id=instance.speaker_id,
        organizer_id=instance.organizer_id,
        status=instance.status,
    )


@receiver([post_save, post_delete], sender=Invitation)
def publish_invitation_change(sender, instance, **kwargs):
    """Publish when an invitation is saved or deleted."""
    change_feed.publish_on_commit("invitations", instance.pk, speaker_id=instance.speaker_id)


@receiver([post_save, post_delete], sender=Review)
def publish_review_change(sender, instance, **kwargs):
    """Publish when a review is saved or deleted."""
    change_feed.publish_on_commit("reviews", instance.pk, reviewee_id=instance.reviewee_id)
