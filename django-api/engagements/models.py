"""Django ORM models (persistence layer).

These models handle database concerns. Domain logic lives in domain/.
Profiles are owned by an external identity service, so they are referenced
by UUID rather than by foreign key.
"""

import uuid

from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models
from django.db.models import Q
from django.utils import timezone


class Event(models.Model):
    """Persistence model for events."""

    class EventType(models.TextChoices):
        LECTURE = "lecture"
        SEMINAR = "seminar"
        WORKSHOP = "workshop"
        WEBINAR = "webinar"
        CONFERENCE = "conference"
        OTHER = "other"

    class Format(models.TextChoices):
        IN_PERSON = "in-person"
        VIRTUAL = "virtual"
        HYBRID = "hybrid"

    class Status(models.TextChoices):
        OPEN = "open"
        IN_PROGRESS = "in_progress"
        FINISHED = "finished"
        COMPLETED = "completed"
        CANCELLED = "cancelled"

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    organizer_id = models.UUIDField(db_index=True)
    title = models.CharField(max_length=255)
    description = models.TextField(blank=True)
    event_type = models.CharField(max_length=20, choices=EventType.choices)
    format = models.CharField(max_length=20, choices=Format.choices)
    location = models.CharField(max_length=255, blank=True, null=True)
    date_time = models.DateTimeField()
    duration_hours = models.DecimalField(max_digits=6, decimal_places=2)
    budget_min = models.DecimalField(max_digits=12, decimal_places=2, blank=True, null=True)
    budget_max = models.DecimalField(max_digits=12, decimal_places=2, blank=True, null=True)
    required_topics = models.JSONField(default=list, blank=True)
    status = models.CharField(max_length=20, choices=Status.choices, default=Status.OPEN)
    version = models.PositiveIntegerField(default=1)
    created_at = models.DateTimeField(default=timezone.now)
    updated_at = models.DateTimeField(default=timezone.now)

    class Meta:
        db_table = "events"
        ordering = ["date_time"]
        indexes = [
            models.Index(fields=["organizer_id", "date_time"], name="events_org_date_idx"),
            models.Index(fields=["status"], name="events_status_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=Q(duration_hours__gt=0), name="event_duration_positive"
            ),
            models.CheckConstraint(
                condition=Q(budget_min__isnull=True)
                | Q(budget_max__isnull=True)
                | Q(budget_min__lte=models.F("budget_max")),
                name="event_budget_range",
            ),
        ]

    def __str__(self) -> str:
        return self.title


class Speaker(models.Model):
    """Persistence model for speaker profiles."""

    class ExperienceLevel(models.TextChoices):
        BEGINNER = "beginner"
        INTERMEDIATE = "intermediate"
        EXPERT = "expert"

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    profile_id = models.UUIDField(unique=True)
    experience_level = models.CharField(
        max_length=20, choices=ExperienceLevel.choices, default=ExperienceLevel.BEGINNER
    )
    hourly_rate = models.DecimalField(max_digits=12, decimal_places=2, blank=True, null=True)
    available = models.BooleanField(default=True)
    verified = models.BooleanField(default=False)
    total_talks = models.PositiveIntegerField(default=0)
    average_rating = models.FloatField(
        default=0.0, validators=[MinValueValidator(0.0), MaxValueValidator(5.0)]
    )
    topics = models.JSONField(default=list, blank=True)
    primary_topic = models.CharField(max_length=100, blank=True, null=True)
    created_at = models.DateTimeField(default=timezone.now)

    class Meta:
        db_table = "speakers"

    def __str__(self) -> str:
        return f"Speaker {self.profile_id}"


class Booking(models.Model):
    """Persistence model for a speaker's engagement on an event."""

    class Status(models.TextChoices):
        PENDING = "pending"
        ACCEPTED = "accepted"
        REJECTED = "rejected"
        PAID = "paid"
        COMPLETED = "completed"

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    event = models.ForeignKey(Event, on_delete=models.PROTECT, related_name="bookings")
    speaker = models.ForeignKey(Speaker, on_delete=models.PROTECT, related_name="bookings")
    organizer_id = models.UUIDField(db_index=True)
    status = models.CharField(max_length=20, choices=Status.choices, default=Status.PENDING)
    agreed_rate = models.DecimalField(max_digits=12, decimal_places=2, blank=True, null=True)
    message = models.TextField(blank=True, null=True)
    organizer_rating = models.PositiveSmallIntegerField(
        blank=True, null=True, validators=[MinValueValidator(1), MaxValueValidator(5)]
    )
    organizer_feedback = models.TextField(blank=True, null=True)
    reviewer_notes = models.TextField(blank=True, null=True)
    reviewed_at = models.DateTimeField(blank=True, null=True)
    version = models.PositiveIntegerField(default=1)
    created_at = models.DateTimeField(default=timezone.now)
    updated_at = models.DateTimeField(default=timezone.now)

    class Meta:
        db_table = "bookings"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["organizer_id", "status"], name="bookings_org_status_idx"),
            models.Index(fields=["speaker", "status"], name="bookings_speaker_status_idx"),
        ]
        constraints = [
            models.UniqueConstraint(
                fields=["event", "speaker"],
                condition=~Q(status="rejected"),
                name="unique_active_booking",
            ),
            models.CheckConstraint(
                condition=Q(organizer_rating__isnull=True)
                | Q(organizer_rating__gte=1, organizer_rating__lte=5),
                name="booking_rating_range",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.speaker_id} @ {self.event_id} ({self.status})"


class Invitation(models.Model):
    """Persistence model for organizer invitations."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    event = models.ForeignKey(Event, on_delete=models.CASCADE, related_name="invitations")
    speaker = models.ForeignKey(Speaker, on_delete=models.CASCADE, related_name="invitations")
    organizer_id = models.UUIDField()
    message = models.TextField(blank=True, null=True)
    proposed_rate = models.DecimalField(max_digits=12, decimal_places=2, blank=True, null=True)
    created_at = models.DateTimeField(default=timezone.now)

    class Meta:
        db_table = "invitations"
        ordering = ["-created_at"]
        constraints = [
            models.UniqueConstraint(
                fields=["event", "speaker", "organizer_id"],
                name="unique_speaker_event_invitation",
            ),
        ]

    def __str__(self) -> str:
        return f"Invitation {self.speaker_id} -> {self.event_id}"


class Review(models.Model):
    """Persistence model for standalone speaker reviews."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    rating = models.PositiveSmallIntegerField(
        validators=[MinValueValidator(1), MaxValueValidator(5)]
    )
    comment = models.TextField(blank=True, null=True)
    reviewer_id = models.UUIDField()
    reviewee = models.ForeignKey(Speaker, on_delete=models.CASCADE, related_name="reviews")
    created_at = models.DateTimeField(default=timezone.now)

    class Meta:
        db_table = "reviews"
        ordering = ["-created_at"]
        constraints = [
            models.CheckConstraint(
                condition=Q(rating__gte=1, rating__lte=5), name="review_rating_range"
            ),
        ]

    def __str__(self) -> str:
        return f"{self.rating} stars for {self.reviewee_id}"
