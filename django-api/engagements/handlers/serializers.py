"""Serializers for transforming domain models to API responses, and request bodies to plain values."""

from rest_framework import serializers


class EventSerializer(serializers.Serializer):
    """Serializer for Event domain model."""

    id = serializers.UUIDField(source="id.value")
    organizer_id = serializers.UUIDField(source="organizer_id.value")
    title = serializers.CharField()
    description = serializers.CharField()
    event_type = serializers.CharField(source="event_type.value")
    format = serializers.CharField(source="format.value")
    location = serializers.CharField(allow_null=True)
    date_time = serializers.DateTimeField()
    ends_at = serializers.DateTimeField()
    duration_hours = serializers.DecimalField(source="duration.hours", max_digits=6, decimal_places=2)
    budget_min = serializers.DecimalField(
        source="budget_min.amount", max_digits=12, decimal_places=2, allow_null=True
    )
    budget_max = serializers.DecimalField(
        source="budget_max.amount", max_digits=12, decimal_places=2, allow_null=True
    )
    required_topics = serializers.SerializerMethodField()
    status = serializers.CharField(source="status.value")
    created_at = serializers.DateTimeField()

    def get_required_topics(self, event) -> list[str]:
        return sorted(event.required_topics)


class EventSummarySerializer(serializers.Serializer):
    """Serializer for an event with its derived booking counts."""

    event = EventSerializer()
    application_count = serializers.IntegerField()
    pending_count = serializers.IntegerField()
    confirmed_count = serializers.IntegerField()


class BookingSerializer(serializers.Serializer):
    """Serializer for Booking domain model."""

    id = serializers.UUIDField(source="id.value")
    event_id = serializers.UUIDField(source="event_id.value")
    speaker_id = serializers.UUIDField(source="speaker_id.value")
    organizer_id = serializers.UUIDField(source="organizer_id.value")
    status = serializers.CharField(source="status.value")
    agreed_rate = serializers.DecimalField(
        source="agreed_rate.amount", max_digits=12, decimal_places=2, allow_null=True
    )
    message = serializers.CharField(allow_null=True)
    organizer_rating = serializers.IntegerField(source="organizer_rating.value", allow_null=True)
    organizer_feedback = serializers.CharField(allow_null=True)
    reviewed_at = serializers.DateTimeField(allow_null=True)
    created_at = serializers.DateTimeField()


class InvitationSerializer(serializers.Serializer):
    """Serializer for Invitation domain model."""

    id = serializers.UUIDField(source="id.value")
    event_id = serializers.UUIDField(source="event_id.value")
    speaker_id = serializers.UUIDField(source="speaker_id.value")
    organizer_id = serializers.UUIDField(source="organizer_id.value")
    message = serializers.CharField(allow_null=True)
    proposed_rate = serializers.DecimalField(
        source="proposed_rate.amount", max_digits=12, decimal_places=2, allow_null=True
    )
    created_at = serializers.DateTimeField()


class ReviewEntrySerializer(serializers.Serializer):
    """Serializer for one entry of a speaker's review feed."""

    id = serializers.CharField()
    rating = serializers.IntegerField(allow_null=True)
    comment = serializers.CharField(allow_null=True)
    created_at = serializers.DateTimeField()
    source = serializers.CharField(source="source.value")
    event_id = serializers.UUIDField(source="event_id.value", allow_null=True)
    reviewer_id = serializers.UUIDField(source="reviewer_id.value", allow_null=True)


class SpeakerStatsSerializer(serializers.Serializer):
    speaker_id = serializers.UUIDField(source="speaker_id.value")
    average_rating = serializers.FloatField()
    rating_count = serializers.IntegerField()
    total_talks = serializers.IntegerField()


# Request bodies


class EventCreateSerializer(serializers.Serializer):
    title = serializers.CharField(max_length=255)
    description = serializers.CharField(required=False, allow_blank=True, default="")
    event_type = serializers.CharField()
    format = serializers.CharField()
    location = serializers.CharField(required=False, allow_null=True, allow_blank=True, default=None)
    date_time = serializers.DateTimeField()
    duration_hours = serializers.DecimalField(max_digits=6, decimal_places=2)
    budget_min = serializers.DecimalField(
        max_digits=12, decimal_places=2, required=False, allow_null=True, default=None
    )
    budget_max = serializers.DecimalField(
        max_digits=12, decimal_places=2, required=False, allow_null=True, default=None
    )
    required_topics = serializers.ListField(
        child=serializers.CharField(max_length=100), required=False, default=list
    )


class ApplicationSerializer(serializers.Serializer):
    message = serializers.CharField(required=False, allow_null=True, allow_blank=True, default=None)
    proposed_rate = serializers.DecimalField(
        max_digits=12, decimal_places=2, required=False, allow_null=True, default=None
    )


class CompletionSerializer(serializers.Serializer):
    reviewer_notes = serializers.CharField(
        required=False, allow_null=True, allow_blank=True, default=None
    )


class ReviewSubmitSerializer(serializers.Serializer):
    rating = serializers.IntegerField()
    feedback = serializers.CharField(required=False, allow_null=True, allow_blank=True, default=None)


class SpeakerReviewSerializer(serializers.Serializer):
    rating = serializers.IntegerField()
    comment = serializers.CharField(required=False, allow_null=True, allow_blank=True, default=None)


class InvitationCreateSerializer(serializers.Serializer):
    speaker_id = serializers.UUIDField()
    event_id = serializers.UUIDField()
    message = serializers.CharField(required=False, allow_null=True, allow_blank=True, default=None)
    proposed_rate = serializers.DecimalField(
        max_digits=12, decimal_places=2, required=False, allow_null=True, default=None
    )
