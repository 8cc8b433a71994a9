from engagements.domain.models import (
    Booking,
    BookingStatus,
    Event,
    EventFormat,
    EventStatus,
    EventSummary,
    EventType,
    ExperienceLevel,
    Invitation,
    Review,
    ReviewEntry,
    ReviewSource,
    Speaker,
    SpeakerStats,
)
from engagements.domain.value_objects import (
    BookingId,
    Duration,
    EventId,
    InvitationId,
    Money,
    ProfileId,
    Rating,
    ReviewId,
    SpeakerId,
)

__all__ = [
    "Booking",
    "BookingStatus",
    "Event",
    "EventFormat",
    "EventStatus",
    "EventSummary",
    "EventType",
    "ExperienceLevel",
    "Invitation",
    "Review",
    "ReviewEntry",
    "ReviewSource",
    "Speaker",
    "SpeakerStats",
    "BookingId",
    "EventId",
    "InvitationId",
    "ProfileId",
    "ReviewId",
    "SpeakerId",
    "Money",
    "Rating",
    "Duration",
]
