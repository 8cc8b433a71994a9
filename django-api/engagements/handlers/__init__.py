from engagements.handlers.views import (
    BookingCompleteView,
    BookingListView,
    BookingReviewView,
    BookingTransitionView,
    ConfirmedSpeakerListView,
    EventApplyView,
    EventBookingsView,
    EventListView,
    EventTransitionView,
    InvitationAcceptView,
    InvitationDetailView,
    InvitationListView,
    InviteableEventListView,
    SpeakerPastEventsView,
    SpeakerReviewListView,
    SpeakerStatsView,
)

__all__ = [
    "BookingCompleteView",
    "BookingListView",
    "BookingReviewView",
    "BookingTransitionView",
    "ConfirmedSpeakerListView",
    "EventApplyView",
    "EventBookingsView",
    "EventListView",
    "EventTransitionView",
    "InvitationAcceptView",
    "InvitationDetailView",
    "InvitationListView",
    "InviteableEventListView",
    "SpeakerPastEventsView",
    "SpeakerReviewListView",
    "SpeakerStatsView",
]
