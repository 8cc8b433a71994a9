from django.urls import path

from engagements.handlers import (
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

urlpatterns = [
    path("events", EventListView.as_view(), name="event-list"),
    path("events/inviteable", InviteableEventListView.as_view(), name="event-inviteable"),
    path(
        "events/<str:event_id>/bookings",
        EventBookingsView.as_view(),
        name="event-bookings",
    ),
    path("events/<str:event_id>/apply", EventApplyView.as_view(), name="event-apply"),
    path(
        "events/<str:event_id>/finish",
        EventTransitionView.as_view(),
        {"transition": "finish"},
        name="event-finish",
    ),
    path(
        "events/<str:event_id>/start",
        EventTransitionView.as_view(),
        {"transition": "start"},
        name="event-start",
    ),
    path(
        "events/<str:event_id>/cancel",
        EventTransitionView.as_view(),
        {"transition": "cancel"},
        name="event-cancel",
    ),
    path("bookings", BookingListView.as_view(), name="booking-list"),
    path("bookings/confirmed", ConfirmedSpeakerListView.as_view(), name="booking-confirmed"),
    path(
        "bookings/<str:booking_id>/accept",
        BookingTransitionView.as_view(),
        {"transition": "accept"},
        name="booking-accept",
    ),
    path(
        "bookings/<str:booking_id>/reject",
        BookingTransitionView.as_view(),
        {"transition": "reject"},
        name="booking-reject",
    ),
    path(
        "bookings/<str:booking_id>/payment",
        BookingTransitionView.as_view(),
        {"transition": "payment"},
        name="booking-payment",
    ),
    path(
        "bookings/<str:booking_id>/complete",
        BookingCompleteView.as_view(),
        name="booking-complete",
    ),
    path("bookings/<str:booking_id>/review", BookingReviewView.as_view(), name="booking-review"),
    path("invitations", InvitationListView.as_view(), name="invitation-list"),
    path(
        "invitations/<str:invitation_id>",
        InvitationDetailView.as_view(),
        name="invitation-detail",
    ),
    path(
        "invitations/<str:invitation_id>/accept",
        InvitationAcceptView.as_view(),
        name="invitation-accept",
    ),
    path(
        "speakers/<str:speaker_id>/reviews",
        SpeakerReviewListView.as_view(),
        name="speaker-reviews",
    ),
    path("speakers/<str:speaker_id>/stats", SpeakerStatsView.as_view(), name="speaker-stats"),
    path(
        "speakers/<str:speaker_id>/past-events",
        SpeakerPastEventsView.as_view(),
        name="speaker-past-events",
    ),
]
