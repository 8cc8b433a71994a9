"""HTTP handlers (views) - handle HTTP concerns only.

Handlers:
- Parse requests and validate input format
- Build an explicit RequestContext from the caller's identity headers
- Call services for business logic
- Map domain errors to HTTP responses
- Never contain business logic
- Never expose internal error details
"""

import logging
from typing import Any

from django.core.cache import cache
from rest_framework import serializers, status
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from engagements import conf
from engagements.cache import speaker_reviews_key, speaker_stats_key
from engagements.context import RequestContext
from engagements.domain import BookingId, EventId, EventStatus, InvitationId, ProfileId, SpeakerId
from engagements.domain.errors import DomainError, ErrorCode, ValidationError
from engagements.handlers.serializers import (
    ApplicationSerializer,
    BookingSerializer,
    CompletionSerializer,
    EventCreateSerializer,
    EventSerializer,
    EventSummarySerializer,
    InvitationCreateSerializer,
    InvitationSerializer,
    ReviewEntrySerializer,
    ReviewSubmitSerializer,
    SpeakerReviewSerializer,
    SpeakerStatsSerializer,
)
from engagements.services import Services, build_services

logger = logging.getLogger(__name__)

PROFILE_HEADER = "X-Profile-Id"
SPEAKER_HEADER = "X-Speaker-Id"

HTTP_STATUS_BY_CODE = {
    ErrorCode.EVENT_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.BOOKING_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.SPEAKER_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.INVITATION_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.INVALID_STATE: status.HTTP_409_CONFLICT,
    ErrorCode.ALREADY_REVIEWED: status.HTTP_409_CONFLICT,
    ErrorCode.DUPLICATE_INVITATION: status.HTTP_409_CONFLICT,
    ErrorCode.VALIDATION_ERROR: status.HTTP_400_BAD_REQUEST,
    ErrorCode.STORE_UNAVAILABLE: status.HTTP_503_SERVICE_UNAVAILABLE,
}


def error_response(error: DomainError) -> Response:
    body: dict[str, Any] = {"code": error.code.value, "message": error.message}
    if isinstance(error, ValidationError):
        body["field"] = error.field
    return Response(body, status=HTTP_STATUS_BY_CODE[error.code])


def parse_id(id_class: Any, value: str, field: str) -> Any:
    try:
        return id_class.from_string(value)
    except (TypeError, ValueError) as e:
        raise ValidationError(field, "must be a valid UUID") from e


def parse_body(serializer_class: type[serializers.Serializer], data: Any) -> dict[str, Any]:
    """Validate a request body, reporting the first bad field as a domain ValidationError."""
    serializer = serializer_class(data=data)
    if not serializer.is_valid():
        field, messages = next(iter(serializer.errors.items()))
        raise ValidationError(field, str(messages[0]) if isinstance(messages, list) else str(messages))
    return serializer.validated_data


class EngagementAPIView(APIView):
    """Base handler: identity headers in, domain errors out."""

    def services(self) -> Services:
        return build_services()

    def context(self, request: Request) -> RequestContext:
        raw_profile = request.headers.get(PROFILE_HEADER)
        if not raw_profile:
            raise ValidationError("profile_id", f"{PROFILE_HEADER} header is required")
        profile_id = parse_id(ProfileId, raw_profile, "profile_id")
        raw_speaker = request.headers.get(SPEAKER_HEADER)
        speaker_id = parse_id(SpeakerId, raw_speaker, "speaker_id") if raw_speaker else None
        return RequestContext(profile_id=profile_id, speaker_id=speaker_id)

    def handle_exception(self, exc: Exception) -> Response:
        if isinstance(exc, DomainError):
            if exc.code is ErrorCode.STORE_UNAVAILABLE:
                logger.error(f"{self.__class__.__name__}: {exc}")
            return error_response(exc)
        return super().handle_exception(exc)


class EventListView(EngagementAPIView):
    """Handler for GET/POST /api/events"""

    def get(self, request: Request) -> Response:
        ctx = self.context(request)
        raw_status = request.query_params.get("status")
        event_status = None
        if raw_status and raw_status != "all":
            try:
                event_status = EventStatus(raw_status)
            except ValueError as e:
                raise ValidationError("status", "is not a known event status") from e
        summaries = self.services().lifecycle.list_my_events(
            ctx, status=event_status, search=request.query_params.get("search")
        )
        return Response(EventSummarySerializer(summaries, many=True).data)

    def post(self, request: Request) -> Response:
        ctx = self.context(request)
        data = parse_body(EventCreateSerializer, request.data)
        event = self.services().lifecycle.create_event(ctx, **data)
        return Response(EventSerializer(event).data, status=status.HTTP_201_CREATED)


class InviteableEventListView(EngagementAPIView):
    """Handler for GET /api/events/inviteable"""

    def get(self, request: Request) -> Response:
        events = self.services().lifecycle.list_inviteable_events(self.context(request))
        return Response(EventSerializer(events, many=True).data)


class EventBookingsView(EngagementAPIView):
    """Handler for GET /api/events/{event_id}/bookings"""

    def get(self, request: Request, event_id: str) -> Response:
        ctx = self.context(request)
        applications, confirmed = self.services().lifecycle.list_event_bookings(
            ctx, parse_id(EventId, event_id, "event_id")
        )
        return Response(
            {
                "applications": BookingSerializer(applications, many=True).data,
                "confirmed": BookingSerializer(confirmed, many=True).data,
            }
        )


class EventTransitionView(EngagementAPIView):
    """Handler for POST /api/events/{event_id}/{finish|start|cancel}"""

    transitions = {
        "finish": "mark_event_finished",
        "start": "start_event",
        "cancel": "cancel_event",
    }

    def post(self, request: Request, event_id: str, transition: str) -> Response:
        ctx = self.context(request)
        operation = getattr(self.services().lifecycle, self.transitions[transition])
        event = operation(ctx, parse_id(EventId, event_id, "event_id"))
        return Response(EventSerializer(event).data)


class EventApplyView(EngagementAPIView):
    """Handler for POST /api/events/{event_id}/apply"""

    def post(self, request: Request, event_id: str) -> Response:
        ctx = self.context(request)
        data = parse_body(ApplicationSerializer, request.data)
        booking = self.services().lifecycle.apply_to_event(
            ctx, parse_id(EventId, event_id, "event_id"), **data
        )
        return Response(BookingSerializer(booking).data, status=status.HTTP_201_CREATED)


class BookingListView(EngagementAPIView):
    """Handler for GET /api/bookings (applications view)"""

    def get(self, request: Request) -> Response:
        bookings = self.services().lifecycle.list_bookings_for_organizer(self.context(request))
        return Response(BookingSerializer(bookings, many=True).data)


class ConfirmedSpeakerListView(EngagementAPIView):
    """Handler for GET /api/bookings/confirmed"""

    def get(self, request: Request) -> Response:
        ctx = self.context(request)
        raw_event = request.query_params.get("event_id")
        event_id = parse_id(EventId, raw_event, "event_id") if raw_event else None
        bookings = self.services().lifecycle.list_confirmed_speakers(ctx, event_id)
        return Response(BookingSerializer(bookings, many=True).data)


class BookingTransitionView(EngagementAPIView):
    """Handler for POST /api/bookings/{booking_id}/{accept|reject|payment}"""

    transitions = {
        "accept": "accept_booking",
        "reject": "reject_booking",
        "payment": "confirm_payment",
    }

    def post(self, request: Request, booking_id: str, transition: str) -> Response:
        ctx = self.context(request)
        operation = getattr(self.services().lifecycle, self.transitions[transition])
        booking = operation(ctx, parse_id(BookingId, booking_id, "booking_id"))
        return Response(BookingSerializer(booking).data)


class BookingCompleteView(EngagementAPIView):
    """Handler for POST /api/bookings/{booking_id}/complete"""

    def post(self, request: Request, booking_id: str) -> Response:
        ctx = self.context(request)
        data = parse_body(CompletionSerializer, request.data)
        booking = self.services().lifecycle.complete_engagement(
            ctx, parse_id(BookingId, booking_id, "booking_id"), data["reviewer_notes"]
        )
        return Response(BookingSerializer(booking).data)


class BookingReviewView(EngagementAPIView):
    """Handler for POST /api/bookings/{booking_id}/review"""

    def post(self, request: Request, booking_id: str) -> Response:
        ctx = self.context(request)
        data = parse_body(ReviewSubmitSerializer, request.data)
        booking = self.services().reviews.submit_review(
            ctx, parse_id(BookingId, booking_id, "booking_id"), data["rating"], data["feedback"]
        )
        return Response(BookingSerializer(booking).data)


class InvitationListView(EngagementAPIView):
    """Handler for GET/POST /api/invitations"""

    def get(self, request: Request) -> Response:
        invitations = self.services().invitations.list_invitations_for_speaker(self.context(request))
        return Response(InvitationSerializer(invitations, many=True).data)

    def post(self, request: Request) -> Response:
        ctx = self.context(request)
        data = parse_body(InvitationCreateSerializer, request.data)
        invitation = self.services().invitations.send_invitation(
            ctx,
            SpeakerId(data["speaker_id"]),
            EventId(data["event_id"]),
            message=data["message"],
            proposed_rate=data["proposed_rate"],
        )
        return Response(InvitationSerializer(invitation).data, status=status.HTTP_201_CREATED)


class InvitationDetailView(EngagementAPIView):
    """Handler for DELETE /api/invitations/{invitation_id}"""

    def delete(self, request: Request, invitation_id: str) -> Response:
        ctx = self.context(request)
        self.services().invitations.withdraw_invitation(
            ctx, parse_id(InvitationId, invitation_id, "invitation_id")
        )
        return Response(status=status.HTTP_204_NO_CONTENT)


class InvitationAcceptView(EngagementAPIView):
    """Handler for POST /api/invitations/{invitation_id}/accept"""

    def post(self, request: Request, invitation_id: str) -> Response:
        ctx = self.context(request)
        booking = self.services().invitations.accept_invitation(
            ctx, parse_id(InvitationId, invitation_id, "invitation_id")
        )
        return Response(BookingSerializer(booking).data, status=status.HTTP_201_CREATED)


class SpeakerReviewListView(EngagementAPIView):
    """Handler for GET/POST /api/speakers/{speaker_id}/reviews"""

    def get(self, request: Request, speaker_id: str) -> Response:
        speaker = parse_id(SpeakerId, speaker_id, "speaker_id")
        key = speaker_reviews_key(speaker)
        data = cache.get(key)
        if data is None:
            entries = self.services().aggregation.speaker_review_feed(speaker)
            data = ReviewEntrySerializer(entries, many=True).data
            cache.set(key, data, conf.review_cache_timeout())
        return Response(data)

    def post(self, request: Request, speaker_id: str) -> Response:
        ctx = self.context(request)
        data = parse_body(SpeakerReviewSerializer, request.data)
        review = self.services().reviews.add_review(
            ctx, parse_id(SpeakerId, speaker_id, "speaker_id"), data["rating"], data["comment"]
        )
        return Response({"id": str(review.id)}, status=status.HTTP_201_CREATED)


class SpeakerStatsView(EngagementAPIView):
    """Handler for GET /api/speakers/{speaker_id}/stats"""

    def get(self, request: Request, speaker_id: str) -> Response:
        speaker = parse_id(SpeakerId, speaker_id, "speaker_id")
        key = speaker_stats_key(speaker)
        data = cache.get(key)
        if data is None:
            stats = self.services().aggregation.speaker_stats(speaker)
            data = SpeakerStatsSerializer(stats).data
            cache.set(key, data, conf.review_cache_timeout())
        return Response(data)


class SpeakerPastEventsView(EngagementAPIView):
    """Handler for GET /api/speakers/{speaker_id}/past-events"""

    def get(self, request: Request, speaker_id: str) -> Response:
        bookings = self.services().lifecycle.list_speaker_past_events(
            parse_id(SpeakerId, speaker_id, "speaker_id")
        )
        return Response(BookingSerializer(bookings, many=True).data)
