"""Invitation service - organizer outreach with one invitation per (organizer, speaker, event)."""

import logging
from typing import Any

from django.utils import timezone

from engagements.context import RequestContext
from engagements.domain import (
    Booking,
    BookingId,
    BookingStatus,
    EventId,
    EventStatus,
    Invitation,
    InvitationId,
    SpeakerId,
)
from engagements.domain.errors import (
    DuplicateInvitationError,
    InvalidStateError,
    InvitationNotFoundError,
)
from engagements.domain.status import is_active
from engagements.services.common import (
    Clock,
    clean_text,
    optional_money,
    require_caller_speaker,
    require_event,
    require_speaker,
)
from engagements.stores.interfaces import EngagementStore, UniqueConflictError

logger = logging.getLogger(__name__)


class InvitationService:
    """Service for sending, withdrawing and accepting invitations."""

    def __init__(self, store: EngagementStore, clock: Clock = timezone.now) -> None:
        self._store = store
        self._clock = clock

    def send_invitation(
        self,
        ctx: RequestContext,
        speaker_id: SpeakerId,
        event_id: EventId,
        message: str | None = None,
        proposed_rate: Any = None,
    ) -> Invitation:
        """Invite a speaker to an open event.

        Invitations are keyed by (organizer, speaker, event): a second one for the
        same triple is rejected, never merged into the first, while a different
        organizer may invite the same speaker to the same event. Accepting still
        books the speaker under the event's own organizer.

        Raises:
            ValidationError: If the proposed rate is malformed.
            EventNotFoundError: If the event does not exist.
            SpeakerNotFoundError: If the speaker does not exist.
            InvalidStateError: If the event is not open or the speaker is already booked on it.
            DuplicateInvitationError: If the triple was already invited.
        """
        rate = optional_money("proposed_rate", proposed_rate)
        event = require_event(self._store, event_id)
        speaker = require_speaker(self._store, speaker_id)
        if event.status is not EventStatus.OPEN:
            raise InvalidStateError(
                "Invitations can only be sent for open events", current=event.status.value
            )
        if self._store.find_invitation(event.id, speaker.id, ctx.profile_id) is not None:
            raise DuplicateInvitationError()
        bookings = self._store.list_bookings(event_ids=[event.id], speaker_id=speaker.id)
        if any(is_active(booking) for booking in bookings):
            raise InvalidStateError("Speaker already has an active booking for this event")

        invitation = Invitation(
            id=InvitationId.new(),
            event_id=event.id,
            speaker_id=speaker.id,
            organizer_id=ctx.profile_id,
            message=clean_text(message),
            proposed_rate=rate,
            created_at=self._clock(),
        )
        try:
            invitation = self._store.insert_invitation(invitation)
        except UniqueConflictError as e:
            raise DuplicateInvitationError() from e
        logger.info(f"Invitation {invitation.id}: organizer {ctx.profile_id} invited speaker {speaker.id} to {event.id}")
        return invitation

    def withdraw_invitation(self, ctx: RequestContext, invitation_id: InvitationId) -> None:
        """Delete one of the caller's invitations, freeing the triple for a new one."""
        invitation = self._store.get_invitation(invitation_id)
        if invitation is None or invitation.organizer_id != ctx.profile_id:
            raise InvitationNotFoundError(invitation_id)
        if not self._store.delete_invitation(invitation_id):
            raise InvitationNotFoundError(invitation_id)
        logger.info(f"Invitation {invitation_id} withdrawn")

    def accept_invitation(self, ctx: RequestContext, invitation_id: InvitationId) -> Booking:
        """Turn an invitation addressed to the calling speaker into an accepted booking.

        Raises:
            InvitationNotFoundError: If the invitation does not exist or is addressed elsewhere.
            InvalidStateError: If the event is no longer open or the speaker is already booked.
        """
        speaker_id = require_caller_speaker(ctx)
        invitation = self._store.get_invitation(invitation_id)
        if invitation is None or invitation.speaker_id != speaker_id:
            raise InvitationNotFoundError(invitation_id)
        event = require_event(self._store, invitation.event_id)
        if event.status is not EventStatus.OPEN:
            raise InvalidStateError(
                "The event is no longer accepting speakers", current=event.status.value
            )

        now = self._clock()
        booking = Booking(
            id=BookingId.new(),
            event_id=event.id,
            speaker_id=speaker_id,
            organizer_id=event.organizer_id,
            status=BookingStatus.ACCEPTED,
            agreed_rate=invitation.proposed_rate,
            message=invitation.message,
            organizer_rating=None,
            organizer_feedback=None,
            reviewer_notes=None,
            reviewed_at=None,
            created_at=now,
            updated_at=now,
        )
        with self._store.atomic():
            try:
                booking = self._store.insert_booking(booking)
            except UniqueConflictError as e:
                raise InvalidStateError("Speaker already has an active booking for this event") from e
            self._store.delete_invitation(invitation_id)
        logger.info(f"Invitation {invitation_id} accepted; booking {booking.id} created")
        return booking

    def list_invitations_for_speaker(self, ctx: RequestContext) -> list[Invitation]:
        return self._store.list_invitations(require_caller_speaker(ctx))
