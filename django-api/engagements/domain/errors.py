"""Domain error codes for the engagements module."""

from dataclasses import dataclass
from enum import Enum


class ErrorCode(Enum):
    """Domain error codes."""

    EVENT_NOT_FOUND = "EVENT_NOT_FOUND"
    BOOKING_NOT_FOUND = "BOOKING_NOT_FOUND"
    SPEAKER_NOT_FOUND = "SPEAKER_NOT_FOUND"
    INVITATION_NOT_FOUND = "INVITATION_NOT_FOUND"
    INVALID_STATE = "INVALID_STATE"
    ALREADY_REVIEWED = "ALREADY_REVIEWED"
    DUPLICATE_INVITATION = "DUPLICATE_INVITATION"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    STORE_UNAVAILABLE = "STORE_UNAVAILABLE"


@dataclass(frozen=True)
class DomainError(Exception):
    """Base domain error with code and user-safe message."""

    code: ErrorCode
    message: str

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"


class NotFoundError(DomainError):
    """A referenced record does not exist (or is not visible to the caller)."""


class EventNotFoundError(NotFoundError):
    """Raised when an event is not found."""

    def __init__(self, event_id: object) -> None:
        super().__init__(
            code=ErrorCode.EVENT_NOT_FOUND,
            message="Event not found",
        )
        self.event_id = str(event_id)


class BookingNotFoundError(NotFoundError):
    """Raised when a booking is not found."""

    def __init__(self, booking_id: object) -> None:
        super().__init__(
            code=ErrorCode.BOOKING_NOT_FOUND,
            message="Booking not found",
        )
        self.booking_id = str(booking_id)


class SpeakerNotFoundError(NotFoundError):
    """Raised when a speaker is not found."""

    def __init__(self, speaker_id: object) -> None:
        super().__init__(
            code=ErrorCode.SPEAKER_NOT_FOUND,
            message="Speaker not found",
        )
        self.speaker_id = str(speaker_id)


class InvitationNotFoundError(NotFoundError):
    """Raised when an invitation is not found."""

    def __init__(self, invitation_id: object) -> None:
        super().__init__(
            code=ErrorCode.INVITATION_NOT_FOUND,
            message="Invitation not found",
        )
        self.invitation_id = str(invitation_id)


class InvalidStateError(DomainError):
    """Raised when a transition is attempted from a state that does not permit it."""

    def __init__(self, message: str, current: str | None = None, target: str | None = None) -> None:
        super().__init__(code=ErrorCode.INVALID_STATE, message=message)
        self.current = current
        self.target = target

    @classmethod
    def transition(cls, record: str, current: str, target: str) -> "InvalidStateError":
        return cls(
            f"Cannot move {record} from '{current}' to '{target}'",
            current=current,
            target=target,
        )


class AlreadyReviewedError(DomainError):
    """Raised when a booking already carries an organizer rating."""

    def __init__(self, booking_id: object) -> None:
        super().__init__(
            code=ErrorCode.ALREADY_REVIEWED,
            message="This booking has already been reviewed",
        )
        self.booking_id = str(booking_id)


class DuplicateInvitationError(DomainError):
    """Raised when the organizer already invited this speaker to this event."""

    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.DUPLICATE_INVITATION,
            message="You have already invited this speaker to this event",
        )


class ValidationError(DomainError):
    """Raised for malformed input; names the offending field and rule."""

    def __init__(self, field: str, rule: str) -> None:
        super().__init__(
            code=ErrorCode.VALIDATION_ERROR,
            message=f"{field}: {rule}",
        )
        self.field = field
        self.rule = rule


class StoreUnavailableError(DomainError):
    """Raised when the data store fails transiently. Callers may retry."""

    def __init__(self, operation: str) -> None:
        super().__init__(
            code=ErrorCode.STORE_UNAVAILABLE,
            message="The data store is temporarily unavailable",
        )
        self.operation = operation
