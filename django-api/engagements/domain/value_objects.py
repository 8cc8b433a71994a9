"""Domain primitives that enforce validity at creation time."""

from dataclasses import dataclass
from decimal import Decimal
from typing import Self
from uuid import UUID, uuid4


@dataclass(frozen=True)
class _Identifier:
    value: UUID

    @classmethod
    def from_string(cls, value: str) -> Self:
        return cls(value=UUID(value))

    @classmethod
    def new(cls) -> Self:
        return cls(value=uuid4())

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class EventId(_Identifier):
    """Unique identifier for an Event."""


@dataclass(frozen=True)
class BookingId(_Identifier):
    """Unique identifier for a Booking."""


@dataclass(frozen=True)
class SpeakerId(_Identifier):
    """Unique identifier for a Speaker."""


@dataclass(frozen=True)
class InvitationId(_Identifier):
    """Unique identifier for an Invitation."""


@dataclass(frozen=True)
class ReviewId(_Identifier):
    """Unique identifier for a standalone Review."""


@dataclass(frozen=True)
class ProfileId(_Identifier):
    """Identifier of an externally managed user profile (organizer or reviewer)."""


def _as_amount(value: object, label: str, max_value: Decimal) -> Decimal:
    """Coerce to a finite Decimal with at most two places, no larger than ``max_value``."""
    amount = value if isinstance(value, Decimal) else Decimal(str(value))
    if not amount.is_finite():
        raise ValueError(f"{label} must be a finite number")
    if abs(amount) > max_value:
        raise ValueError(f"{label} cannot exceed {max_value}")
    if amount.normalize().as_tuple().exponent < -2:
        raise ValueError(f"{label} allows at most 2 decimal places")
    return amount


@dataclass(frozen=True)
class Money:
    """Rate or budget amount with validation."""

    amount: Decimal

    MAX = Decimal("9999999999.99")

    def __post_init__(self) -> None:
        object.__setattr__(self, "amount", _as_amount(self.amount, "Money amount", self.MAX))
        if self.amount < 0:
            raise ValueError("Money amount cannot be negative")

    def __str__(self) -> str:
        return f"{self.amount:.2f}"


@dataclass(frozen=True)
class Rating:
    """Star rating between 1 and 5 inclusive."""

    value: int

    MIN = 1
    MAX = 5

    def __post_init__(self) -> None:
        if isinstance(self.value, bool) or not isinstance(self.value, int):
            raise ValueError("Rating must be a whole number")
        if not self.MIN <= self.value <= self.MAX:
            raise ValueError(f"Rating must be between {self.MIN} and {self.MAX}")


@dataclass(frozen=True)
class Duration:
    """Positive event duration in hours, bounded by the duration_hours column."""

    hours: Decimal

    MAX = Decimal("9999.99")

    def __post_init__(self) -> None:
        object.__setattr__(self, "hours", _as_amount(self.hours, "Duration", self.MAX))
        if self.hours <= 0:
            raise ValueError("Duration must be positive")
