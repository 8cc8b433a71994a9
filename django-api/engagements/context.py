"""Explicit caller identity passed into every service operation."""

from dataclasses import dataclass

from engagements.domain import ProfileId, SpeakerId


@dataclass(frozen=True)
class RequestContext:
    """Who is calling.

    ``profile_id`` identifies the organizer (or reviewer). ``speaker_id`` is
    set when the caller also owns a speaker profile.
    """

    profile_id: ProfileId
    speaker_id: SpeakerId | None = None
