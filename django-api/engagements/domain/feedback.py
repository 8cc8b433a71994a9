"""Parsing of completion notes written as "Rating: <n>/5 stars. Feedback: <text>"."""

import re
from dataclasses import dataclass

from engagements.domain.value_objects import Rating

RATING_PATTERN = re.compile(r"Rating:\s*(\d+)\s*/\s*5 stars\.?\s*")
FEEDBACK_PATTERN = re.compile(r"Feedback:\s*(.+)$", re.DOTALL)

NO_FEEDBACK_TEXT = "No additional feedback provided"


@dataclass(frozen=True)
class ParsedNote:
    rating: int | None
    comment: str


def parse_reviewer_notes(notes: str) -> ParsedNote:
    """Split a completion note into rating and comment.

    A note without a valid rating yields ``rating=None`` and the whole note as
    the comment. It is never given a default score.
    """
    rating_match = RATING_PATTERN.search(notes)
    if rating_match is None:
        return ParsedNote(rating=None, comment=notes.strip())

    try:
        rating = Rating(int(rating_match.group(1))).value
    except ValueError:
        return ParsedNote(rating=None, comment=notes.strip())

    feedback_match = FEEDBACK_PATTERN.search(notes, rating_match.end())
    if feedback_match:
        comment = feedback_match.group(1).strip()
    else:
        comment = RATING_PATTERN.sub("", notes, count=1).strip()
    return ParsedNote(rating=rating, comment=comment or NO_FEEDBACK_TEXT)

