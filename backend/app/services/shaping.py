"""
Questions Portal Backend — Filter, Tally and Shaping Helpers
=============================================================

What:  Pure functions shared by the question query service:
       - encounter/question filter predicates
       - vote score reduction
       - projection of a loaded Question into a QuestionResponse
How:   Operate on already-loaded ORM objects (or anything with the same
       attributes); no database access happens here.

Filter semantics:
    A question is retained iff AT LEAST ONE of its encounters matches ALL
    of: company, location, role (each: empty filter list ⇒ match, else
    membership) and start_date <= seen_at <= end_date (no lower bound when
    start_date is None).
"""

from datetime import datetime, timezone
from typing import Iterable, Optional, Sequence

from app.models.vote import VoteType
from app.schemas.question import QuestionFilter, QuestionResponse

UNKNOWN_LOCATION = "Unknown location"
UNKNOWN_ROLE = "Unknown role"

_VOTE_WEIGHTS = {
    VoteType.UPVOTE: 1,
    VoteType.DOWNVOTE: -1,
}


def as_utc(value: datetime) -> datetime:
    """Treats naive datetimes as UTC so they compare with aware ones."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def tally_votes(votes: Iterable) -> int:
    """Signed score: +1 per UPVOTE, -1 per DOWNVOTE, 0 for anything else."""
    return sum(_VOTE_WEIGHTS.get(v.vote, 0) for v in votes)


def _matches(allowed: Sequence[str], value: Optional[str]) -> bool:
    return not allowed or value in allowed


def _or_default(value: Optional[str], default: str) -> str:
    return default if value is None else value


def encounter_matches(encounter, flt: QuestionFilter) -> bool:
    """True when a single encounter satisfies every field of the filter."""
    if not (
        _matches(flt.companies, encounter.company)
        and _matches(flt.locations, encounter.location)
        and _matches(flt.roles, encounter.role)
    ):
        return False

    seen_at = as_utc(encounter.seen_at)
    if flt.start_date is not None and seen_at < as_utc(flt.start_date):
        return False
    return seen_at <= as_utc(flt.end_date)


def question_matches(question, flt: QuestionFilter) -> bool:
    """True when any encounter of the question matches the filter."""
    return any(encounter_matches(e, flt) for e in question.encounters)


def shape_question(question, num_answers: int, num_comments: int) -> QuestionResponse:
    """
    Builds the display-ready record for a loaded question.

    The first encounter in relationship order is canonical. A question
    without encounters shows an empty company and no seen_at.
    """
    first = question.encounters[0] if question.encounters else None
    user = question.user

    return QuestionResponse(
        id=question.id,
        content=question.content,
        type=question.question_type,
        company=first.company if first else "",
        location=_or_default(first.location if first else None, UNKNOWN_LOCATION),
        role=_or_default(first.role if first else None, UNKNOWN_ROLE),
        seen_at=first.seen_at if first else None,
        updated_at=question.updated_at,
        num_answers=num_answers,
        num_comments=num_comments,
        num_votes=tally_votes(question.votes),
        user=(user.name if user is not None else None) or "",
    )
