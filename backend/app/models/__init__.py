"""
Questions Portal Backend — ORM Models
======================================

Importing this package registers every mapped class with Base.metadata, so
string-based relationships ("Question", "Vote", ...) always resolve and
Alembic autogenerate sees the full schema.
"""

from app.models.user import User
from app.models.question import (
    Question,
    QuestionAnswer,
    QuestionComment,
    QuestionEncounter,
    QuestionType,
)
from app.models.vote import QuestionVote, VoteType

__all__ = [
    "User",
    "Question",
    "QuestionAnswer",
    "QuestionComment",
    "QuestionEncounter",
    "QuestionType",
    "QuestionVote",
    "VoteType",
]
