"""
Questions Portal Backend — Vote SQLAlchemy Model
=================================================

What:  ORM model for a user's vote on a question.
How:   UniqueConstraint(question_id, user_id) enforces one vote per user per
       question at the database level. The service layer performs no
       duplicate pre-check; a second insert fails with IntegrityError.
Who:   Written by VoteService; read (eagerly) by the question query service
       to compute the vote score.
"""

import enum
import uuid
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Optional

from sqlalchemy import (
    DateTime,
    Enum,
    ForeignKey,
    UniqueConstraint,
    Uuid,
    text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.database import Base

if TYPE_CHECKING:
    from app.models.question import Question


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class VoteType(str, enum.Enum):
    """
    Stored vote values.

    NO_VOTE rows may exist (a cleared vote) and count as 0 in the score.
    """

    NO_VOTE = "NO_VOTE"
    UPVOTE = "UPVOTE"
    DOWNVOTE = "DOWNVOTE"


class QuestionVote(Base):
    """One user's vote on one question."""

    __tablename__ = "questions_question_votes"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )

    question_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("questions_questions.id", ondelete="CASCADE"),
        nullable=False,
    )

    user_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid,
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
    )

    vote: Mapped[VoteType] = mapped_column(
        Enum(VoteType, name="questions_vote"),
        nullable=False,
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
        server_default=text("CURRENT_TIMESTAMP"),
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
        onupdate=_utcnow,
        server_default=text("CURRENT_TIMESTAMP"),
    )

    question: Mapped["Question"] = relationship(
        "Question", back_populates="votes", lazy="raise"
    )

    __table_args__ = (
        UniqueConstraint("question_id", "user_id", name="uq_question_votes_question_user"),
    )

    def __repr__(self) -> str:
        return (
            f"<QuestionVote(question_id={self.question_id}, "
            f"user_id={self.user_id}, vote='{self.vote}')>"
        )
