"""
Questions Portal Backend — Question SQLAlchemy Models
======================================================

What:  ORM models for interview questions and the rows hanging off them:
       encounters (where/when a question was asked), answers and comments.
How:   Inherits from the shared DeclarativeBase; Alembic reads these for migrations.
Who:   Used by the question and vote services.

Table Design:
    questions_questions            one row per submitted question
    questions_question_encounters  one row per reported sighting (1:N)
    questions_question_answers     answers; only counted here (1:N)
    questions_question_comments    comments; only counted here (1:N)

Canonical encounter:
    Question.encounters is ordered by (created_at, id). The first element is
    the oldest sighting and supplies the company/location/role/seen_at shown
    for the question. The order is declared on the relationship instead of
    relying on storage order.
"""

import enum
import uuid
from datetime import datetime, timezone
from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import (
    DateTime,
    Enum,
    ForeignKey,
    Index,
    String,
    Text,
    Uuid,
    text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.database import Base

if TYPE_CHECKING:
    from app.models.user import User
    from app.models.vote import QuestionVote


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class QuestionType(str, enum.Enum):
    """Kinds of interview questions."""

    CODING = "CODING"
    SYSTEM_DESIGN = "SYSTEM_DESIGN"
    BEHAVIORAL = "BEHAVIORAL"
    THEORY = "THEORY"


class Question(Base):
    """
    An interview question submitted by a user.

    Lifecycle:
        1. Created together with its first encounter (same transaction)
        2. More encounters may be reported later by any user
        3. content/question_type may be edited by the owner
        4. Deleting a question deletes its encounters, votes, answers, comments
    """

    __tablename__ = "questions_questions"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )

    content: Mapped[str] = mapped_column(Text, nullable=False)

    question_type: Mapped[QuestionType] = mapped_column(
        Enum(QuestionType, name="questions_question_type"),
        nullable=False,
    )

    # Weak reference: deleting the user keeps the question
    user_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid,
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
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

    # ── Relationships ─────────────────────────────────────────────────────
    user: Mapped[Optional["User"]] = relationship("User", lazy="raise")

    # encounters[0] is the canonical (first reported) encounter. The first
    # encounter is written by create_question before any other can exist, so
    # created_at ties only occur between later encounters; id makes their
    # order deterministic across reads, not chronological.
    encounters: Mapped[List["QuestionEncounter"]] = relationship(
        "QuestionEncounter",
        back_populates="question",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by=lambda: (QuestionEncounter.created_at, QuestionEncounter.id),
        lazy="raise",
    )

    votes: Mapped[List["QuestionVote"]] = relationship(
        "QuestionVote",
        back_populates="question",
        cascade="all, delete-orphan",
        passive_deletes=True,
        lazy="raise",
    )

    answers: Mapped[List["QuestionAnswer"]] = relationship(
        "QuestionAnswer",
        cascade="all, delete-orphan",
        passive_deletes=True,
        lazy="raise",
    )

    comments: Mapped[List["QuestionComment"]] = relationship(
        "QuestionComment",
        cascade="all, delete-orphan",
        passive_deletes=True,
        lazy="raise",
    )

    # Listing is always newest first
    __table_args__ = (
        Index("idx_questions_created_at", created_at.desc()),
        Index("idx_questions_question_type", "question_type"),
    )

    def __repr__(self) -> str:
        return (
            f"<Question(id={self.id}, type='{self.question_type}', "
            f"created_at='{self.created_at}')>"
        )


class QuestionEncounter(Base):
    """
    One reported sighting of a question at a company/role/location/time.

    location and role are optional; the query service renders missing
    values as "Unknown location" / "Unknown role".
    """

    __tablename__ = "questions_question_encounters"

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

    company: Mapped[str] = mapped_column(String(255), nullable=False)
    location: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    role: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    seen_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
        server_default=text("CURRENT_TIMESTAMP"),
    )

    question: Mapped["Question"] = relationship(
        "Question", back_populates="encounters", lazy="raise"
    )

    __table_args__ = (
        Index("idx_question_encounters_question_id", "question_id", "created_at"),
    )

    def __repr__(self) -> str:
        return (
            f"<QuestionEncounter(question_id={self.question_id}, "
            f"company='{self.company}', seen_at='{self.seen_at}')>"
        )


class QuestionAnswer(Base):
    """An answer to a question. Only the per-question count is used here."""

    __tablename__ = "questions_question_answers"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    question_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("questions_questions.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    user_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )
    content: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
        server_default=text("CURRENT_TIMESTAMP"),
    )


class QuestionComment(Base):
    """A comment on a question. Only the per-question count is used here."""

    __tablename__ = "questions_question_comments"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    question_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("questions_questions.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    user_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )
    content: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
        server_default=text("CURRENT_TIMESTAMP"),
    )
