"""
Questions Portal Backend — Question Service (Queries and Mutations)
====================================================================

What:  Business logic for questions: filtered listing, lookup by id,
       creation (with the first encounter), extra encounters, update, delete.
How:   Reads questions with eager-loaded encounters/votes/user plus
       answer/comment counts, filters and shapes them in memory
       (app.services.shaping); writes go through the request's AsyncSession.
Who:   Called by the question route handlers.

Listing Flow:
    ┌──────────────┐    ┌───────────────────┐    ┌──────────────┐    ┌─────────┐
    │ SELECT by    │───▶│ any encounter     │───▶│ tally votes  │───▶│ shape   │
    │ type, newest │    │ matches filter?   │    │ (+1/-1/0)    │    │ record  │
    └──────────────┘    └───────────────────┘    └──────────────┘    └─────────┘

Ownership:
    update/delete require the caller to own the question. By default the
    question's user_id is compared to the caller. With
    settings.legacy_ownership_check the question's own id is compared
    instead, which reproduces the behaviour of the previous service.
    A missing question never passes the check (UnauthorizedError).

Transactions:
    Methods only flush. The first encounter is flushed in the same
    transaction as its question; get_db_session commits or rolls back both.
"""

import logging
from datetime import datetime, timezone
from typing import List, Optional
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.config import settings
from app.exceptions import DatabaseError, NotFoundError, UnauthorizedError
from app.models.question import (
    Question,
    QuestionAnswer,
    QuestionComment,
    QuestionEncounter,
)
from app.schemas.question import (
    EncounterCreate,
    EncounterResponse,
    QuestionCreate,
    QuestionFilter,
    QuestionRecord,
    QuestionResponse,
    QuestionUpdate,
)
from app.services.shaping import question_matches, shape_question

logger = logging.getLogger(__name__)


def _count_of(model):
    """Correlated COUNT(*) of `model` rows belonging to the outer Question."""
    return (
        select(func.count(model.id))
        .where(model.question_id == Question.id)
        .correlate(Question)
        .scalar_subquery()
    )


def _question_query():
    """SELECT Question, num_answers, num_comments with relations eager-loaded."""
    return select(
        Question,
        _count_of(QuestionAnswer).label("num_answers"),
        _count_of(QuestionComment).label("num_comments"),
    ).options(
        selectinload(Question.encounters),
        selectinload(Question.votes),
        selectinload(Question.user),
    )


class QuestionService:
    """
    Question queries and mutations.

    Stateless: every method receives the request's session and the caller id.
    """

    # ══════════════════════════════════════════════════════════════════════
    # Queries
    # ══════════════════════════════════════════════════════════════════════

    async def list_questions(
        self,
        db: AsyncSession,
        flt: QuestionFilter,
    ) -> List[QuestionResponse]:
        """
        Questions matching the filter, newest first.

        The type filter runs in SQL; company/location/role/date run in memory
        against each question's encounters (see shaping.question_matches).
        """
        query = _question_query().order_by(Question.created_at.desc())
        if flt.question_types:
            query = query.where(Question.question_type.in_(flt.question_types))

        try:
            result = await db.execute(query)
            rows = result.all()
        except SQLAlchemyError as e:
            logger.error("Database error listing questions: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not retrieve questions. Please try again.",
                context={"error_type": type(e).__name__},
            )

        questions = [
            shape_question(question, num_answers or 0, num_comments or 0)
            for question, num_answers, num_comments in rows
            if question_matches(question, flt)
        ]
        logger.debug("Filter kept %d of %d questions", len(questions), len(rows))
        return questions

    async def get_question(self, db: AsyncSession, question_id: UUID) -> QuestionResponse:
        """
        A single shaped question.

        Raises:
            NotFoundError: No question with this id (→ 404)
            DatabaseError: Query execution failed (→ 500)
        """
        try:
            result = await db.execute(_question_query().where(Question.id == question_id))
            row = result.one_or_none()
        except SQLAlchemyError as e:
            logger.error("Database error fetching question %s: %s", question_id, str(e))
            raise DatabaseError(
                message="Could not retrieve the question. Please try again.",
                context={"question_id": str(question_id)},
            )

        if row is None:
            raise NotFoundError(resource="question", resource_id=str(question_id))

        question, num_answers, num_comments = row
        return shape_question(question, num_answers or 0, num_comments or 0)

    # ══════════════════════════════════════════════════════════════════════
    # Mutations
    # ══════════════════════════════════════════════════════════════════════

    async def create_question(
        self,
        db: AsyncSession,
        user_id: UUID,
        data: QuestionCreate,
    ) -> QuestionRecord:
        """Inserts a question and its first encounter in one transaction."""
        question = Question(
            content=data.content,
            question_type=data.question_type,
            user_id=user_id,
        )
        db.add(question)
        await db.flush()

        encounter = QuestionEncounter(
            question_id=question.id,
            user_id=user_id,
            company=data.company,
            location=data.location,
            role=data.role,
            seen_at=data.seen_at,
        )
        db.add(encounter)
        await db.flush()

        logger.info(
            "Question %s created by %s (company=%s)", question.id, user_id, data.company
        )
        return QuestionRecord.model_validate(question)

    async def create_encounter(
        self,
        db: AsyncSession,
        user_id: UUID,
        question_id: UUID,
        data: EncounterCreate,
    ) -> EncounterResponse:
        """
        Records another sighting of an existing question.

        Any authenticated user may report an encounter.

        Raises:
            NotFoundError: No question with this id (→ 404)
        """
        question = await db.get(Question, question_id)
        if question is None:
            raise NotFoundError(resource="question", resource_id=str(question_id))

        encounter = QuestionEncounter(
            question_id=question_id,
            user_id=user_id,
            company=data.company,
            location=data.location,
            role=data.role,
            seen_at=data.seen_at,
        )
        db.add(encounter)
        await db.flush()

        logger.info("Encounter %s added to question %s", encounter.id, question_id)
        return EncounterResponse.model_validate(encounter)

    async def update_question(
        self,
        db: AsyncSession,
        user_id: UUID,
        question_id: UUID,
        data: QuestionUpdate,
    ) -> QuestionRecord:
        """
        Partial update of content and/or question_type.

        Raises:
            UnauthorizedError: Caller fails the ownership check (→ 401)
        """
        question = await db.get(Question, question_id)
        self._authorize(question, user_id)

        changes = data.model_dump(exclude_none=True)
        if changes:
            for field, value in changes.items():
                setattr(question, field, value)
            question.updated_at = datetime.now(timezone.utc)
            await db.flush()

        logger.info("Question %s updated (%s)", question_id, ", ".join(changes) or "no changes")
        return QuestionRecord.model_validate(question)

    async def delete_question(
        self,
        db: AsyncSession,
        user_id: UUID,
        question_id: UUID,
    ) -> QuestionRecord:
        """
        Deletes a question; its encounters, votes, answers and comments
        are removed by ON DELETE CASCADE.

        Raises:
            UnauthorizedError: Caller fails the ownership check (→ 401)
        """
        question = await db.get(Question, question_id)
        self._authorize(question, user_id)

        record = QuestionRecord.model_validate(question)
        await db.delete(question)
        await db.flush()

        logger.info("Question %s deleted by %s", question_id, user_id)
        return record

    @staticmethod
    def _authorize(question: Optional[Question], user_id: UUID) -> None:
        """Raises UnauthorizedError unless the caller owns the question."""
        if question is not None:
            owner = question.id if settings.legacy_ownership_check else question.user_id
            if owner == user_id:
                return

        logger.warning(
            "User %s refused write access to question %s",
            user_id,
            question.id if question is not None else "<missing>",
        )
        raise UnauthorizedError()


# ── Singleton Instance ────────────────────────────────────────────────────
question_service = QuestionService()
