"""
Questions Portal Backend — Vote Service
========================================

What:  Reads and writes a single user's vote on a question.
How:   Plain CRUD against questions_question_votes through the request session.
Who:   Called by the vote route handlers.

One vote per (question, user):
    Enforced by the uq_question_votes_question_user constraint, not here.
    create_vote inserts without looking first; a duplicate raises
    IntegrityError on flush, which propagates to the catch-all handler (500)
    and the request transaction is rolled back.

Ownership:
    update_vote/delete_vote compare the vote's user_id to the caller. A
    mismatch (or a missing vote) raises UnauthorizedError before any write.
"""

import logging
from datetime import datetime, timezone
from typing import Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.exceptions import UnauthorizedError
from app.models.vote import QuestionVote
from app.schemas.vote import VoteCreate, VoteResponse, VoteUpdate

logger = logging.getLogger(__name__)


class VoteService:
    """Vote CRUD scoped to the calling user."""

    async def get_vote(
        self,
        db: AsyncSession,
        user_id: UUID,
        question_id: UUID,
    ) -> Optional[VoteResponse]:
        """The caller's vote on a question, or None when they have not voted."""
        result = await db.execute(
            select(QuestionVote).where(
                QuestionVote.question_id == question_id,
                QuestionVote.user_id == user_id,
            )
        )
        vote = result.scalar_one_or_none()
        if vote is None:
            return None
        return VoteResponse.model_validate(vote)

    async def create_vote(
        self,
        db: AsyncSession,
        user_id: UUID,
        data: VoteCreate,
    ) -> VoteResponse:
        """Inserts the caller's vote. Duplicates fail at the database."""
        vote = QuestionVote(
            question_id=data.question_id,
            user_id=user_id,
            vote=data.vote,
        )
        db.add(vote)
        await db.flush()

        logger.info("Vote %s (%s) cast on question %s", vote.id, vote.vote.value, vote.question_id)
        return VoteResponse.model_validate(vote)

    async def update_vote(
        self,
        db: AsyncSession,
        user_id: UUID,
        vote_id: UUID,
        data: VoteUpdate,
    ) -> VoteResponse:
        """
        Changes the direction of the caller's vote.

        Raises:
            UnauthorizedError: The vote belongs to someone else or does not exist
        """
        vote = await self._owned_vote(db, user_id, vote_id)
        vote.vote = data.vote
        vote.updated_at = datetime.now(timezone.utc)
        await db.flush()

        logger.info("Vote %s changed to %s", vote_id, data.vote.value)
        return VoteResponse.model_validate(vote)

    async def delete_vote(
        self,
        db: AsyncSession,
        user_id: UUID,
        vote_id: UUID,
    ) -> VoteResponse:
        """
        Removes the caller's vote and returns it.

        Raises:
            UnauthorizedError: The vote belongs to someone else or does not exist
        """
        vote = await self._owned_vote(db, user_id, vote_id)
        record = VoteResponse.model_validate(vote)
        await db.delete(vote)
        await db.flush()

        logger.info("Vote %s deleted", vote_id)
        return record

    async def _owned_vote(
        self, db: AsyncSession, user_id: UUID, vote_id: UUID
    ) -> QuestionVote:
        vote = await db.get(QuestionVote, vote_id)
        if vote is None or vote.user_id != user_id:
            logger.warning("User %s refused access to vote %s", user_id, vote_id)
            raise UnauthorizedError()
        return vote


# ── Singleton Instance ────────────────────────────────────────────────────
vote_service = VoteService()
