"""
Questions Portal Backend — Vote Route Handlers
===============================================

What:  HTTP endpoints for the caller's vote on a question.
How:   Thin handlers; VoteService does the work.

Endpoints:
    GET    /api/questions/{question_id}/vote   caller's vote or null
    POST   /api/votes                          cast a vote
    PATCH  /api/votes/{id}                     change direction (owner only)
    DELETE /api/votes/{id}                     remove (owner only)

A second POST for the same question by the same user is rejected by the
database uniqueness constraint and surfaces as a 500 internal error.
"""

import logging
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth import get_current_user_id
from app.database import get_db_session
from app.schemas.common import ErrorResponse
from app.schemas.vote import VoteCreate, VoteResponse, VoteUpdate
from app.services.vote_service import vote_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Votes"])

_AUTH_ERRORS = {
    401: {"description": "Not authenticated or not the owner", "model": ErrorResponse},
}


@router.get(
    "/questions/{question_id}/vote",
    response_model=Optional[VoteResponse],
    responses=_AUTH_ERRORS,
    summary="Get the caller's vote on a question",
)
async def get_vote(
    question_id: UUID,
    user_id: UUID = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db_session),
) -> Optional[VoteResponse]:
    return await vote_service.get_vote(db=db, user_id=user_id, question_id=question_id)


@router.post(
    "/votes",
    status_code=201,
    response_model=VoteResponse,
    responses=_AUTH_ERRORS,
    summary="Vote on a question",
)
async def create_vote(
    body: VoteCreate,
    user_id: UUID = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db_session),
) -> VoteResponse:
    return await vote_service.create_vote(db=db, user_id=user_id, data=body)


@router.patch(
    "/votes/{vote_id}",
    response_model=VoteResponse,
    responses=_AUTH_ERRORS,
    summary="Change a vote",
)
async def update_vote(
    vote_id: UUID,
    body: VoteUpdate,
    user_id: UUID = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db_session),
) -> VoteResponse:
    return await vote_service.update_vote(db=db, user_id=user_id, vote_id=vote_id, data=body)


@router.delete(
    "/votes/{vote_id}",
    response_model=VoteResponse,
    responses=_AUTH_ERRORS,
    summary="Remove a vote",
)
async def delete_vote(
    vote_id: UUID,
    user_id: UUID = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db_session),
) -> VoteResponse:
    return await vote_service.delete_vote(db=db, user_id=user_id, vote_id=vote_id)
