"""
Questions Portal Backend — Question Route Handlers
===================================================

What:  HTTP endpoints for browsing, creating, editing and deleting questions,
       and for reporting additional encounters.
How:   Validates input (query params / JSON bodies via Pydantic), resolves the
       caller identity, delegates to QuestionService, returns JSON.
Who:   Called by the portal frontend (question list, question page, draft dialog).

Endpoints:
    GET    /api/questions                       filtered list
    GET    /api/questions/{id}                  single question
    POST   /api/questions                       create question + first encounter
    POST   /api/questions/{id}/encounters       report another encounter
    PATCH  /api/questions/{id}                  edit (owner only)
    DELETE /api/questions/{id}                  delete (owner only)
"""

import logging
from datetime import datetime
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth import get_current_user_id
from app.database import get_db_session
from app.models.question import QuestionType
from app.schemas.common import ErrorResponse
from app.schemas.question import (
    EncounterCreate,
    EncounterResponse,
    QuestionCreate,
    QuestionFilter,
    QuestionRecord,
    QuestionResponse,
    QuestionUpdate,
)
from app.services.question_service import question_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Questions"])

_AUTH_ERRORS = {
    401: {"description": "Not authenticated or not the owner", "model": ErrorResponse},
}


@router.get(
    "/questions",
    response_model=List[QuestionResponse],
    responses=_AUTH_ERRORS,
    summary="List questions matching a filter",
    description=(
        "Returns questions, newest first, having at least one encounter that "
        "matches every given company/location/role constraint and whose seen_at "
        "falls within [start_date, end_date]. Empty lists do not constrain."
    ),
)
async def list_questions(
    end_date: datetime = Query(..., description="Latest seen_at (inclusive)"),
    start_date: Optional[datetime] = Query(default=None, description="Earliest seen_at (inclusive)"),
    companies: List[str] = Query(default=[]),
    locations: List[str] = Query(default=[]),
    roles: List[str] = Query(default=[]),
    question_types: List[QuestionType] = Query(default=[]),
    user_id: UUID = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db_session),
) -> List[QuestionResponse]:
    flt = QuestionFilter(
        companies=companies,
        locations=locations,
        roles=roles,
        question_types=question_types,
        start_date=start_date,
        end_date=end_date,
    )
    return await question_service.list_questions(db=db, flt=flt)


@router.get(
    "/questions/{question_id}",
    response_model=QuestionResponse,
    responses={
        **_AUTH_ERRORS,
        404: {"description": "Question not found", "model": ErrorResponse},
    },
    summary="Get a single question by ID",
)
async def get_question(
    question_id: UUID,
    user_id: UUID = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db_session),
) -> QuestionResponse:
    return await question_service.get_question(db=db, question_id=question_id)


@router.post(
    "/questions",
    status_code=201,
    response_model=QuestionRecord,
    responses=_AUTH_ERRORS,
    summary="Submit a question draft",
    description="Creates the question and its first encounter atomically.",
)
async def create_question(
    body: QuestionCreate,
    user_id: UUID = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db_session),
) -> QuestionRecord:
    return await question_service.create_question(db=db, user_id=user_id, data=body)


@router.post(
    "/questions/{question_id}/encounters",
    status_code=201,
    response_model=EncounterResponse,
    responses={
        **_AUTH_ERRORS,
        404: {"description": "Question not found", "model": ErrorResponse},
    },
    summary="Report another encounter of a question",
)
async def create_encounter(
    question_id: UUID,
    body: EncounterCreate,
    user_id: UUID = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db_session),
) -> EncounterResponse:
    return await question_service.create_encounter(
        db=db, user_id=user_id, question_id=question_id, data=body
    )


@router.patch(
    "/questions/{question_id}",
    response_model=QuestionRecord,
    responses=_AUTH_ERRORS,
    summary="Edit a question's content or type",
)
async def update_question(
    question_id: UUID,
    body: QuestionUpdate,
    user_id: UUID = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db_session),
) -> QuestionRecord:
    return await question_service.update_question(
        db=db, user_id=user_id, question_id=question_id, data=body
    )


@router.delete(
    "/questions/{question_id}",
    response_model=QuestionRecord,
    responses=_AUTH_ERRORS,
    summary="Delete a question",
    description="Returns the deleted question.",
)
async def delete_question(
    question_id: UUID,
    user_id: UUID = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db_session),
) -> QuestionRecord:
    return await question_service.delete_question(
        db=db, user_id=user_id, question_id=question_id
    )
