"""
Questions Portal Backend — Vote Request/Response Schemas
========================================================

What:  Pydantic models for the vote endpoints.
How:   Clients may only cast UPVOTE or DOWNVOTE; NO_VOTE is a stored state,
       not an input, and is rejected with 422.
"""

import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, field_validator

from app.models.vote import VoteType


def _require_cast_vote(v: VoteType) -> VoteType:
    if v not in (VoteType.UPVOTE, VoteType.DOWNVOTE):
        raise ValueError("vote must be UPVOTE or DOWNVOTE")
    return v


class VoteCreate(BaseModel):
    """Body of POST /api/votes."""
    question_id: uuid.UUID
    vote: VoteType

    @field_validator("vote")
    @classmethod
    def validate_vote(cls, v: VoteType) -> VoteType:
        return _require_cast_vote(v)


class VoteUpdate(BaseModel):
    """Body of PATCH /api/votes/{id}."""
    vote: VoteType

    @field_validator("vote")
    @classmethod
    def validate_vote(cls, v: VoteType) -> VoteType:
        return _require_cast_vote(v)


class VoteResponse(BaseModel):
    """A stored vote row."""
    id: uuid.UUID
    question_id: uuid.UUID
    user_id: Optional[uuid.UUID]
    vote: VoteType
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
