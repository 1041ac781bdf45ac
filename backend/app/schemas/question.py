"""
Questions Portal Backend — Question Request/Response Schemas
=============================================================

What:  Pydantic models defining the API contract for questions and encounters.
How:   FastAPI validates request bodies/query params against these models
       (422 on mismatch) before any service or database call, and serializes
       responses through them.

Two output shapes exist:
    QuestionResponse  display-ready projection (canonical encounter, counts, score)
    QuestionRecord    the stored row, returned by create/update/delete
"""

import uuid
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from app.models.question import QuestionType


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════


class QuestionFilter(BaseModel):
    """
    Filter for listing questions.

    Empty lists mean "no constraint" on that field. end_date is required;
    start_date is optional (no lower bound when omitted).
    """
    companies: List[str] = Field(default_factory=list)
    locations: List[str] = Field(default_factory=list)
    roles: List[str] = Field(default_factory=list)
    question_types: List[QuestionType] = Field(default_factory=list)
    start_date: Optional[datetime] = Field(default=None, description="Earliest seen_at (inclusive)")
    end_date: datetime = Field(description="Latest seen_at (inclusive)")


class QuestionCreate(BaseModel):
    """Body of POST /api/questions: the question plus its first encounter."""
    company: str
    content: str
    location: str
    question_type: QuestionType
    role: str
    seen_at: datetime


class QuestionUpdate(BaseModel):
    """Body of PATCH /api/questions/{id}. Omitted fields are left unchanged."""
    content: Optional[str] = None
    question_type: Optional[QuestionType] = None


class EncounterCreate(BaseModel):
    """Body of POST /api/questions/{id}/encounters."""
    company: str
    location: str
    role: str
    seen_at: datetime


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class QuestionResponse(BaseModel):
    """
    Display-ready question.

    company/location/role/seen_at come from the first (oldest) encounter.
    num_votes is the signed score: upvotes minus downvotes.
    """
    id: uuid.UUID
    content: str
    type: QuestionType
    company: str
    location: str
    role: str
    seen_at: Optional[datetime]
    updated_at: datetime
    num_answers: int
    num_comments: int
    num_votes: int
    user: str = Field(description="Author display name; empty when unknown")


class QuestionRecord(BaseModel):
    """A stored question row."""
    id: uuid.UUID
    content: str
    question_type: QuestionType
    user_id: Optional[uuid.UUID]
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class EncounterResponse(BaseModel):
    """A stored encounter row."""
    id: uuid.UUID
    question_id: uuid.UUID
    user_id: Optional[uuid.UUID]
    company: str
    location: Optional[str]
    role: Optional[str]
    seen_at: datetime
    created_at: datetime

    model_config = {"from_attributes": True}
