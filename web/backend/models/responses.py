#!/usr/bin/env python3
"""
Response models for API endpoints.
"""

from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional, Dict, Any


class MatchResponse(BaseModel):
    """A job match with its score and lifecycle state."""
    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "match_id": "550e8400-e29b-41d4-a716-446655440000",
                "job_id": "6ba7b810-9dad-11d1-80b4-00c04fd430c8",
                "candidate_id": "6ba7b811-9dad-11d1-80b4-00c04fd430c8",
                "score": 95.0,
                "explanation": "Match score: 95.00/100\n+ Skills: full overlap with required skills (Node.js, React)",
                "status": "pending",
                "label": "pending",
                "version": 1,
                "created_at": "2026-02-01T12:00:00+00:00",
                "status_changed_at": "2026-02-01T12:00:00+00:00"
            }
        }
    )

    match_id: str
    job_id: str
    candidate_id: str
    score: float = Field(ge=0, le=100)
    explanation: Optional[str]
    factors: Dict[str, Any] = Field(default_factory=dict)
    status: str
    label: str
    version: int
    candidate_viewed_at: Optional[str] = None
    employer_viewed_at: Optional[str] = None
    created_at: Optional[str]
    status_changed_at: Optional[str]


class ApplicationResponse(BaseModel):
    application_id: str
    match_id: str
    job_id: str
    candidate_id: str
    status: str
    applied_at: Optional[str]
    updated_at: Optional[str]


class StatusChangeResponse(BaseModel):
    from_status: str
    to_status: str
    actor_id: Optional[str]
    actor_role: str
    note: Optional[str]
    created_at: Optional[str]


class HistoryResponse(BaseModel):
    match_id: str
    changes: List[StatusChangeResponse]


class ExamAttemptResponse(BaseModel):
    attempt_id: str
    match_id: str
    score: float
    correct_answers: int
    total_questions: int
    passed: bool
    timed_out: bool
    match_status: str
    completed_at: Optional[str]


class ChatRoomResponse(BaseModel):
    room_id: str
    match_id: str
    status: str
    opened_by: Optional[str]
    created_at: Optional[str]
    closed_at: Optional[str]


class ChatAvailabilityResponse(BaseModel):
    match_id: str
    can_open_chat: bool
    room: Optional[ChatRoomResponse] = None


class RankedMatch(BaseModel):
    rank: int
    match_id: str
    candidate_id: str
    score: float
    status: str
    label: str
    created_at: Optional[str]


class RankingResponse(BaseModel):
    job_id: str
    count: int
    include_rejected: bool
    matches: List[RankedMatch]


class ScoreFactorResponse(BaseModel):
    name: str
    credit: float
    weight: float
    contribution: float
    detail: str
    positive: bool
    scored: bool = True


class ScorePreviewResponse(BaseModel):
    score: float = Field(ge=0, le=100)
    explanation: str
    factors: List[ScoreFactorResponse]
    matched_skills: List[str]
    missing_skills: List[str]
    insufficient_data: bool


class IntentResponse(BaseModel):
    intent_id: str
    job_id: str
    candidate_id: str
    match_id: Optional[str]
    action: str
    status: str
    next_step: Optional[str]
    expires_at: Optional[str]
