#!/usr/bin/env python3
"""
Request models for API endpoints.
"""

import uuid
from datetime import datetime
from pydantic import BaseModel, Field
from typing import Any, Dict, List, Optional


class CreateMatchRequest(BaseModel):
    """Request to match a candidate to a job."""
    job_id: uuid.UUID
    candidate_id: uuid.UUID
    quota_available: bool = Field(
        default=True,
        description="Billing pre-condition supplied by the caller"
    )


class TransitionRequest(BaseModel):
    """Request to move a match to another lifecycle status."""
    target: str = Field(..., description="pending, applied, screening, interview, hired or rejected")
    expected_version: Optional[int] = Field(None, ge=1, description="Version last read by the caller")
    expected_status: Optional[str] = Field(None, description="Status last read by the caller")
    note: Optional[str] = Field(None, max_length=2000)


class ApplyRequest(BaseModel):
    expected_version: Optional[int] = Field(None, ge=1)


class ExamSubmissionRequest(BaseModel):
    """Answers keyed by question id."""
    answers: Dict[str, Any] = Field(default_factory=dict)
    started_at: Optional[datetime] = Field(None, description="When the candidate opened the exam")


class JobInput(BaseModel):
    required_skills: List[str] = Field(default_factory=list)
    location: Optional[str] = None
    work_mode: str = Field(default="onsite", description="remote, hybrid or onsite")
    experience_level: Optional[str] = None


class CandidateInput(BaseModel):
    skills: List[str] = Field(default_factory=list)
    location: Optional[str] = None
    preferred_work_mode: Optional[str] = None
    experience_level: Optional[str] = None


class ScorePreviewRequest(BaseModel):
    """Score an unsaved job/candidate pair."""
    job: JobInput
    candidate: CandidateInput


class CreateIntentRequest(BaseModel):
    job_id: uuid.UUID
