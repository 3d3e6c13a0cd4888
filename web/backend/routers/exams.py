#!/usr/bin/env python3
"""
Exam endpoints.
"""

import uuid
from fastapi import APIRouter, Depends

from core.actors import Actor
from core.app_context import Services
from core.exceptions import PermissionDenied
from ..dependencies import get_actor, get_services
from ..models.requests import ExamSubmissionRequest
from ..models.responses import ExamAttemptResponse
from ..serializers import exam_attempt_response

router = APIRouter(prefix="/api/matches", tags=["exams"])


@router.post("/{match_id}/exam", response_model=ExamAttemptResponse, status_code=201)
def submit_exam(
    match_id: uuid.UUID,
    body: ExamSubmissionRequest,
    actor: Actor = Depends(get_actor),
    services: Services = Depends(get_services)
):
    """
    Grade an exam submission.

    A passing attempt on a pending match applies automatically; the
    response carries the resulting match status.
    """
    if not actor.is_candidate:
        raise PermissionDenied("Only candidates can submit exams")

    attempt = services.exams.submit_exam(match_id, actor.user_id, body.answers, started_at=body.started_at)
    match = services.matches.get_match(match_id)
    return exam_attempt_response(attempt, match.status)


@router.get("/{match_id}/exam", response_model=ExamAttemptResponse)
def get_exam_result(
    match_id: uuid.UUID,
    actor: Actor = Depends(get_actor),
    services: Services = Depends(get_services)
):
    match = services.matches.get_match(match_id, actor)
    attempt = services.exams.get_result(match_id)
    return exam_attempt_response(attempt, match.status)
