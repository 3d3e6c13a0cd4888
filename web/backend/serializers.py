#!/usr/bin/env python3
"""
ORM -> response model conversion.

Runs inside the request's unit of work, before the session commits.
"""

from typing import List

from core.lifecycle.service import display_label
from core.scorer import MatchResult
from database.models import ApplicationRecord, ChatRoom, ExamAttempt, JobMatch, PendingIntent, StatusChange
from .models.responses import (
    ApplicationResponse,
    ChatRoomResponse,
    ExamAttemptResponse,
    IntentResponse,
    MatchResponse,
    RankedMatch,
    ScoreFactorResponse,
    ScorePreviewResponse,
    StatusChangeResponse,
)
from .utils import safe_datetime_iso, safe_float, safe_str


def match_response(match: JobMatch) -> MatchResponse:
    return MatchResponse(
        match_id=str(match.id),
        job_id=str(match.job_id),
        candidate_id=str(match.candidate_id),
        score=safe_float(match.match_score),
        explanation=match.ai_explanation,
        factors=match.score_factors or {},
        status=match.status,
        label=display_label(match),
        version=match.version,
        candidate_viewed_at=safe_datetime_iso(match.candidate_viewed_at),
        employer_viewed_at=safe_datetime_iso(match.employer_viewed_at),
        created_at=safe_datetime_iso(match.created_at),
        status_changed_at=safe_datetime_iso(match.status_changed_at)
    )


def application_response(record: ApplicationRecord) -> ApplicationResponse:
    return ApplicationResponse(
        application_id=str(record.id),
        match_id=str(record.match_id),
        job_id=str(record.job_id),
        candidate_id=str(record.candidate_id),
        status=record.status,
        applied_at=safe_datetime_iso(record.applied_at),
        updated_at=safe_datetime_iso(record.updated_at)
    )


def status_change_responses(changes: List[StatusChange]) -> List[StatusChangeResponse]:
    return [
        StatusChangeResponse(
            from_status=c.from_status,
            to_status=c.to_status,
            actor_id=c.actor_id,
            actor_role=c.actor_role,
            note=c.note,
            created_at=safe_datetime_iso(c.created_at)
        )
        for c in changes
    ]


def exam_attempt_response(attempt: ExamAttempt, match_status: str) -> ExamAttemptResponse:
    return ExamAttemptResponse(
        attempt_id=str(attempt.id),
        match_id=str(attempt.match_id),
        score=safe_float(attempt.score),
        correct_answers=attempt.correct_answers,
        total_questions=attempt.total_questions,
        passed=attempt.passed,
        timed_out=attempt.timed_out,
        match_status=match_status,
        completed_at=safe_datetime_iso(attempt.completed_at)
    )


def chat_room_response(room: ChatRoom) -> ChatRoomResponse:
    return ChatRoomResponse(
        room_id=str(room.id),
        match_id=str(room.match_id),
        status=room.status,
        opened_by=room.opened_by,
        created_at=safe_datetime_iso(room.created_at),
        closed_at=safe_datetime_iso(room.closed_at)
    )


def ranked_matches(matches: List[JobMatch]) -> List[RankedMatch]:
    return [
        RankedMatch(
            rank=position,
            match_id=str(m.id),
            candidate_id=str(m.candidate_id),
            score=safe_float(m.match_score),
            status=m.status,
            label=display_label(m),
            created_at=safe_datetime_iso(m.created_at)
        )
        for position, m in enumerate(matches, start=1)
    ]


def score_preview_response(result: MatchResult) -> ScorePreviewResponse:
    return ScorePreviewResponse(
        score=result.score,
        explanation=result.explanation,
        factors=[
            ScoreFactorResponse(
                name=f.name,
                credit=round(f.credit, 4),
                weight=round(f.weight, 4),
                contribution=round(f.contribution, 2),
                detail=f.detail,
                positive=f.positive,
                scored=f.scored
            )
            for f in result.factors
        ],
        matched_skills=result.matched_skills,
        missing_skills=result.missing_skills,
        insufficient_data=result.insufficient_data
    )


def intent_response(intent: PendingIntent) -> IntentResponse:
    return IntentResponse(
        intent_id=str(intent.id),
        job_id=str(intent.job_id),
        candidate_id=str(intent.candidate_id),
        match_id=safe_str(intent.match_id),
        action=intent.action,
        status=intent.status,
        next_step=intent.next_step,
        expires_at=safe_datetime_iso(intent.expires_at)
    )
