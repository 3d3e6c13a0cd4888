#!/usr/bin/env python3
"""
Match endpoints - create, score and move matches through the lifecycle.
"""

import uuid
import logging
from fastapi import APIRouter, Depends

from core.actors import Actor
from core.app_context import Services
from core.exceptions import NotFoundError, PermissionDenied
from ..dependencies import get_actor, get_services
from ..models.requests import ApplyRequest, CreateMatchRequest, TransitionRequest
from ..models.responses import ApplicationResponse, HistoryResponse, MatchResponse
from ..serializers import application_response, match_response, status_change_responses

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/matches", tags=["matches"])


@router.post("", response_model=MatchResponse, status_code=201)
def create_match(
    body: CreateMatchRequest,
    actor: Actor = Depends(get_actor),
    services: Services = Depends(get_services)
):
    """
    Create the match between a job and a candidate.

    Repeating the request returns the existing match.
    """
    if actor.is_candidate and not actor.owns_candidate(body.candidate_id):
        raise PermissionDenied("Candidates can only create their own matches")

    match = services.matches.create_match(body.job_id, body.candidate_id, quota_available=body.quota_available)
    return match_response(match)


@router.get("/{match_id}", response_model=MatchResponse)
def get_match(
    match_id: uuid.UUID,
    actor: Actor = Depends(get_actor),
    services: Services = Depends(get_services)
):
    return match_response(services.matches.get_match(match_id, actor))


@router.post("/{match_id}/refresh", response_model=MatchResponse)
def refresh_score(
    match_id: uuid.UUID,
    actor: Actor = Depends(get_actor),
    services: Services = Depends(get_services)
):
    """Re-score the match if the job or candidate changed materially."""
    return match_response(services.matches.refresh_score(match_id, actor))


@router.post("/{match_id}/transition", response_model=MatchResponse)
def transition(
    match_id: uuid.UUID,
    body: TransitionRequest,
    actor: Actor = Depends(get_actor),
    services: Services = Depends(get_services)
):
    """
    Move the match to another status.

    Pass expected_version (and optionally expected_status) from the last read;
    a 409 means the match changed and must be re-read.
    """
    match = services.lifecycle.transition(
        match_id,
        body.target,
        actor,
        expected_version=body.expected_version,
        expected_status=body.expected_status,
        note=body.note
    )
    return match_response(match)


@router.post("/{match_id}/apply", response_model=MatchResponse)
def apply(
    match_id: uuid.UUID,
    body: ApplyRequest = None,
    actor: Actor = Depends(get_actor),
    services: Services = Depends(get_services)
):
    expected_version = body.expected_version if body else None
    return match_response(services.lifecycle.apply(match_id, actor, expected_version=expected_version))


@router.post("/{match_id}/viewed", response_model=MatchResponse)
def mark_viewed(
    match_id: uuid.UUID,
    actor: Actor = Depends(get_actor),
    services: Services = Depends(get_services)
):
    return match_response(services.lifecycle.mark_viewed(match_id, actor))


@router.get("/{match_id}/application", response_model=ApplicationResponse)
def get_application(
    match_id: uuid.UUID,
    actor: Actor = Depends(get_actor),
    services: Services = Depends(get_services)
):
    services.matches.get_match(match_id, actor)
    record = services.lifecycle.get_application(match_id)
    if record is None:
        raise NotFoundError(f"Match {match_id} has no application yet")
    return application_response(record)


@router.get("/{match_id}/history", response_model=HistoryResponse)
def get_history(
    match_id: uuid.UUID,
    actor: Actor = Depends(get_actor),
    services: Services = Depends(get_services)
):
    services.matches.get_match(match_id, actor)
    changes = services.lifecycle.history(match_id)
    return HistoryResponse(match_id=str(match_id), changes=status_change_responses(changes))
