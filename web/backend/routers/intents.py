#!/usr/bin/env python3
"""
Pending intent endpoints - resumable apply drafts.
"""

import uuid
from fastapi import APIRouter, Depends

from core.actors import Actor
from core.app_context import Services
from ..dependencies import get_actor, get_services
from ..models.requests import CreateIntentRequest
from ..models.responses import IntentResponse
from ..serializers import intent_response

router = APIRouter(prefix="/api/intents", tags=["intents"])


@router.post("", response_model=IntentResponse, status_code=201)
def create_intent(
    body: CreateIntentRequest,
    actor: Actor = Depends(get_actor),
    services: Services = Depends(get_services)
):
    return intent_response(services.intents.create_intent(actor, body.job_id))


@router.post("/{intent_id}/resume", response_model=IntentResponse)
def resume_intent(
    intent_id: uuid.UUID,
    actor: Actor = Depends(get_actor),
    services: Services = Depends(get_services)
):
    """
    Continue an interrupted apply.

    next_step is 'exam' when the job's exam still has to be passed and
    'done' once the candidate has applied.
    """
    return intent_response(services.intents.resume_intent(intent_id, actor))


@router.delete("/{intent_id}", response_model=IntentResponse)
def cancel_intent(
    intent_id: uuid.UUID,
    actor: Actor = Depends(get_actor),
    services: Services = Depends(get_services)
):
    return intent_response(services.intents.cancel_intent(intent_id, actor))
