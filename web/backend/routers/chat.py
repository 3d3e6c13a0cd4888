#!/usr/bin/env python3
"""
Chat availability endpoints.

Only the gate lives here; messages travel over the external realtime service.
"""

import uuid
from fastapi import APIRouter, Depends

from core.actors import Actor
from core.app_context import Services
from ..dependencies import get_actor, get_services
from ..models.responses import ChatAvailabilityResponse, ChatRoomResponse
from ..serializers import chat_room_response

router = APIRouter(prefix="/api/matches", tags=["chat"])


@router.get("/{match_id}/chat", response_model=ChatAvailabilityResponse)
def get_chat(
    match_id: uuid.UUID,
    actor: Actor = Depends(get_actor),
    services: Services = Depends(get_services)
):
    services.matches.get_match(match_id, actor)
    allowed = services.chat.can_open_chat(match_id)
    room = services.chat.get_room(match_id)
    return ChatAvailabilityResponse(
        match_id=str(match_id),
        can_open_chat=allowed,
        room=chat_room_response(room) if room is not None else None
    )


@router.post("/{match_id}/chat", response_model=ChatRoomResponse)
def open_chat(
    match_id: uuid.UUID,
    actor: Actor = Depends(get_actor),
    services: Services = Depends(get_services)
):
    return chat_room_response(services.chat.open_chat(match_id, actor))
