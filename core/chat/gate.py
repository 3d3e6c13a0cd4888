#!/usr/bin/env python3
"""
Chat-Availability Gate.

Decides whether a direct channel between a candidate and the hiring team may
exist for a match. The room itself is only a handle for the external realtime
transport; no messages live here.
"""

import logging
from datetime import datetime
from typing import Any, Optional

from sqlalchemy.exc import IntegrityError

from database.models import ChatRoom, JobMatch
from database.repository import MatchRepositoryHub
from core.actors import Actor
from core.exceptions import ChatNotAvailable, ConflictError, MatchNotFound, PermissionDenied
from core.lifecycle.states import CHAT_ELIGIBLE_STATES, parse_status
from core.utils import utcnow

logger = logging.getLogger(__name__)


def can_open_chat(match: JobMatch) -> bool:
    """
    Whether the gate authorizes a chat room for this match.

    - External jobs: never (candidates are routed off-platform)
    - Internal jobs: only once the hiring team has moved the candidate to
      screening or interview; terminal matches have their room closed and
      rooms are never reopened
    """
    job = match.job
    if job is None or job.is_external:
        return False
    return parse_status(match.status) in CHAT_ELIGIBLE_STATES


class ChatGate:
    """Opens and closes chat rooms according to lifecycle state."""

    def __init__(self, repo: MatchRepositoryHub, notifier=None):
        self.repo = repo
        self.notifier = notifier

    def can_open_chat(self, match_id: Any) -> bool:
        return can_open_chat(self._get_match(match_id))

    def get_room(self, match_id: Any) -> Optional[ChatRoom]:
        self._get_match(match_id)
        return self.repo.chats.get_by_match_id(match_id)

    def open_chat(self, match_id: Any, actor: Actor) -> ChatRoom:
        """
        Open (or return the existing) chat room for a match.

        Only an agent of the job's organization may initiate the conversation.

        Raises:
            MatchNotFound: If the match does not exist.
            PermissionDenied: If the actor does not act for the job's organization.
            ChatNotAvailable: If the gate does not authorize chat for the match.
        """
        match = self._get_match(match_id)

        if not actor.acts_for_organization(match.job.organization_id):
            raise PermissionDenied(
                f"Only the hiring organization of job {match.job_id} can open a chat"
            )

        existing = self.repo.chats.get_by_match_id(match.id)
        if existing is not None and existing.is_open:
            return existing

        if not can_open_chat(match):
            raise ChatNotAvailable(
                f"Chat is not available for match {match.id} in status '{match.status}'"
            )

        if existing is not None:
            # Closed rooms belong to matches that already reached a terminal state
            raise ChatNotAvailable(f"Chat room for match {match.id} is closed and cannot be reopened")

        try:
            room = self.repo.chats.create_room(match, opened_by=actor.user_id)
        except IntegrityError as e:
            # A concurrent request opened the room first; a retry returns it
            raise ConflictError(match.id) from e

        logger.info(f"Opened chat room {room.id} for match {match.id}")

        self.repo.notify_after_commit(self.notifier, 'chat_opened', {
            'match_id': str(match.id),
            'room_id': str(room.id),
            'candidate_id': str(match.candidate_id),
            'job_id': str(match.job_id),
        })
        return room

    def close_for_match(self, match: JobMatch, closed_at: Optional[datetime] = None) -> Optional[ChatRoom]:
        """Close the match's room if one is open. Called on terminal transitions."""
        room = self.repo.chats.get_by_match_id(match.id)
        if room is None or not room.is_open:
            return room

        self.repo.chats.close_room(room, closed_at or utcnow())
        logger.info(f"Closed chat room {room.id} for match {match.id} ({match.status})")
        return room

    def _get_match(self, match_id: Any) -> JobMatch:
        match = self.repo.matches.get_by_id(match_id)
        if match is None:
            raise MatchNotFound(f"Match {match_id} not found")
        return match
