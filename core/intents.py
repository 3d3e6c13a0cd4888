#!/usr/bin/env python3
"""
Pending intents: server-tracked drafts of an interrupted workflow.

A candidate who clicks "apply" before signing up or before taking a job's exam
gets an intent. Resuming it later picks the workflow up from where it stopped
instead of relying on anything stored client-side.
"""

import logging
from datetime import timedelta
from typing import Any, Callable, Optional

from database.models import PendingIntent
from database.repository import MatchRepositoryHub
from core.actors import Actor
from core.config_loader import IntentConfig
from core.exceptions import IntentExpired, IntentNotFound, JobNotFound, PermissionDenied
from core.lifecycle.service import APPLIED_OR_LATER, LifecycleService
from core.lifecycle.states import MatchStatus, parse_status
from core.matcher.service import MatchService
from core.utils import as_utc, to_uuid, utcnow

logger = logging.getLogger(__name__)

APPLY_ACTION = 'apply'


class IntentService:
    def __init__(
        self,
        repo: MatchRepositoryHub,
        match_service: MatchService,
        lifecycle: LifecycleService,
        config: Optional[IntentConfig] = None,
        clock: Callable = utcnow
    ):
        self.repo = repo
        self.match_service = match_service
        self.lifecycle = lifecycle
        self.config = config or IntentConfig()
        self.clock = clock

    def create_intent(self, actor: Actor, job_id: Any) -> PendingIntent:
        """
        Record that the candidate wants to apply to a job.

        An open, unexpired intent for the same (candidate, job) is reused.
        """
        if not actor.is_candidate:
            raise PermissionDenied("Only candidates can start an application")

        job = self.repo.jobs.get_by_id(job_id)
        if job is None:
            raise JobNotFound(f"Job {job_id} not found")

        candidate_id = self._candidate_pk(actor)
        now = self.clock()
        existing = self.repo.intents.get_open_intent(candidate_id, job.id, APPLY_ACTION)
        if existing is not None and not self._is_expired(existing, now):
            return existing

        intent = self.repo.intents.add_intent(PendingIntent(
            candidate_id=candidate_id,
            job_id=job.id,
            action=APPLY_ACTION,
            status='open',
            expires_at=now + timedelta(hours=self.config.ttl_hours),
            created_at=now,
            updated_at=now
        ))
        logger.info(f"Created intent {intent.id} for candidate {actor.user_id} on job {job.id}")
        return intent

    def resume_intent(self, intent_id: Any, actor: Actor) -> PendingIntent:
        """
        Continue an interrupted apply.

        Ensures the match exists, then either points the candidate at the exam
        (next_step='exam') or applies and completes the intent (next_step='done').

        Raises:
            IntentNotFound, PermissionDenied, IntentExpired, plus anything the
            match or lifecycle services raise
        """
        intent = self._get_owned_intent(intent_id, actor)

        if intent.status == 'completed':
            return intent
        if intent.status != 'open':
            raise IntentExpired(f"Intent {intent.id} is {intent.status}")

        now = self.clock()
        if self._is_expired(intent, now):
            raise IntentExpired(f"Intent {intent.id} expired at {as_utc(intent.expires_at).isoformat()}")

        match = self.match_service.create_match(intent.job_id, intent.candidate_id)
        # create_match may have rolled back a lost insert race; reload
        intent = self._get_owned_intent(intent_id, actor)
        intent.match_id = match.id

        if parse_status(match.status) == MatchStatus.PENDING:
            passed, reason = self.lifecycle.check_exam_gate(match, match.job)
            if not passed:
                intent.next_step = 'exam'
                intent.updated_at = now
                self.repo.flush()
                logger.info(f"Intent {intent.id} waiting on exam: {reason}")
                return intent
            self.lifecycle.apply(match.id, actor)
        elif parse_status(match.status) not in APPLIED_OR_LATER:
            # Rejected matches cannot be applied to; let the lifecycle say why
            self.lifecycle.apply(match.id, actor)

        intent.status = 'completed'
        intent.next_step = 'done'
        intent.updated_at = now
        self.repo.flush()
        logger.info(f"Intent {intent.id} completed (match {match.id})")
        return intent

    def cancel_intent(self, intent_id: Any, actor: Actor) -> PendingIntent:
        intent = self._get_owned_intent(intent_id, actor)
        if intent.status == 'open':
            intent.status = 'cancelled'
            intent.updated_at = self.clock()
            self.repo.flush()
        return intent

    def _get_owned_intent(self, intent_id: Any, actor: Actor) -> PendingIntent:
        intent = self.repo.intents.get_by_id(intent_id)
        if intent is None:
            raise IntentNotFound(f"Intent {intent_id} not found")
        if not actor.owns_candidate(intent.candidate_id):
            raise PermissionDenied(f"Intent {intent_id} belongs to another candidate")
        return intent

    def _is_expired(self, intent: PendingIntent, now) -> bool:
        return as_utc(intent.expires_at) <= as_utc(now)

    def _candidate_pk(self, actor: Actor) -> Any:
        candidate = self.repo.candidates.get_by_id(to_uuid(actor.user_id))
        if candidate is None:
            raise PermissionDenied(f"Candidate {actor.user_id} has no profile")
        return candidate.id
