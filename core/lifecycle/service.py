#!/usr/bin/env python3
"""
Application Lifecycle State Machine.

Owns the canonical status of a match and keeps its ApplicationRecord in step.

Every transition:
1. Validates the edge against the table in states.py
2. Checks the caller's role and ownership
3. Applies the exam gate on pending -> applied
4. Writes the status with a conditional UPDATE on the version token
5. Mirrors the status onto the ApplicationRecord, appends a StatusChange
6. Closes the chat room when the match becomes terminal

All of it happens inside the caller's unit of work; any raised error rolls the
whole transition back.
"""

import logging
from typing import Any, Callable, List, Optional, Tuple, Union

from database.models import ApplicationRecord, JobMatch, JobPosting, StatusChange
from database.repository import MatchRepositoryHub
from core.actors import Actor, ActorRole
from core.chat.gate import ChatGate
from core.exceptions import ConflictError, InvalidTransition, MatchNotFound, PermissionDenied
from core.lifecycle.states import (
    MatchStatus,
    allowed_targets,
    is_terminal,
    parse_status,
    required_role,
)
from core.utils import utcnow

logger = logging.getLogger(__name__)

# Statuses that imply the candidate has applied (and so has an ApplicationRecord)
APPLIED_OR_LATER = frozenset({
    MatchStatus.APPLIED,
    MatchStatus.SCREENING,
    MatchStatus.INTERVIEW,
    MatchStatus.HIRED,
})


def display_label(match: JobMatch) -> str:
    """
    Presentational label for dashboards.

    "viewed" and "interested" are not lifecycle states: a pending match the
    candidate has opened reads "viewed", and an application the hiring team
    has opened reads "interested". Everything else shows the status itself.
    """
    status = parse_status(match.status)
    if status == MatchStatus.PENDING and match.candidate_viewed_at is not None:
        return 'viewed'
    if status == MatchStatus.APPLIED and match.employer_viewed_at is not None:
        return 'interested'
    return match.status


class LifecycleService:
    """Enforces legal, authorized, conflict-free status transitions."""

    def __init__(
        self,
        repo: MatchRepositoryHub,
        notifier=None,
        clock: Callable = utcnow
    ):
        self.repo = repo
        self.notifier = notifier
        self.clock = clock
        self.chat_gate = ChatGate(repo, notifier=notifier)

    def transition(
        self,
        match_id: Any,
        target: Union[str, MatchStatus],
        actor: Actor,
        expected_version: Optional[int] = None,
        expected_status: Optional[Union[str, MatchStatus]] = None,
        note: Optional[str] = None
    ) -> JobMatch:
        """
        Move a match to a new status.

        Args:
            match_id: Match to transition
            target: Requested status
            actor: Caller identity and role
            expected_version: Version the caller last read (optimistic check)
            expected_status: Status the caller last read (optimistic check)
            note: Optional free-text note stored in the status history

        Returns:
            The updated match

        Raises:
            MatchNotFound: If the match does not exist.
            ConflictError: If the match changed since the caller read it.
            InvalidTransition: If the edge is illegal or the exam gate is closed.
            PermissionDenied: If the actor may not trigger this edge.
        """
        match = self._get_match(match_id)
        job = match.job
        current = parse_status(match.status)

        requested = parse_status(target)
        if requested is None:
            raise InvalidTransition(match.status, str(target), "unknown status")

        self._check_expectations(match, expected_version, expected_status)

        if is_terminal(current, job.is_external):
            raise InvalidTransition(current.value, requested.value, "match is in a terminal state")

        role = required_role(current, requested, job.is_external)
        if role is None:
            allowed = ', '.join(sorted(s.value for s in allowed_targets(current, job.is_external)))
            raise InvalidTransition(current.value, requested.value, f"allowed targets: {allowed or 'none'}")

        self._authorize(actor, role, match, job, requested)

        if requested == MatchStatus.APPLIED:
            passed, reason = self.check_exam_gate(match, job)
            if not passed:
                raise InvalidTransition(current.value, requested.value, f"exam gate not satisfied: {reason}")

        read_version = match.version
        changed_at = self.clock()
        if not self.repo.matches.compare_and_set_status(match, requested.value, read_version, changed_at):
            raise ConflictError(match.id, f"version {read_version}", "a newer version")

        self._sync_application(match, changed_at)

        self.repo.matches.add_status_change(
            match,
            from_status=current.value,
            to_status=requested.value,
            actor_id=actor.user_id,
            actor_role=actor.role.value,
            note=note
        )

        if is_terminal(requested, job.is_external):
            self.chat_gate.close_for_match(match, changed_at)

        self.repo.flush()
        logger.info(
            f"Match {match.id}: {current.value} -> {requested.value} "
            f"by {actor.role.value} (version {match.version})"
        )

        self.repo.notify_after_commit(self.notifier, 'status_update', {
            'match_id': str(match.id),
            'job_id': str(match.job_id),
            'candidate_id': str(match.candidate_id),
            'previous_status': current.value,
            'new_status': requested.value,
        })

        return match

    def apply(self, match_id: Any, actor: Actor, expected_version: Optional[int] = None) -> JobMatch:
        """Candidate-initiated pending -> applied."""
        return self.transition(
            match_id,
            MatchStatus.APPLIED,
            actor,
            expected_version=expected_version,
            expected_status=MatchStatus.PENDING if expected_version is not None else None
        )

    def check_exam_gate(self, match: JobMatch, job: JobPosting) -> Tuple[bool, str]:
        """
        Whether the match may advance to applied with respect to the job's exam.

        Returns:
            (passed, reason)
        """
        if not job.has_exam:
            return True, "job has no exam"

        attempt = self.repo.exams.get_final_attempt(match.id)
        if attempt is None:
            return False, "no exam attempt recorded"
        if not attempt.passed:
            return False, f"final exam attempt scored {float(attempt.score):g}, below the passing score"
        return True, "passing exam attempt recorded"

    def get_application(self, match_id: Any) -> Optional[ApplicationRecord]:
        """
        ApplicationRecord for a match, checked against the match.

        The match is the single source of truth; a diverged record is repaired
        from it and the divergence logged.
        """
        match = self._get_match(match_id)
        record = self.repo.applications.get_by_match_id(match.id)

        if record is None:
            if parse_status(match.status) in APPLIED_OR_LATER:
                logger.warning(f"Match {match.id} is '{match.status}' without an application record; rebuilding")
                record = self.repo.applications.create_for_match(match, match.status_changed_at)
            return record

        if record.status != match.status:
            logger.warning(
                f"Application {record.id} status '{record.status}' diverged from "
                f"match {match.id} status '{match.status}'; repairing"
            )
            self.repo.applications.sync_status(record, match.status, self.clock())
            self.repo.flush()

        return record

    def mark_viewed(self, match_id: Any, actor: Actor) -> JobMatch:
        """
        Record that the candidate or the hiring team opened the match.

        Not a status change: the version token is left untouched so viewing
        never conflicts with a concurrent transition.
        """
        match = self._get_match(match_id)
        now = self.clock()

        if actor.owns_candidate(match.candidate_id):
            if match.candidate_viewed_at is None:
                match.candidate_viewed_at = now
        elif actor.acts_for_organization(match.job.organization_id):
            if match.employer_viewed_at is None:
                match.employer_viewed_at = now
        else:
            raise PermissionDenied(f"Actor may not view match {match.id}")

        self.repo.flush()
        return match

    def history(self, match_id: Any) -> List[StatusChange]:
        self._get_match(match_id)
        return self.repo.matches.get_status_history(match_id)

    def _get_match(self, match_id: Any) -> JobMatch:
        match = self.repo.matches.get_by_id(match_id)
        if match is None:
            raise MatchNotFound(f"Match {match_id} not found")
        return match

    def _check_expectations(
        self,
        match: JobMatch,
        expected_version: Optional[int],
        expected_status: Optional[Union[str, MatchStatus]]
    ) -> None:
        if expected_version is not None and int(expected_version) != match.version:
            raise ConflictError(match.id, f"version {expected_version}", f"version {match.version}")

        if expected_status is not None:
            expected = parse_status(expected_status)
            if expected is None or expected.value != match.status:
                raise ConflictError(match.id, f"status {expected_status}", f"status {match.status}")

    def _authorize(
        self,
        actor: Actor,
        role: ActorRole,
        match: JobMatch,
        job: JobPosting,
        requested: MatchStatus
    ) -> None:
        if role == ActorRole.CANDIDATE:
            # The system may act for the candidate (deferred apply after an exam pass)
            if actor.role == ActorRole.SYSTEM or actor.owns_candidate(match.candidate_id):
                return
            raise PermissionDenied(f"Only the candidate can move match {match.id} to '{requested.value}'")

        if role == ActorRole.HIRING_ORG:
            if actor.acts_for_organization(job.organization_id):
                return
            raise PermissionDenied(
                f"Only the hiring organization of job {job.id} can move match {match.id} to '{requested.value}'"
            )

        raise PermissionDenied(f"No actor may move match {match.id} to '{requested.value}'")

    def _sync_application(self, match: JobMatch, changed_at) -> None:
        record = self.repo.applications.get_by_match_id(match.id)
        if record is None:
            if parse_status(match.status) in APPLIED_OR_LATER:
                self.repo.applications.create_for_match(match, changed_at)
            return
        self.repo.applications.sync_status(record, match.status, changed_at)
