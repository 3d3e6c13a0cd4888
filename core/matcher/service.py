#!/usr/bin/env python3
"""
Match Service - creates and re-scores job/candidate matches.

At most one match exists per (job, candidate); a repeated create returns the
existing match. Scores are recomputed only when the scoring inputs change and
re-scoring never touches the lifecycle status.
"""
from typing import Any, Optional
import logging

from sqlalchemy.exc import IntegrityError

from database.models import JobMatch
from database.repository import MatchRepositoryHub
from core.actors import Actor
from core.exceptions import CandidateNotFound, JobClosed, JobNotFound, MatchNotFound, PermissionDenied, QuotaExceeded
from core.scorer import ScoringService

logger = logging.getLogger(__name__)


class MatchService:
    """
    Service for creating scored matches.

    Uniqueness is enforced twice: a read before insert for the common case and
    the uq_job_match_job_candidate constraint for concurrent creators.
    """

    def __init__(self, repo: MatchRepositoryHub, scorer: Optional[ScoringService] = None):
        """
        Initialize match service with dependencies.

        Args:
            repo: Repository hub bound to the caller's session
            scorer: ScoringService used to score new and changed matches
        """
        self.repo = repo
        self.scorer = scorer or ScoringService()

    def create_match(self, job_id: Any, candidate_id: Any, quota_available: bool = True) -> JobMatch:
        """
        Create (or return) the match between a job and a candidate.

        Must be the first write of its transaction: losing a concurrent insert
        rolls the session back before the winner's row is read.

        Args:
            job_id: Job posting id
            candidate_id: Candidate profile id
            quota_available: Billing pre-condition supplied by the caller

        Returns:
            The new or existing JobMatch

        Raises:
            JobNotFound, CandidateNotFound, JobClosed, QuotaExceeded
        """
        job = self.repo.jobs.get_by_id(job_id)
        if job is None:
            raise JobNotFound(f"Job {job_id} not found")

        candidate = self.repo.candidates.get_by_id(candidate_id)
        if candidate is None:
            raise CandidateNotFound(f"Candidate {candidate_id} not found")

        existing = self.repo.matches.get_existing_match(job.id, candidate.id)
        if existing is not None:
            logger.debug(f"Match already exists for job {job.id} / candidate {candidate.id}")
            return existing

        if job.status == 'closed':
            raise JobClosed(f"Job {job.id} is closed")

        if not quota_available:
            raise QuotaExceeded(f"Match quota exhausted; cannot match candidate {candidate.id} to job {job.id}")

        result = self.scorer.compute_match(job, candidate)
        job_pk, candidate_pk = job.id, candidate.id

        try:
            match = self.repo.matches.create_match(
                job_id=job_pk,
                candidate_id=candidate_pk,
                match_score=result.score,
                explanation=result.explanation,
                factors=result.factors_dict(),
                fingerprint=self.scorer.fingerprint(job, candidate)
            )
        except IntegrityError:
            self.repo.rollback()
            winner = self.repo.matches.get_existing_match(job_pk, candidate_pk)
            if winner is None:
                raise
            logger.info(f"Concurrent create for job {job_pk} / candidate {candidate_pk}; returning match {winner.id}")
            return winner

        logger.info(f"Created match {match.id} for job {job.id} / candidate {candidate.id}: score={result.score}")
        return match

    def refresh_score(self, match_id: Any, actor: Optional[Actor] = None) -> JobMatch:
        """
        Re-score a match if its job or candidate changed materially.

        Status and version are never touched.
        """
        match = self.get_match(match_id, actor)
        fingerprint = self.scorer.fingerprint(match.job, match.candidate)

        if fingerprint == match.inputs_fingerprint:
            logger.debug(f"Match {match.id} inputs unchanged; skipping re-score")
            return match

        result = self.scorer.compute_match(match.job, match.candidate)
        self.repo.matches.update_score(
            match,
            match_score=result.score,
            explanation=result.explanation,
            factors=result.factors_dict(),
            fingerprint=fingerprint
        )
        self.repo.flush()
        logger.info(f"Re-scored match {match.id}: {result.score}")
        return match

    def get_match(self, match_id: Any, actor: Optional[Actor] = None) -> JobMatch:
        """
        Load a match, optionally checking that the actor may see it.

        Raises:
            MatchNotFound: If the match does not exist.
            PermissionDenied: If the actor is neither the candidate nor the hiring organization.
        """
        match = self.repo.matches.get_by_id(match_id)
        if match is None:
            raise MatchNotFound(f"Match {match_id} not found")
        if actor is not None and not actor.can_see_match(match.candidate_id, match.job.organization_id):
            raise PermissionDenied(f"Actor may not read match {match.id}")
        return match
