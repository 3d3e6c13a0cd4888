"""
Ranking Service - ordered candidate list for a job.

Order is match_score desc, created_at asc, id asc. The id tie-break keeps the
order stable across calls even when two matches share score and timestamp.
"""

import logging
from typing import Any, List, Optional

from database.models import JobMatch
from database.repository import MatchRepositoryHub
from core.config_loader import RankingConfig
from core.actors import Actor, ActorRole
from core.exceptions import JobNotFound, PermissionDenied

logger = logging.getLogger(__name__)


class RankingService:
    def __init__(self, repo: MatchRepositoryHub, config: Optional[RankingConfig] = None):
        self.repo = repo
        self.config = config or RankingConfig()

    def rank_candidates(
        self,
        job_id: Any,
        include_rejected: bool = False,
        limit: Optional[int] = None,
        actor: Optional[Actor] = None
    ) -> List[JobMatch]:
        """
        Matches for a job in ranking order.

        Args:
            job_id: Job to rank
            include_rejected: "Show all" view; rejected matches are hidden otherwise
            limit: Maximum number of matches (defaults to ranking.default_limit)
            actor: When given, must act for the job's organization (or be the system)

        Raises:
            JobNotFound: If the job does not exist.
            PermissionDenied: If the actor is not the hiring organization of the job.
        """
        job = self.repo.jobs.get_by_id(job_id)
        if job is None:
            raise JobNotFound(f"Job {job_id} not found")

        if actor is not None and actor.role != ActorRole.SYSTEM and not actor.acts_for_organization(job.organization_id):
            raise PermissionDenied(f"Only the hiring organization of job {job.id} can see its ranking")

        if limit is None:
            limit = self.config.default_limit

        matches = self.repo.matches.get_matches_for_job(
            job.id,
            include_rejected=include_rejected,
            limit=limit
        )
        logger.debug(f"Ranked {len(matches)} matches for job {job.id} (include_rejected={include_rejected})")
        return matches
