import logging
from datetime import datetime
from typing import List, Optional, Any, Dict

from sqlalchemy import select, update

from database.models import JobMatch, StatusChange
from database.repositories.base import BaseRepository

logger = logging.getLogger(__name__)


class MatchRepository(BaseRepository):
    def get_by_id(self, match_id: Any) -> Optional[JobMatch]:
        stmt = select(JobMatch).where(JobMatch.id == match_id)
        return self.db.execute(stmt).scalar_one_or_none()

    def get_existing_match(
        self,
        job_id: Any,
        candidate_id: Any
    ) -> Optional[JobMatch]:
        stmt = select(JobMatch).where(
            JobMatch.job_id == job_id,
            JobMatch.candidate_id == candidate_id
        )
        return self.db.execute(stmt).scalar_one_or_none()

    def create_match(
        self,
        job_id: Any,
        candidate_id: Any,
        match_score: float,
        explanation: str,
        factors: Dict[str, Any],
        fingerprint: str
    ) -> JobMatch:
        match = JobMatch(
            job_id=job_id,
            candidate_id=candidate_id,
            match_score=match_score,
            ai_explanation=explanation,
            score_factors=factors,
            inputs_fingerprint=fingerprint,
            status='pending',
            version=1
        )
        self.db.add(match)
        self.db.flush()  # Surfaces uq_job_match_job_candidate violations here
        return match

    def update_score(
        self,
        match: JobMatch,
        match_score: float,
        explanation: str,
        factors: Dict[str, Any],
        fingerprint: str
    ) -> None:
        match.match_score = match_score
        match.ai_explanation = explanation
        match.score_factors = factors
        match.inputs_fingerprint = fingerprint

    def compare_and_set_status(
        self,
        match: JobMatch,
        new_status: str,
        read_version: int,
        changed_at: datetime
    ) -> bool:
        """
        Conditionally move a match to new_status.

        Only succeeds if the stored version still equals read_version, i.e.
        nobody else changed the match since it was read. Bumps the version.

        Returns:
            True if exactly one row was updated.
        """
        self.db.flush()
        stmt = (
            update(JobMatch)
            .where(JobMatch.id == match.id, JobMatch.version == read_version)
            .values(
                status=new_status,
                version=read_version + 1,
                status_changed_at=changed_at,
                updated_at=changed_at
            )
            .execution_options(synchronize_session=False)
        )
        result = self.db.execute(stmt)
        if result.rowcount != 1:
            logger.warning(
                f"Conditional status update missed for match {match.id} "
                f"(read version {read_version}, target {new_status})"
            )
            return False

        self.db.refresh(match)
        return True

    def get_matches_for_job(
        self,
        job_id: Any,
        include_rejected: bool = False,
        limit: Optional[int] = None
    ) -> List[JobMatch]:
        """Matches for a job, best score first, earliest first among equals."""
        stmt = select(JobMatch).where(JobMatch.job_id == job_id)

        if not include_rejected:
            stmt = stmt.where(JobMatch.status != 'rejected')

        stmt = stmt.order_by(
            JobMatch.match_score.desc(),
            JobMatch.created_at.asc(),
            JobMatch.id.asc()
        )

        if limit is not None:
            stmt = stmt.limit(limit)

        return list(self.db.execute(stmt).scalars().all())

    def add_status_change(
        self,
        match: JobMatch,
        from_status: str,
        to_status: str,
        actor_id: Optional[str],
        actor_role: str,
        note: Optional[str] = None
    ) -> StatusChange:
        change = StatusChange(
            match_id=match.id,
            from_status=from_status,
            to_status=to_status,
            actor_id=actor_id,
            actor_role=actor_role,
            note=note
        )
        self.db.add(change)
        return change

    def get_status_history(self, match_id: Any) -> List[StatusChange]:
        self.db.flush()
        stmt = select(StatusChange).where(
            StatusChange.match_id == match_id
        ).order_by(StatusChange.created_at.asc())
        return list(self.db.execute(stmt).scalars().all())
