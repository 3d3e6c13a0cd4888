import logging
from typing import Optional, Any, Iterable

from sqlalchemy import select

from database.models import JobPosting, JobExam
from database.repositories.base import BaseRepository

logger = logging.getLogger(__name__)


class JobPostingRepository(BaseRepository):
    def get_by_id(self, job_id: Any) -> Optional[JobPosting]:
        stmt = select(JobPosting).where(JobPosting.id == job_id)
        return self.db.execute(stmt).scalar_one_or_none()

    def create_job(self, **fields) -> JobPosting:
        fields['required_skills'] = list(fields.get('required_skills') or [])
        job = JobPosting(**fields)
        self.db.add(job)
        self.db.flush()  # Generate ID
        return job

    def set_status(self, job: JobPosting, status: str) -> JobPosting:
        """Open or close a posting; closed postings accept no new matches."""
        previous = job.status
        job.status = status
        self.db.flush()
        logger.info(f"Job {job.id} status: {previous} -> {status}")
        return job

    def attach_exam(
        self,
        job: JobPosting,
        questions: Iterable[dict],
        passing_score: Optional[float] = None,
        time_limit_minutes: Optional[int] = None,
        allow_retakes: bool = False,
        grading_policy: str = 'percentage',
        title: Optional[str] = None
    ) -> JobExam:
        exam = JobExam(
            job_id=job.id,
            title=title or f"{job.title} assessment",
            questions=list(questions),
            passing_score=passing_score,
            time_limit_minutes=time_limit_minutes,
            allow_retakes=allow_retakes,
            grading_policy=grading_policy,
            is_active=True
        )
        self.db.add(exam)
        self.db.flush()
        job.exam = exam
        return exam
