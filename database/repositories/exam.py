from typing import List, Optional, Any

from sqlalchemy import select

from database.models import ExamAttempt
from database.repositories.base import BaseRepository


class ExamAttemptRepository(BaseRepository):
    def get_final_attempt(self, match_id: Any) -> Optional[ExamAttempt]:
        """The attempt that counts toward gating, if any."""
        stmt = select(ExamAttempt).where(
            ExamAttempt.match_id == match_id,
            ExamAttempt.is_final.is_(True)
        ).order_by(ExamAttempt.completed_at.desc())
        return self.db.execute(stmt).scalars().first()

    def get_attempts(self, match_id: Any) -> List[ExamAttempt]:
        stmt = select(ExamAttempt).where(
            ExamAttempt.match_id == match_id
        ).order_by(ExamAttempt.completed_at.asc())
        return list(self.db.execute(stmt).scalars().all())

    def add_attempt(self, attempt: ExamAttempt) -> ExamAttempt:
        self.db.add(attempt)
        self.db.flush()
        return attempt

    def supersede(self, attempt: ExamAttempt) -> None:
        attempt.is_final = False
        self.db.flush()
