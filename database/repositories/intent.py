from typing import Optional, Any

from sqlalchemy import select

from database.models import PendingIntent
from database.repositories.base import BaseRepository


class IntentRepository(BaseRepository):
    def get_by_id(self, intent_id: Any) -> Optional[PendingIntent]:
        stmt = select(PendingIntent).where(PendingIntent.id == intent_id)
        return self.db.execute(stmt).scalar_one_or_none()

    def get_open_intent(self, candidate_id: Any, job_id: Any, action: str = 'apply') -> Optional[PendingIntent]:
        stmt = select(PendingIntent).where(
            PendingIntent.candidate_id == candidate_id,
            PendingIntent.job_id == job_id,
            PendingIntent.action == action,
            PendingIntent.status == 'open'
        ).order_by(PendingIntent.created_at.desc())
        return self.db.execute(stmt).scalars().first()

    def add_intent(self, intent: PendingIntent) -> PendingIntent:
        self.db.add(intent)
        self.db.flush()
        return intent
