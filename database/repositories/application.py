import logging
from datetime import datetime
from typing import Optional, Any

from sqlalchemy import select

from database.models import ApplicationRecord, JobMatch
from database.repositories.base import BaseRepository

logger = logging.getLogger(__name__)


class ApplicationRepository(BaseRepository):
    def get_by_match_id(self, match_id: Any) -> Optional[ApplicationRecord]:
        stmt = select(ApplicationRecord).where(ApplicationRecord.match_id == match_id)
        return self.db.execute(stmt).scalar_one_or_none()

    def create_for_match(self, match: JobMatch, applied_at: datetime) -> ApplicationRecord:
        record = ApplicationRecord(
            match_id=match.id,
            job_id=match.job_id,
            candidate_id=match.candidate_id,
            status=match.status,
            applied_at=applied_at,
            updated_at=applied_at
        )
        self.db.add(record)
        self.db.flush()
        return record

    def sync_status(self, record: ApplicationRecord, status: str, changed_at: datetime) -> None:
        record.status = status
        record.updated_at = changed_at
