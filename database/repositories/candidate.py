from typing import Optional, Any

from sqlalchemy import select

from database.models import CandidateProfile
from database.repositories.base import BaseRepository


class CandidateRepository(BaseRepository):
    def get_by_id(self, candidate_id: Any) -> Optional[CandidateProfile]:
        stmt = select(CandidateProfile).where(CandidateProfile.id == candidate_id)
        return self.db.execute(stmt).scalar_one_or_none()

    def create_candidate(self, **fields) -> CandidateProfile:
        fields['skills'] = list(fields.get('skills') or [])
        candidate = CandidateProfile(**fields)
        self.db.add(candidate)
        self.db.flush()
        return candidate
