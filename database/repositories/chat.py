from datetime import datetime
from typing import Optional, Any

from sqlalchemy import select

from database.models import ChatRoom, JobMatch
from database.repositories.base import BaseRepository


class ChatRoomRepository(BaseRepository):
    def get_by_match_id(self, match_id: Any) -> Optional[ChatRoom]:
        stmt = select(ChatRoom).where(ChatRoom.match_id == match_id)
        return self.db.execute(stmt).scalar_one_or_none()

    def create_room(self, match: JobMatch, opened_by: Optional[str]) -> ChatRoom:
        room = ChatRoom(
            match_id=match.id,
            job_id=match.job_id,
            candidate_id=match.candidate_id,
            opened_by=opened_by,
            status='open'
        )
        self.db.add(room)
        self.db.flush()
        return room

    def close_room(self, room: ChatRoom, closed_at: datetime) -> None:
        room.status = 'closed'
        room.closed_at = closed_at
