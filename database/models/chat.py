import uuid

from sqlalchemy import Column, Text, TIMESTAMP, ForeignKey, Uuid
from sqlalchemy.orm import relationship

from core.utils import utcnow
from .base import Base


class ChatRoom(Base):
    """
    One-to-one with a match; holds no conversation state.

    Message delivery belongs to the external realtime transport.
    """
    __tablename__ = 'chat_room'

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    match_id = Column(Uuid, ForeignKey('job_match.id', ondelete='CASCADE'), nullable=False, unique=True)
    job_id = Column(Uuid, nullable=False)
    candidate_id = Column(Uuid, nullable=False)
    opened_by = Column(Text)

    status = Column(Text, nullable=False, default='open')  # open|closed
    created_at = Column(TIMESTAMP(timezone=True), nullable=False, default=utcnow)
    closed_at = Column(TIMESTAMP(timezone=True))

    match = relationship("JobMatch", back_populates="chat_room")

    @property
    def is_open(self) -> bool:
        return self.status == 'open'
