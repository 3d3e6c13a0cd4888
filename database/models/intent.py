import uuid

from sqlalchemy import Column, Text, TIMESTAMP, ForeignKey, Uuid, Index

from core.utils import utcnow
from .base import Base


class PendingIntent(Base):
    """
    Server-tracked draft of a workflow the candidate has started but not
    finished (e.g. "apply to this job" interrupted by sign-up or an exam).
    """
    __tablename__ = 'pending_intent'

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    candidate_id = Column(Uuid, ForeignKey('candidate_profile.id', ondelete='CASCADE'), nullable=False)
    job_id = Column(Uuid, ForeignKey('job_posting.id', ondelete='CASCADE'), nullable=False)
    match_id = Column(Uuid, ForeignKey('job_match.id', ondelete='SET NULL'))

    action = Column(Text, nullable=False, default='apply')
    status = Column(Text, nullable=False, default='open')  # open|completed|expired|cancelled
    next_step = Column(Text)  # exam|done

    expires_at = Column(TIMESTAMP(timezone=True), nullable=False)
    created_at = Column(TIMESTAMP(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(TIMESTAMP(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    __table_args__ = (
        Index('idx_pending_intent_candidate_job', 'candidate_id', 'job_id'),
    )
