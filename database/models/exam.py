import uuid

from sqlalchemy import Column, Text, TIMESTAMP, ForeignKey, Boolean, Integer, Numeric, Uuid, Index
from sqlalchemy.orm import relationship

from core.utils import utcnow
from .base import Base, JSONType


class ExamAttempt(Base):
    """
    A graded exam submission for one (match, candidate) pair.

    Immutable once written; only is_final is cleared when a permitted
    retake supersedes it.
    """
    __tablename__ = 'exam_attempt'

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    match_id = Column(Uuid, ForeignKey('job_match.id', ondelete='CASCADE'), nullable=False)
    candidate_id = Column(Uuid, nullable=False)
    job_id = Column(Uuid, nullable=False)

    answers = Column(JSONType, nullable=False, default=dict)
    score = Column(Numeric(5, 2), nullable=False)
    correct_answers = Column(Integer, nullable=False, default=0)
    total_questions = Column(Integer, nullable=False, default=0)
    passed = Column(Boolean, nullable=False, default=False)
    is_final = Column(Boolean, nullable=False, default=True)
    timed_out = Column(Boolean, nullable=False, default=False)

    started_at = Column(TIMESTAMP(timezone=True))
    completed_at = Column(TIMESTAMP(timezone=True), nullable=False, default=utcnow)

    match = relationship("JobMatch", back_populates="exam_attempts")

    __table_args__ = (
        Index('idx_exam_attempt_match', 'match_id'),
        # At most one final attempt per match, even under concurrent submissions
        Index(
            'uq_exam_attempt_final_per_match', 'match_id',
            unique=True,
            postgresql_where=is_final.is_(True),
            sqlite_where=is_final.is_(True)
        ),
    )
