import uuid

from sqlalchemy import Column, Text, TIMESTAMP, ForeignKey, Integer, Numeric, Uuid, UniqueConstraint, Index
from sqlalchemy.orm import relationship

from core.utils import utcnow
from .base import Base, JSONType


class JobMatch(Base):
    """
    Links one job posting to one candidate profile.

    Tracks:
    - Compatibility score and its human-readable explanation
    - Lifecycle status (pending|applied|screening|interview|hired|rejected)
    - Optimistic concurrency version, bumped on every status change
    - Input fingerprint so the score is only recomputed on material change
    """
    __tablename__ = 'job_match'

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    job_id = Column(Uuid, ForeignKey('job_posting.id', ondelete='CASCADE'), nullable=False)
    candidate_id = Column(Uuid, ForeignKey('candidate_profile.id', ondelete='CASCADE'), nullable=False)

    match_score = Column(Numeric(5, 2), nullable=False, default=0)
    ai_explanation = Column(Text)
    score_factors = Column(JSONType, default=dict)
    inputs_fingerprint = Column(Text)

    status = Column(Text, nullable=False, default='pending')
    version = Column(Integer, nullable=False, default=1)

    candidate_viewed_at = Column(TIMESTAMP(timezone=True))
    employer_viewed_at = Column(TIMESTAMP(timezone=True))
    created_at = Column(TIMESTAMP(timezone=True), nullable=False, default=utcnow)
    status_changed_at = Column(TIMESTAMP(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(TIMESTAMP(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    job = relationship("JobPosting", back_populates="matches")
    candidate = relationship("CandidateProfile", back_populates="matches")
    application = relationship("ApplicationRecord", back_populates="match", uselist=False, cascade="all, delete-orphan")
    status_changes = relationship(
        "StatusChange",
        back_populates="match",
        cascade="all, delete-orphan",
        order_by="StatusChange.created_at"
    )
    exam_attempts = relationship("ExamAttempt", back_populates="match", cascade="all, delete-orphan")
    chat_room = relationship("ChatRoom", back_populates="match", uselist=False, cascade="all, delete-orphan")

    __table_args__ = (
        UniqueConstraint('job_id', 'candidate_id', name='uq_job_match_job_candidate'),
        Index('idx_job_match_candidate', 'candidate_id'),
        Index('idx_job_match_job_score', 'job_id', 'match_score'),
        Index('idx_job_match_status', 'status'),
        Index('idx_job_match_created', 'created_at'),
    )


class ApplicationRecord(Base):
    """
    Candidate-side view of a match once the candidate has applied.

    status mirrors JobMatch.status and is only ever written in the same
    transaction as the match it belongs to.
    """
    __tablename__ = 'application_record'

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    match_id = Column(Uuid, ForeignKey('job_match.id', ondelete='CASCADE'), nullable=False, unique=True)
    job_id = Column(Uuid, nullable=False)
    candidate_id = Column(Uuid, nullable=False)

    status = Column(Text, nullable=False)
    applied_at = Column(TIMESTAMP(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(TIMESTAMP(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    match = relationship("JobMatch", back_populates="application")

    __table_args__ = (
        Index('idx_application_candidate', 'candidate_id'),
        Index('idx_application_job', 'job_id'),
    )


class StatusChange(Base):
    """
    Append-only audit trail of lifecycle transitions.
    """
    __tablename__ = 'match_status_change'

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    match_id = Column(Uuid, ForeignKey('job_match.id', ondelete='CASCADE'), nullable=False)

    from_status = Column(Text, nullable=False)
    to_status = Column(Text, nullable=False)
    actor_id = Column(Text)
    actor_role = Column(Text, nullable=False)  # candidate|hiring_org|system
    note = Column(Text)

    created_at = Column(TIMESTAMP(timezone=True), nullable=False, default=utcnow)

    match = relationship("JobMatch", back_populates="status_changes")

    __table_args__ = (
        Index('idx_status_change_match', 'match_id'),
    )
