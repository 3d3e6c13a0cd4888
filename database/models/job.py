import uuid

from sqlalchemy import Column, Integer, Text, TIMESTAMP, ForeignKey, Boolean, Numeric, Uuid, Index
from sqlalchemy.orm import relationship

from core.utils import utcnow
from .base import Base, JSONType


class JobPosting(Base):
    """
    A job owned by a hiring organization.

    External jobs (source='external') originate off-platform: candidates can
    only be marked applied and are never offered chat.
    """
    __tablename__ = 'job_posting'

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    organization_id = Column(Uuid, nullable=True)

    # Core Identity
    title = Column(Text, nullable=False)
    company = Column(Text, nullable=False)
    location = Column(Text)
    work_mode = Column(Text, nullable=False, default='onsite')  # remote|hybrid|onsite
    experience_level = Column(Text)  # target level, e.g. junior|mid|senior

    required_skills = Column(JSONType, nullable=False, default=list)

    salary_min = Column(Numeric)
    salary_max = Column(Numeric)

    status = Column(Text, nullable=False, default='active')  # active|paused|closed
    source = Column(Text, nullable=False, default='platform')  # platform|external
    external_url = Column(Text)

    created_at = Column(TIMESTAMP(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(TIMESTAMP(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    # Relationships
    exam = relationship("JobExam", back_populates="job", uselist=False, cascade="all, delete-orphan")
    matches = relationship("JobMatch", back_populates="job", cascade="all, delete-orphan", passive_deletes=True)

    __table_args__ = (
        Index('idx_job_posting_org', 'organization_id'),
        Index('idx_job_posting_status', 'status'),
    )

    @property
    def is_external(self) -> bool:
        return self.source == 'external'

    @property
    def has_exam(self) -> bool:
        return self.exam is not None and bool(self.exam.is_active)


class JobExam(Base):
    """
    Optional assessment attached to a job.

    questions: [{"id": "q1", "prompt": "...", "correct_answer": "...", "points": 10}]
    """
    __tablename__ = 'job_exam'

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    job_id = Column(Uuid, ForeignKey('job_posting.id', ondelete='CASCADE'), nullable=False, unique=True)

    title = Column(Text)
    questions = Column(JSONType, nullable=False, default=list)
    time_limit_minutes = Column(Integer)
    passing_score = Column(Numeric(5, 2))
    allow_retakes = Column(Boolean, nullable=False, default=False)
    grading_policy = Column(Text, nullable=False, default='percentage')  # percentage|weighted
    is_active = Column(Boolean, nullable=False, default=True)

    created_at = Column(TIMESTAMP(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(TIMESTAMP(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    job = relationship("JobPosting", back_populates="exam")
