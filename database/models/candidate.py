import uuid

from sqlalchemy import Column, Text, TIMESTAMP, Uuid
from sqlalchemy.orm import relationship

from core.utils import utcnow
from .base import Base, JSONType


class CandidateProfile(Base):
    """Candidate-owned profile used as the scoring input on the candidate side."""
    __tablename__ = 'candidate_profile'

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    full_name = Column(Text)

    skills = Column(JSONType, nullable=False, default=list)
    experience_level = Column(Text)
    location = Column(Text)
    preferred_work_mode = Column(Text)  # remote|hybrid|onsite, optional

    links = Column(JSONType, nullable=False, default=dict)
    availability = Column(Text)
    resume_ref = Column(Text)

    created_at = Column(TIMESTAMP(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(TIMESTAMP(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    matches = relationship("JobMatch", back_populates="candidate", cascade="all, delete-orphan", passive_deletes=True)
