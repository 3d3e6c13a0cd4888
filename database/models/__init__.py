from .base import Base, JSONType
from .job import JobPosting, JobExam
from .candidate import CandidateProfile
from .match import JobMatch, ApplicationRecord, StatusChange
from .exam import ExamAttempt
from .chat import ChatRoom
from .intent import PendingIntent

__all__ = [
    'Base',
    'JSONType',
    'JobPosting',
    'JobExam',
    'CandidateProfile',
    'JobMatch',
    'ApplicationRecord',
    'StatusChange',
    'ExamAttempt',
    'ChatRoom',
    'PendingIntent',
]
