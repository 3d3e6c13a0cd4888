from database.repositories.base import BaseRepository
from database.repositories.job_post import JobPostingRepository
from database.repositories.candidate import CandidateRepository
from database.repositories.match import MatchRepository
from database.repositories.application import ApplicationRepository
from database.repositories.exam import ExamAttemptRepository
from database.repositories.chat import ChatRoomRepository
from database.repositories.intent import IntentRepository

__all__ = [
    'BaseRepository',
    'JobPostingRepository',
    'CandidateRepository',
    'MatchRepository',
    'ApplicationRepository',
    'ExamAttemptRepository',
    'ChatRoomRepository',
    'IntentRepository',
]
