"""API route handlers."""

from .matches import router as matches_router
from .exams import router as exams_router
from .chat import router as chat_router
from .jobs import router as jobs_router
from .score import router as score_router
from .intents import router as intents_router
