#!/usr/bin/env python3
"""
Error taxonomy for the match & application lifecycle engine.

Every error raised by a core operation derives from ServiceException so the
HTTP layer can translate it in one place. State-changing operations raise
before anything is committed; the unit-of-work scope rolls the transaction
back, so a raised error never leaves partial writes behind.

Insufficient scoring data is deliberately absent here: the scorer degrades to
a low score and flags it on the result instead of raising.
"""

from typing import Optional


class ServiceException(Exception):
    """Base exception for service layer errors."""
    pass


class NotFoundError(ServiceException):
    """Referenced entity does not exist."""
    pass


class JobNotFound(NotFoundError):
    """Raised when a job posting is not found."""
    pass


class CandidateNotFound(NotFoundError):
    """Raised when a candidate profile is not found."""
    pass


class MatchNotFound(NotFoundError):
    """Raised when a match is not found."""
    pass


class ExamAttemptNotFound(NotFoundError):
    """Raised when an exam attempt is not found."""
    pass


class IntentNotFound(NotFoundError):
    """Raised when a pending intent is not found."""
    pass


class InvalidTransition(ServiceException):
    """
    Lifecycle rule violated.

    Carries the current and requested status so callers can show
    "please refresh and retry" with context.
    """

    def __init__(self, current: str, requested: str, reason: Optional[str] = None):
        self.current = current
        self.requested = requested
        self.reason = reason
        message = f"Invalid transition from '{current}' to '{requested}'"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class ConflictError(ServiceException):
    """Optimistic concurrency check failed; caller must re-read and retry."""

    def __init__(self, match_id, expected: Optional[str] = None, actual: Optional[str] = None):
        self.match_id = match_id
        self.expected = expected
        self.actual = actual
        message = f"Match {match_id} was modified concurrently"
        if expected is not None:
            message = f"{message} (expected {expected}, found {actual})"
        super().__init__(message)


class AlreadySubmitted(ServiceException):
    """Raised when a final exam attempt exists and retakes are not allowed."""
    pass


class JobHasNoExam(ServiceException):
    """Raised when an exam is submitted against a job without exam configuration."""
    pass


class JobClosed(ServiceException):
    """Raised when a new match is requested for a closed job."""
    pass


class QuotaExceeded(ServiceException):
    """Raised when the billing quota pre-condition rejects a new match."""
    pass


class PermissionDenied(ServiceException):
    """Raised when the caller's identity or role may not perform the operation."""
    pass


class ChatNotAvailable(ServiceException):
    """Raised when the chat gate does not authorize a room for the match."""
    pass


class IntentExpired(ServiceException):
    """Raised when a pending intent is resumed after its expiry."""
    pass
