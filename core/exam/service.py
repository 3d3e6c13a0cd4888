#!/usr/bin/env python3
"""
Exam Service - grades job exam submissions and feeds the lifecycle exam gate.

A passing attempt on a pending match advances it to applied in the same
transaction, acting as the system on the candidate's behalf.
"""

import logging
from datetime import datetime, timedelta
from typing import Any, Callable, Dict, List, Optional

from sqlalchemy.exc import IntegrityError

from database.models import ExamAttempt
from database.repository import MatchRepositoryHub
from core.actors import Actor, same_id
from core.config_loader import ExamConfig
from core.exam.grading import grade
from core.exceptions import (
    AlreadySubmitted,
    ExamAttemptNotFound,
    InvalidTransition,
    JobHasNoExam,
    MatchNotFound,
    PermissionDenied,
)
from core.lifecycle.service import LifecycleService
from core.lifecycle.states import MatchStatus, is_terminal, parse_status
from core.utils import as_utc, utcnow

logger = logging.getLogger(__name__)


class ExamService:
    def __init__(
        self,
        repo: MatchRepositoryHub,
        lifecycle: Optional[LifecycleService] = None,
        config: Optional[ExamConfig] = None,
        notifier=None,
        clock: Callable = utcnow
    ):
        self.repo = repo
        self.config = config or ExamConfig()
        self.notifier = notifier
        self.clock = clock
        self.lifecycle = lifecycle or LifecycleService(repo, notifier=notifier, clock=clock)

    def submit_exam(
        self,
        match_id: Any,
        candidate_id: Any,
        answers: Dict[str, Any],
        started_at: Optional[datetime] = None
    ) -> ExamAttempt:
        """
        Grade and record an exam submission.

        Args:
            match_id: Match the exam belongs to
            candidate_id: Submitting candidate (must own the match)
            answers: Mapping of question id to answer
            started_at: When the candidate opened the exam; enables the time limit

        Returns:
            The recorded ExamAttempt

        Raises:
            MatchNotFound, PermissionDenied, InvalidTransition, JobHasNoExam,
            AlreadySubmitted
        """
        match = self.repo.matches.get_by_id(match_id)
        if match is None:
            raise MatchNotFound(f"Match {match_id} not found")

        if not same_id(match.candidate_id, candidate_id):
            raise PermissionDenied(f"Candidate {candidate_id} does not own match {match.id}")

        job = match.job
        status = parse_status(match.status)
        if is_terminal(status, job.is_external):
            raise InvalidTransition(match.status, MatchStatus.APPLIED.value, "match is in a terminal state")

        if not job.has_exam:
            raise JobHasNoExam(f"Job {job.id} has no exam")
        exam = job.exam

        previous = self.repo.exams.get_final_attempt(match.id)
        if previous is not None:
            if not exam.allow_retakes:
                raise AlreadySubmitted(f"Exam for match {match.id} was already submitted")
            self.repo.exams.supersede(previous)

        completed_at = self.clock()
        result = grade(exam.questions or [], answers, exam.grading_policy or 'percentage')
        passing_score = float(exam.passing_score) if exam.passing_score is not None \
            else self.config.default_passing_score
        timed_out = self._is_overdue(exam.time_limit_minutes, started_at, completed_at)
        passed = result.score >= passing_score and not timed_out

        try:
            attempt = self.repo.exams.add_attempt(ExamAttempt(
                match_id=match.id,
                candidate_id=match.candidate_id,
                job_id=job.id,
                answers=dict(answers or {}),
                score=result.score,
                correct_answers=result.correct_answers,
                total_questions=result.total_questions,
                passed=passed,
                is_final=True,
                timed_out=timed_out,
                started_at=started_at,
                completed_at=completed_at
            ))
        except IntegrityError as e:
            # A concurrent submission recorded the final attempt first
            raise AlreadySubmitted(f"Exam for match {match.id} was already submitted") from e

        logger.info(
            f"Exam attempt {attempt.id} for match {match.id}: score={result.score} "
            f"passed={passed} timed_out={timed_out}"
        )

        if passed and status == MatchStatus.PENDING:
            self.lifecycle.transition(
                match.id,
                MatchStatus.APPLIED,
                Actor.system(),
                note="exam passed"
            )

        self.repo.notify_after_commit(self.notifier, 'exam_completed', {
            'match_id': str(match.id),
            'job_id': str(job.id),
            'candidate_id': str(match.candidate_id),
            'job_title': job.title,
            'score': result.score,
            'passed': passed,
        })

        return attempt

    def get_attempts(self, match_id: Any) -> List[ExamAttempt]:
        return self.repo.exams.get_attempts(match_id)

    def get_result(self, match_id: Any) -> ExamAttempt:
        """The attempt that currently counts toward the exam gate."""
        match = self.repo.matches.get_by_id(match_id)
        if match is None:
            raise MatchNotFound(f"Match {match_id} not found")
        attempt = self.repo.exams.get_final_attempt(match.id)
        if attempt is None:
            raise ExamAttemptNotFound(f"No exam attempt recorded for match {match.id}")
        return attempt

    def _is_overdue(
        self,
        time_limit_minutes: Optional[int],
        started_at: Optional[datetime],
        completed_at: datetime
    ) -> bool:
        if started_at is None:
            return False
        limit = time_limit_minutes or self.config.default_time_limit_minutes
        if not limit:
            return False
        deadline = as_utc(started_at) + timedelta(minutes=limit, seconds=self.config.time_limit_grace_seconds)
        return as_utc(completed_at) > deadline
