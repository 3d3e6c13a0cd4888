#!/usr/bin/env python3
"""
Repository-level tests: uniqueness, conditional status writes, ordering,
unit-of-work rollback and post-commit notifications.
"""

import unittest
from datetime import timedelta
from unittest.mock import Mock

from sqlalchemy.exc import IntegrityError

from core.utils import utcnow
from database.models import ExamAttempt
from database.uow import match_uow
from tests import create_test_session_factory
from tests.fixtures.factories import make_candidate, make_job, make_match


class RepositoryTestCase(unittest.TestCase):

    def setUp(self):
        self.Session = create_test_session_factory()


class TestMatchRepository(RepositoryTestCase):

    def test_duplicate_match_violates_constraint(self):
        with self.assertRaises(IntegrityError):
            with match_uow(self.Session) as repo:
                job = make_job(repo)
                candidate = make_candidate(repo)
                make_match(repo, job, candidate)
                make_match(repo, job, candidate)

    def test_compare_and_set_status_bumps_version(self):
        with match_uow(self.Session) as repo:
            match = make_match(repo, make_job(repo), make_candidate(repo))

            self.assertTrue(repo.matches.compare_and_set_status(match, 'applied', 1, utcnow()))
            self.assertEqual(match.status, 'applied')
            self.assertEqual(match.version, 2)

    def test_compare_and_set_status_rejects_stale_version(self):
        with match_uow(self.Session) as repo:
            match = make_match(repo, make_job(repo), make_candidate(repo))
            repo.matches.compare_and_set_status(match, 'applied', 1, utcnow())

            with self.assertLogs('database.repositories.match', level='WARNING'):
                self.assertFalse(repo.matches.compare_and_set_status(match, 'rejected', 1, utcnow()))
            self.assertEqual(match.status, 'applied')

    def test_matches_for_job_order(self):
        with match_uow(self.Session) as repo:
            job = make_job(repo)
            base = utcnow()
            late_tie = make_match(repo, job, make_candidate(repo, full_name="Late"), score=70.0)
            early_tie = make_match(repo, job, make_candidate(repo, full_name="Early"), score=70.0)
            best = make_match(repo, job, make_candidate(repo, full_name="Best"), score=91.5)
            late_tie.created_at = base + timedelta(minutes=5)
            early_tie.created_at = base
            repo.flush()

            ranked = repo.matches.get_matches_for_job(job.id)

            self.assertEqual([m.id for m in ranked], [best.id, early_tie.id, late_tie.id])
            self.assertEqual(len(repo.matches.get_matches_for_job(job.id, limit=2)), 2)

    def test_rejected_matches_filtered_by_default(self):
        with match_uow(self.Session) as repo:
            job = make_job(repo)
            kept = make_match(repo, job, make_candidate(repo))
            dropped = make_match(repo, job, make_candidate(repo, full_name="Other"))
            repo.matches.compare_and_set_status(dropped, 'rejected', 1, utcnow())

            self.assertEqual([m.id for m in repo.matches.get_matches_for_job(job.id)], [kept.id])
            self.assertEqual(len(repo.matches.get_matches_for_job(job.id, include_rejected=True)), 2)

    def test_zero_limit_returns_nothing(self):
        with match_uow(self.Session) as repo:
            job = make_job(repo)
            make_match(repo, job, make_candidate(repo))

            self.assertEqual(repo.matches.get_matches_for_job(job.id, limit=0), [])
            self.assertEqual(len(repo.matches.get_matches_for_job(job.id, limit=None)), 1)


class TestJobPostingRepository(RepositoryTestCase):

    def test_set_status(self):
        with match_uow(self.Session) as repo:
            job = make_job(repo)
            with self.assertLogs('database.repositories.job_post', level='INFO'):
                repo.jobs.set_status(job, 'closed')

        with match_uow(self.Session) as repo:
            self.assertEqual(repo.jobs.get_by_id(job.id).status, 'closed')


class TestExamAttemptRepository(RepositoryTestCase):

    def add_attempt(self, repo, match, is_final=True):
        return repo.exams.add_attempt(ExamAttempt(
            match_id=match.id,
            candidate_id=match.candidate_id,
            job_id=match.job_id,
            answers={},
            score=50,
            is_final=is_final
        ))

    def test_second_final_attempt_violates_constraint(self):
        with self.assertRaises(IntegrityError):
            with match_uow(self.Session) as repo:
                match = make_match(repo, make_job(repo), make_candidate(repo))
                self.add_attempt(repo, match)
                self.add_attempt(repo, match)

    def test_superseded_attempts_do_not_conflict(self):
        with match_uow(self.Session) as repo:
            match = make_match(repo, make_job(repo), make_candidate(repo))
            first = self.add_attempt(repo, match)
            repo.exams.supersede(first)
            second = self.add_attempt(repo, match)
            self.add_attempt(repo, match, is_final=False)

            self.assertEqual(repo.exams.get_final_attempt(match.id).id, second.id)
            self.assertEqual(len(repo.exams.get_attempts(match.id)), 3)


class TestNotificationOutbox(RepositoryTestCase):

    def test_queued_notifications_sent_after_commit(self):
        notifier = Mock()
        with match_uow(self.Session) as repo:
            repo.notify_after_commit(notifier, 'status_update', {'match_id': '1'})
            repo.notify_after_commit(None, 'ignored', {})
            notifier.notify.assert_not_called()

        notifier.notify.assert_called_once_with('status_update', {'match_id': '1'})

    def test_queued_notifications_dropped_on_rollback(self):
        notifier = Mock()
        with self.assertRaises(RuntimeError):
            with match_uow(self.Session) as repo:
                repo.notify_after_commit(notifier, 'status_update', {'match_id': '1'})
                raise RuntimeError("boom")

        notifier.notify.assert_not_called()

    def test_failing_notifier_does_not_break_commit(self):
        broken = Mock()
        broken.notify.side_effect = RuntimeError("webhook down")
        working = Mock()

        with self.assertLogs('database.repository', level='ERROR'):
            with match_uow(self.Session) as repo:
                job_id = make_job(repo).id
                repo.notify_after_commit(broken, 'status_update', {})
                repo.notify_after_commit(working, 'chat_opened', {})

        working.notify.assert_called_once_with('chat_opened', {})
        with match_uow(self.Session) as repo:
            self.assertIsNotNone(repo.jobs.get_by_id(job_id))


class TestUnitOfWork(RepositoryTestCase):

    def test_commit_on_success(self):
        with match_uow(self.Session) as repo:
            job_id = make_job(repo).id

        with match_uow(self.Session) as repo:
            self.assertIsNotNone(repo.jobs.get_by_id(job_id))

    def test_rollback_on_error(self):
        with self.assertRaises(RuntimeError):
            with match_uow(self.Session) as repo:
                job_id = make_job(repo).id
                raise RuntimeError("boom")

        with match_uow(self.Session) as repo:
            self.assertIsNone(repo.jobs.get_by_id(job_id))


if __name__ == '__main__':
    unittest.main()
