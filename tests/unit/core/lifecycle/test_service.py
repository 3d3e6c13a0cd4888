#!/usr/bin/env python3
"""
Tests for the application lifecycle state machine.

Covers legal edges, role checks, terminal immutability, optimistic
concurrency, exam gating and Match/ApplicationRecord consistency.
"""

import unittest
from unittest.mock import Mock

from sqlalchemy import update

from core.actors import Actor, ActorRole
from core.exceptions import ConflictError, InvalidTransition, MatchNotFound, PermissionDenied
from core.lifecycle import MatchStatus
from core.lifecycle.service import LifecycleService, display_label
from core.lifecycle.states import EXTERNAL_TRANSITIONS, INTERNAL_TRANSITIONS
from database.models import JobMatch
from database.repository import MatchRepositoryHub
from database.uow import match_uow
from tests import create_test_session_factory
from tests.fixtures.factories import OTHER_ORG_ID, ORG_ID, attach_exam, make_candidate, make_job, make_match


class LifecycleTestCase(unittest.TestCase):

    def setUp(self):
        self.Session = create_test_session_factory()
        self.session = self.Session()
        self.repo = MatchRepositoryHub(self.session)
        self.notifier = Mock()
        self.lifecycle = LifecycleService(self.repo, notifier=self.notifier)

        self.job = make_job(self.repo)
        self.candidate = make_candidate(self.repo)
        self.match = make_match(self.repo, self.job, self.candidate)

        self.candidate_actor = Actor.candidate(self.candidate.id)
        self.agent = Actor.hiring_agent("agent-1", ORG_ID)

    def tearDown(self):
        self.session.close()

    def advance_to(self, status: MatchStatus):
        path = [MatchStatus.APPLIED, MatchStatus.SCREENING, MatchStatus.INTERVIEW, MatchStatus.HIRED]
        for step in path:
            actor = self.candidate_actor if step == MatchStatus.APPLIED else self.agent
            self.lifecycle.transition(self.match.id, step, actor)
            if step == status:
                return


class TestLegalTransitions(LifecycleTestCase):

    def test_candidate_applies(self):
        match = self.lifecycle.apply(self.match.id, self.candidate_actor)

        self.assertEqual(match.status, 'applied')
        self.assertEqual(match.version, 2)

        record = self.repo.applications.get_by_match_id(match.id)
        self.assertIsNotNone(record)
        self.assertEqual(record.status, 'applied')
        print("✅ pending -> applied creates the application record")

    def test_full_internal_path_to_hired(self):
        self.advance_to(MatchStatus.HIRED)

        self.assertEqual(self.match.status, 'hired')
        self.assertEqual(self.match.version, 5)
        record = self.repo.applications.get_by_match_id(self.match.id)
        self.assertEqual(record.status, 'hired')

        history = self.lifecycle.history(self.match.id)
        self.assertEqual(
            [(h.from_status, h.to_status) for h in history],
            [('pending', 'applied'), ('applied', 'screening'), ('screening', 'interview'), ('interview', 'hired')]
        )
        self.assertEqual(history[1].actor_role, 'hiring_org')

    def test_reject_from_any_non_terminal_state(self):
        for status in (MatchStatus.APPLIED, MatchStatus.SCREENING, MatchStatus.INTERVIEW):
            with self.subTest(status=status):
                candidate = make_candidate(self.repo, full_name=f"Candidate {status.value}")
                self.match = make_match(self.repo, self.job, candidate)
                self.candidate_actor = Actor.candidate(candidate.id)
                self.advance_to(status)

                match = self.lifecycle.transition(self.match.id, 'rejected', self.agent)
                self.assertEqual(match.status, 'rejected')
                self.assertEqual(self.repo.applications.get_by_match_id(match.id).status, 'rejected')

    def test_reject_pending_match_has_no_application(self):
        match = self.lifecycle.transition(self.match.id, MatchStatus.REJECTED, self.agent)
        self.assertEqual(match.status, 'rejected')
        self.assertIsNone(self.repo.applications.get_by_match_id(match.id))

    def test_status_update_notification(self):
        self.lifecycle.apply(self.match.id, self.candidate_actor)
        self.notifier.notify.assert_not_called()

        self.session.commit()

        self.notifier.notify.assert_called_once()
        event_type, payload = self.notifier.notify.call_args[0]
        self.assertEqual(event_type, 'status_update')
        self.assertEqual(payload['previous_status'], 'pending')
        self.assertEqual(payload['new_status'], 'applied')

    def test_terminal_transition_closes_chat_room(self):
        self.advance_to(MatchStatus.SCREENING)
        room = self.lifecycle.chat_gate.open_chat(self.match.id, self.agent)
        self.assertTrue(room.is_open)

        self.lifecycle.transition(self.match.id, MatchStatus.REJECTED, self.agent)

        self.assertFalse(self.repo.chats.get_by_match_id(self.match.id).is_open)


class TestIllegalTransitions(LifecycleTestCase):

    def test_skipping_states_is_invalid(self):
        with self.assertRaises(InvalidTransition) as ctx:
            self.lifecycle.transition(self.match.id, MatchStatus.INTERVIEW, self.agent)
        self.assertEqual(ctx.exception.current, 'pending')
        self.assertEqual(ctx.exception.requested, 'interview')
        self.assertEqual(self.match.status, 'pending')

    def test_unknown_status_is_invalid(self):
        with self.assertRaises(InvalidTransition):
            self.lifecycle.transition(self.match.id, 'shortlisted', self.agent)

    def test_backwards_transition_is_invalid(self):
        self.advance_to(MatchStatus.SCREENING)
        with self.assertRaises(InvalidTransition):
            self.lifecycle.transition(self.match.id, MatchStatus.APPLIED, self.candidate_actor)

    def test_terminal_states_are_immutable(self):
        self.advance_to(MatchStatus.HIRED)
        for target in MatchStatus:
            with self.subTest(target=target):
                with self.assertRaises(InvalidTransition):
                    self.lifecycle.transition(self.match.id, target, self.agent)
        self.assertEqual(self.match.status, 'hired')

    def test_rejected_candidate_cannot_reapply(self):
        self.lifecycle.transition(self.match.id, MatchStatus.REJECTED, self.agent)
        with self.assertRaises(InvalidTransition):
            self.lifecycle.apply(self.match.id, self.candidate_actor)

    def test_missing_match(self):
        import uuid
        with self.assertRaises(MatchNotFound):
            self.lifecycle.transition(uuid.uuid4(), MatchStatus.APPLIED, self.candidate_actor)


class TestTransitionMatrix(LifecycleTestCase):
    """Every (from, to) pair is either a listed edge or rejected without side effects."""

    def match_in(self, job, status: MatchStatus):
        candidate = make_candidate(self.repo, full_name=f"Matrix {job.source} {status.value}")
        match = make_match(self.repo, job, candidate)
        match.status = status.value
        self.session.flush()
        return match, Actor.candidate(candidate.id)

    def check_matrix(self, job, table):
        for source in MatchStatus:
            for target in MatchStatus:
                with self.subTest(source=source.value, target=target.value):
                    match, candidate_actor = self.match_in(job, source)
                    role = table.get((source, target))

                    if role is None:
                        for actor in (candidate_actor, self.agent):
                            with self.assertRaises(InvalidTransition):
                                self.lifecycle.transition(match.id, target, actor)
                        self.assertEqual(match.status, source.value)
                        self.assertEqual(match.version, 1)
                        self.assertEqual(self.repo.matches.get_status_history(match.id), [])
                    else:
                        actor = candidate_actor if role == ActorRole.CANDIDATE else self.agent
                        moved = self.lifecycle.transition(match.id, target, actor)
                        self.assertEqual(moved.status, target.value)
                        self.assertEqual(moved.version, 2)

    def test_internal_job_matrix(self):
        self.check_matrix(self.job, INTERNAL_TRANSITIONS)

    def test_external_job_matrix(self):
        external = make_job(self.repo, source='external', title="Scraped Role")
        self.check_matrix(external, EXTERNAL_TRANSITIONS)


class TestAuthorization(LifecycleTestCase):

    def test_candidate_cannot_advance_hiring_steps(self):
        self.lifecycle.apply(self.match.id, self.candidate_actor)
        with self.assertRaises(PermissionDenied):
            self.lifecycle.transition(self.match.id, MatchStatus.SCREENING, self.candidate_actor)

    def test_other_organization_cannot_advance(self):
        self.lifecycle.apply(self.match.id, self.candidate_actor)
        outsider = Actor.hiring_agent("agent-2", OTHER_ORG_ID)
        with self.assertRaises(PermissionDenied):
            self.lifecycle.transition(self.match.id, MatchStatus.SCREENING, outsider)

    def test_other_candidate_cannot_apply(self):
        other = make_candidate(self.repo, full_name="Someone Else")
        with self.assertRaises(PermissionDenied):
            self.lifecycle.apply(self.match.id, Actor.candidate(other.id))

    def test_hiring_org_cannot_apply_for_candidate(self):
        with self.assertRaises(PermissionDenied):
            self.lifecycle.apply(self.match.id, self.agent)

    def test_system_may_apply_for_candidate(self):
        match = self.lifecycle.apply(self.match.id, Actor.system())
        self.assertEqual(match.status, 'applied')


class TestExternalJobs(LifecycleTestCase):

    def setUp(self):
        super().setUp()
        self.job = make_job(self.repo, source='external', title="Scraped Role")
        self.match = make_match(self.repo, self.job, self.candidate)

    def test_external_apply_then_terminal(self):
        match = self.lifecycle.apply(self.match.id, self.candidate_actor)
        self.assertEqual(match.status, 'applied')

        with self.assertRaises(InvalidTransition):
            self.lifecycle.transition(self.match.id, MatchStatus.SCREENING, self.agent)
        with self.assertRaises(InvalidTransition):
            self.lifecycle.transition(self.match.id, MatchStatus.REJECTED, self.agent)


class TestExamGate(LifecycleTestCase):

    def test_apply_blocked_without_passing_attempt(self):
        attach_exam(self.repo, self.job)

        with self.assertRaises(InvalidTransition) as ctx:
            self.lifecycle.apply(self.match.id, self.candidate_actor)
        self.assertIn("exam gate not satisfied", str(ctx.exception))
        self.assertEqual(self.match.status, 'pending')
        self.assertIsNone(self.repo.applications.get_by_match_id(self.match.id))

    def test_inactive_exam_does_not_gate(self):
        exam = attach_exam(self.repo, self.job)
        exam.is_active = False

        match = self.lifecycle.apply(self.match.id, self.candidate_actor)
        self.assertEqual(match.status, 'applied')


class TestOptimisticConcurrency(LifecycleTestCase):

    def test_expected_version_mismatch_conflicts(self):
        self.lifecycle.apply(self.match.id, self.candidate_actor, expected_version=1)

        with self.assertRaises(ConflictError):
            self.lifecycle.transition(self.match.id, MatchStatus.SCREENING, self.agent, expected_version=1)
        self.assertEqual(self.match.status, 'applied')

    def test_expected_status_mismatch_conflicts(self):
        with self.assertRaises(ConflictError):
            self.lifecycle.transition(
                self.match.id, MatchStatus.REJECTED, self.agent, expected_status=MatchStatus.APPLIED
            )

    def test_concurrent_write_detected_by_conditional_update(self):
        # Another writer bumps the version behind this session's back
        self.session.flush()
        self.session.execute(
            update(JobMatch)
            .where(JobMatch.id == self.match.id)
            .values(version=JobMatch.version + 1)
            .execution_options(synchronize_session=False)
        )
        self.assertEqual(self.match.version, 1)

        with self.assertRaises(ConflictError):
            self.lifecycle.apply(self.match.id, self.candidate_actor)


class TestTransactionalConsistency(unittest.TestCase):

    def setUp(self):
        self.Session = create_test_session_factory()
        with match_uow(self.Session) as repo:
            job = make_job(repo)
            candidate = make_candidate(repo)
            self.match_id = make_match(repo, job, candidate).id
            self.candidate_actor = Actor.candidate(candidate.id)

    def test_failure_after_transition_rolls_everything_back(self):
        with self.assertRaises(RuntimeError):
            with match_uow(self.Session) as repo:
                LifecycleService(repo).apply(self.match_id, self.candidate_actor)
                raise RuntimeError("downstream failure")

        with match_uow(self.Session) as repo:
            match = repo.matches.get_by_id(self.match_id)
            self.assertEqual(match.status, 'pending')
            self.assertEqual(match.version, 1)
            self.assertIsNone(repo.applications.get_by_match_id(self.match_id))
            self.assertEqual(repo.matches.get_status_history(self.match_id), [])

    def test_rolled_back_transition_sends_no_notification(self):
        notifier = Mock()
        with self.assertRaises(RuntimeError):
            with match_uow(self.Session) as repo:
                LifecycleService(repo, notifier=notifier).apply(self.match_id, self.candidate_actor)
                raise RuntimeError("downstream failure")

        notifier.notify.assert_not_called()

    def test_committed_transition_notifies_once(self):
        notifier = Mock()
        with match_uow(self.Session) as repo:
            LifecycleService(repo, notifier=notifier).apply(self.match_id, self.candidate_actor)
            notifier.notify.assert_not_called()

        notifier.notify.assert_called_once()
        self.assertEqual(notifier.notify.call_args[0][0], 'status_update')

    def test_committed_transition_is_visible_in_new_unit_of_work(self):
        with match_uow(self.Session) as repo:
            LifecycleService(repo).apply(self.match_id, self.candidate_actor)

        with match_uow(self.Session) as repo:
            match = repo.matches.get_by_id(self.match_id)
            record = repo.applications.get_by_match_id(self.match_id)
            self.assertEqual(match.status, 'applied')
            self.assertEqual(record.status, match.status)


class TestApplicationConsistency(LifecycleTestCase):

    def test_diverged_record_is_repaired(self):
        self.advance_to(MatchStatus.SCREENING)
        record = self.repo.applications.get_by_match_id(self.match.id)
        record.status = 'applied'

        with self.assertLogs('core.lifecycle.service', level='WARNING'):
            repaired = self.lifecycle.get_application(self.match.id)

        self.assertEqual(repaired.status, 'screening')

    def test_pending_match_has_no_application(self):
        self.assertIsNone(self.lifecycle.get_application(self.match.id))


class TestViewedLabels(LifecycleTestCase):

    def test_candidate_view_labels_pending_match_viewed(self):
        self.assertEqual(display_label(self.match), 'pending')

        match = self.lifecycle.mark_viewed(self.match.id, self.candidate_actor)

        self.assertIsNotNone(match.candidate_viewed_at)
        self.assertEqual(match.version, 1)
        self.assertEqual(display_label(match), 'viewed')

    def test_employer_view_labels_application_interested(self):
        self.lifecycle.apply(self.match.id, self.candidate_actor)
        match = self.lifecycle.mark_viewed(self.match.id, self.agent)

        self.assertIsNotNone(match.employer_viewed_at)
        self.assertEqual(match.status, 'applied')
        self.assertEqual(display_label(match), 'interested')

    def test_outsider_cannot_mark_viewed(self):
        with self.assertRaises(PermissionDenied):
            self.lifecycle.mark_viewed(self.match.id, Actor.hiring_agent("x", OTHER_ORG_ID))


if __name__ == '__main__':
    unittest.main()
