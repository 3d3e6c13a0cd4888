import logging
from typing import Any, Dict, List, Tuple

from sqlalchemy import event
from sqlalchemy.orm import Session

from database.repositories import (
    JobPostingRepository,
    CandidateRepository,
    MatchRepository,
    ApplicationRepository,
    ExamAttemptRepository,
    ChatRoomRepository,
    IntentRepository,
)

logger = logging.getLogger(__name__)


class MatchRepositoryHub:
    """
    All repositories bound to one Session.

    Services receive a hub instead of individual repositories so that every
    read and write of one operation shares the same transaction.

    Notifications queued with notify_after_commit are sent only once the
    session commits and are dropped if it rolls back.
    """

    def __init__(self, db: Session):
        self.db = db
        self.jobs = JobPostingRepository(db)
        self.candidates = CandidateRepository(db)
        self.matches = MatchRepository(db)
        self.applications = ApplicationRepository(db)
        self.exams = ExamAttemptRepository(db)
        self.chats = ChatRoomRepository(db)
        self.intents = IntentRepository(db)

        self._outbox: List[Tuple[Any, str, Dict[str, Any]]] = []
        event.listen(db, 'after_commit', self._dispatch_outbox)
        event.listen(db, 'after_rollback', self._discard_outbox)

    def flush(self) -> None:
        self.db.flush()

    def rollback(self) -> None:
        self.db.rollback()

    def notify_after_commit(self, notifier, event_type: str, payload: Dict[str, Any]) -> None:
        """Queue a notification for delivery after the current transaction commits."""
        if notifier is None:
            return
        self._outbox.append((notifier, event_type, payload))

    def _dispatch_outbox(self, session: Session) -> None:
        pending, self._outbox = self._outbox, []
        for notifier, event_type, payload in pending:
            try:
                notifier.notify(event_type, payload)
            except Exception:
                # Already committed; delivery failures must not surface to the caller
                logger.exception(f"Failed to dispatch '{event_type}' notification")

    def _discard_outbox(self, session: Session) -> None:
        if self._outbox:
            logger.debug(f"Discarding {len(self._outbox)} queued notification(s) after rollback")
        self._outbox = []
