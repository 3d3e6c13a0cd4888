import contextlib
import logging

from database.repository import MatchRepositoryHub

logger = logging.getLogger(__name__)


@contextlib.contextmanager
def match_uow(session_factory=None):
    """Per-unit-of-work transaction scope.

    Yields a MatchRepositoryHub bound to a fresh Session. Commits on success,
    rolls back on exception, always closes. Every state-changing engine
    operation runs inside exactly one of these scopes, so a match and its
    application record either both change or neither does.

    Usage:
        with match_uow() as repo:
            match = repo.matches.get_by_id(match_id)
            # perform operations...
        # commit happens automatically on successful exit
    """
    if session_factory is None:
        from database.database import get_session_factory
        session_factory = get_session_factory()

    session = session_factory()
    try:
        repo = MatchRepositoryHub(session)
        yield repo
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
