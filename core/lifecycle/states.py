#!/usr/bin/env python3
"""
Lifecycle states and the legal edge set.

Internal jobs:  pending -> applied -> screening -> interview -> {hired | rejected}
                (any non-terminal -> rejected)
External jobs:  pending -> applied, and nothing after that.
"""

from enum import Enum
from typing import Dict, FrozenSet, Optional, Tuple

from core.actors import ActorRole


class MatchStatus(str, Enum):
    PENDING = 'pending'
    APPLIED = 'applied'
    SCREENING = 'screening'
    INTERVIEW = 'interview'
    HIRED = 'hired'
    REJECTED = 'rejected'


TERMINAL_STATES: FrozenSet[MatchStatus] = frozenset({MatchStatus.HIRED, MatchStatus.REJECTED})

# Statuses from which a chat room may be opened on internal jobs
CHAT_ELIGIBLE_STATES: FrozenSet[MatchStatus] = frozenset({MatchStatus.SCREENING, MatchStatus.INTERVIEW})

# (from, to) -> role allowed to trigger it
INTERNAL_TRANSITIONS: Dict[Tuple[MatchStatus, MatchStatus], ActorRole] = {
    (MatchStatus.PENDING, MatchStatus.APPLIED): ActorRole.CANDIDATE,
    (MatchStatus.APPLIED, MatchStatus.SCREENING): ActorRole.HIRING_ORG,
    (MatchStatus.SCREENING, MatchStatus.INTERVIEW): ActorRole.HIRING_ORG,
    (MatchStatus.INTERVIEW, MatchStatus.HIRED): ActorRole.HIRING_ORG,
    (MatchStatus.PENDING, MatchStatus.REJECTED): ActorRole.HIRING_ORG,
    (MatchStatus.APPLIED, MatchStatus.REJECTED): ActorRole.HIRING_ORG,
    (MatchStatus.SCREENING, MatchStatus.REJECTED): ActorRole.HIRING_ORG,
    (MatchStatus.INTERVIEW, MatchStatus.REJECTED): ActorRole.HIRING_ORG,
}

EXTERNAL_TRANSITIONS: Dict[Tuple[MatchStatus, MatchStatus], ActorRole] = {
    (MatchStatus.PENDING, MatchStatus.APPLIED): ActorRole.CANDIDATE,
}


def parse_status(value) -> Optional[MatchStatus]:
    """Coerce a string to MatchStatus, returning None for unknown values."""
    if isinstance(value, MatchStatus):
        return value
    try:
        return MatchStatus(str(value).strip().lower())
    except ValueError:
        return None


def transition_table(is_external: bool) -> Dict[Tuple[MatchStatus, MatchStatus], ActorRole]:
    return EXTERNAL_TRANSITIONS if is_external else INTERNAL_TRANSITIONS


def is_terminal(status: MatchStatus, is_external: bool = False) -> bool:
    if status in TERMINAL_STATES:
        return True
    # Externally sourced jobs stop being tracked once marked applied
    return is_external and status == MatchStatus.APPLIED


def allowed_targets(status: MatchStatus, is_external: bool = False) -> FrozenSet[MatchStatus]:
    return frozenset(
        target for (source, target) in transition_table(is_external) if source == status
    )


def required_role(
    current: MatchStatus,
    target: MatchStatus,
    is_external: bool = False
) -> Optional[ActorRole]:
    """Role permitted to trigger current -> target, or None if it is not an edge."""
    return transition_table(is_external).get((current, target))
