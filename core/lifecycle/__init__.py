"""
Lifecycle states and the legal edge set.

LifecycleService lives in core.lifecycle.service; it depends on the chat gate,
which in turn reads the states defined here.
"""
from core.lifecycle.states import MatchStatus, TERMINAL_STATES, allowed_targets, is_terminal, parse_status

__all__ = [
    'MatchStatus',
    'TERMINAL_STATES',
    'allowed_targets',
    'is_terminal',
    'parse_status',
]
