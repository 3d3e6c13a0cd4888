"""Matcher Module - creates scored job/candidate matches."""
from core.matcher.service import MatchService

__all__ = ['MatchService']
