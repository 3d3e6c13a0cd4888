#!/usr/bin/env python3
"""
Scoring Module - Deterministic job/candidate compatibility.

Public API:
- ScoringService: Config-bound scoring facade
- compute_match: Pure scoring function
- MatchResult / ScoreFactor: Result dataclasses

Split into focused modules:

- models.py: Data structures (MatchResult, ScoreFactor)
- skills.py: Skill normalization and overlap
- factors.py: Location/work-mode and experience credits
- service.py: Score composition, explanation, input fingerprints
"""

from core.scorer.models import MatchResult, ScoreFactor
from core.scorer.service import ScoringService, compute_match, inputs_fingerprint

__all__ = ['ScoringService', 'compute_match', 'inputs_fingerprint', 'MatchResult', 'ScoreFactor']
