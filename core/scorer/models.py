#!/usr/bin/env python3
"""
Scoring Models - Data structures for scoring results.
"""

from typing import List, Dict, Any
from dataclasses import dataclass, field, asdict


@dataclass
class ScoreFactor:
    """One weighted contribution to the overall match score."""
    name: str
    credit: float
    weight: float
    detail: str
    positive: bool = True
    scored: bool = True

    @property
    def contribution(self) -> float:
        return 100 * self.weight * self.credit


@dataclass
class MatchResult:
    """Complete scored match result with its explanation."""
    score: float = 0.0
    explanation: str = ""
    factors: List[ScoreFactor] = field(default_factory=list)
    matched_skills: List[str] = field(default_factory=list)
    missing_skills: List[str] = field(default_factory=list)
    insufficient_data: bool = False
    ceiling_applied: str = ""

    def factors_dict(self) -> Dict[str, Any]:
        """JSON-serializable breakdown stored alongside the match."""
        return {
            'factors': [
                {**asdict(f), 'contribution': round(f.contribution, 2)}
                for f in self.factors
            ],
            'matched_skills': list(self.matched_skills),
            'missing_skills': list(self.missing_skills),
            'insufficient_data': self.insufficient_data,
            'ceiling_applied': self.ceiling_applied,
        }
