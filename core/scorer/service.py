#!/usr/bin/env python3
"""
Scoring Service - Deterministic, explainable job/candidate compatibility.

Score = 100 * (w_skills * skills + w_location * location + w_experience * experience)

A location or experience factor with missing inputs is not scored: its weight
is dropped and the remaining weights rescaled to sum to 1.

- Skills: weighted Jaccard-like overlap on canonical skill names
- Location: work-mode aware, partial credit for hybrid
- Experience: non-linear distance penalty, harsher when underqualified

Pure functions over their inputs: no I/O, no clock, no randomness. Incomplete
inputs degrade to a low score flagged as insufficient data instead of raising.
"""

from typing import Any, List, Optional
import logging

from core.config_loader import ScorerConfig
from core.utils import ContentFingerprinter
from core.scorer.models import MatchResult, ScoreFactor
from core.scorer.skills import calculate_skill_overlap, normalize_skills
from core.scorer.factors import calculate_location_credit, calculate_experience_credit

logger = logging.getLogger(__name__)

POSITIVE_CREDIT_THRESHOLD = 0.75


def _format_skills(skills: List[str]) -> str:
    return ', '.join(skills)


def _skill_factor(job: Any, candidate: Any, config: ScorerConfig):
    required = getattr(job, 'required_skills', None) or []
    offered = getattr(candidate, 'skills', None) or []
    overlap = calculate_skill_overlap(required, offered, config.skill_coverage_weight)

    insufficient = []
    if not normalize_skills(required):
        insufficient.append("job lists no required skills")
    if not normalize_skills(offered):
        insufficient.append("candidate lists no skills")

    if insufficient:
        detail = "insufficient data: " + "; ".join(insufficient)
        positive = False
    elif overlap.full_overlap:
        detail = f"full overlap with required skills ({_format_skills(overlap.matched)})"
        positive = True
    elif overlap.matched:
        total = len(overlap.matched) + len(overlap.missing)
        detail = (
            f"covers {len(overlap.matched)} of {total} required skills "
            f"({_format_skills(overlap.matched)}); missing {_format_skills(overlap.missing)}"
        )
        positive = overlap.coverage >= 0.5
    else:
        detail = f"no overlap with required skills (missing {_format_skills(overlap.missing)})"
        positive = False

    factor = ScoreFactor(
        name='skills',
        credit=overlap.score,
        weight=config.weight_skills,
        detail=detail,
        positive=positive
    )
    return factor, overlap, insufficient


def _normalized_weights(config: ScorerConfig):
    total = config.weight_skills + config.weight_location + config.weight_experience
    if total <= 0:
        return 1.0, 0.0, 0.0
    return (
        config.weight_skills / total,
        config.weight_location / total,
        config.weight_experience / total,
    )


def _optional_factor(name: str, credit: Optional[float], weight: float, detail: str) -> ScoreFactor:
    if credit is None:
        return ScoreFactor(name=name, credit=0.0, weight=weight, detail=detail, positive=False, scored=False)
    return ScoreFactor(
        name=name,
        credit=credit,
        weight=weight,
        detail=detail,
        positive=credit >= POSITIVE_CREDIT_THRESHOLD
    )


def _rescale_weights(factors: List[ScoreFactor]) -> None:
    """Zero the weight of unscored factors and rescale the rest to sum to 1."""
    total = sum(f.weight for f in factors if f.scored)
    for factor in factors:
        factor.weight = factor.weight / total if factor.scored and total > 0 else 0.0


def build_explanation(result: MatchResult) -> str:
    """
    Render the factor breakdown as text shown verbatim to users.

    One line per factor, "+" for positive and "-" for negative contributions,
    "~" for factors left out for lack of data.
    """
    lines = [f"Match score: {result.score:.2f}/100"]
    for factor in result.factors:
        if not factor.scored:
            lines.append(f"~ {factor.name.capitalize()}: {factor.detail} (not scored)")
            continue
        sign = '+' if factor.positive else '-'
        lines.append(f"{sign} {factor.name.capitalize()}: {factor.detail}")
    if result.ceiling_applied:
        lines.append(f"- Capped: {result.ceiling_applied}")
    return "\n".join(lines)


def compute_match(job: Any, candidate: Any, config: Optional[ScorerConfig] = None) -> MatchResult:
    """
    Compute the compatibility score between a job posting and a candidate.

    Args:
        job: JobPosting (or any object with required_skills, location,
            work_mode, experience_level)
        candidate: CandidateProfile (or any object with skills, location,
            preferred_work_mode, experience_level)
        config: ScorerConfig with weights, penalties and ceilings

    Returns:
        MatchResult with score in [0, 100] and its explanation
    """
    config = config or ScorerConfig()
    w_skills, w_location, w_experience = _normalized_weights(config)

    skill_factor, overlap, insufficient = _skill_factor(job, candidate, config)
    skill_factor.weight = w_skills

    location_credit, location_detail = calculate_location_credit(
        getattr(job, 'work_mode', None),
        getattr(job, 'location', None),
        getattr(candidate, 'location', None),
        getattr(candidate, 'preferred_work_mode', None),
        config
    )
    location_factor = _optional_factor('location', location_credit, w_location, location_detail)

    experience_credit, experience_detail = calculate_experience_credit(
        getattr(job, 'experience_level', None),
        getattr(candidate, 'experience_level', None),
        config
    )
    experience_factor = _optional_factor('experience', experience_credit, w_experience, experience_detail)

    factors = [skill_factor, location_factor, experience_factor]
    _rescale_weights(factors)
    score = sum(f.contribution for f in factors)

    ceiling_applied = ""
    if insufficient:
        if score > config.insufficient_data_ceiling:
            score = config.insufficient_data_ceiling
            ceiling_applied = f"insufficient data limits the score to {config.insufficient_data_ceiling:g}"
    elif not overlap.matched and score > config.no_overlap_ceiling:
        score = config.no_overlap_ceiling
        ceiling_applied = f"no skill overlap limits the score to {config.no_overlap_ceiling:g}"

    result = MatchResult(
        score=round(max(0.0, min(100.0, score)), 2),
        factors=factors,
        matched_skills=overlap.matched,
        missing_skills=overlap.missing,
        insufficient_data=bool(insufficient),
        ceiling_applied=ceiling_applied
    )
    result.explanation = build_explanation(result)
    return result


def inputs_fingerprint(job: Any, candidate: Any) -> str:
    """
    Hash of every field that influences the score.

    A match is re-scored only when this changes.
    """
    payload = {
        'job': {
            'skills': sorted(normalize_skills(getattr(job, 'required_skills', None))),
            'location': ContentFingerprinter.normalize_location(getattr(job, 'location', None)),
            'work_mode': (getattr(job, 'work_mode', None) or '').lower(),
            'experience_level': (getattr(job, 'experience_level', None) or '').lower(),
        },
        'candidate': {
            'skills': sorted(normalize_skills(getattr(candidate, 'skills', None))),
            'location': ContentFingerprinter.normalize_location(getattr(candidate, 'location', None)),
            'preferred_work_mode': (getattr(candidate, 'preferred_work_mode', None) or '').lower(),
            'experience_level': (getattr(candidate, 'experience_level', None) or '').lower(),
        },
    }
    return ContentFingerprinter.calculate(payload)


class ScoringService:
    """
    Config-bound facade over compute_match.

    Stateless; safe to share between requests.
    """

    def __init__(self, config: Optional[ScorerConfig] = None):
        self.config = config or ScorerConfig()

    def compute_match(self, job: Any, candidate: Any) -> MatchResult:
        result = compute_match(job, candidate, self.config)
        if result.insufficient_data:
            logger.debug(
                f"Insufficient scoring data for job {getattr(job, 'id', '?')} / "
                f"candidate {getattr(candidate, 'id', '?')}"
            )
        return result

    def fingerprint(self, job: Any, candidate: Any) -> str:
        return inputs_fingerprint(job, candidate)
