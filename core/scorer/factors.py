#!/usr/bin/env python3
"""
Compatibility Factors - Location/work-mode and experience alignment.

Each function returns a credit in [0, 1] plus a short reason used verbatim
in the match explanation. A credit of None means the inputs are missing and
the factor is not scored.
"""

from typing import Optional, Tuple

from core.config_loader import ScorerConfig
from core.utils import ContentFingerprinter


def _level_rank(level: Optional[str], config: ScorerConfig) -> Optional[int]:
    if not level or not isinstance(level, str):
        return None
    return config.experience_levels.get(level.strip().lower())


def calculate_location_credit(
    work_mode: Optional[str],
    job_location: Optional[str],
    candidate_location: Optional[str],
    preferred_work_mode: Optional[str],
    config: ScorerConfig
) -> Tuple[Optional[float], str]:
    """
    Location / work-mode compatibility.

    - remote role: full credit
    - same city: full credit, reduced if the candidate prefers remote
    - different city: partial credit for hybrid, none for onsite
    - unknown location on either side: not scored
    """
    mode = (work_mode or 'onsite').strip().lower()
    preference = (preferred_work_mode or '').strip().lower()

    if mode == 'remote':
        return 1.0, "remote role, location independent"

    job_city = ContentFingerprinter.normalize_location(job_location)
    candidate_city = ContentFingerprinter.normalize_location(candidate_location)

    if not job_city or not candidate_city:
        return None, f"{mode} role, location not specified"

    if job_city == candidate_city:
        if preference == 'remote':
            return config.remote_preference_credit, f"{mode} role in candidate's city, but candidate prefers remote"
        return 1.0, f"{mode} role in candidate's city ({job_location})"

    if mode == 'hybrid':
        return config.hybrid_other_city_credit, f"hybrid role in {job_location}, candidate in {candidate_location}"

    return 0.0, f"onsite role in {job_location}, candidate in {candidate_location}"


def calculate_experience_credit(
    job_level: Optional[str],
    candidate_level: Optional[str],
    config: ScorerConfig
) -> Tuple[Optional[float], str]:
    """
    Experience-level alignment.

    distance = candidate_rank - job_rank; credit = 1 - k * |distance| ** p,
    with k larger for underqualified (distance < 0) than overqualified.
    """
    job_rank = _level_rank(job_level, config)
    candidate_rank = _level_rank(candidate_level, config)

    if job_rank is None or candidate_rank is None:
        return None, "experience level not specified"

    distance = candidate_rank - job_rank
    if distance == 0:
        return 1.0, f"matches target level ({job_level})"

    exponent = config.experience_penalty_exponent
    if distance < 0:
        penalty = config.underqualified_penalty * (abs(distance) ** exponent)
        label = "underqualified"
    else:
        penalty = config.overqualified_penalty * (distance ** exponent)
        label = "overqualified"

    credit = max(0.0, 1.0 - penalty)
    return credit, f"{label}: {candidate_level} vs {job_level} target"
