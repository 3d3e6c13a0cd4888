#!/usr/bin/env python3
"""
Skill Normalization - Canonical skill names and overlap metrics.

"ReactJS", "react.js" and "React" all resolve to "React" before comparison,
so overlap is computed on canonical names, case-insensitively.
"""

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional

# Lowercase alias -> canonical name
SKILL_ALIASES: Dict[str, str] = {
    # JavaScript ecosystem
    'js': 'JavaScript',
    'javascript': 'JavaScript',
    'ecmascript': 'JavaScript',
    'es6': 'JavaScript',
    'typescript': 'TypeScript',
    'ts': 'TypeScript',
    'node': 'Node.js',
    'nodejs': 'Node.js',
    'node.js': 'Node.js',
    'node js': 'Node.js',
    'react': 'React',
    'reactjs': 'React',
    'react.js': 'React',
    'react js': 'React',
    'vue': 'Vue.js',
    'vuejs': 'Vue.js',
    'vue.js': 'Vue.js',
    'angular': 'Angular',
    'angularjs': 'Angular',
    'nextjs': 'Next.js',
    'next.js': 'Next.js',
    'express': 'Express.js',
    'expressjs': 'Express.js',
    'express.js': 'Express.js',

    # Python ecosystem
    'python': 'Python',
    'python3': 'Python',
    'py': 'Python',
    'django': 'Django',
    'flask': 'Flask',
    'fastapi': 'FastAPI',
    'pandas': 'Pandas',
    'numpy': 'NumPy',
    'pytorch': 'PyTorch',
    'torch': 'PyTorch',
    'tensorflow': 'TensorFlow',
    'scikit-learn': 'Scikit-learn',
    'sklearn': 'Scikit-learn',

    # JVM / systems
    'java': 'Java',
    'kotlin': 'Kotlin',
    'golang': 'Go',
    'go': 'Go',
    'c#': 'C#',
    'csharp': 'C#',
    'c++': 'C++',
    'cpp': 'C++',
    'rust': 'Rust',

    # Data
    'sql': 'SQL',
    'postgres': 'PostgreSQL',
    'postgresql': 'PostgreSQL',
    'psql': 'PostgreSQL',
    'mysql': 'MySQL',
    'mongo': 'MongoDB',
    'mongodb': 'MongoDB',
    'redis': 'Redis',

    # Infrastructure
    'aws': 'AWS',
    'amazon web services': 'AWS',
    'gcp': 'GCP',
    'google cloud': 'GCP',
    'azure': 'Azure',
    'k8s': 'Kubernetes',
    'kubernetes': 'Kubernetes',
    'docker': 'Docker',
    'terraform': 'Terraform',
    'ci/cd': 'CI/CD',
    'cicd': 'CI/CD',
}


def normalize_skill(name: str) -> Optional[str]:
    """
    Map a skill name to its canonical form.

    Unknown skills keep their original spelling (whitespace collapsed).
    Returns None for blank input.
    """
    if not isinstance(name, str):
        return None
    cleaned = ' '.join(name.split())
    if not cleaned:
        return None
    return SKILL_ALIASES.get(cleaned.lower(), cleaned)


def normalize_skills(names: Optional[Iterable[str]]) -> Dict[str, str]:
    """
    Normalize a collection of skills.

    Returns:
        Dict mapping lowercase canonical key -> canonical display name
    """
    normalized: Dict[str, str] = {}
    for name in names or []:
        canonical = normalize_skill(name)
        if canonical:
            normalized.setdefault(canonical.lower(), canonical)
    return normalized


@dataclass
class SkillOverlap:
    """Overlap between job-required and candidate skills."""
    matched: List[str] = field(default_factory=list)
    missing: List[str] = field(default_factory=list)
    extra: List[str] = field(default_factory=list)
    coverage: float = 0.0
    jaccard: float = 0.0
    score: float = 0.0

    @property
    def full_overlap(self) -> bool:
        return bool(self.matched) and not self.missing


def calculate_skill_overlap(
    required: Optional[Iterable[str]],
    candidate: Optional[Iterable[str]],
    coverage_weight: float
) -> SkillOverlap:
    """
    Weighted Jaccard-like overlap.

    Formula: coverage_weight * |R & C| / |R| + (1 - coverage_weight) * |R & C| / |R | C|

    Coverage of what the job asks for dominates; unrelated extra candidate
    skills only dilute the Jaccard share.
    """
    req = normalize_skills(required)
    cand = normalize_skills(candidate)

    if not req or not cand:
        return SkillOverlap(
            missing=sorted(req.values()),
            extra=sorted(cand.values())
        )

    matched_keys = set(req) & set(cand)
    union_keys = set(req) | set(cand)

    coverage = len(matched_keys) / len(req)
    jaccard = len(matched_keys) / len(union_keys)

    return SkillOverlap(
        matched=sorted(req[k] for k in matched_keys),
        missing=sorted(req[k] for k in set(req) - matched_keys),
        extra=sorted(cand[k] for k in set(cand) - matched_keys),
        coverage=coverage,
        jaccard=jaccard,
        score=coverage_weight * coverage + (1 - coverage_weight) * jaccard
    )
