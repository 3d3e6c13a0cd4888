"""
Exam grading policies.

Questions are dicts of the form::

    {"id": "q1", "prompt": "...", "correct_answer": "useEffect", "points": 10}

``correct_answer`` may also be a list, in which case the candidate's answer
must contain the same items in any order.
"""

from dataclasses import dataclass
from typing import Any, Dict, List

GRADING_POLICIES = ('percentage', 'weighted')
DEFAULT_QUESTION_POINTS = 10


@dataclass
class GradeResult:
    score: float
    correct_answers: int
    total_questions: int


def normalize_answer(value: Any) -> Any:
    """Case and whitespace insensitive form of an answer; lists become sets."""
    if value is None:
        return None
    if isinstance(value, (list, tuple, set)):
        return frozenset(normalize_answer(v) for v in value if v is not None)
    return ' '.join(str(value).split()).lower()


def is_correct(question: Dict[str, Any], answer: Any) -> bool:
    expected = question.get('correct_answer')
    if expected is None or answer is None:
        return False
    expected_norm = normalize_answer(expected)
    answer_norm = normalize_answer(answer)
    if isinstance(expected_norm, frozenset) and not isinstance(answer_norm, frozenset):
        answer_norm = frozenset([answer_norm])
    return expected_norm == answer_norm


def _points(question: Dict[str, Any]) -> float:
    try:
        points = float(question.get('points', DEFAULT_QUESTION_POINTS))
    except (TypeError, ValueError):
        return float(DEFAULT_QUESTION_POINTS)
    return max(points, 0.0)


def grade(questions: List[Dict[str, Any]], answers: Dict[str, Any], policy: str = 'percentage') -> GradeResult:
    """
    Grade a submission.

    Args:
        questions: Exam question list
        answers: Mapping of question id to the candidate's answer
        policy: 'percentage' (correct / total) or 'weighted' (points of correct / total points)

    Returns:
        GradeResult with score in [0, 100]
    """
    if policy not in GRADING_POLICIES:
        raise ValueError(f"Unknown grading policy '{policy}'")

    answers = answers or {}
    total = len(questions)
    if total == 0:
        return GradeResult(score=0.0, correct_answers=0, total_questions=0)

    correct = 0
    earned = 0.0
    possible = 0.0
    for question in questions:
        points = _points(question)
        possible += points
        if is_correct(question, answers.get(str(question.get('id')))):
            correct += 1
            earned += points

    if policy == 'weighted':
        score = (earned / possible * 100.0) if possible > 0 else 0.0
    else:
        score = correct / total * 100.0

    return GradeResult(
        score=round(min(max(score, 0.0), 100.0), 2),
        correct_answers=correct,
        total_questions=total
    )
