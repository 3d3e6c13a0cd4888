from core.exam.grading import GradeResult, grade, normalize_answer
from core.exam.service import ExamService

__all__ = ['ExamService', 'GradeResult', 'grade', 'normalize_answer']
