from .user import User, ROLES
from .course import Course
from .lesson import Lesson
from .enrollment import Enrollment
from .progress import LessonProgress
from .quiz import Quiz, QuizQuestion, QuizAttempt, QUESTION_TYPES

__all__ = [
    "User", "ROLES", "Course", "Lesson", "Enrollment", "LessonProgress",
    "Quiz", "QuizQuestion", "QuizAttempt", "QUESTION_TYPES",
]
