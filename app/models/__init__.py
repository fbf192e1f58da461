from app.models.base import Base, get_db
from app.models.quiz import Quiz
from app.models.quiz_answer import QuizAnswer
from app.models.quiz_attempt import QuizAttempt
from app.models.quiz_question import QuizQuestion

__all__ = ["Base", "Quiz", "QuizQuestion", "QuizAttempt", "QuizAnswer", "get_db"]
