from app.services.attempt_service import (
    can_take_quiz,
    complete_attempt,
    get_attempt,
    get_attempt_result,
    get_best_score,
    get_remaining_attempts,
    get_student_attempts,
    record_answer,
    start_attempt,
)
from app.services.grading import (
    check_answer,
    grade_answers,
    normalize_text,
)
from app.services.quiz_service import (
    create_quiz,
    delete_quiz,
    get_quiz,
    get_quiz_statistics,
    list_quizzes,
    toggle_quiz_status,
    update_quiz,
)

__all__ = [
    "check_answer",
    "grade_answers",
    "normalize_text",
    "start_attempt",
    "record_answer",
    "complete_attempt",
    "get_attempt",
    "get_attempt_result",
    "get_remaining_attempts",
    "get_best_score",
    "get_student_attempts",
    "can_take_quiz",
    "create_quiz",
    "get_quiz",
    "list_quizzes",
    "update_quiz",
    "delete_quiz",
    "toggle_quiz_status",
    "get_quiz_statistics",
]
