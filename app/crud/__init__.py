from app.crud.attempt import (
    complete_attempt,
    count_attempts,
    count_open_attempts,
    create_attempt,
    get_attempt_by_id,
    get_attempts_by_student,
    get_completed_attempts_by_quiz,
    upsert_answer,
)
from app.crud.quiz import (
    create_quiz,
    delete_quiz,
    get_quiz_by_id,
    get_quizzes,
    update_quiz,
    update_quiz_status,
)

__all__ = [
    "get_quiz_by_id",
    "get_quizzes",
    "create_quiz",
    "update_quiz",
    "update_quiz_status",
    "delete_quiz",
    "count_attempts",
    "count_open_attempts",
    "create_attempt",
    "get_attempt_by_id",
    "get_attempts_by_student",
    "get_completed_attempts_by_quiz",
    "upsert_answer",
    "complete_attempt",
]
