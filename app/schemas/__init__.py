from app.schemas.attempt import (
    AnswerSubmitRequest,
    AttemptListResponse,
    AttemptResultResponse,
    AttemptStartRequest,
    AttemptStartResponse,
    BestScoreResponse,
    EligibilityResponse,
    QuizAnswerResponse,
    QuizAttemptResponse,
    RemainingAttemptsResponse,
)
from app.schemas.grading import (
    GradedAnswer,
    GradingResult,
)
from app.schemas.quiz import (
    QuizCreateRequest,
    QuizListResponse,
    QuizOptionCreate,
    QuizOptionResponse,
    QuizQuestionCreate,
    QuizQuestionResponse,
    QuizResponse,
    QuizStatisticsResponse,
    QuizUpdateRequest,
)

__all__ = [
    "QuizCreateRequest",
    "QuizUpdateRequest",
    "QuizQuestionCreate",
    "QuizOptionCreate",
    "QuizResponse",
    "QuizQuestionResponse",
    "QuizOptionResponse",
    "QuizListResponse",
    "QuizStatisticsResponse",
    "AttemptStartRequest",
    "AttemptStartResponse",
    "AnswerSubmitRequest",
    "QuizAnswerResponse",
    "QuizAttemptResponse",
    "AttemptListResponse",
    "AttemptResultResponse",
    "RemainingAttemptsResponse",
    "BestScoreResponse",
    "EligibilityResponse",
    "GradedAnswer",
    "GradingResult",
]
