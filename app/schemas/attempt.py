from datetime import datetime

from pydantic import BaseModel, Field

from app.schemas.quiz import QuizResponse


class AttemptStartRequest(BaseModel):
    """응시 시작 요청 스키마"""
    quiz_id: int = Field(..., description="퀴즈 ID")
    student_id: str = Field(..., min_length=1, description="학습자 ID (인증 uid)")


class AnswerSubmitRequest(BaseModel):
    """답안 제출 요청 스키마

    is_correct / points_earned는 채점 엔진만 기록하므로 받지 않는다.
    """
    selected_answers: list[str] = Field(default_factory=list, description="선택한 선택지 ID 목록")
    text_answer: str | None = Field(None, description="주관식 답안")


class QuizAnswerResponse(BaseModel):
    """답안 응답 스키마"""
    question_id: int
    selected_answers: list[str]
    text_answer: str | None
    is_correct: bool
    points_earned: int

    model_config = {"from_attributes": True}


class QuizAttemptResponse(BaseModel):
    """응시 기록 응답 스키마"""
    id: int
    quiz_id: int
    student_id: str
    attempt_number: int
    answers: list[QuizAnswerResponse]
    score: int
    max_score: int
    passed: bool
    started_at: datetime
    completed_at: datetime | None
    time_spent: int

    model_config = {"from_attributes": True}


class AttemptStartResponse(BaseModel):
    """응시 시작 응답 스키마 (문제는 정답 제거된 상태)"""
    attempt_id: int
    attempt_number: int
    remaining_attempts: int
    started_at: datetime
    quiz: QuizResponse


class AttemptListResponse(BaseModel):
    """응시 기록 목록 응답 스키마"""
    attempts: list[QuizAttemptResponse]
    total: int


class AttemptResultResponse(BaseModel):
    """응시 결과 요약 스키마"""
    attempt_id: int
    quiz_id: int
    total_questions: int
    correct_count: int
    score: int
    max_score: int
    percentage: int
    grade: str
    passed: bool
    passing_score: int


class RemainingAttemptsResponse(BaseModel):
    """남은 응시 횟수 응답 스키마"""
    quiz_id: int
    student_id: str
    max_attempts: int
    remaining_attempts: int


class BestScoreResponse(BaseModel):
    """최고 점수 응답 스키마"""
    quiz_id: int
    student_id: str
    best_score: float = Field(..., description="완료된 응시 중 최고 득점률 (%)")


class EligibilityResponse(BaseModel):
    """응시 가능 여부 응답 스키마"""
    can_take: bool
    reason: str | None = None
