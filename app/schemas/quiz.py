from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field, field_validator, model_validator

QuestionType = Literal["multiple_choice", "true_false", "fill_blank", "essay"]
QuizStatus = Literal["draft", "published", "archived"]

TRUE_FALSE_VALUES = {"true", "false"}


class QuizOptionCreate(BaseModel):
    """선택지 생성 스키마"""
    id: str = Field(..., min_length=1, description="선택지 ID (정답 판별에 사용)")
    text: str = Field(..., description="선택지 텍스트")
    is_correct: bool = Field(False, description="정답 여부")


class QuizQuestionCreate(BaseModel):
    """문제 생성 스키마"""
    type: QuestionType = Field(..., description="문제 유형")
    question: str = Field(..., min_length=1, description="문제 본문")
    explanation: str | None = Field(None, description="해설")
    points: int = Field(1, ge=1, description="배점 (양의 정수)")
    order: int = Field(0, ge=0, description="출제 순서")
    options: list[QuizOptionCreate] = Field(default_factory=list, description="선택지 (객관식/OX 전용)")
    correct_answers: list[str] = Field(
        default_factory=list,
        description="정답 목록 (객관식/OX: 선택지 ID, 빈칸: 허용 답안 문자열)",
    )

    @model_validator(mode="after")
    def validate_true_false_answers(self) -> "QuizQuestionCreate":
        """OX 문제의 정답은 'true'/'false'만 허용"""
        if self.type == "true_false":
            invalid = [a for a in self.correct_answers if a not in TRUE_FALSE_VALUES]
            if invalid:
                raise ValueError(f"true_false 문제의 정답은 'true' 또는 'false'여야 합니다: {invalid}")
        return self


class QuizCreateRequest(BaseModel):
    """퀴즈 생성 요청 스키마"""
    course_id: str | None = Field(None, description="강좌 ID")
    lesson_id: str | None = Field(None, description="강의 ID")
    title: str = Field(..., min_length=1, description="퀴즈 제목")
    description: str | None = Field(None, description="퀴즈 설명")
    time_limit: int | None = Field(None, ge=1, description="제한 시간 (분, UI 표시용)")
    attempts: int = Field(1, ge=1, description="최대 응시 횟수")
    passing_score: int = Field(70, ge=0, le=100, description="합격 기준 (%)")
    status: QuizStatus = Field("draft", description="공개 상태")
    questions: list[QuizQuestionCreate] = Field(default_factory=list)


class QuizUpdateRequest(BaseModel):
    """퀴즈 수정 요청 스키마 (questions가 주어지면 문제 목록 전체 교체)"""
    course_id: str | None = None
    lesson_id: str | None = None
    title: str | None = Field(None, min_length=1)
    description: str | None = None
    time_limit: int | None = Field(None, ge=1)
    attempts: int | None = Field(None, ge=1)
    passing_score: int | None = Field(None, ge=0, le=100)
    status: QuizStatus | None = None
    questions: list[QuizQuestionCreate] | None = None

    @field_validator("title", "attempts", "passing_score", "status")
    @classmethod
    def reject_null(cls, value, info):
        """필수 컬럼은 생략만 가능하고 null로 지울 수 없음"""
        if value is None:
            raise ValueError(f"{info.field_name}은(는) null일 수 없습니다")
        return value


class QuizOptionResponse(BaseModel):
    """선택지 응답 스키마"""
    id: str
    text: str
    is_correct: bool | None = Field(None, description="정답 여부 (응시 중에는 None)")


class QuizQuestionResponse(BaseModel):
    """문제 응답 스키마"""
    id: int
    quiz_id: int
    type: str
    question: str
    explanation: str | None
    points: int
    order: int
    options: list[QuizOptionResponse]
    correct_answers: list[str] | None = Field(None, description="정답 (응시 중에는 None)")

    model_config = {"from_attributes": True}


class QuizResponse(BaseModel):
    """퀴즈 응답 스키마"""
    id: int
    course_id: str | None
    lesson_id: str | None
    title: str
    description: str | None
    time_limit: int | None
    attempts: int
    passing_score: int
    status: str
    questions: list[QuizQuestionResponse]
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}

    def hide_answers(self) -> "QuizResponse":
        """응시자용: 정답 정보 제거"""
        for question in self.questions:
            question.correct_answers = None
            question.explanation = None
            for option in question.options:
                option.is_correct = None
        return self


class QuizListResponse(BaseModel):
    """퀴즈 목록 응답 스키마"""
    quizzes: list[QuizResponse]
    total: int


class QuizStatisticsResponse(BaseModel):
    """퀴즈 통계 응답 스키마 (완료된 응시 기준)"""
    quiz_id: int
    total_attempts: int
    unique_students: int
    average_score: int
    pass_rate: int
    highest_score: int
    lowest_score: int
