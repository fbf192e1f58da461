from pydantic import BaseModel, Field


class GradedAnswer(BaseModel):
    """채점된 답안"""
    question_id: int
    selected_answers: list[str] = Field(default_factory=list)
    text_answer: str | None = None
    is_correct: bool = False
    points_earned: int = 0


class GradingResult(BaseModel):
    """응시 채점 결과"""
    answers: list[GradedAnswer]
    score: int
    max_score: int
    passed: bool
