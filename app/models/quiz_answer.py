from sqlalchemy import ForeignKey, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.models.base import Base, JSONType, TimestampMixin


class QuizAnswer(Base, TimestampMixin):
    __tablename__ = "quiz_answers"
    __table_args__ = (
        UniqueConstraint("attempt_id", "question_id", name="uq_quiz_answers_attempt_question"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    attempt_id: Mapped[int] = mapped_column(ForeignKey("quiz_attempts.id", ondelete="CASCADE"), nullable=False, index=True)
    # 채점 결과가 문제 수정/삭제 후에도 남도록 FK를 두지 않음
    question_id: Mapped[int] = mapped_column(nullable=False)
    selected_answers: Mapped[list[str]] = mapped_column(JSONType, nullable=False, default=list)
    text_answer: Mapped[str | None] = mapped_column(Text, default=None)
    # 채점 엔진만 기록 (완료 전까지 False/0)
    is_correct: Mapped[bool] = mapped_column(nullable=False, default=False)
    points_earned: Mapped[int] = mapped_column(nullable=False, default=0)

    attempt: Mapped["QuizAttempt"] = relationship("QuizAttempt", back_populates="answers")
