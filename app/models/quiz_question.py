from sqlalchemy import ForeignKey, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.models.base import Base, JSONType, TimestampMixin


class QuizQuestion(Base, TimestampMixin):
    __tablename__ = "quiz_questions"

    id: Mapped[int] = mapped_column(primary_key=True)
    quiz_id: Mapped[int] = mapped_column(ForeignKey("quizzes.id", ondelete="CASCADE"), nullable=False, index=True)
    type: Mapped[str] = mapped_column(nullable=False)  # 'multiple_choice', 'true_false', 'fill_blank', 'essay'
    question: Mapped[str] = mapped_column(Text, nullable=False)
    explanation: Mapped[str | None] = mapped_column(Text, default=None)
    points: Mapped[int] = mapped_column(nullable=False, default=1)
    order: Mapped[int] = mapped_column(nullable=False, default=0)
    # [{"id": "a", "text": "...", "is_correct": false}, ...]
    options: Mapped[list[dict]] = mapped_column(JSONType, nullable=False, default=list)
    correct_answers: Mapped[list[str]] = mapped_column(JSONType, nullable=False, default=list)

    quiz: Mapped["Quiz"] = relationship("Quiz", back_populates="questions")
