from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.models.base import Base, TimestampMixin


class Quiz(Base, TimestampMixin):
    __tablename__ = "quizzes"

    id: Mapped[int] = mapped_column(primary_key=True)
    course_id: Mapped[str | None] = mapped_column(String, default=None, index=True)
    lesson_id: Mapped[str | None] = mapped_column(String, default=None)
    title: Mapped[str] = mapped_column(nullable=False)
    description: Mapped[str | None] = mapped_column(Text, default=None)
    time_limit: Mapped[int | None] = mapped_column(default=None)  # 분 단위, UI 카운트다운용
    attempts: Mapped[int] = mapped_column(nullable=False, default=1)
    passing_score: Mapped[int] = mapped_column(nullable=False, default=0)
    status: Mapped[str] = mapped_column(nullable=False, default="draft", index=True)  # 'draft', 'published', 'archived'

    questions: Mapped[list["QuizQuestion"]] = relationship(
        "QuizQuestion",
        back_populates="quiz",
        cascade="all, delete-orphan",
        order_by="[QuizQuestion.order, QuizQuestion.id]",
        lazy="selectin",
    )
