from typing import Sequence

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.quiz import Quiz
from app.models.quiz_answer import QuizAnswer
from app.models.quiz_attempt import QuizAttempt
from app.models.quiz_question import QuizQuestion
from app.schemas.quiz import QuizCreateRequest, QuizQuestionCreate, QuizUpdateRequest


def _build_question(data: QuizQuestionCreate) -> QuizQuestion:
    return QuizQuestion(
        type=data.type,
        question=data.question,
        explanation=data.explanation,
        points=data.points,
        order=data.order,
        options=[option.model_dump() for option in data.options],
        correct_answers=list(data.correct_answers),
    )


async def get_quiz_by_id(session: AsyncSession, quiz_id: int) -> Quiz | None:
    """ID로 퀴즈 조회 (문제 포함)"""
    stmt = (
        select(Quiz)
        .where(Quiz.id == quiz_id)
        .execution_options(populate_existing=True)
    )
    result = await session.execute(stmt)
    return result.scalar_one_or_none()


async def get_quizzes(
    session: AsyncSession,
    course_id: str | None = None,
) -> Sequence[Quiz]:
    """퀴즈 목록 조회 (강좌 필터 선택, 최신순)"""
    stmt = select(Quiz)
    if course_id is not None:
        stmt = stmt.where(Quiz.course_id == course_id)
    stmt = stmt.order_by(Quiz.created_at.desc(), Quiz.id.desc())
    result = await session.execute(stmt)
    return result.scalars().all()


async def create_quiz(session: AsyncSession, request: QuizCreateRequest) -> Quiz:
    """퀴즈 생성 (문제 포함)"""
    quiz = Quiz(
        course_id=request.course_id,
        lesson_id=request.lesson_id,
        title=request.title,
        description=request.description,
        time_limit=request.time_limit,
        attempts=request.attempts,
        passing_score=request.passing_score,
        status=request.status,
        questions=[_build_question(q) for q in request.questions],
    )
    session.add(quiz)
    await session.commit()
    await session.refresh(quiz)
    return quiz


async def update_quiz(
    session: AsyncSession,
    quiz: Quiz,
    request: QuizUpdateRequest,
) -> Quiz:
    """퀴즈 수정

    questions가 주어지면 기존 문제를 모두 삭제하고 교체한다.
    이미 채점된 응시 답안은 그대로 유지된다.
    """
    updates = request.model_dump(exclude_unset=True, exclude={"questions"})
    for field, value in updates.items():
        setattr(quiz, field, value)

    if request.questions is not None:
        quiz.questions = [_build_question(q) for q in request.questions]

    await session.commit()
    await session.refresh(quiz)
    return quiz


async def update_quiz_status(session: AsyncSession, quiz: Quiz, status: str) -> Quiz:
    """퀴즈 공개 상태 변경"""
    quiz.status = status
    await session.commit()
    await session.refresh(quiz)
    return quiz


async def delete_quiz(session: AsyncSession, quiz: Quiz) -> None:
    """퀴즈 삭제 (문제, 응시 기록, 답안 함께 삭제)"""
    attempt_ids = select(QuizAttempt.id).where(QuizAttempt.quiz_id == quiz.id)
    await session.execute(
        delete(QuizAnswer)
        .where(QuizAnswer.attempt_id.in_(attempt_ids))
        .execution_options(synchronize_session=False)
    )
    await session.execute(
        delete(QuizAttempt)
        .where(QuizAttempt.quiz_id == quiz.id)
        .execution_options(synchronize_session=False)
    )
    await session.delete(quiz)
    await session.commit()
