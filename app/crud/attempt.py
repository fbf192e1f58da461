from datetime import datetime
from typing import Sequence

from sqlalchemy import func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.quiz_answer import QuizAnswer
from app.models.quiz_attempt import QuizAttempt
from app.schemas.grading import GradingResult


async def count_attempts(
    session: AsyncSession,
    quiz_id: int,
    student_id: str,
) -> int:
    """학습자의 퀴즈 응시 횟수 (완료 여부 무관)"""
    stmt = select(func.count(QuizAttempt.id)).where(
        QuizAttempt.quiz_id == quiz_id,
        QuizAttempt.student_id == student_id,
    )
    total_count = await session.scalar(stmt)
    return total_count or 0


async def count_open_attempts(session: AsyncSession) -> int:
    """진행 중(미완료) 응시 수"""
    stmt = select(func.count(QuizAttempt.id)).where(QuizAttempt.completed_at.is_(None))
    return await session.scalar(stmt) or 0


async def create_attempt(
    session: AsyncSession,
    quiz_id: int,
    student_id: str,
    attempt_number: int,
    started_at: datetime,
) -> QuizAttempt:
    """응시 기록 생성

    (quiz_id, student_id, attempt_number) 유니크 제약 위반 시 IntegrityError가 발생한다.
    """
    attempt = QuizAttempt(
        quiz_id=quiz_id,
        student_id=student_id,
        attempt_number=attempt_number,
        score=0,
        max_score=0,
        passed=False,
        started_at=started_at,
        time_spent=0,
        answers=[],
    )
    session.add(attempt)
    await session.commit()
    await session.refresh(attempt)
    return attempt


async def get_attempt_by_id(session: AsyncSession, attempt_id: int) -> QuizAttempt | None:
    """ID로 응시 기록 조회 (답안 포함)"""
    stmt = (
        select(QuizAttempt)
        .where(QuizAttempt.id == attempt_id)
        .execution_options(populate_existing=True)
    )
    result = await session.execute(stmt)
    return result.scalar_one_or_none()


async def get_attempts_by_student(
    session: AsyncSession,
    quiz_id: int,
    student_id: str,
) -> Sequence[QuizAttempt]:
    """학습자의 퀴즈 응시 기록 (최신순)"""
    stmt = (
        select(QuizAttempt)
        .where(
            QuizAttempt.quiz_id == quiz_id,
            QuizAttempt.student_id == student_id,
        )
        .order_by(QuizAttempt.started_at.desc(), QuizAttempt.id.desc())
    )
    result = await session.execute(stmt)
    return result.scalars().all()


async def get_completed_attempts_by_quiz(
    session: AsyncSession,
    quiz_id: int,
) -> Sequence[QuizAttempt]:
    """퀴즈의 완료된 응시 기록 전체 (통계용)"""
    stmt = select(QuizAttempt).where(
        QuizAttempt.quiz_id == quiz_id,
        QuizAttempt.completed_at.is_not(None),
    )
    result = await session.execute(stmt)
    return result.scalars().all()


async def upsert_answer(
    session: AsyncSession,
    attempt: QuizAttempt,
    question_id: int,
    selected_answers: list[str],
    text_answer: str | None,
) -> QuizAnswer | None:
    """문제 ID 기준 답안 저장 (기존 답안은 교체, 채점 필드는 초기값 유지)

    응시가 아직 진행 중일 때만 쓴다. 조회 이후 다른 요청이 응시를 완료했으면
    아무것도 쓰지 않고 None을 반환한다 (호출 측에서 rollback).
    """
    # 진행 중인 응시 행을 잠가서 동시 완료 처리와 직렬화
    guard = (
        update(QuizAttempt)
        .where(
            QuizAttempt.id == attempt.id,
            QuizAttempt.completed_at.is_(None),
        )
        .values(updated_at=func.now())
        .execution_options(synchronize_session=False)
    )
    result = await session.execute(guard)
    if result.rowcount == 0:
        return None

    answer = await _get_answer(session, attempt.id, question_id)
    if answer is None:
        try:
            async with session.begin_nested():
                answer = QuizAnswer(attempt_id=attempt.id, question_id=question_id)
                session.add(answer)
        except IntegrityError:
            # 같은 문제의 첫 답안이 동시에 저장된 경우 기존 행을 갱신
            answer = await _get_answer(session, attempt.id, question_id)

    answer.selected_answers = list(selected_answers)
    answer.text_answer = text_answer
    answer.is_correct = False
    answer.points_earned = 0

    await session.commit()
    return answer


async def _get_answer(
    session: AsyncSession,
    attempt_id: int,
    question_id: int,
) -> QuizAnswer | None:
    stmt = (
        select(QuizAnswer)
        .where(
            QuizAnswer.attempt_id == attempt_id,
            QuizAnswer.question_id == question_id,
        )
        .execution_options(populate_existing=True)
    )
    return await session.scalar(stmt)


async def complete_attempt(
    session: AsyncSession,
    attempt: QuizAttempt,
    grading_result: GradingResult,
    completed_at: datetime,
    time_spent: int,
) -> bool:
    """채점 결과 저장 및 응시 완료 처리

    completed_at이 비어 있는 경우에만 갱신한다.
    이미 완료된 경우 아무것도 쓰지 않고 False를 반환한다 (호출 측에서 rollback).
    """
    stmt = (
        update(QuizAttempt)
        .where(
            QuizAttempt.id == attempt.id,
            QuizAttempt.completed_at.is_(None),
        )
        .values(
            score=grading_result.score,
            max_score=grading_result.max_score,
            passed=grading_result.passed,
            completed_at=completed_at,
            time_spent=time_spent,
        )
        .execution_options(synchronize_session=False)
    )
    result = await session.execute(stmt)
    if result.rowcount == 0:
        return False

    # 완료 갱신 이전에 저장된 답안까지 반영
    await session.refresh(attempt, ["answers"])
    existing = {a.question_id: a for a in attempt.answers}
    graded_ids = {g.question_id for g in grading_result.answers}

    # 퀴즈에서 삭제된 문제의 답안 제거 (문제당 답안 1개 유지)
    for answer in list(attempt.answers):
        if answer.question_id not in graded_ids:
            attempt.answers.remove(answer)

    for graded in grading_result.answers:
        answer = existing.get(graded.question_id)
        if answer is None:
            answer = QuizAnswer(question_id=graded.question_id)
            attempt.answers.append(answer)
        answer.selected_answers = graded.selected_answers
        answer.text_answer = graded.text_answer
        answer.is_correct = graded.is_correct
        answer.points_earned = graded.points_earned

    await session.commit()
    return True
