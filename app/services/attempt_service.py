import logging
from datetime import datetime, timezone

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.crud import attempt as attempt_crud, quiz as quiz_crud
from app.exceptions import (
    AttemptAlreadyCompletedError,
    AttemptConflictError,
    AttemptLimitExceededError,
    AttemptNotFoundError,
    BaseAppError,
    InvalidQuizRequestError,
    QuestionNotFoundError,
    QuizNotFoundError,
)
from app.schemas import attempt as attempt_schema, quiz as quiz_schema
from app.services import grading

logger = logging.getLogger(__name__)

OUT_OF_ATTEMPTS_REASON = "Đã hết số lần thử"
ALREADY_PASSED_REASON = "Bạn đã vượt qua quiz này"


def _as_utc(value: datetime) -> datetime:
    """timezone 정보가 없는 값(SQLite 등)은 UTC로 간주"""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


async def _get_quiz_or_raise(session: AsyncSession, quiz_id: int):
    quiz = await quiz_crud.get_quiz_by_id(session, quiz_id)
    if not quiz:
        raise QuizNotFoundError(quiz_id)
    return quiz


async def _get_attempt_or_raise(session: AsyncSession, attempt_id: int):
    attempt = await attempt_crud.get_attempt_by_id(session, attempt_id)
    if not attempt:
        raise AttemptNotFoundError(attempt_id)
    return attempt


async def start_attempt(
    session: AsyncSession,
    request: attempt_schema.AttemptStartRequest,
) -> attempt_schema.AttemptStartResponse:
    """응시 시작

    완료 여부와 상관없이 기존 응시 횟수가 최대 응시 횟수에 도달했으면 거부한다.
    회차 번호는 (기존 응시 횟수 + 1).
    """
    quiz = await _get_quiz_or_raise(session, request.quiz_id)
    quiz_id = quiz.id

    used_attempts = await attempt_crud.count_attempts(session, quiz.id, request.student_id)
    if used_attempts >= quiz.attempts:
        logger.warning(
            f"응시 횟수 초과: quiz_id={quiz.id}, student_id={request.student_id}, "
            f"used={used_attempts}, max={quiz.attempts}"
        )
        raise AttemptLimitExceededError(quiz.id, quiz.attempts)

    attempt_number = used_attempts + 1

    try:
        attempt = await attempt_crud.create_attempt(
            session,
            quiz_id=quiz.id,
            student_id=request.student_id,
            attempt_number=attempt_number,
            started_at=datetime.now(timezone.utc),
        )
    except IntegrityError:
        # 다른 탭/세션에서 같은 회차가 먼저 생성된 경우
        await session.rollback()
        logger.warning(
            f"응시 회차 충돌: quiz_id={quiz_id}, student_id={request.student_id}, "
            f"attempt_number={attempt_number}"
        )
        raise AttemptConflictError(quiz_id, request.student_id)
    except Exception as e:
        logger.error(f"응시 기록 생성 중 예상치 못한 오류: {e}, quiz_id={quiz_id}", exc_info=True)
        await session.rollback()
        raise

    logger.info(
        f"응시 시작: attempt_id={attempt.id}, quiz_id={quiz.id}, "
        f"student_id={request.student_id}, attempt_number={attempt_number}"
    )

    quiz_response = quiz_schema.QuizResponse.model_validate(quiz).hide_answers()
    return attempt_schema.AttemptStartResponse(
        attempt_id=attempt.id,
        attempt_number=attempt.attempt_number,
        remaining_attempts=max(0, quiz.attempts - attempt_number),
        started_at=attempt.started_at,
        quiz=quiz_response,
    )


async def record_answer(
    session: AsyncSession,
    attempt_id: int,
    question_id: int,
    request: attempt_schema.AnswerSubmitRequest,
) -> attempt_schema.QuizAnswerResponse:
    """답안 저장 (채점은 완료 시점에 수행)

    같은 문제에 다시 답하면 이전 답안을 교체한다 (마지막 저장 우선).
    """
    attempt = await _get_attempt_or_raise(session, attempt_id)
    if attempt.completed_at is not None:
        raise AttemptAlreadyCompletedError(attempt_id)

    quiz = await _get_quiz_or_raise(session, attempt.quiz_id)
    if not any(q.id == question_id for q in quiz.questions):
        raise QuestionNotFoundError(question_id, quiz.id)

    try:
        answer = await attempt_crud.upsert_answer(
            session,
            attempt,
            question_id=question_id,
            selected_answers=request.selected_answers,
            text_answer=request.text_answer,
        )
        if answer is None:
            # 조회 이후 다른 요청이 먼저 완료 처리함
            await session.rollback()
            raise AttemptAlreadyCompletedError(attempt_id)
    except BaseAppError:
        raise
    except Exception as e:
        logger.error(f"답안 저장 실패: {e}, attempt_id={attempt_id}, question_id={question_id}", exc_info=True)
        await session.rollback()
        raise

    logger.debug(f"답안 저장: attempt_id={attempt_id}, question_id={question_id}")
    return attempt_schema.QuizAnswerResponse.model_validate(answer)


async def complete_attempt(
    session: AsyncSession,
    attempt_id: int,
) -> attempt_schema.QuizAttemptResponse:
    """응시 완료 및 자동 채점

    완료 시점의 퀴즈 문제 전체로 채점하며, 완료 후 응시 기록은 변경되지 않는다.
    """
    attempt = await _get_attempt_or_raise(session, attempt_id)
    if attempt.completed_at is not None:
        raise AttemptAlreadyCompletedError(attempt_id)

    quiz = await _get_quiz_or_raise(session, attempt.quiz_id)

    result = grading.grade_answers(quiz.questions, attempt.answers, quiz.passing_score)
    completed_at = datetime.now(timezone.utc)
    time_spent = max(0, int((completed_at - _as_utc(attempt.started_at)).total_seconds()))

    try:
        completed = await attempt_crud.complete_attempt(
            session,
            attempt,
            grading_result=result,
            completed_at=completed_at,
            time_spent=time_spent,
        )
        if not completed:
            await session.rollback()
            raise AttemptAlreadyCompletedError(attempt_id)
    except BaseAppError:
        raise
    except Exception as e:
        logger.error(f"응시 완료 처리 실패: {e}, attempt_id={attempt_id}", exc_info=True)
        await session.rollback()
        raise

    logger.info(
        f"응시 완료: attempt_id={attempt_id}, quiz_id={quiz.id}, "
        f"score={result.score}/{result.max_score}, passed={result.passed}"
    )

    graded_attempt = await _get_attempt_or_raise(session, attempt_id)
    return attempt_schema.QuizAttemptResponse.model_validate(graded_attempt)


async def get_attempt(
    session: AsyncSession,
    attempt_id: int,
) -> attempt_schema.QuizAttemptResponse:
    """응시 기록 조회"""
    attempt = await _get_attempt_or_raise(session, attempt_id)
    return attempt_schema.QuizAttemptResponse.model_validate(attempt)


async def get_attempt_result(
    session: AsyncSession,
    attempt_id: int,
) -> attempt_schema.AttemptResultResponse:
    """완료된 응시의 결과 요약"""
    attempt = await _get_attempt_or_raise(session, attempt_id)
    if attempt.completed_at is None:
        raise InvalidQuizRequestError(f"Lượt làm bài {attempt_id} chưa được nộp")

    quiz = await _get_quiz_or_raise(session, attempt.quiz_id)

    percentage = grading.round_percentage(
        grading.calculate_percentage(attempt.score, attempt.max_score)
    )
    return attempt_schema.AttemptResultResponse(
        attempt_id=attempt.id,
        quiz_id=attempt.quiz_id,
        total_questions=len(attempt.answers),
        correct_count=sum(1 for a in attempt.answers if a.is_correct),
        score=attempt.score,
        max_score=attempt.max_score,
        percentage=percentage,
        grade=grading.get_grade_letter(percentage),
        passed=attempt.passed,
        passing_score=quiz.passing_score,
    )


async def get_remaining_attempts(
    session: AsyncSession,
    quiz_id: int,
    student_id: str,
) -> attempt_schema.RemainingAttemptsResponse:
    """남은 응시 횟수 = max(0, 최대 응시 횟수 - 전체 응시 횟수)"""
    quiz = await _get_quiz_or_raise(session, quiz_id)
    used_attempts = await attempt_crud.count_attempts(session, quiz_id, student_id)
    return attempt_schema.RemainingAttemptsResponse(
        quiz_id=quiz_id,
        student_id=student_id,
        max_attempts=quiz.attempts,
        remaining_attempts=max(0, quiz.attempts - used_attempts),
    )


async def get_student_attempts(
    session: AsyncSession,
    quiz_id: int,
    student_id: str,
) -> attempt_schema.AttemptListResponse:
    """학습자의 응시 기록 목록 (최신순)"""
    attempts = await attempt_crud.get_attempts_by_student(session, quiz_id, student_id)
    attempt_responses = [attempt_schema.QuizAttemptResponse.model_validate(a) for a in attempts]
    return attempt_schema.AttemptListResponse(attempts=attempt_responses, total=len(attempt_responses))


async def get_best_score(
    session: AsyncSession,
    quiz_id: int,
    student_id: str,
) -> attempt_schema.BestScoreResponse:
    """완료된 응시 중 최고 득점률 (없으면 0)"""
    await _get_quiz_or_raise(session, quiz_id)
    attempts = await attempt_crud.get_attempts_by_student(session, quiz_id, student_id)
    percentages = [
        grading.calculate_percentage(a.score, a.max_score)
        for a in attempts
        if a.completed_at is not None
    ]
    return attempt_schema.BestScoreResponse(
        quiz_id=quiz_id,
        student_id=student_id,
        best_score=max(percentages, default=0.0),
    )


async def can_take_quiz(
    session: AsyncSession,
    quiz_id: int,
    student_id: str,
) -> attempt_schema.EligibilityResponse:
    """응시 가능 여부 (UI 안내용, 응시 시작은 횟수 제한만 검사)"""
    quiz = await _get_quiz_or_raise(session, quiz_id)
    attempts = await attempt_crud.get_attempts_by_student(session, quiz_id, student_id)

    if len(attempts) >= quiz.attempts:
        return attempt_schema.EligibilityResponse(can_take=False, reason=OUT_OF_ATTEMPTS_REASON)

    if any(a.passed for a in attempts if a.completed_at is not None):
        return attempt_schema.EligibilityResponse(can_take=False, reason=ALREADY_PASSED_REASON)

    return attempt_schema.EligibilityResponse(can_take=True)
