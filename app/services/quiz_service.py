import logging

from sqlalchemy.ext.asyncio import AsyncSession

from app.crud import attempt as attempt_crud, quiz as quiz_crud
from app.exceptions import InvalidQuizRequestError, QuizNotFoundError
from app.schemas import quiz as quiz_schema
from app.services import grading

logger = logging.getLogger(__name__)


async def create_quiz(
    session: AsyncSession,
    request: quiz_schema.QuizCreateRequest,
) -> quiz_schema.QuizResponse:
    """퀴즈 생성 (강사용)"""
    try:
        quiz = await quiz_crud.create_quiz(session, request)
    except Exception as e:
        logger.error(f"퀴즈 생성 실패: {e}, title={request.title}", exc_info=True)
        await session.rollback()
        raise

    logger.info(f"퀴즈 생성: quiz_id={quiz.id}, questions={len(quiz.questions)}")
    return quiz_schema.QuizResponse.model_validate(quiz)


async def get_quiz(
    session: AsyncSession,
    quiz_id: int,
) -> quiz_schema.QuizResponse:
    """퀴즈 조회 (정답 포함)"""
    quiz = await quiz_crud.get_quiz_by_id(session, quiz_id)
    if not quiz:
        raise QuizNotFoundError(quiz_id)
    return quiz_schema.QuizResponse.model_validate(quiz)


async def list_quizzes(
    session: AsyncSession,
    course_id: str | None = None,
) -> quiz_schema.QuizListResponse:
    """퀴즈 목록 조회 (최신순)"""
    quizzes = await quiz_crud.get_quizzes(session, course_id=course_id)
    quiz_responses = [quiz_schema.QuizResponse.model_validate(q) for q in quizzes]
    return quiz_schema.QuizListResponse(quizzes=quiz_responses, total=len(quiz_responses))


async def update_quiz(
    session: AsyncSession,
    quiz_id: int,
    request: quiz_schema.QuizUpdateRequest,
) -> quiz_schema.QuizResponse:
    """퀴즈 수정"""
    quiz = await quiz_crud.get_quiz_by_id(session, quiz_id)
    if not quiz:
        raise QuizNotFoundError(quiz_id)

    try:
        quiz = await quiz_crud.update_quiz(session, quiz, request)
    except Exception as e:
        logger.error(f"퀴즈 수정 실패: {e}, quiz_id={quiz_id}", exc_info=True)
        await session.rollback()
        raise

    logger.info(f"퀴즈 수정: quiz_id={quiz_id}, questions_replaced={request.questions is not None}")
    return quiz_schema.QuizResponse.model_validate(quiz)


async def delete_quiz(session: AsyncSession, quiz_id: int) -> None:
    """퀴즈 삭제"""
    quiz = await quiz_crud.get_quiz_by_id(session, quiz_id)
    if not quiz:
        raise QuizNotFoundError(quiz_id)

    try:
        await quiz_crud.delete_quiz(session, quiz)
    except Exception as e:
        logger.error(f"퀴즈 삭제 실패: {e}, quiz_id={quiz_id}", exc_info=True)
        await session.rollback()
        raise

    logger.info(f"퀴즈 삭제: quiz_id={quiz_id}")


async def toggle_quiz_status(
    session: AsyncSession,
    quiz_id: int,
) -> quiz_schema.QuizResponse:
    """공개 상태 전환 (published ↔ draft)"""
    quiz = await quiz_crud.get_quiz_by_id(session, quiz_id)
    if not quiz:
        raise QuizNotFoundError(quiz_id)

    if quiz.status == "archived":
        raise InvalidQuizRequestError(f"Bài kiểm tra {quiz_id} đã được lưu trữ")

    new_status = "draft" if quiz.status == "published" else "published"
    quiz = await quiz_crud.update_quiz_status(session, quiz, new_status)

    logger.info(f"퀴즈 상태 변경: quiz_id={quiz_id}, status={new_status}")
    return quiz_schema.QuizResponse.model_validate(quiz)


async def get_quiz_statistics(
    session: AsyncSession,
    quiz_id: int,
) -> quiz_schema.QuizStatisticsResponse:
    """퀴즈 통계 (완료된 응시 기준, 득점률은 정수 반올림)"""
    quiz = await quiz_crud.get_quiz_by_id(session, quiz_id)
    if not quiz:
        raise QuizNotFoundError(quiz_id)

    attempts = await attempt_crud.get_completed_attempts_by_quiz(session, quiz_id)
    if not attempts:
        return quiz_schema.QuizStatisticsResponse(
            quiz_id=quiz_id,
            total_attempts=0,
            unique_students=0,
            average_score=0,
            pass_rate=0,
            highest_score=0,
            lowest_score=0,
        )

    scores = [
        grading.round_percentage(grading.calculate_percentage(a.score, a.max_score))
        for a in attempts
    ]
    passed_count = sum(1 for a in attempts if a.passed)

    return quiz_schema.QuizStatisticsResponse(
        quiz_id=quiz_id,
        total_attempts=len(attempts),
        unique_students=len({a.student_id for a in attempts}),
        average_score=grading.round_percentage(sum(scores) / len(scores)),
        pass_rate=grading.round_percentage(passed_count / len(attempts) * 100),
        highest_score=max(scores),
        lowest_score=min(scores),
    )
