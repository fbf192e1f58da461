import logging

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.base import get_db
from app.schemas import attempt as attempt_schema, quiz as quiz_schema
from app.services import attempt_service, quiz_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/quizzes", tags=["quizzes"])


@router.post("", response_model=quiz_schema.QuizResponse, status_code=status.HTTP_201_CREATED)
async def create_quiz(
    request: quiz_schema.QuizCreateRequest,
    db: AsyncSession = Depends(get_db),
):
    """퀴즈 생성 API (강사용)"""
    return await quiz_service.create_quiz(db, request)


@router.get("", response_model=quiz_schema.QuizListResponse)
async def list_quizzes(
    course_id: str | None = Query(None, description="강좌 ID"),
    db: AsyncSession = Depends(get_db),
):
    """퀴즈 목록 조회 API"""
    return await quiz_service.list_quizzes(db, course_id=course_id)


@router.get("/{quiz_id}", response_model=quiz_schema.QuizResponse)
async def get_quiz(
    quiz_id: int,
    db: AsyncSession = Depends(get_db),
):
    """퀴즈 조회 API (정답 포함, 강사용)"""
    return await quiz_service.get_quiz(db, quiz_id)


@router.put("/{quiz_id}", response_model=quiz_schema.QuizResponse)
async def update_quiz(
    quiz_id: int,
    request: quiz_schema.QuizUpdateRequest,
    db: AsyncSession = Depends(get_db),
):
    """퀴즈 수정 API"""
    return await quiz_service.update_quiz(db, quiz_id, request)


@router.delete("/{quiz_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_quiz(
    quiz_id: int,
    db: AsyncSession = Depends(get_db),
):
    """퀴즈 삭제 API"""
    await quiz_service.delete_quiz(db, quiz_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{quiz_id}/toggle-status", response_model=quiz_schema.QuizResponse)
async def toggle_quiz_status(
    quiz_id: int,
    db: AsyncSession = Depends(get_db),
):
    """퀴즈 공개/비공개 전환 API"""
    return await quiz_service.toggle_quiz_status(db, quiz_id)


@router.get("/{quiz_id}/statistics", response_model=quiz_schema.QuizStatisticsResponse)
async def get_quiz_statistics(
    quiz_id: int,
    db: AsyncSession = Depends(get_db),
):
    """퀴즈 통계 API"""
    return await quiz_service.get_quiz_statistics(db, quiz_id)


@router.get(
    "/{quiz_id}/students/{student_id}/remaining-attempts",
    response_model=attempt_schema.RemainingAttemptsResponse,
)
async def get_remaining_attempts(
    quiz_id: int,
    student_id: str,
    db: AsyncSession = Depends(get_db),
):
    """남은 응시 횟수 조회 API"""
    return await attempt_service.get_remaining_attempts(db, quiz_id, student_id)


@router.get(
    "/{quiz_id}/students/{student_id}/best-score",
    response_model=attempt_schema.BestScoreResponse,
)
async def get_best_score(
    quiz_id: int,
    student_id: str,
    db: AsyncSession = Depends(get_db),
):
    """최고 점수 조회 API"""
    return await attempt_service.get_best_score(db, quiz_id, student_id)


@router.get(
    "/{quiz_id}/students/{student_id}/attempts",
    response_model=attempt_schema.AttemptListResponse,
)
async def get_student_attempts(
    quiz_id: int,
    student_id: str,
    db: AsyncSession = Depends(get_db),
):
    """학습자 응시 기록 목록 API"""
    return await attempt_service.get_student_attempts(db, quiz_id, student_id)


@router.get(
    "/{quiz_id}/students/{student_id}/eligibility",
    response_model=attempt_schema.EligibilityResponse,
)
async def get_eligibility(
    quiz_id: int,
    student_id: str,
    db: AsyncSession = Depends(get_db),
):
    """응시 가능 여부 조회 API"""
    return await attempt_service.can_take_quiz(db, quiz_id, student_id)
