from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.base import get_db
from app.schemas import attempt as attempt_schema
from app.services import attempt_service

router = APIRouter(prefix="/attempts", tags=["attempts"])


@router.post(
    "/start",
    response_model=attempt_schema.AttemptStartResponse,
    status_code=status.HTTP_201_CREATED,
)
async def start_attempt(
    request: attempt_schema.AttemptStartRequest,
    db: AsyncSession = Depends(get_db),
):
    """응시 시작 API"""
    return await attempt_service.start_attempt(db, request)


@router.put(
    "/{attempt_id}/answers/{question_id}",
    response_model=attempt_schema.QuizAnswerResponse,
)
async def record_answer(
    attempt_id: int,
    question_id: int,
    request: attempt_schema.AnswerSubmitRequest,
    db: AsyncSession = Depends(get_db),
):
    """답안 저장 API (같은 문제는 덮어쓰기)"""
    return await attempt_service.record_answer(db, attempt_id, question_id, request)


@router.post("/{attempt_id}/complete", response_model=attempt_schema.QuizAttemptResponse)
async def complete_attempt(
    attempt_id: int,
    db: AsyncSession = Depends(get_db),
):
    """응시 완료 및 채점 API"""
    return await attempt_service.complete_attempt(db, attempt_id)


@router.get("/{attempt_id}", response_model=attempt_schema.QuizAttemptResponse)
async def get_attempt(
    attempt_id: int,
    db: AsyncSession = Depends(get_db),
):
    """응시 기록 조회 API"""
    return await attempt_service.get_attempt(db, attempt_id)


@router.get("/{attempt_id}/result", response_model=attempt_schema.AttemptResultResponse)
async def get_attempt_result(
    attempt_id: int,
    db: AsyncSession = Depends(get_db),
):
    """응시 결과 요약 API"""
    return await attempt_service.get_attempt_result(db, attempt_id)
