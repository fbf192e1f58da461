"""Attempt CRUD 테스트 (in-memory SQLite)"""
from datetime import datetime, timezone

import pytest
from sqlalchemy.exc import IntegrityError

from app.crud import attempt as attempt_crud, quiz as quiz_crud
from app.schemas.grading import GradedAnswer, GradingResult
from app.schemas.quiz import QuizCreateRequest


async def _create_quiz(session):
    request = QuizCreateRequest(
        title="Quiz CRUD",
        attempts=3,
        questions=[
            {
                "type": "multiple_choice",
                "question": "1 + 1 = ?",
                "points": 2,
                "options": [{"id": "a", "text": "2", "is_correct": True}],
                "correct_answers": ["a"],
            }
        ],
    )
    return await quiz_crud.create_quiz(session, request)


async def _create_attempt(session, quiz_id, attempt_number=1):
    return await attempt_crud.create_attempt(
        session,
        quiz_id=quiz_id,
        student_id="student-1",
        attempt_number=attempt_number,
        started_at=datetime.now(timezone.utc),
    )


@pytest.mark.asyncio
async def test_duplicate_attempt_number_rejected(test_db_session):
    """같은 학습자/퀴즈의 회차 번호 중복은 IntegrityError"""
    quiz = await _create_quiz(test_db_session)
    quiz_id = quiz.id
    await _create_attempt(test_db_session, quiz_id, attempt_number=1)

    with pytest.raises(IntegrityError):
        await _create_attempt(test_db_session, quiz_id, attempt_number=1)
    await test_db_session.rollback()

    assert await attempt_crud.count_attempts(test_db_session, quiz_id, "student-1") == 1


@pytest.mark.asyncio
async def test_complete_attempt_only_once(test_db_session):
    """completed_at이 설정된 응시는 다시 완료 처리되지 않음"""
    quiz = await _create_quiz(test_db_session)
    question_id = quiz.questions[0].id
    attempt = await _create_attempt(test_db_session, quiz.id)
    attempt_id = attempt.id

    result = GradingResult(
        answers=[
            GradedAnswer(
                question_id=question_id,
                selected_answers=["a"],
                is_correct=True,
                points_earned=2,
            )
        ],
        score=2,
        max_score=2,
        passed=True,
    )

    first = await attempt_crud.complete_attempt(
        test_db_session,
        attempt,
        grading_result=result,
        completed_at=datetime.now(timezone.utc),
        time_spent=5,
    )
    assert first is True

    stored = await attempt_crud.get_attempt_by_id(test_db_session, attempt_id)
    assert stored.completed_at is not None
    assert stored.score == 2
    assert len(stored.answers) == 1

    overwrite = GradingResult(answers=[], score=0, max_score=2, passed=False)
    second = await attempt_crud.complete_attempt(
        test_db_session,
        stored,
        grading_result=overwrite,
        completed_at=datetime.now(timezone.utc),
        time_spent=99,
    )
    await test_db_session.rollback()

    assert second is False
    stored = await attempt_crud.get_attempt_by_id(test_db_session, attempt_id)
    assert stored.score == 2
    assert stored.time_spent == 5
    assert len(stored.answers) == 1


@pytest.mark.asyncio
async def test_upsert_answer_replaces_existing(test_db_session):
    """문제당 답안 1개 유지"""
    quiz = await _create_quiz(test_db_session)
    question_id = quiz.questions[0].id
    attempt = await _create_attempt(test_db_session, quiz.id)

    await attempt_crud.upsert_answer(test_db_session, attempt, question_id, ["b"], None)
    await attempt_crud.upsert_answer(test_db_session, attempt, question_id, ["a"], None)

    stored = await attempt_crud.get_attempt_by_id(test_db_session, attempt.id)
    assert len(stored.answers) == 1
    assert stored.answers[0].selected_answers == ["a"]


@pytest.mark.asyncio
async def test_upsert_answer_after_concurrent_completion(test_db_session, test_session_maker):
    """조회 후 다른 세션이 완료한 응시에는 답안을 쓰지 않음"""
    quiz = await _create_quiz(test_db_session)
    question_id = quiz.questions[0].id
    attempt = await _create_attempt(test_db_session, quiz.id)
    attempt_id = attempt.id
    await attempt_crud.upsert_answer(test_db_session, attempt, question_id, ["a"], None)

    # 첫 번째 탭: 진행 중 상태로 조회
    stale = await attempt_crud.get_attempt_by_id(test_db_session, attempt_id)
    assert stale.completed_at is None

    # 두 번째 탭: 같은 응시 완료
    async with test_session_maker() as other_session:
        loaded = await attempt_crud.get_attempt_by_id(other_session, attempt_id)
        completed = await attempt_crud.complete_attempt(
            other_session,
            loaded,
            grading_result=GradingResult(
                answers=[
                    GradedAnswer(
                        question_id=question_id,
                        selected_answers=["a"],
                        is_correct=True,
                        points_earned=2,
                    )
                ],
                score=2,
                max_score=2,
                passed=True,
            ),
            completed_at=datetime.now(timezone.utc),
            time_spent=1,
        )
        assert completed is True

    # 첫 번째 탭: 오래된 상태로 답안 변경 시도
    answer = await attempt_crud.upsert_answer(test_db_session, stale, question_id, ["b"], None)
    await test_db_session.rollback()

    assert answer is None
    stored = await attempt_crud.get_attempt_by_id(test_db_session, attempt_id)
    assert stored.score == 2
    assert len(stored.answers) == 1
    assert stored.answers[0].selected_answers == ["a"]
    assert stored.answers[0].is_correct is True
    assert stored.answers[0].points_earned == 2


@pytest.mark.asyncio
async def test_count_open_attempts(test_db_session):
    """완료되지 않은 응시만 집계"""
    quiz = await _create_quiz(test_db_session)
    quiz_id = quiz.id
    first = await _create_attempt(test_db_session, quiz_id, attempt_number=1)
    await _create_attempt(test_db_session, quiz_id, attempt_number=2)

    await attempt_crud.complete_attempt(
        test_db_session,
        first,
        grading_result=GradingResult(answers=[], score=0, max_score=2, passed=False),
        completed_at=datetime.now(timezone.utc),
        time_spent=1,
    )

    assert await attempt_crud.count_open_attempts(test_db_session) == 1
