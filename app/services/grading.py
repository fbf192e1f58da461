"""자동 채점 로직 (상태 없는 순수 함수)

문제 유형별 정답 판정 규칙:
    - multiple_choice / true_false: 선택한 ID 집합과 정답 ID 집합이 정확히 일치 (순서 무관)
    - fill_blank: 소문자 변환 + 앞뒤 공백 제거 후 허용 답안 중 하나와 일치
    - essay: 자동 채점 불가 → 항상 오답 (0점)

부분 점수는 없다.
"""
import logging
import math
from typing import Iterable, Protocol, Sequence

from app.schemas.grading import GradedAnswer, GradingResult

logger = logging.getLogger(__name__)

CHOICE_TYPES = ("multiple_choice", "true_false")


class GradableQuestion(Protocol):
    id: int
    type: str
    points: int
    correct_answers: list[str]


class GradableAnswer(Protocol):
    question_id: int
    selected_answers: list[str]
    text_answer: str | None


def normalize_text(text: str | None) -> str:
    """빈칸 답안 비교용 정규화 (소문자 + 앞뒤 공백 제거, 성조/발음 구별 기호는 유지)"""
    return (text or "").lower().strip()


def check_answer(question: GradableQuestion, answer: GradableAnswer) -> bool:
    """문제 유형별 정답 여부 판정"""
    if question.type in CHOICE_TYPES:
        return set(answer.selected_answers or []) == set(question.correct_answers or [])

    if question.type == "fill_blank":
        user_text = normalize_text(answer.text_answer)
        return any(normalize_text(correct) == user_text for correct in question.correct_answers or [])

    if question.type != "essay":
        logger.warning(f"알 수 없는 문제 유형: type={question.type}, question_id={question.id}")
    return False


def calculate_percentage(score: int, max_score: int) -> float:
    """득점률(%) 계산 (총점 0이면 0)"""
    if max_score <= 0:
        return 0.0
    return score / max_score * 100


def round_percentage(percentage: float) -> int:
    """득점률 반올림 (0.5는 올림)"""
    return math.floor(percentage + 0.5)


def grade_answers(
    questions: Sequence[GradableQuestion],
    answers: Iterable[GradableAnswer],
    passing_score: int,
) -> GradingResult:
    """퀴즈의 모든 문제를 채점

    Args:
        questions: 퀴즈의 전체 문제 (답하지 않은 문제 포함)
        answers: 학습자 답안 (문제 ID 기준, 중복 시 마지막 답안 사용)
        passing_score: 합격 기준 (%)

    Returns:
        문제당 정확히 하나의 답안을 포함한 채점 결과.
        답하지 않은 문제는 0점 오답으로 채워진다.
    """
    answers_by_question = {a.question_id: a for a in answers}

    graded: list[GradedAnswer] = []
    score = 0
    max_score = 0

    for question in questions:
        max_score += question.points
        user_answer = answers_by_question.get(question.id)

        if user_answer is None:
            graded.append(GradedAnswer(question_id=question.id))
            continue

        is_correct = check_answer(question, user_answer)
        points_earned = question.points if is_correct else 0
        score += points_earned
        graded.append(
            GradedAnswer(
                question_id=question.id,
                selected_answers=list(user_answer.selected_answers or []),
                text_answer=user_answer.text_answer,
                is_correct=is_correct,
                points_earned=points_earned,
            )
        )

    # 총점 0인 퀴즈는 항상 불합격
    passed = max_score > 0 and calculate_percentage(score, max_score) >= passing_score

    return GradingResult(answers=graded, score=score, max_score=max_score, passed=passed)


def get_grade_letter(percentage: float) -> str:
    """득점률에 따른 등급"""
    if percentage >= 90:
        return "A"
    if percentage >= 80:
        return "B"
    if percentage >= 70:
        return "C"
    if percentage >= 60:
        return "D"
    return "F"
