"""Quiz API 테스트"""
import pytest


def _quiz_payload(**overrides):
    payload = {
        "course_id": "course-1",
        "lesson_id": "lesson-1",
        "title": "Kiểm tra chương 1",
        "description": "Ôn tập chương 1",
        "time_limit": 15,
        "attempts": 2,
        "passing_score": 70,
        "status": "published",
        "questions": [
            {
                "type": "multiple_choice",
                "question": "2 + 2 = ?",
                "explanation": "Cộng cơ bản",
                "points": 10,
                "order": 0,
                "options": [
                    {"id": "a", "text": "2", "is_correct": False},
                    {"id": "b", "text": "4", "is_correct": True},
                ],
                "correct_answers": ["b"],
            },
            {
                "type": "true_false",
                "question": "Trái đất hình cầu",
                "points": 5,
                "order": 1,
                "correct_answers": ["true"],
            },
        ],
    }
    payload.update(overrides)
    return payload


@pytest.mark.asyncio
async def test_root(client):
    """루트 엔드포인트"""
    response = await client.get("/")

    assert response.status_code == 200
    assert response.json()["message"] == "E-learning Quiz Backend API"


@pytest.mark.asyncio
async def test_create_quiz(client):
    """퀴즈 생성 (강사용 응답에는 정답 포함)"""
    response = await client.post("/api/v1/quizzes", json=_quiz_payload())

    assert response.status_code == 201
    data = response.json()
    assert data["id"] > 0
    assert data["title"] == "Kiểm tra chương 1"
    assert data["attempts"] == 2
    assert [q["type"] for q in data["questions"]] == ["multiple_choice", "true_false"]
    assert data["questions"][0]["correct_answers"] == ["b"]
    assert data["questions"][0]["options"][1]["is_correct"] is True


@pytest.mark.asyncio
async def test_create_quiz_defaults(client):
    """응시 횟수 1, 합격 기준 70, draft 기본값"""
    response = await client.post("/api/v1/quizzes", json={"title": "Quiz nhanh"})

    assert response.status_code == 201
    data = response.json()
    assert data["attempts"] == 1
    assert data["passing_score"] == 70
    assert data["status"] == "draft"
    assert data["questions"] == []


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "overrides",
    [
        {"attempts": 0},
        {"passing_score": 101},
        {"passing_score": -1},
        {"title": ""},
        {"status": "hidden"},
    ],
)
async def test_create_quiz_invalid_fields(client, overrides):
    """잘못된 퀴즈 설정은 422"""
    response = await client.post("/api/v1/quizzes", json=_quiz_payload(**overrides))

    assert response.status_code == 422


@pytest.mark.asyncio
async def test_create_quiz_invalid_true_false_answer(client):
    """OX 문제 정답이 'true'/'false'가 아니면 422"""
    payload = _quiz_payload(
        questions=[
            {
                "type": "true_false",
                "question": "Trái đất hình cầu",
                "correct_answers": ["yes"],
            }
        ]
    )

    response = await client.post("/api/v1/quizzes", json=payload)

    assert response.status_code == 422


@pytest.mark.asyncio
async def test_create_quiz_unknown_question_type(client):
    """지원하지 않는 문제 유형은 422"""
    payload = _quiz_payload(
        questions=[{"type": "matching", "question": "Nối cột", "correct_answers": []}]
    )

    response = await client.post("/api/v1/quizzes", json=payload)

    assert response.status_code == 422


@pytest.mark.asyncio
async def test_get_quiz(client):
    """퀴즈 조회"""
    created = (await client.post("/api/v1/quizzes", json=_quiz_payload())).json()

    response = await client.get(f"/api/v1/quizzes/{created['id']}")

    assert response.status_code == 200
    assert response.json()["id"] == created["id"]
    assert len(response.json()["questions"]) == 2


@pytest.mark.asyncio
async def test_get_quiz_not_found(client):
    """존재하지 않는 퀴즈 조회 시 404"""
    response = await client.get("/api/v1/quizzes/9999")

    assert response.status_code == 404
    assert "9999" in response.json()["detail"]


@pytest.mark.asyncio
async def test_list_quizzes_by_course(client):
    """강좌별 퀴즈 목록 (최신순)"""
    first = (await client.post("/api/v1/quizzes", json=_quiz_payload(title="Quiz 1"))).json()
    second = (await client.post("/api/v1/quizzes", json=_quiz_payload(title="Quiz 2"))).json()
    await client.post("/api/v1/quizzes", json=_quiz_payload(title="Khác", course_id="course-2"))

    response = await client.get("/api/v1/quizzes", params={"course_id": "course-1"})

    assert response.status_code == 200
    data = response.json()
    assert data["total"] == 2
    assert [q["id"] for q in data["quizzes"]] == [second["id"], first["id"]]

    all_quizzes = (await client.get("/api/v1/quizzes")).json()
    assert all_quizzes["total"] == 3


@pytest.mark.asyncio
async def test_update_quiz_fields(client):
    """지정한 필드만 수정, 문제 목록 유지"""
    created = (await client.post("/api/v1/quizzes", json=_quiz_payload())).json()

    response = await client.put(
        f"/api/v1/quizzes/{created['id']}",
        json={"title": "Đã sửa", "passing_score": 50},
    )

    assert response.status_code == 200
    data = response.json()
    assert data["title"] == "Đã sửa"
    assert data["passing_score"] == 50
    assert data["attempts"] == 2
    assert len(data["questions"]) == 2


@pytest.mark.asyncio
async def test_update_quiz_replaces_questions(client):
    """questions가 주어지면 문제 목록 전체 교체"""
    created = (await client.post("/api/v1/quizzes", json=_quiz_payload())).json()

    response = await client.put(
        f"/api/v1/quizzes/{created['id']}",
        json={
            "questions": [
                {
                    "type": "fill_blank",
                    "question": "Thủ đô của Pháp là ___",
                    "points": 3,
                    "correct_answers": ["Paris"],
                }
            ]
        },
    )

    assert response.status_code == 200
    questions = response.json()["questions"]
    assert len(questions) == 1
    assert questions[0]["type"] == "fill_blank"
    assert questions[0]["points"] == 3


@pytest.mark.asyncio
async def test_update_quiz_not_found(client):
    """존재하지 않는 퀴즈 수정 시 404"""
    response = await client.put("/api/v1/quizzes/9999", json={"title": "x"})

    assert response.status_code == 404


@pytest.mark.asyncio
async def test_delete_quiz(client):
    """퀴즈 삭제 후 조회 시 404"""
    created = (await client.post("/api/v1/quizzes", json=_quiz_payload())).json()
    await client.post(
        "/api/v1/attempts/start",
        json={"quiz_id": created["id"], "student_id": "student-1"},
    )

    response = await client.delete(f"/api/v1/quizzes/{created['id']}")

    assert response.status_code == 204
    assert (await client.get(f"/api/v1/quizzes/{created['id']}")).status_code == 404

    attempts = await client.get(f"/api/v1/quizzes/{created['id']}/students/student-1/attempts")
    assert attempts.json()["total"] == 0


@pytest.mark.asyncio
async def test_delete_quiz_not_found(client):
    """존재하지 않는 퀴즈 삭제 시 404"""
    response = await client.delete("/api/v1/quizzes/9999")

    assert response.status_code == 404


@pytest.mark.asyncio
async def test_toggle_quiz_status(client):
    """published ↔ draft 전환"""
    created = (await client.post("/api/v1/quizzes", json=_quiz_payload(status="draft"))).json()

    first = await client.post(f"/api/v1/quizzes/{created['id']}/toggle-status")
    second = await client.post(f"/api/v1/quizzes/{created['id']}/toggle-status")

    assert first.status_code == 200
    assert first.json()["status"] == "published"
    assert second.json()["status"] == "draft"


@pytest.mark.asyncio
async def test_toggle_archived_quiz(client):
    """보관된 퀴즈는 상태 전환 불가 (400)"""
    created = (await client.post("/api/v1/quizzes", json=_quiz_payload(status="archived"))).json()

    response = await client.post(f"/api/v1/quizzes/{created['id']}/toggle-status")

    assert response.status_code == 400


@pytest.mark.asyncio
async def test_quiz_statistics_empty(client):
    """완료된 응시가 없으면 모두 0"""
    created = (await client.post("/api/v1/quizzes", json=_quiz_payload())).json()
    # 진행 중인 응시는 통계에서 제외
    await client.post(
        "/api/v1/attempts/start",
        json={"quiz_id": created["id"], "student_id": "student-1"},
    )

    response = await client.get(f"/api/v1/quizzes/{created['id']}/statistics")

    assert response.status_code == 200
    data = response.json()
    assert data["total_attempts"] == 0
    assert data["average_score"] == 0
    assert data["pass_rate"] == 0


@pytest.mark.asyncio
async def test_quiz_statistics(client):
    """완료된 응시 기준 통계"""
    created = (await client.post("/api/v1/quizzes", json=_quiz_payload())).json()
    quiz_id = created["id"]
    mc_id, tf_id = [q["id"] for q in created["questions"]]

    async def take(student_id, answers):
        start = (
            await client.post(
                "/api/v1/attempts/start",
                json={"quiz_id": quiz_id, "student_id": student_id},
            )
        ).json()
        for question_id, selected in answers.items():
            await client.put(
                f"/api/v1/attempts/{start['attempt_id']}/answers/{question_id}",
                json={"selected_answers": selected},
            )
        await client.post(f"/api/v1/attempts/{start['attempt_id']}/complete")

    # 15점 만점: 15/15 = 100%, 10/15 = 67%, 5/15 = 33%
    await take("student-1", {mc_id: ["b"], tf_id: ["true"]})
    await take("student-2", {mc_id: ["b"], tf_id: ["false"]})
    await take("student-2", {mc_id: ["a"], tf_id: ["true"]})

    response = await client.get(f"/api/v1/quizzes/{quiz_id}/statistics")

    assert response.status_code == 200
    data = response.json()
    assert data["total_attempts"] == 3
    assert data["unique_students"] == 2
    assert data["highest_score"] == 100
    assert data["lowest_score"] == 33
    assert data["average_score"] == 67
    assert data["pass_rate"] == 33


@pytest.mark.asyncio
async def test_quiz_statistics_not_found(client):
    """존재하지 않는 퀴즈 통계 조회 시 404"""
    response = await client.get("/api/v1/quizzes/9999/statistics")

    assert response.status_code == 404


@pytest.mark.asyncio
@pytest.mark.parametrize("field", ["title", "attempts", "passing_score", "status"])
async def test_update_quiz_rejects_null_required_field(client, field):
    """필수 필드를 null로 보내면 422, 기존 값 유지"""
    created = (await client.post("/api/v1/quizzes", json=_quiz_payload())).json()

    response = await client.put(f"/api/v1/quizzes/{created['id']}", json={field: None})

    assert response.status_code == 422
    current = (await client.get(f"/api/v1/quizzes/{created['id']}")).json()
    assert current[field] == created[field]


@pytest.mark.asyncio
async def test_update_quiz_null_optional_field(client):
    """선택 필드는 null로 지울 수 있음"""
    created = (await client.post("/api/v1/quizzes", json=_quiz_payload())).json()

    response = await client.put(
        f"/api/v1/quizzes/{created['id']}",
        json={"description": None, "time_limit": None},
    )

    assert response.status_code == 200
    assert response.json()["description"] is None
    assert response.json()["time_limit"] is None


@pytest.mark.asyncio
async def test_health_db_reports_open_attempts(client):
    """DB 상태 확인 시 진행 중 응시 수 포함"""
    created = (await client.post("/api/v1/quizzes", json=_quiz_payload())).json()
    await client.post(
        "/api/v1/attempts/start",
        json={"quiz_id": created["id"], "student_id": "student-1"},
    )

    response = await client.get("/health/db")

    assert response.status_code == 200
    assert response.json() == {"status": "healthy", "database": "connected", "open_attempts": 1}
