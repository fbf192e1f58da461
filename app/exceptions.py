"""커스텀 예외 클래스 정의"""


class BaseAppError(Exception):
    """애플리케이션 기본 예외 클래스"""

    def __init__(self, message: str, status_code: int = 500):
        self.message = message
        self.status_code = status_code
        super().__init__(self.message)


class QuizNotFoundError(BaseAppError):
    """퀴즈를 찾을 수 없을 때 발생하는 예외 (404)"""

    def __init__(self, quiz_id: int):
        super().__init__(f"Không tìm thấy bài kiểm tra: {quiz_id}", status_code=404)


class QuestionNotFoundError(BaseAppError):
    """퀴즈에 속하지 않는 문제일 때 발생하는 예외 (404)"""

    def __init__(self, question_id: int, quiz_id: int):
        super().__init__(
            f"Câu hỏi {question_id} không thuộc bài kiểm tra {quiz_id}",
            status_code=404,
        )


class AttemptNotFoundError(BaseAppError):
    """응시 기록을 찾을 수 없을 때 발생하는 예외 (404)"""

    def __init__(self, attempt_id: int):
        super().__init__(f"Không tìm thấy lượt làm bài: {attempt_id}", status_code=404)


class AttemptLimitExceededError(BaseAppError):
    """최대 응시 횟수를 초과했을 때 발생하는 예외 (403)"""

    def __init__(self, quiz_id: int, max_attempts: int):
        self.quiz_id = quiz_id
        self.max_attempts = max_attempts
        super().__init__(
            f"Đã hết số lần thử cho bài kiểm tra {quiz_id} (tối đa {max_attempts} lần)",
            status_code=403,
        )


class AttemptAlreadyCompletedError(BaseAppError):
    """이미 완료된 응시를 수정하려 할 때 발생하는 예외 (409)"""

    def __init__(self, attempt_id: int):
        super().__init__(f"Lượt làm bài {attempt_id} đã được nộp", status_code=409)


class AttemptConflictError(BaseAppError):
    """동시 응시 시작으로 회차 번호가 충돌했을 때 발생하는 예외 (409)"""

    def __init__(self, quiz_id: int, student_id: str):
        self.quiz_id = quiz_id
        self.student_id = student_id
        super().__init__(
            f"Lượt làm bài mới cho bài kiểm tra {quiz_id} đang được tạo, vui lòng thử lại",
            status_code=409,
        )


class InvalidQuizRequestError(BaseAppError):
    """잘못된 퀴즈 요청일 때 발생하는 예외 (400)"""

    def __init__(self, message: str):
        super().__init__(message, status_code=400)
