"""
Các lỗi của module quiz

Mỗi lỗi mang status_code và message để blueprint trả JSON thống nhất:
    {"success": false, "error": "<message>"}
"""


class QuizError(Exception):
    """Lỗi gốc - mọi lỗi trong 1 request nộp bài, không làm chết process"""
    status_code = 400
    retryable = False

    def __init__(self, message=None):
        super().__init__(message or self.default_message())
        self.message = message or self.default_message()

    @classmethod
    def default_message(cls):
        return 'Quiz request failed'

    def to_dict(self):
        payload = {'success': False, 'error': self.message}
        if self.retryable:
            payload['retryable'] = True
        return payload


class InvalidSubmissionError(QuizError):
    """Thiếu/sai quiz_id hoặc payload answers không đúng schema"""
    status_code = 400

    @classmethod
    def default_message(cls):
        return 'Invalid submission'


class SubmissionAuthError(QuizError):
    """Nonce không hợp lệ - chặn trước khi chấm điểm"""
    status_code = 403

    @classmethod
    def default_message(cls):
        return 'Invalid or missing submission nonce'


class QuizNotFoundError(QuizError):
    """Đề không tồn tại hoặc chưa có câu hỏi nào"""
    status_code = 404

    @classmethod
    def default_message(cls):
        return 'Quiz not found'


class QuizValidationError(QuizError):
    """Dữ liệu câu hỏi không hợp lệ khi admin lưu"""
    status_code = 400

    @classmethod
    def default_message(cls):
        return 'Invalid question data'


class SubmissionPersistenceError(QuizError):
    """Ghi bài làm thất bại, đã rollback toàn bộ - client có thể thử lại"""
    status_code = 503
    retryable = True

    @classmethod
    def default_message(cls):
        return 'Could not save your answers, please try again'


class DuplicateSubmissionError(QuizError):
    """Request khác đã ghi bài làm trước (vi phạm unique constraint) - chỉ dùng nội bộ"""
    status_code = 409

    @classmethod
    def default_message(cls):
        return 'Quiz already submitted'
