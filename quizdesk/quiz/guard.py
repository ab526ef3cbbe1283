"""
Submission Guard - chỉ lần nộp đầu tiên của (quiz, user) được ghi và nhận thưởng

Check (đếm bài làm đã có) rồi mới ghi, nên cần khóa theo key (quiz_id, user_id):
- Trong 1 process: lock theo key qua serialize()
- Giữa nhiều worker: unique constraint (quiz, user, question) ở DB
"""

import threading
from contextlib import contextmanager


class SubmissionGuard:
    """Kiểm tra đã nộp bài chưa + khóa theo (quiz_id, user_id)"""

    def __init__(self, repository):
        self.repository = repository
        self._registry_lock = threading.Lock()
        self._locks = {}  # key -> [lock, số request đang giữ/chờ]

    def has_already_submitted(self, quiz_id, user_id):
        return self.repository.count_answer_records(quiz_id, user_id) > 0

    @contextmanager
    def serialize(self, quiz_id, user_id):
        """Chỉ 1 request cho mỗi (quiz_id, user_id) chạy phần check-then-act tại 1 thời điểm"""
        key = (quiz_id, user_id)
        with self._registry_lock:
            entry = self._locks.setdefault(key, [threading.Lock(), 0])
            entry[1] += 1

        entry[0].acquire()
        try:
            yield
        finally:
            entry[0].release()
            with self._registry_lock:
                entry[1] -= 1
                if entry[1] == 0:
                    del self._locks[key]

    def active_keys(self):
        with self._registry_lock:
            return len(self._locks)
