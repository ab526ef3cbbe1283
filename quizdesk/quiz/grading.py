"""
Grading Orchestrator - chấm bài và đảm bảo chỉ lần nộp đầu tiên được ghi/thưởng

Luồng:
    load câu hỏi -> (khóa theo quiz/user) kiểm tra đã nộp chưa -> chấm từng câu
    -> nếu lần đầu: ghi toàn bộ bài làm trong 1 transaction
    -> sau commit: cộng XP đúng 1 lần
"""

import logging
from flask import current_app
from quizdesk.models import AnswerRecord
from quizdesk.quiz.matcher import Solution, is_correct
from quizdesk.quiz.errors import QuizNotFoundError, DuplicateSubmissionError

logger = logging.getLogger(__name__)

QUIZ_COMPLETION_REWARD = 200


class FeedbackEntry:
    """Kết quả 1 câu trả về cho client (không phụ thuộc việc có được lưu hay không)"""

    def __init__(self, question_id, question_text, user_answer, correct_answer, is_correct):
        self.question_id = question_id
        self.question_text = question_text
        self.user_answer = user_answer
        self.correct_answer = correct_answer
        self.is_correct = is_correct

    def to_dict(self):
        return {
            'questionId': self.question_id,
            'questionText': self.question_text,
            'userAnswer': self.user_answer,
            'correctAnswer': self.correct_answer,
            'isCorrect': self.is_correct,
        }


class GradeResult:
    def __init__(self, score, total, feedback, first_submission):
        self.score = score
        self.total = total
        self.feedback = feedback
        self.first_submission = first_submission

    def to_dict(self):
        return {
            'score': self.score,
            'total': self.total,
            'feedback': [entry.to_dict() for entry in self.feedback],
            'firstSubmission': self.first_submission,
        }


class GradingOrchestrator:
    """Chấm bài nộp; repository, guard, notifier được truyền vào (không dùng global)"""

    def __init__(self, repository, guard, notifier, reward_amount=QUIZ_COMPLETION_REWARD):
        self.repository = repository
        self.guard = guard
        self.notifier = notifier
        self.reward_amount = reward_amount

    def grade_submission(self, quiz_id, user_id, answers):
        """
        Chấm bài nộp của user

        Args:
            quiz_id (int): id đề
            user_id (int): id user đã xác thực
            answers (dict): {question_id: str | list | None}

        Returns:
            GradeResult

        Raises:
            QuizNotFoundError: đề không tồn tại hoặc không có câu hỏi
            SubmissionPersistenceError: ghi bài làm thất bại (đã rollback, có thể thử lại)
        """
        answers = answers or {}
        questions = self.repository.get_questions_for_quiz(quiz_id)
        if not questions:
            raise QuizNotFoundError()

        with self.guard.serialize(quiz_id, user_id):
            first_submission = not self.guard.has_already_submitted(quiz_id, user_id)

            score = 0
            feedback = []
            records = []
            for question in questions:
                user_answer = answers.get(question.id)
                try:
                    solution = Solution.from_stored(question.question_type, question.solution)
                except ValueError as e:
                    # Đáp án lưu sai dạng thì coi như không ai đúng câu này
                    logger.error(f'❌ Question {question.id} has a malformed solution: {str(e)}')
                    solution = None

                correct = is_correct(question.question_type, user_answer, solution)
                if correct:
                    score += 1

                feedback.append(FeedbackEntry(
                    question_id=question.id,
                    question_text=question.question_text,
                    user_answer=user_answer,
                    correct_answer=solution.to_json() if solution is not None else question.solution,
                    is_correct=correct
                ))

                if first_submission:
                    records.append(AnswerRecord(
                        quiz_id=quiz_id,
                        user_id=user_id,
                        question_id=question.id,
                        user_answer=user_answer,
                        correct=correct
                    ))

            if first_submission:
                try:
                    self.repository.insert_answer_records(records)
                except DuplicateSubmissionError:
                    logger.info(f'Quiz {quiz_id} already recorded for user {user_id}, treating as replay')
                    first_submission = False

        if first_submission:
            self._award(user_id)
        else:
            logger.info(f'Replay of quiz {quiz_id} by user {user_id}: graded without saving')

        return GradeResult(score, len(questions), feedback, first_submission)

    def _award(self, user_id):
        try:
            self.notifier.award_experience(user_id, self.reward_amount)
        except Exception as e:
            # Bài làm đã commit, lỗi reward không được làm hỏng kết quả trả về
            logger.error(f'❌ Reward notifier failed for user {user_id}: {str(e)}', exc_info=True)


# ==================== KHỞI TẠO KHI APP CHẠY ====================
def init_grading(app):
    """Dựng orchestrator 1 lần cho app (guard giữ lock dùng chung giữa các request)"""
    from quizdesk.quiz.repository import QuizRepository
    from quizdesk.quiz.guard import SubmissionGuard
    from quizdesk.quiz.rewards import build_notifier

    repository = QuizRepository()
    orchestrator = GradingOrchestrator(
        repository=repository,
        guard=SubmissionGuard(repository),
        notifier=build_notifier(app.config),
        reward_amount=app.config.get('QUIZ_REWARD_XP', QUIZ_COMPLETION_REWARD)
    )
    app.extensions['quiz_grading'] = orchestrator
    return orchestrator


def get_grader():
    return current_app.extensions['quiz_grading']
