"""
Quiz/Question Repository - lớp truy cập dữ liệu cho module quiz

Grading chỉ dùng 3 hàm:
- get_questions_for_quiz(quiz_id)
- count_answer_records(quiz_id, user_id)
- insert_answer_records(records)  # 1 transaction, all-or-nothing

Phần còn lại là CRUD cho admin.
"""

import logging
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from quizdesk import db
from quizdesk.models import Quiz, Question, AnswerRecord, SINGLE_CHOICE, QUESTION_TYPES
from quizdesk.quiz.errors import (QuizNotFoundError, QuizValidationError,
                                  DuplicateSubmissionError, SubmissionPersistenceError)

logger = logging.getLogger(__name__)


# ==================== VALIDATE KHI GHI ====================
def normalize_question_data(question_type, options, solution):
    """
    Kiểm tra và chuẩn hóa options/solution trước khi lưu

    Returns:
        tuple: (options list, solution) - solution là str (single) hoặc list (multiple)

    Raises:
        QuizValidationError
    """
    if question_type not in QUESTION_TYPES:
        raise QuizValidationError(f'Unknown question type: {question_type}')

    options = [str(o).strip() for o in (options or []) if str(o).strip()]
    if not options:
        raise QuizValidationError('A question needs at least one option')

    if isinstance(solution, str):
        solution = [solution]
    values = [str(v).strip() for v in (solution or []) if str(v).strip()]
    values = list(dict.fromkeys(values))  # bỏ trùng, giữ thứ tự

    missing = [v for v in values if v not in options]
    if missing:
        raise QuizValidationError(f'Solution values not among options: {", ".join(missing)}')

    if question_type == SINGLE_CHOICE:
        if len(values) != 1:
            raise QuizValidationError('A single choice question needs exactly one correct option')
        return options, values[0]

    if not values:
        raise QuizValidationError('A multiple choice question needs at least one correct option')
    return options, values


class QuizRepository:
    """Repository dùng Flask-SQLAlchemy session của request hiện tại"""

    # ==================== ĐỌC ====================
    def get_quiz(self, quiz_id):
        return db.session.get(Quiz, quiz_id)

    def get_quiz_or_raise(self, quiz_id):
        quiz = self.get_quiz(quiz_id)
        if quiz is None:
            raise QuizNotFoundError()
        return quiz

    def list_quizzes(self):
        return Quiz.query.order_by(Quiz.created_at.desc(), Quiz.id.desc()).all()

    def get_question(self, quiz_id, question_id):
        question = db.session.get(Question, question_id)
        if question is None or question.quiz_id != quiz_id:
            return None
        return question

    def get_questions_for_quiz(self, quiz_id):
        """Câu hỏi theo thứ tự id (thứ tự feedback)"""
        return Question.query.filter_by(quiz_id=quiz_id).order_by(Question.id).all()

    def count_answer_records(self, quiz_id, user_id):
        return db.session.query(func.count(AnswerRecord.id)).filter(
            AnswerRecord.quiz_id == quiz_id,
            AnswerRecord.user_id == user_id
        ).scalar() or 0

    def get_answer_records(self, quiz_id, user_id):
        return AnswerRecord.query.filter_by(quiz_id=quiz_id, user_id=user_id) \
            .order_by(AnswerRecord.question_id).all()

    # ==================== GHI BÀI LÀM ====================
    def insert_answer_records(self, records):
        """
        Ghi toàn bộ bài làm trong 1 transaction

        Raises:
            DuplicateSubmissionError: request khác đã ghi trước (unique constraint)
            SubmissionPersistenceError: lỗi DB khác (kể cả FK, vd câu hỏi vừa bị xóa), đã rollback
        """
        keys = {(r.quiz_id, r.user_id) for r in records}
        try:
            db.session.add_all(records)
            db.session.commit()
        except IntegrityError as e:
            db.session.rollback()
            # Chỉ là trùng khi thật sự đã có bài làm được lưu
            if any(self.count_answer_records(quiz_id, user_id) for quiz_id, user_id in keys):
                logger.warning(f'⚠️ Duplicate submission rejected by unique constraint: {e.orig}')
                raise DuplicateSubmissionError() from e
            logger.error(f'❌ Answer records violate an integrity constraint: {e.orig}')
            raise SubmissionPersistenceError() from e
        except SQLAlchemyError as e:
            db.session.rollback()
            logger.error(f'❌ Failed to save answer records: {str(e)}')
            raise SubmissionPersistenceError() from e

    # ==================== CRUD QUIZ ====================
    def create_quiz(self, title, description=''):
        quiz = Quiz(title=title, description=description)
        db.session.add(quiz)
        db.session.commit()
        return quiz

    def update_quiz(self, quiz, title, description=''):
        quiz.title = title
        quiz.description = description
        db.session.commit()
        return quiz

    def delete_quiz(self, quiz):
        db.session.delete(quiz)
        db.session.commit()

    # ==================== CRUD QUESTION ====================
    def create_question(self, quiz, question_text, question_type, options, solution):
        options, solution = normalize_question_data(question_type, options, solution)
        question = Question(
            quiz_id=quiz.id,
            question_text=question_text,
            question_type=question_type,
            options=options,
            solution=solution
        )
        db.session.add(question)
        db.session.commit()
        return question

    def update_question(self, question, question_text, question_type, options, solution):
        options, solution = normalize_question_data(question_type, options, solution)
        question.question_text = question_text
        question.question_type = question_type
        question.options = options
        question.solution = solution
        db.session.commit()
        return question

    def delete_question(self, question):
        db.session.delete(question)
        db.session.commit()
