# ==================== MODELS ====================

from flask_login import UserMixin
from werkzeug.security import generate_password_hash, check_password_hash
from quizdesk import db, login_manager
from datetime import datetime

SINGLE_CHOICE = 'single_choice'
MULTIPLE_CHOICE = 'multiple_choice'
QUESTION_TYPES = (SINGLE_CHOICE, MULTIPLE_CHOICE)


# ==================== USER MODEL ====================
class User(db.Model, UserMixin):
    """Người dùng làm bài, admin soạn đề"""
    __tablename__ = 'users'

    id = db.Column(db.Integer, primary_key=True)
    username = db.Column(db.String(80), unique=True, nullable=False, index=True)
    email = db.Column(db.String(120), unique=True, nullable=False, index=True)
    password_hash = db.Column(db.String(255))
    is_admin = db.Column(db.Boolean, default=False, nullable=False)
    is_active = db.Column(db.Boolean, default=True)
    experience_points = db.Column(db.Integer, default=0, nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    def __repr__(self):
        return f'<User {self.username}>'

    def set_password(self, password):
        """Hash và lưu mật khẩu"""
        self.password_hash = generate_password_hash(password)

    def check_password(self, password):
        """Kiểm tra mật khẩu"""
        if not self.password_hash:
            return False
        return check_password_hash(self.password_hash, password)


@login_manager.user_loader
def load_user(user_id):
    """Load user cho Flask-Login"""
    return db.session.get(User, int(user_id))


# ==================== QUIZ MODEL ====================
class Quiz(db.Model):
    """Đề thi trắc nghiệm"""
    __tablename__ = 'quizzes'

    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(255), nullable=False)
    description = db.Column(db.Text)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    # Xóa đề thì xóa luôn câu hỏi và bài làm
    questions = db.relationship('Question', backref='quiz', lazy=True,
                                order_by='Question.id',
                                cascade='all, delete-orphan')
    answer_records = db.relationship('AnswerRecord', backref='quiz', lazy=True,
                                     cascade='all, delete-orphan')

    def __repr__(self):
        return f'<Quiz {self.title}>'

    def to_dict(self):
        return {
            'id': self.id,
            'title': self.title,
            'description': self.description or '',
            'created_at': self.created_at.isoformat() if self.created_at else None,
            'question_count': len(self.questions),
        }


# ==================== QUESTION MODEL ====================
class Question(db.Model):
    """
    Câu hỏi trắc nghiệm

    options: list các lựa chọn (có thể trùng nhau)
    solution: 1 giá trị (single_choice) hoặc list giá trị không trùng (multiple_choice)
    """
    __tablename__ = 'quiz_questions'

    id = db.Column(db.Integer, primary_key=True)
    quiz_id = db.Column(db.Integer, db.ForeignKey('quizzes.id', ondelete='CASCADE'),
                        nullable=False, index=True)
    question_text = db.Column(db.Text, nullable=False)
    question_type = db.Column(db.Enum(*QUESTION_TYPES, name='question_type'), nullable=False)
    options = db.Column(db.JSON, nullable=False)
    solution = db.Column(db.JSON, nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    answer_records = db.relationship('AnswerRecord', backref='question', lazy=True,
                                     cascade='all, delete-orphan')

    def __repr__(self):
        return f'<Question {self.id} ({self.question_type})>'

    def to_public_dict(self):
        """Dữ liệu cho người làm bài - KHÔNG có đáp án"""
        return {
            'id': self.id,
            'question_text': self.question_text,
            'question_type': self.question_type,
            'options': list(self.options or []),
        }

    def to_dict(self):
        data = self.to_public_dict()
        data['quiz_id'] = self.quiz_id
        data['solution'] = self.solution
        data['created_at'] = self.created_at.isoformat() if self.created_at else None
        return data


# ==================== ANSWER RECORD MODEL ====================
class AnswerRecord(db.Model):
    """
    Bài làm của user cho từng câu - chỉ ghi ở lần nộp đầu tiên.
    Unique (quiz, user, question) để 2 request nộp trùng không ghi được 2 lần.
    """
    __tablename__ = 'quiz_user_answers'
    __table_args__ = (
        db.UniqueConstraint('quiz_id', 'user_id', 'question_id', name='uq_answer_quiz_user_question'),
    )

    id = db.Column(db.Integer, primary_key=True)
    quiz_id = db.Column(db.Integer, db.ForeignKey('quizzes.id', ondelete='CASCADE'), nullable=False)
    user_id = db.Column(db.Integer, nullable=False, index=True)
    question_id = db.Column(db.Integer, db.ForeignKey('quiz_questions.id', ondelete='CASCADE'),
                            nullable=False)
    user_answer = db.Column(db.JSON, nullable=True)
    correct = db.Column(db.Boolean, nullable=False)
    submitted_at = db.Column(db.DateTime, default=datetime.utcnow)

    def __repr__(self):
        return f'<AnswerRecord quiz={self.quiz_id} user={self.user_id} question={self.question_id}>'
