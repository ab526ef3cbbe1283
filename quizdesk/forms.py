from flask_wtf import FlaskForm
from wtforms import StringField, TextAreaField, PasswordField, SelectField, BooleanField, Field
from wtforms.validators import DataRequired, Email, Length, Optional, ValidationError
from quizdesk.models import SINGLE_CHOICE, MULTIPLE_CHOICE


class CommaSeparatedField(Field):
    """
    Nhận list giá trị từ:
    - 1 chuỗi "A,B,C" (form admin cũ)
    - nhiều giá trị cùng key / JSON list
    """

    def _value(self):
        return ','.join(self.data or [])

    def process_formdata(self, valuelist):
        if len(valuelist) == 1 and isinstance(valuelist[0], str):
            valuelist = valuelist[0].split(',')
        self.data = [str(v).strip() for v in valuelist if str(v).strip()]


# ==================== FORM ĐĂNG NHẬP ====================
class LoginForm(FlaskForm):
    """Form đăng nhập"""
    email = StringField('Email', validators=[
        DataRequired(message='Email is required'),
        Email(message='Invalid email address')
    ])
    password = PasswordField('Password', validators=[
        DataRequired(message='Password is required')
    ])
    remember_me = BooleanField('Remember me')


# ==================== FORM QUIZ ====================
class QuizForm(FlaskForm):
    """Form tạo/sửa đề"""
    title = StringField('Quiz Title', validators=[
        DataRequired(message='Quiz title is required'),
        Length(max=255)
    ])
    description = TextAreaField('Description', validators=[Optional()])


# ==================== FORM CÂU HỎI ====================
class QuestionForm(FlaskForm):
    """Form tạo/sửa câu hỏi - options và solution nhập cách nhau bởi dấu phẩy"""
    question_text = StringField('Question Text', validators=[
        DataRequired(message='Question text is required')
    ])
    question_type = SelectField('Question Type', choices=[
        (SINGLE_CHOICE, 'Single Choice'),
        (MULTIPLE_CHOICE, 'Multiple Choice'),
    ], default=SINGLE_CHOICE)
    options = CommaSeparatedField('Options (comma-separated)')
    solution = CommaSeparatedField('Correct Answer(s) (comma-separated)')

    def validate_options(self, field):
        if not field.data:
            raise ValidationError('At least one option is required')

    def validate_solution(self, field):
        values = list(dict.fromkeys(field.data or []))
        if not values:
            raise ValidationError('At least one correct answer is required')
        if self.question_type.data == SINGLE_CHOICE and len(values) != 1:
            raise ValidationError('A single choice question has exactly one correct answer')
        missing = [v for v in values if v not in (self.options.data or [])]
        if missing:
            raise ValidationError(f'Not among the options: {", ".join(missing)}')
