from flask import Blueprint, request, jsonify, current_app
from flask_login import login_required, current_user
from flask_wtf.csrf import generate_csrf, validate_csrf
from wtforms.validators import ValidationError
from quizdesk.quiz.errors import QuizError, QuizNotFoundError, SubmissionAuthError
from quizdesk.quiz.grading import get_grader
from quizdesk.quiz.schemas import parse_submission
from quizdesk.utils import isoformat_local

quiz_bp = Blueprint('quiz', __name__)


@quiz_bp.errorhandler(QuizError)
def handle_quiz_error(error):
    if error.status_code >= 500:
        current_app.logger.error(f"❌ Quiz error: {error.message}")
    return jsonify(error.to_dict()), error.status_code


def check_nonce(token):
    """Nonce = CSRF token của Flask-WTF, gắn với session của user"""
    if not current_app.config.get('WTF_CSRF_ENABLED', True):
        return
    try:
        validate_csrf(token)
    except ValidationError as e:
        raise SubmissionAuthError(f'Invalid submission nonce: {str(e)}') from e


# ==================== XEM ĐỀ ====================
@quiz_bp.route('/<int:quiz_id>')
@login_required
def show_quiz(quiz_id):
    """Dữ liệu để frontend render đề (không kèm đáp án) + nonce nộp bài"""
    grader = get_grader()
    quiz = grader.repository.get_quiz_or_raise(quiz_id)
    questions = grader.repository.get_questions_for_quiz(quiz_id)

    return jsonify({
        'success': True,
        'quiz': {
            'id': quiz.id,
            'title': quiz.title,
            'description': quiz.description or '',
        },
        'questions': [q.to_public_dict() for q in questions],
        'alreadySubmitted': grader.guard.has_already_submitted(quiz_id, current_user.id),
        'nonce': generate_csrf(),
    })


# ==================== NỘP BÀI ====================
@quiz_bp.route('/<int:quiz_id>/submit', methods=['POST'])
@login_required
def submit_quiz(quiz_id):
    """
    Nộp bài

    Body JSON:
        {"answers": {"<question_id>": "B" | ["X", "Z"] | null}, "nonce": "..."}
    """
    payload = request.get_json(silent=True)
    nonce = payload.get('nonce') if isinstance(payload, dict) else None
    check_nonce(nonce or request.headers.get('X-CSRFToken'))

    submission = parse_submission(payload)
    result = get_grader().grade_submission(quiz_id, current_user.id, submission.answers)

    current_app.logger.info(
        f"Quiz {quiz_id} graded for user {current_user.id}: "
        f"{result.score}/{result.total} (first={result.first_submission})"
    )
    payload = result.to_dict()
    payload['success'] = True
    return jsonify(payload)


# ==================== XEM BÀI ĐÃ NỘP ====================
@quiz_bp.route('/<int:quiz_id>/submission')
@login_required
def my_submission(quiz_id):
    """Bài làm lần đầu đã lưu của user hiện tại"""
    repository = get_grader().repository
    quiz = repository.get_quiz_or_raise(quiz_id)
    records = repository.get_answer_records(quiz_id, current_user.id)
    if not records:
        raise QuizNotFoundError('No submission found for this quiz')

    return jsonify({
        'success': True,
        'quiz_id': quiz.id,
        'score': sum(1 for r in records if r.correct),
        'total': len(records),
        'submittedAt': isoformat_local(min(r.submitted_at for r in records)),
        'answers': [{
            'questionId': r.question_id,
            'userAnswer': r.user_answer,
            'isCorrect': r.correct,
        } for r in records],
    })
