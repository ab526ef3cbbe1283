from flask import Blueprint, jsonify, current_app, abort
from quizdesk.decorators import admin_required
from quizdesk.forms import QuizForm, QuestionForm
from quizdesk.quiz.errors import QuizError
from quizdesk.quiz.grading import get_grader

quiz_admin_bp = Blueprint('quiz_admin', __name__)


@quiz_admin_bp.errorhandler(QuizError)
def handle_quiz_error(error):
    return jsonify(error.to_dict()), error.status_code


def _repository():
    return get_grader().repository


def _form_error(form):
    return jsonify({'success': False, 'error': 'Invalid form data', 'errors': form.errors}), 400


# ==================== QUẢN LÝ ĐỀ ====================
@quiz_admin_bp.route('')
@admin_required
def quizzes():
    """Danh sách đề"""
    return jsonify({
        'success': True,
        'quizzes': [quiz.to_dict() for quiz in _repository().list_quizzes()]
    })


@quiz_admin_bp.route('/add', methods=['POST'])
@admin_required
def add_quiz():
    """Thêm đề mới"""
    form = QuizForm()
    if not form.validate_on_submit():
        return _form_error(form)

    quiz = _repository().create_quiz(form.title.data.strip(), (form.description.data or '').strip())
    current_app.logger.info(f"✅ Quiz {quiz.id} created")
    return jsonify({'success': True, 'quiz': quiz.to_dict()}), 201


@quiz_admin_bp.route('/edit/<int:quiz_id>', methods=['POST'])
@admin_required
def edit_quiz(quiz_id):
    """Sửa tiêu đề/mô tả đề"""
    repository = _repository()
    quiz = repository.get_quiz_or_raise(quiz_id)

    form = QuizForm()
    if not form.validate_on_submit():
        return _form_error(form)

    repository.update_quiz(quiz, form.title.data.strip(), (form.description.data or '').strip())
    return jsonify({'success': True, 'quiz': quiz.to_dict()})


@quiz_admin_bp.route('/delete/<int:quiz_id>', methods=['POST'])
@admin_required
def delete_quiz(quiz_id):
    """Xóa đề - câu hỏi và bài làm bị xóa theo"""
    repository = _repository()
    quiz = repository.get_quiz_or_raise(quiz_id)
    repository.delete_quiz(quiz)
    current_app.logger.info(f"🗑️ Quiz {quiz_id} deleted")
    return jsonify({'success': True})


# ==================== QUẢN LÝ CÂU HỎI ====================
@quiz_admin_bp.route('/<int:quiz_id>/questions')
@admin_required
def questions(quiz_id):
    """Danh sách câu hỏi của đề (kèm đáp án)"""
    repository = _repository()
    quiz = repository.get_quiz_or_raise(quiz_id)
    return jsonify({
        'success': True,
        'quiz': quiz.to_dict(),
        'questions': [q.to_dict() for q in repository.get_questions_for_quiz(quiz_id)]
    })


@quiz_admin_bp.route('/<int:quiz_id>/questions/add', methods=['POST'])
@admin_required
def add_question(quiz_id):
    """Thêm câu hỏi"""
    repository = _repository()
    quiz = repository.get_quiz_or_raise(quiz_id)

    form = QuestionForm()
    if not form.validate_on_submit():
        return _form_error(form)

    question = repository.create_question(
        quiz,
        question_text=form.question_text.data.strip(),
        question_type=form.question_type.data,
        options=form.options.data,
        solution=form.solution.data
    )
    return jsonify({'success': True, 'question': question.to_dict()}), 201


@quiz_admin_bp.route('/<int:quiz_id>/questions/edit/<int:question_id>', methods=['POST'])
@admin_required
def edit_question(quiz_id, question_id):
    """Sửa câu hỏi"""
    repository = _repository()
    question = repository.get_question(quiz_id, question_id)
    if question is None:
        abort(404)

    form = QuestionForm()
    if not form.validate_on_submit():
        return _form_error(form)

    repository.update_question(
        question,
        question_text=form.question_text.data.strip(),
        question_type=form.question_type.data,
        options=form.options.data,
        solution=form.solution.data
    )
    return jsonify({'success': True, 'question': question.to_dict()})


@quiz_admin_bp.route('/<int:quiz_id>/questions/delete/<int:question_id>', methods=['POST'])
@admin_required
def delete_question(quiz_id, question_id):
    """Xóa câu hỏi"""
    repository = _repository()
    question = repository.get_question(quiz_id, question_id)
    if question is None:
        abort(404)

    repository.delete_question(question)
    return jsonify({'success': True})
