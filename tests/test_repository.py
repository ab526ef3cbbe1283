import pytest
from sqlalchemy import text
from sqlalchemy.exc import OperationalError

from quizdesk.models import Quiz, Question, AnswerRecord, SINGLE_CHOICE, MULTIPLE_CHOICE
from quizdesk.quiz.errors import QuizValidationError, DuplicateSubmissionError, SubmissionPersistenceError
from quizdesk.quiz.guard import SubmissionGuard
from quizdesk.quiz.repository import QuizRepository, normalize_question_data


@pytest.fixture
def repository(app):
    return QuizRepository()


def records_for(quiz, user_id, correct=True):
    return [AnswerRecord(quiz_id=quiz.id, user_id=user_id, question_id=q.id,
                         user_answer=q.solution, correct=correct) for q in quiz.questions]


class TestNormalizeQuestionData:
    def test_single_choice(self):
        assert normalize_question_data(SINGLE_CHOICE, [' A', 'B ', ''], 'B') == (['A', 'B'], 'B')

    def test_multiple_choice_dedupes(self):
        assert normalize_question_data(MULTIPLE_CHOICE, ['X', 'Y', 'Z'], ['Z', 'X', 'Z']) == \
            (['X', 'Y', 'Z'], ['Z', 'X'])

    def test_options_may_repeat(self):
        assert normalize_question_data(SINGLE_CHOICE, ['A', 'A'], ['A'])[0] == ['A', 'A']

    @pytest.mark.parametrize('question_type,options,solution', [
        (SINGLE_CHOICE, ['A', 'B'], ['A', 'B']),
        (SINGLE_CHOICE, ['A', 'B'], []),
        (SINGLE_CHOICE, ['A', 'B'], 'C'),
        (MULTIPLE_CHOICE, ['X', 'Y'], []),
        (MULTIPLE_CHOICE, [], ['X']),
        ('essay', ['A'], 'A'),
    ])
    def test_invalid(self, question_type, options, solution):
        with pytest.raises(QuizValidationError):
            normalize_question_data(question_type, options, solution)


def test_questions_load_in_id_order(repository, quiz):
    questions = repository.get_questions_for_quiz(quiz.id)
    assert [q.id for q in questions] == sorted(q.id for q in questions)
    assert repository.get_questions_for_quiz(quiz.id + 1000) == []


def test_insert_and_count(repository, quiz, user):
    assert repository.count_answer_records(quiz.id, user.id) == 0

    repository.insert_answer_records(records_for(quiz, user.id))

    assert repository.count_answer_records(quiz.id, user.id) == 2
    assert repository.count_answer_records(quiz.id, user.id + 1) == 0


def test_duplicate_batch_is_rejected_as_a_whole(repository, quiz, user, db):
    repository.insert_answer_records(records_for(quiz, user.id))

    with pytest.raises(DuplicateSubmissionError):
        repository.insert_answer_records(records_for(quiz, user.id, correct=False))

    assert repository.count_answer_records(quiz.id, user.id) == 2
    assert all(r.correct for r in AnswerRecord.query.all())


def test_database_failure_rolls_back_batch(repository, quiz, user, db, monkeypatch):
    def failing_commit():
        raise OperationalError('INSERT', {}, Exception('disk I/O error'))

    monkeypatch.setattr(db.session, 'commit', failing_commit)
    with pytest.raises(SubmissionPersistenceError):
        repository.insert_answer_records(records_for(quiz, user.id))
    monkeypatch.undo()

    assert repository.count_answer_records(quiz.id, user.id) == 0


@pytest.fixture
def foreign_keys(db):
    db.session.commit()
    db.session.execute(text('PRAGMA foreign_keys=ON'))
    yield
    db.session.rollback()
    db.session.execute(text('PRAGMA foreign_keys=OFF'))


def test_foreign_key_failure_is_not_a_duplicate(repository, quiz, user, db, foreign_keys):
    records = records_for(quiz, user.id)
    # câu hỏi bị admin xóa giữa lúc load đề và lúc ghi bài
    db.session.delete(quiz.questions[1])
    db.session.commit()

    with pytest.raises(SubmissionPersistenceError) as exc:
        repository.insert_answer_records(records)

    assert exc.value.retryable is True
    assert repository.count_answer_records(quiz.id, user.id) == 0


def test_guard_reports_submission(repository, quiz, user):
    guard = SubmissionGuard(repository)
    assert guard.has_already_submitted(quiz.id, user.id) is False

    repository.insert_answer_records(records_for(quiz, user.id))

    assert guard.has_already_submitted(quiz.id, user.id) is True


def test_question_crud_validates_on_write(repository, quiz):
    question = repository.create_question(quiz, 'Pick one', SINGLE_CHOICE, ['A', 'B'], ['A'])
    assert question.solution == 'A'

    with pytest.raises(QuizValidationError):
        repository.update_question(question, 'Pick one', SINGLE_CHOICE, ['A', 'B'], ['A', 'B'])

    repository.update_question(question, 'Pick some', MULTIPLE_CHOICE, ['A', 'B'], ['B', 'A'])
    assert question.solution == ['B', 'A']

    assert repository.get_question(quiz.id, question.id) is question
    assert repository.get_question(quiz.id + 1, question.id) is None


def test_delete_quiz_cascades(repository, quiz, user, db):
    repository.insert_answer_records(records_for(quiz, user.id))

    repository.delete_quiz(quiz)

    assert Quiz.query.count() == 0
    assert Question.query.count() == 0
    assert AnswerRecord.query.count() == 0


def test_delete_question_cascades_to_its_records(repository, quiz, user):
    repository.insert_answer_records(records_for(quiz, user.id))
    first = quiz.questions[0]
    first_id = first.id

    repository.delete_question(first)

    assert AnswerRecord.query.filter_by(question_id=first_id).count() == 0
    assert repository.count_answer_records(quiz.id, user.id) == 1
