import pytest
from flask_login import FlaskLoginClient

from quizdesk import create_app, db as _db
from quizdesk.config import TestingConfig
from quizdesk.models import Quiz
from tests.helpers import make_user, make_quiz, question_ids_of


@pytest.fixture
def app():
    app = create_app(TestingConfig)
    app.test_client_class = FlaskLoginClient
    with app.app_context():
        _db.create_all()
        yield app
        _db.session.remove()
        _db.drop_all()


@pytest.fixture
def db(app):
    return _db


@pytest.fixture
def user(app):
    return make_user('alice')


@pytest.fixture
def admin(app):
    return make_user('root', is_admin=True)


@pytest.fixture
def client(app, user):
    return app.test_client(user=user)


@pytest.fixture
def admin_client(app, admin):
    return app.test_client(user=admin)


@pytest.fixture
def quiz(app):
    return make_quiz()


@pytest.fixture
def question_ids(quiz):
    return question_ids_of(quiz)


@pytest.fixture
def empty_quiz(app):
    quiz = Quiz(title='Empty')
    _db.session.add(quiz)
    _db.session.commit()
    return quiz
