from flask import g
from quizdesk import db
from quizdesk.models import User, Quiz, Question, SINGLE_CHOICE, MULTIPLE_CHOICE


def make_user(username, is_admin=False, password='secret123'):
    user = User(username=username, email=f'{username}@example.com', is_admin=is_admin)
    user.set_password(password)
    db.session.add(user)
    db.session.commit()
    return user


def make_quiz(title='Basics'):
    """Q1 single choice [A,B,C] -> B ; Q2 multiple choice [X,Y,Z] -> {X,Z}"""
    quiz = Quiz(title=title, description='Two questions')
    db.session.add(quiz)
    db.session.flush()
    db.session.add_all([
        Question(quiz_id=quiz.id, question_text='Pick B', question_type=SINGLE_CHOICE,
                 options=['A', 'B', 'C'], solution='B'),
        Question(quiz_id=quiz.id, question_text='Pick X and Z', question_type=MULTIPLE_CHOICE,
                 options=['X', 'Y', 'Z'], solution=['X', 'Z']),
    ])
    db.session.commit()
    return quiz


def question_ids_of(quiz):
    return tuple(sorted(q.id for q in quiz.questions))


def forget_current_user():
    """Request trong test dùng chung app context nên g._login_user còn giữ user của client trước"""
    g.pop('_login_user', None)
