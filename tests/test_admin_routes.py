from quizdesk.models import Quiz, Question, AnswerRecord
from tests.helpers import forget_current_user


def create_quiz(admin_client, title='Geography', description='Capitals'):
    response = admin_client.post('/admin/quizzes/add', json={'title': title, 'description': description})
    assert response.status_code == 201
    return response.get_json()['quiz']


def test_regular_user_is_forbidden(client):
    assert client.get('/admin/quizzes').status_code == 403
    assert client.post('/admin/quizzes/add', json={'title': 'Nope'}).status_code == 403


def test_anonymous_is_unauthorized(app):
    assert app.test_client().get('/admin/quizzes').status_code == 401


def test_quiz_crud(admin_client):
    quiz = create_quiz(admin_client)
    assert quiz['title'] == 'Geography'
    assert quiz['question_count'] == 0

    response = admin_client.post(f"/admin/quizzes/edit/{quiz['id']}",
                                 json={'title': 'World Geography', 'description': ''})
    assert response.get_json()['quiz']['title'] == 'World Geography'

    listing = admin_client.get('/admin/quizzes').get_json()['quizzes']
    assert [q['title'] for q in listing] == ['World Geography']

    assert admin_client.post(f"/admin/quizzes/delete/{quiz['id']}").status_code == 200
    assert Quiz.query.count() == 0


def test_quiz_title_is_required(admin_client):
    response = admin_client.post('/admin/quizzes/add', json={'title': ''})
    assert response.status_code == 400
    assert 'title' in response.get_json()['errors']


def test_edit_missing_quiz(admin_client):
    response = admin_client.post('/admin/quizzes/edit/999', json={'title': 'x'})
    assert response.status_code == 404
    assert response.get_json()['error'] == 'Quiz not found'


def test_add_questions_comma_separated_and_list(admin_client):
    quiz = create_quiz(admin_client)

    single = admin_client.post(f"/admin/quizzes/{quiz['id']}/questions/add", data={
        'question_text': 'Capital of France?',
        'question_type': 'single_choice',
        'options': 'Paris, Lyon,Nice',
        'solution': 'Paris',
    })
    assert single.status_code == 201
    assert single.get_json()['question']['options'] == ['Paris', 'Lyon', 'Nice']
    assert single.get_json()['question']['solution'] == 'Paris'

    multiple = admin_client.post(f"/admin/quizzes/{quiz['id']}/questions/add", json={
        'question_text': 'Which are in Europe?',
        'question_type': 'multiple_choice',
        'options': ['Spain', 'Peru', 'Italy'],
        'solution': ['Italy', 'Spain', 'Italy'],
    })
    assert multiple.status_code == 201
    assert multiple.get_json()['question']['solution'] == ['Italy', 'Spain']

    listed = admin_client.get(f"/admin/quizzes/{quiz['id']}/questions").get_json()
    assert [q['question_type'] for q in listed['questions']] == ['single_choice', 'multiple_choice']
    assert listed['quiz']['question_count'] == 2


def test_invalid_solutions_are_rejected_at_write_time(admin_client):
    quiz = create_quiz(admin_client)
    url = f"/admin/quizzes/{quiz['id']}/questions/add"

    two_for_single = admin_client.post(url, data={
        'question_text': 'Pick one', 'question_type': 'single_choice',
        'options': 'A,B', 'solution': 'A,B',
    })
    not_an_option = admin_client.post(url, data={
        'question_text': 'Pick some', 'question_type': 'multiple_choice',
        'options': 'A,B', 'solution': 'A,C',
    })
    no_options = admin_client.post(url, data={
        'question_text': 'Pick', 'question_type': 'single_choice',
        'options': '', 'solution': 'A',
    })
    bad_type = admin_client.post(url, data={
        'question_text': 'Essay', 'question_type': 'essay',
        'options': 'A', 'solution': 'A',
    })

    for response in (two_for_single, not_an_option, no_options, bad_type):
        assert response.status_code == 400
    assert Question.query.count() == 0


def test_edit_and_delete_question(admin_client, quiz, question_ids, user, client):
    q1, q2 = question_ids
    client.post(f'/quiz/{quiz.id}/submit', json={'answers': {str(q1): 'B'}})
    assert AnswerRecord.query.count() == 2
    forget_current_user()

    edited = admin_client.post(f'/admin/quizzes/{quiz.id}/questions/edit/{q1}', data={
        'question_text': 'Pick C', 'question_type': 'single_choice',
        'options': 'A,B,C', 'solution': 'C',
    })
    assert edited.status_code == 200
    assert edited.get_json()['question']['solution'] == 'C'

    wrong_quiz = admin_client.post(f'/admin/quizzes/{quiz.id + 1}/questions/delete/{q1}')
    assert wrong_quiz.status_code == 404

    assert admin_client.post(f'/admin/quizzes/{quiz.id}/questions/delete/{q1}').status_code == 200
    assert Question.query.count() == 1
    assert AnswerRecord.query.filter_by(question_id=q1).count() == 0


def test_delete_quiz_removes_questions_and_answers(admin_client, quiz, question_ids, client):
    client.post(f'/quiz/{quiz.id}/submit', json={'answers': {}})
    forget_current_user()

    admin_client.post(f'/admin/quizzes/delete/{quiz.id}')

    assert Question.query.count() == 0
    assert AnswerRecord.query.count() == 0
