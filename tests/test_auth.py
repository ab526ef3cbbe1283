def test_login_and_logout(app, user):
    client = app.test_client()

    response = client.post('/auth/login', json={'email': 'alice@example.com', 'password': 'secret123'})
    assert response.status_code == 200
    assert response.get_json() == {'success': True, 'user_id': user.id}

    assert client.get('/quiz/1').status_code == 404  # đã đăng nhập, quiz không tồn tại

    assert client.post('/auth/logout').status_code == 200
    assert client.get('/quiz/1').status_code == 401


def test_wrong_password(app, user):
    response = app.test_client().post('/auth/login', json={'email': 'alice@example.com', 'password': 'nope'})
    assert response.status_code == 401
    assert response.get_json()['success'] is False


def test_invalid_login_payload(app):
    response = app.test_client().post('/auth/login', json={'email': 'not-an-email'})
    assert response.status_code == 400
    assert set(response.get_json()['errors']) == {'email', 'password'}
