# flavorworld/api/users/test_routes.py
import pytest


@pytest.fixture
def users(add_user):
    add_user('alice', 'Alice Kim', bio='Home cook')
    add_user('bob', 'Bob Lee')
    add_user('carol', 'Carol Park', email='carol@example.com')


def test_get_profile_hides_private_fields(client, users):
    response = client.get('/api/users/alice')
    body = response.get_json()
    assert response.status_code == 200
    assert body['full_name'] == 'Alice Kim'
    assert body['bio'] == 'Home cook'
    assert body['followers_count'] == 0 and body['recipes_count'] == 0
    assert 'password_hash' not in body

def test_get_profile_not_found(client, users):
    assert client.get('/api/users/ghost').status_code == 404

def test_update_my_profile(client, users, auth_headers):
    response = client.put('/api/users/me', json={'fullName': 'Alice K.', 'bio': 'Chef'}, headers=auth_headers('alice'))
    body = response.get_json()
    assert response.status_code == 200
    assert body['full_name'] == 'Alice K.' and body['bio'] == 'Chef'

def test_follow_and_unfollow(client, fake_db, users, auth_headers):
    response = client.post('/api/users/alice/follow', headers=auth_headers('bob'))
    assert response.status_code == 200
    assert response.get_json()['followers_count'] == 1

    followers = client.get('/api/users/alice/followers').get_json()
    assert [u['user_id'] for u in followers] == ['bob']
    following = client.get('/api/users/bob/following').get_json()
    assert [u['user_id'] for u in following] == ['alice']

    notifications = fake_db.docs('notifications')
    assert len(notifications) == 1 and notifications[0]['type'] == 'follow'

    duplicate = client.post('/api/users/alice/follow', headers=auth_headers('bob'))
    assert duplicate.status_code == 400
    assert duplicate.get_json()['error_code'] == 'ALREADY_FOLLOWING'

    assert client.delete('/api/users/alice/follow', headers=auth_headers('bob')).status_code == 200
    assert client.get('/api/users/alice/followers').get_json() == []
    again = client.delete('/api/users/alice/follow', headers=auth_headers('bob'))
    assert again.get_json()['error_code'] == 'NOT_FOLLOWING'

def test_cannot_follow_self(client, users, auth_headers):
    response = client.post('/api/users/alice/follow', headers=auth_headers('alice'))
    assert response.status_code == 400
    assert response.get_json()['error_code'] == 'CANNOT_FOLLOW_SELF'

def test_follow_unknown_user(client, users, auth_headers):
    assert client.post('/api/users/ghost/follow', headers=auth_headers('alice')).status_code == 404

def test_search_users_case_insensitive(client, users, auth_headers):
    names = [u['full_name'] for u in client.get('/api/users/search?q=KIM').get_json()]
    assert names == ['Alice Kim']

    by_email = client.get('/api/users/search?q=example.com').get_json()
    assert [u['user_id'] for u in by_email] == ['carol']

    # 로그인한 본인은 검색 결과에서 제외
    assert client.get('/api/users/search?q=alice', headers=auth_headers('alice')).get_json() == []
    assert client.get('/api/users/search?q=').get_json() == []

def test_delete_my_account_cleans_follow_graph(client, fake_db, add_user, auth_headers, recipe_payload):
    add_user('alice', followers=['bob'], following=['carol'])
    add_user('bob', following=['alice'])
    add_user('carol', followers=['alice'])
    client.post('/api/recipes', json=recipe_payload, headers=auth_headers('alice'))

    response = client.delete('/api/users/me', headers=auth_headers('alice'))
    body = response.get_json()
    assert response.status_code == 200
    assert body['deleted'] is True and body['user_id'] == 'alice'

    assert client.get('/api/users/alice').status_code == 404
    assert client.get('/api/users/bob').get_json()['following_count'] == 0
    assert client.get('/api/users/carol').get_json()['followers_count'] == 0
    # 작성한 레시피는 남겨 둠
    assert len(fake_db.docs('recipes')) == 1

def test_delete_unknown_account(client, auth_headers):
    response = client.delete('/api/users/me', headers=auth_headers('ghost'))
    assert response.status_code == 404
    assert response.get_json()['error_code'] == 'USER_NOT_FOUND'
