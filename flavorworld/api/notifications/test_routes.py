# flavorworld/api/notifications/test_routes.py
import pytest


@pytest.fixture
def users(add_user):
    add_user('alice', 'Alice Kim')
    add_user('bob', 'Bob Lee', avatar='data:image/png;base64,AAAA')
    add_user('carol', 'Carol Park')


@pytest.fixture
def followed(client, users, auth_headers):
    """bob과 carol이 alice를 팔로우하여 alice에게 알림 2건이 생깁니다."""
    client.post('/api/users/alice/follow', headers=auth_headers('bob'))
    client.post('/api/users/alice/follow', headers=auth_headers('carol'))


def test_list_notifications(client, followed, auth_headers):
    response = client.get('/api/notifications', headers=auth_headers('alice'))
    body = response.get_json()
    assert response.status_code == 200
    assert len(body) == 2
    assert {n['type'] for n in body} == {'follow'}
    bob = next(n for n in body if n['from_user_id'] == 'bob')
    assert bob['from_user'] == {'name': 'Bob Lee', 'avatar': 'data:image/png;base64,AAAA'}
    assert bob['read'] is False

def test_notifications_require_auth(client, users):
    assert client.get('/api/notifications').status_code == 401

def test_unread_count_and_mark_all(client, followed, auth_headers):
    headers = auth_headers('alice')
    assert client.get('/api/notifications/unread-count', headers=headers).get_json() == {'count': 2}

    response = client.put('/api/notifications/mark-all-read', headers=headers)
    assert response.get_json()['updated'] == 2
    assert client.get('/api/notifications/unread-count', headers=headers).get_json() == {'count': 0}

def test_mark_single_notification_read(client, fake_db, followed, auth_headers):
    notification_id = fake_db.docs('notifications')[0]['notification_id']

    forbidden = client.put(f'/api/notifications/{notification_id}/read', headers=auth_headers('bob'))
    assert forbidden.status_code == 403

    response = client.put(f'/api/notifications/{notification_id}/read', headers=auth_headers('alice'))
    assert response.status_code == 200
    assert response.get_json()['read'] is True
    assert client.get('/api/notifications/unread-count', headers=auth_headers('alice')).get_json() == {'count': 1}

def test_mark_missing_notification(client, users, auth_headers):
    response = client.put('/api/notifications/nope/read', headers=auth_headers('alice'))
    assert response.status_code == 404
    assert response.get_json()['error_code'] == 'NOTIFICATION_NOT_FOUND'
