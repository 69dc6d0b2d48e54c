# flavorworld/api/recipes/test_routes.py
"""
레시피 API 테스트 (CRUD, 좋아요, 댓글, 저장)

사용법: python -m pytest flavorworld/api/recipes/test_routes.py -v
"""

import io

import pytest

from flavorworld.utils.datetime_utils import DateTimeUtils


@pytest.fixture
def users(add_user):
    add_user('alice', 'Alice Kim')
    add_user('bob', 'Bob Lee')


@pytest.fixture
def recipe_id(client, users, auth_headers, recipe_payload):
    response = client.post('/api/recipes', json=recipe_payload, headers=auth_headers('alice'))
    assert response.status_code == 201
    return response.get_json()['recipe_id']


def _notifications(fake_db, n_type):
    return [n for n in fake_db.docs('notifications') if n['type'] == n_type]

# --- CRUD ---

def test_create_recipe(client, users, auth_headers, recipe_payload):
    response = client.post('/api/recipes', json=recipe_payload, headers=auth_headers('alice'))
    body = response.get_json()
    assert response.status_code == 201
    assert body['title'] == 'Kimchi Fried Rice'
    assert body['meat_type'] == 'Pork' and body['prep_time'] == 20
    assert body['user_name'] == 'Alice Kim'
    assert body['likes'] == [] and body['likes_count'] == 0
    assert body['media_type'] == 'none'

def test_create_recipe_requires_auth(client, users, recipe_payload):
    assert client.post('/api/recipes', json=recipe_payload).status_code == 401

def test_create_recipe_validation(client, users, auth_headers, recipe_payload):
    payload = dict(recipe_payload, category='Martian')
    payload.pop('title')
    response = client.post('/api/recipes', json=payload, headers=auth_headers('alice'))
    body = response.get_json()
    assert response.status_code == 400
    assert body['error_code'] == 'VALIDATION_ERROR'
    assert set(body['details']) == {'title', 'category'}

def test_create_recipe_rejects_blank_text_fields(client, fake_db, users, auth_headers, recipe_payload):
    payload = dict(recipe_payload, title='   ', instructions='  \n ')
    response = client.post('/api/recipes', json=payload, headers=auth_headers('alice'))
    body = response.get_json()
    assert response.status_code == 400
    assert body['error_code'] == 'VALIDATION_ERROR'
    assert set(body['details']) == {'title', 'instructions'}
    assert fake_db.docs('recipes') == []

def test_create_recipe_with_multipart_image(client, users, auth_headers, recipe_payload):
    data = {k: str(v) for k, v in recipe_payload.items()}
    data['media'] = (io.BytesIO(b'\x89PNG fake image'), 'dish.png', 'image/png')
    response = client.post('/api/recipes', data=data, headers=auth_headers('alice'),
                           content_type='multipart/form-data')
    body = response.get_json()
    assert response.status_code == 201
    assert body['media_type'] == 'image'
    assert body['image'].startswith('data:image/png;base64,')
    assert body['prep_time'] == 20

def test_create_recipe_rejects_invalid_media(client, users, auth_headers, recipe_payload):
    payload = dict(recipe_payload, image='not-a-data-url')
    response = client.post('/api/recipes', json=payload, headers=auth_headers('alice'))
    assert response.status_code == 400
    assert response.get_json()['error_code'] == 'INVALID_MEDIA'

def test_update_recipe_owner_only(client, recipe_id, auth_headers):
    forbidden = client.put(f'/api/recipes/{recipe_id}', json={'title': 'Hacked'}, headers=auth_headers('bob'))
    assert forbidden.status_code == 403

    response = client.put(f'/api/recipes/{recipe_id}', json={'title': '  Better Rice '}, headers=auth_headers('alice'))
    body = response.get_json()
    assert response.status_code == 200
    assert body['title'] == 'Better Rice'
    assert body['description'] == 'Quick weeknight dinner'

def test_update_recipe_rejects_blank_text(client, recipe_id, auth_headers):
    response = client.put(f'/api/recipes/{recipe_id}', json={'title': ' \t '}, headers=auth_headers('alice'))
    assert response.status_code == 400
    assert set(response.get_json()['details']) == {'title'}
    assert client.get(f'/api/recipes/{recipe_id}').get_json()['title'] == 'Kimchi Fried Rice'

def test_delete_recipe(client, recipe_id, auth_headers):
    assert client.delete(f'/api/recipes/{recipe_id}', headers=auth_headers('bob')).status_code == 403
    assert client.delete(f'/api/recipes/{recipe_id}', headers=auth_headers('alice')).status_code == 204
    assert client.get(f'/api/recipes/{recipe_id}').status_code == 404

def test_list_recipes_newest_first(client, fake_db, users, auth_headers, recipe_payload):
    for day, title in ((1, 'First'), (2, 'Second')):
        created = client.post('/api/recipes', json=dict(recipe_payload, title=title), headers=auth_headers('alice'))
        fake_db.collection('recipes').document(created.get_json()['recipe_id']).update(
            {'created_at': DateTimeUtils.parse_iso_datetime(f'2024-03-0{day}T12:00:00Z')}
        )
    titles = [r['title'] for r in client.get('/api/recipes').get_json()]
    assert titles == ['Second', 'First']

# --- 좋아요 ---

def test_like_and_unlike(client, fake_db, recipe_id, auth_headers):
    response = client.post(f'/api/recipes/{recipe_id}/like', headers=auth_headers('bob'))
    assert response.status_code == 200
    assert response.get_json() == {'likes': ['bob'], 'likes_count': 1}

    again = client.post(f'/api/recipes/{recipe_id}/like', headers=auth_headers('bob'))
    assert again.status_code == 400
    assert again.get_json()['error_code'] == 'ALREADY_LIKED'
    assert again.get_json()['likes'] == ['bob']

    response = client.delete(f'/api/recipes/{recipe_id}/like', headers=auth_headers('bob'))
    assert response.get_json() == {'likes': [], 'likes_count': 0}

    again = client.delete(f'/api/recipes/{recipe_id}/like', headers=auth_headers('bob'))
    assert again.status_code == 400
    assert again.get_json()['error_code'] == 'NOT_LIKED'
    assert again.get_json()['likes'] == []

def test_like_notifies_owner_once(client, fake_db, recipe_id, auth_headers):
    """좋아요 추가만 알림을 만들며, 취소는 알림을 만들지 않음"""
    client.post(f'/api/recipes/{recipe_id}/like', headers=auth_headers('bob'))
    client.delete(f'/api/recipes/{recipe_id}/like', headers=auth_headers('bob'))

    likes = _notifications(fake_db, 'like')
    assert len(likes) == 1
    assert likes[0]['to_user_id'] == 'alice' and likes[0]['from_user_id'] == 'bob'
    assert likes[0]['recipe_id'] == recipe_id

def test_owner_like_creates_no_notification(client, fake_db, recipe_id, auth_headers):
    client.post(f'/api/recipes/{recipe_id}/like', headers=auth_headers('alice'))
    assert fake_db.docs('notifications') == []

def test_like_missing_recipe(client, users, auth_headers):
    response = client.post('/api/recipes/nope/like', headers=auth_headers('bob'))
    assert response.status_code == 404

# --- 댓글 ---

def test_add_comment_returns_full_list(client, fake_db, recipe_id, auth_headers):
    first = client.post(f'/api/recipes/{recipe_id}/comments', json={'text': '  Looks great '}, headers=auth_headers('bob'))
    assert first.status_code == 201
    body = first.get_json()
    assert body['comment']['text'] == 'Looks great'
    assert body['comment']['user_name'] == 'Bob Lee'
    assert body['comments_count'] == 1

    second = client.post(f'/api/recipes/{recipe_id}/comments', json={'text': 'Thanks!'}, headers=auth_headers('alice'))
    texts = [c['text'] for c in second.get_json()['comments']]
    assert texts == ['Looks great', 'Thanks!']

    # 작성자 본인의 댓글은 알림을 만들지 않음
    assert len(_notifications(fake_db, 'comment')) == 1

def test_blank_comment_rejected(client, recipe_id, auth_headers):
    response = client.post(f'/api/recipes/{recipe_id}/comments', json={'text': '   '}, headers=auth_headers('bob'))
    assert response.status_code == 400
    assert response.get_json()['error_code'] == 'VALIDATION_ERROR'

def test_delete_comment_rules(client, recipe_id, auth_headers):
    created = client.post(f'/api/recipes/{recipe_id}/comments', json={'text': 'Yum'}, headers=auth_headers('bob'))
    comment_id = created.get_json()['comment']['comment_id']

    forbidden = client.delete(f'/api/recipes/{recipe_id}/comments/{comment_id}', headers=auth_headers('alice'))
    assert forbidden.status_code == 403

    missing = client.delete(f'/api/recipes/{recipe_id}/comments/unknown', headers=auth_headers('bob'))
    assert missing.status_code == 404
    assert missing.get_json()['error_code'] == 'COMMENT_NOT_FOUND'

    response = client.delete(f'/api/recipes/{recipe_id}/comments/{comment_id}', headers=auth_headers('bob'))
    assert response.status_code == 200
    assert response.get_json() == {'comments': [], 'comments_count': 0}

# --- 저장 ---

def test_save_recipe_flow(client, recipe_id, auth_headers):
    headers = auth_headers('bob')
    assert client.post(f'/api/recipes/{recipe_id}/save', headers=headers).status_code == 200

    again = client.post(f'/api/recipes/{recipe_id}/save', headers=headers)
    assert again.status_code == 400
    assert again.get_json()['error_code'] == 'ALREADY_SAVED'

    saved = client.get('/api/recipes/saved', headers=headers).get_json()
    assert [r['recipe_id'] for r in saved] == [recipe_id]
    assert 'saved_at' in saved[0]

    assert client.delete(f'/api/recipes/{recipe_id}/save', headers=headers).status_code == 204
    assert client.get('/api/recipes/saved', headers=headers).get_json() == []
