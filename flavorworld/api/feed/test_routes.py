# flavorworld/api/feed/test_routes.py
"""
피드 API 테스트

사용법: python -m pytest flavorworld/api/feed/test_routes.py -v
"""

import pytest

from flavorworld.utils.datetime_utils import DateTimeUtils


def _post(fake_db, recipe_id, user_id, day, **fields):
    recipe = {
        'recipe_id': recipe_id,
        'user_id': user_id,
        'user_name': 'Stale Name',
        'title': recipe_id.title(),
        'description': '',
        'ingredients': 'salt',
        'instructions': 'cook',
        'category': 'Korean',
        'meat_type': 'Beef',
        'prep_time': 30,
        'servings': 2,
        'media_type': 'none',
        'likes': [],
        'comments': [],
        'group_id': None,
        'is_approved': True,
        'created_at': DateTimeUtils.parse_iso_datetime(f'2024-05-{day:02d}T09:00:00Z'),
    }
    recipe.update(fields)
    fake_db.collection('recipes').document(recipe_id).set(recipe)


@pytest.fixture
def world(fake_db, add_user):
    """alice는 bob을 팔로우하고 'g1' 그룹에 속해 있습니다."""
    add_user('alice', 'Alice Kim', following=['bob'])
    add_user('bob', 'Bob Lee', bio='Grill master', avatar='data:image/png;base64,AAAA')
    add_user('carol', 'Carol Park')

    fake_db.collection('groups').document('g1').set({
        'group_id': 'g1', 'name': 'Seoul Street Food', 'creator_id': 'carol',
        'members': [], 'member_ids': ['carol', 'alice'], 'pending_requests': [],
    })
    _post(fake_db, 'bob-bulgogi', 'bob', 3)
    _post(fake_db, 'bob-group', 'bob', 9, group_id='g9')   # 내가 속하지 않은 그룹의 글
    _post(fake_db, 'carol-solo', 'carol', 4)                # 팔로우하지 않은 작성자
    _post(fake_db, 'carol-tteok', 'carol', 5, group_id='g1')
    _post(fake_db, 'carol-pending', 'carol', 6, group_id='g1', is_approved=False)
    _post(fake_db, 'alice-own', 'alice', 7)


def _ids(response):
    return [p['recipe_id'] for p in response.get_json()]


def test_personalized_feed_merges_following_and_groups(client, world):
    response = client.get('/api/feed?userId=alice')
    assert response.status_code == 200
    assert _ids(response) == ['carol-tteok', 'bob-bulgogi']

def test_feed_posts_are_enriched(client, world):
    posts = {p['recipe_id']: p for p in client.get('/api/feed?userId=alice').get_json()}

    personal = posts['bob-bulgogi']
    assert personal['user_name'] == 'Bob Lee'
    assert personal['user_bio'] == 'Grill master'
    assert personal['user_avatar'].startswith('data:image/png')
    assert personal['post_source'] == 'personal'

    group = posts['carol-tteok']
    assert group['post_source'] == 'group'
    assert group['group_name'] == 'Seoul Street Food'

def test_following_feed_excludes_group_and_own_posts(client, world):
    assert _ids(client.get('/api/feed/following?userId=alice')) == ['bob-bulgogi']
    assert _ids(client.get('/api/feed?userId=alice&type=following')) == ['bob-bulgogi']

def test_groups_feed_only_approved(client, world):
    assert _ids(client.get('/api/feed/groups?userId=alice')) == ['carol-tteok']

def test_group_without_name_gets_placeholder(client, fake_db, world):
    fake_db.collection('groups').document('g2').set({'group_id': 'g2', 'member_ids': ['alice']})
    _post(fake_db, 'ghost-group', 'carol', 8, group_id='g2')

    posts = client.get('/api/feed/groups?userId=alice').get_json()
    names = {p['recipe_id']: p['group_name'] for p in posts}
    assert names['ghost-group'] == 'Unknown Group'

def test_feed_uses_jwt_identity_without_user_id(client, world, auth_headers):
    response = client.get('/api/feed', headers=auth_headers('alice'))
    assert _ids(response) == ['carol-tteok', 'bob-bulgogi']

def test_feed_requires_user(client, world):
    response = client.get('/api/feed')
    assert response.status_code == 400
    assert response.get_json()['error_code'] == 'USER_ID_REQUIRED'

def test_feed_unknown_user(client, world):
    response = client.get('/api/feed?userId=ghost')
    assert response.status_code == 404
    assert response.get_json()['error_code'] == 'USER_NOT_FOUND'

def test_feed_rejects_unknown_type(client, world):
    response = client.get('/api/feed?userId=alice&type=everything')
    assert response.status_code == 400
    assert 'type' in response.get_json()['details']

def test_feed_limit(client, world):
    assert _ids(client.get('/api/feed?userId=alice&limit=1')) == ['carol-tteok']

def test_feed_stats(client, world):
    stats = client.get('/api/feed/stats?userId=alice').get_json()
    assert stats == {
        'following_count': 1,
        'groups_count': 1,
        'following_posts_count': 1,
        'group_posts_count': 1,
        'own_posts_count': 1,
        'total_feed_posts': 3,
    }

def test_feed_stats_unknown_user(client, world):
    assert client.get('/api/feed/stats?userId=ghost').status_code == 404
