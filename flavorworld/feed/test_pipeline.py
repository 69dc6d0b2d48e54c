# flavorworld/feed/test_pipeline.py
"""
피드 필터/정렬/원본 선택 테스트

사용법: python -m pytest flavorworld/feed/test_pipeline.py -v
"""

import pytest
from unittest.mock import MagicMock

from flavorworld.feed import (
    FeedQuery, build_feed, cooking_time_bucket, filter_posts, normalize_posts, select_source, sort_posts,
)
from flavorworld.feed.models import FeedPost


def _ids(posts):
    return [p.post_id for p in posts]

SCENARIO = [
    {'id': '1', 'createdAt': '2024-01-01', 'likes': []},
    {'id': '2', 'createdAt': '2024-01-03', 'likes': ['u1', 'u2']},
    {'id': '3', 'createdAt': '2024-01-02', 'likes': ['u1']},
]

# --- 필터 ---

def test_category_match_is_case_insensitive():
    posts = normalize_posts([
        {'id': 'a', 'category': 'Italian'},
        {'id': 'b', 'category': 'Asian'},
        {'id': 'c', 'category': 'italian'},
    ])
    result = filter_posts(posts, FeedQuery(category='Italian'))
    assert _ids(result) == ['a', 'c']

def test_missing_field_never_matches_active_filter():
    posts = normalize_posts([{'id': 'a'}, {'id': 'b', 'meatType': 'Fish'}])
    assert _ids(filter_posts(posts, FeedQuery(meat_type='fish'))) == ['b']
    assert _ids(filter_posts(posts, FeedQuery(meat_type='all'))) == ['a', 'b']

def test_facets_combine_with_and():
    posts = normalize_posts([
        {'id': 'a', 'category': 'Thai', 'meatType': 'Chicken', 'prepTime': 20},
        {'id': 'b', 'category': 'Thai', 'meatType': 'Beef', 'prepTime': 20},
        {'id': 'c', 'category': 'Thai', 'meatType': 'Chicken', 'prepTime': 90},
    ])
    query = FeedQuery(category='Thai', meat_type='Chicken', cooking_time='quick')
    assert _ids(filter_posts(posts, query)) == ['a']

def test_single_post_filter_property():
    """filter(F, [P]) == [P] iff P가 모든 활성 facet을 만족"""
    post = normalize_posts([{'id': 'p', 'category': 'Greek', 'meatType': 'Lamb', 'prepTime': 75}])
    assert filter_posts(post, FeedQuery(category='greek', cooking_time='long')) == post
    assert filter_posts(post, FeedQuery(category='greek', cooking_time='medium')) == []

def test_filter_is_stable():
    posts = normalize_posts([{'id': str(i), 'category': 'Korean' if i % 2 else 'Thai'} for i in range(10)])
    assert _ids(filter_posts(posts, FeedQuery(category='Korean'))) == ['1', '3', '5', '7', '9']

@pytest.mark.parametrize('minutes, expected', [
    (0, 'quick'),
    (30, 'quick'),
    (31, 'medium'),
    (60, 'medium'),
    (61, 'long'),
    (120, 'long'),
    (121, 'very_long'),
])
def test_cooking_time_boundaries(minutes, expected):
    """구간 경계값은 정확히 하나의 구간에만 속함 (하한은 배타적)"""
    assert cooking_time_bucket(minutes).key == expected

def test_prep_time_30_is_quick_not_medium():
    posts = normalize_posts([{'id': 'x', 'prepTime': 30}])
    assert _ids(filter_posts(posts, FeedQuery(cooking_time='quick'))) == ['x']
    assert filter_posts(posts, FeedQuery(cooking_time='medium')) == []

def test_missing_minutes_count_as_zero():
    posts = normalize_posts([{'id': 'x'}])
    assert _ids(filter_posts(posts, FeedQuery(cooking_time='quick'))) == ['x']

def test_unknown_bucket_does_not_constrain():
    posts = normalize_posts([{'id': 'x', 'prepTime': 500}])
    assert _ids(filter_posts(posts, FeedQuery(cooking_time='forever'))) == ['x']

# --- 정렬 ---

def test_scenario_sort_newest_and_popular():
    posts = normalize_posts(SCENARIO)
    assert _ids(sort_posts(posts, 'newest')) == ['2', '3', '1']
    assert _ids(sort_posts(posts, 'popular')) == ['2', '3', '1']

def test_newest_is_reverse_of_oldest_without_ties():
    posts = normalize_posts(SCENARIO)
    assert _ids(sort_posts(posts, 'oldest')) == list(reversed(_ids(sort_posts(posts, 'newest'))))

def test_popular_sort_is_stable_for_ties():
    posts = normalize_posts([
        {'id': 'a', 'likes': ['u1']},
        {'id': 'b', 'likes': ['u2', 'u3']},
        {'id': 'c', 'likes': ['u4']},
        {'id': 'd'},
    ])
    assert _ids(sort_posts(posts, 'popular')) == ['b', 'a', 'c', 'd']

def test_missing_created_at_sorts_as_oldest():
    posts = normalize_posts([
        {'id': 'dated', 'createdAt': '2020-05-01'},
        {'id': 'undated'},
    ])
    assert _ids(sort_posts(posts, 'newest')) == ['dated', 'undated']
    assert _ids(sort_posts(posts, 'oldest')) == ['undated', 'dated']

def test_unknown_sort_key_defaults_to_newest():
    posts = normalize_posts(SCENARIO)
    assert _ids(sort_posts(posts, 'random')) == ['2', '3', '1']

def test_sort_does_not_mutate_input():
    posts = normalize_posts(SCENARIO)
    sort_posts(posts, 'newest')
    assert _ids(posts) == ['1', '2', '3']

def test_build_feed_end_to_end():
    raw = SCENARIO + [{'id': '4', 'createdAt': '2024-01-04', 'category': 'Dessert'}]
    result = build_feed(raw, FeedQuery(sort_by='oldest'))
    assert _ids(result) == ['1', '3', '2', '4']
    assert all(isinstance(p, FeedPost) for p in result)

def test_feed_query_helpers():
    query = FeedQuery(feed_mode='following', category='Thai', sort_by='popular')
    assert query.active_filters_count() == 2
    assert query.cleared() == FeedQuery(feed_mode='following')

# --- 원본 선택 ---

def test_select_source_modes():
    source = MagicMock()
    select_source('personalized', 'u1', source)()
    source.get_feed.assert_called_once_with('u1')
    select_source('following', 'u1', source)()
    source.get_following_posts.assert_called_once_with('u1')
    select_source('all', None, source)()
    source.get_all_posts.assert_called_once_with()

@pytest.mark.parametrize('mode', ['personalized', 'following'])
def test_select_source_fails_closed_without_user(mode):
    """사용자 ID가 없으면 전체 게시물로 대체하지 않음"""
    source = MagicMock()
    assert select_source(mode, None, source) is None
    assert select_source(mode, '', source) is None
    source.get_all_posts.assert_not_called()

def test_select_source_unknown_mode():
    source = MagicMock()
    assert select_source('trending', 'u1', source) is None
    assert not source.method_calls
