# flavorworld/feed/test_mutations.py
import pytest

from flavorworld.feed.mutations import (
    add_like, append_comment, remove_comment, remove_like, toggle_like,
)


def test_toggle_like_twice_restores_membership():
    """같은 사용자가 두 번 토글하면 원래 상태로 돌아옴"""
    original = ['u1', 'u2']
    liked, state = toggle_like(original, 'u3')
    assert state is True and liked == ['u1', 'u2', 'u3']
    restored, state = toggle_like(liked, 'u3')
    assert state is False and restored == original
    assert original == ['u1', 'u2']  # 입력은 변경되지 않음

def test_toggle_like_handles_none():
    assert toggle_like(None, 'u1') == (['u1'], True)

def test_add_like_never_duplicates():
    assert add_like(['u1'], 'u1') == ['u1']
    assert remove_like(['u1', 'u2'], 'u1') == ['u2']

def test_append_comment_keeps_order():
    comments = [{'comment_id': 'a'}, {'comment_id': 'b'}]
    result = append_comment(comments, {'comment_id': 'c'})
    assert [c['comment_id'] for c in result] == ['a', 'b', 'c']

def test_remove_comment_by_author():
    comments = [{'comment_id': 'a', 'user_id': 'u1'}, {'comment_id': 'b', 'user_id': 'u2'}]
    assert remove_comment(comments, 'a', 'u1') == [{'comment_id': 'b', 'user_id': 'u2'}]

def test_remove_comment_errors():
    comments = [{'comment_id': 'a', 'user_id': 'u1'}]
    with pytest.raises(PermissionError):
        remove_comment(comments, 'a', 'u2')
    with pytest.raises(ValueError):
        remove_comment(comments, 'missing', 'u1')
