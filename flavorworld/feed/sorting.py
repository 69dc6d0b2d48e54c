# flavorworld/feed/sorting.py
from datetime import datetime
from typing import List, Sequence

from flavorworld.feed.constants import SORT_NEWEST, SORT_OLDEST, SORT_POPULAR
from flavorworld.feed.models import FeedPost
from flavorworld.utils.datetime_utils import EPOCH_MIN


def timestamp_key(post: FeedPost) -> datetime:
    # 작성 시각이 없는 게시물은 가장 오래된 게시물로 취급
    if not post.has_timestamp or post.created_at is None:
        return EPOCH_MIN
    return post.created_at


def likes_key(post: FeedPost) -> int:
    return len(post.likes) if post.likes else 0


def sort_posts(posts: Sequence[FeedPost], sort_by: str = SORT_NEWEST) -> List[FeedPost]:
    """
    정렬 키에 따라 새 목록을 반환합니다. 알 수 없는 키는 'newest'로 처리합니다.
    sorted()는 안정 정렬이므로 같은 키를 가진 게시물은 입력 순서를 유지합니다.
    """
    if sort_by == SORT_OLDEST:
        return sorted(posts, key=timestamp_key)
    if sort_by == SORT_POPULAR:
        return sorted(posts, key=likes_key, reverse=True)
    return sorted(posts, key=timestamp_key, reverse=True)
