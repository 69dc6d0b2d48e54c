# flavorworld/feed/pipeline.py
from typing import Any, List

from flavorworld.feed.filters import filter_posts
from flavorworld.feed.models import FeedPost, FeedQuery
from flavorworld.feed.normalize import normalize_posts
from flavorworld.feed.sorting import sort_posts


def apply_filters_and_sort(posts: List[FeedPost], query: FeedQuery) -> List[FeedPost]:
    """정규화된 게시물 목록에 facet 필터와 정렬을 순서대로 적용합니다."""
    return sort_posts(filter_posts(posts, query), query.sort_by)


def build_feed(raw_posts: Any, query: FeedQuery) -> List[FeedPost]:
    """
    서버 응답 배열 -> 정규화 -> 필터 -> 정렬.
    개별 게시물의 형식 오류는 기본값으로 대체되므로 이 함수는 실패하지 않습니다.
    """
    return apply_filters_and_sort(normalize_posts(raw_posts), query)
