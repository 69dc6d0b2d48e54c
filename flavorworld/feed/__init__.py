# flavorworld/feed/__init__.py
"""
피드 집계 파이프라인 패키지

원본 선택(sources) -> 정규화(normalize) -> facet 필터(filters) -> 정렬(sorting)
모든 단계는 순수 함수이며 실행마다 FeedQuery를 명시적으로 전달받습니다.
"""

from .models import FeedPost, FeedQuery
from .normalize import normalize_post, normalize_posts
from .filters import filter_posts, cooking_time_bucket
from .sorting import sort_posts
from .sources import select_source
from .pipeline import apply_filters_and_sort, build_feed

__all__ = [
    'FeedPost', 'FeedQuery',
    'normalize_post', 'normalize_posts',
    'filter_posts', 'cooking_time_bucket',
    'sort_posts',
    'select_source',
    'apply_filters_and_sort', 'build_feed',
]
