# flavorworld/feed/filters.py
import logging
from typing import Callable, List, Optional, Sequence

from flavorworld.feed.constants import ALL, COOKING_TIMES, COOKING_TIMES_BY_KEY, CookingTimeBucket
from flavorworld.feed.models import FeedPost, FeedQuery

logger = logging.getLogger(__name__)

Predicate = Callable[[FeedPost], bool]


def _fold(value: Optional[str]) -> Optional[str]:
    if not isinstance(value, str):
        return None
    return value.strip().casefold()


def _is_active(selected: Optional[str]) -> bool:
    return bool(selected) and _fold(selected) != ALL


def matches_facet(post_value: Optional[str], selected: Optional[str]) -> bool:
    """대소문자를 구분하지 않는 정확 일치. 'all'은 제약 없음, 값이 없는 게시물은 활성 필터와 일치하지 않습니다."""
    if not _is_active(selected):
        return True
    folded = _fold(post_value)
    return folded is not None and folded == _fold(selected)


def cooking_time_bucket(minutes: int) -> CookingTimeBucket:
    """조리 시간(분)이 속하는 유일한 구간을 반환합니다."""
    for bucket in COOKING_TIMES:
        if bucket.contains(minutes):
            return bucket
    # 음수 등 어떤 구간에도 속하지 않는 값은 가장 짧은 구간으로 취급
    return COOKING_TIMES[0]


def matches_cooking_time(minutes: int, bucket_key: Optional[str]) -> bool:
    if not _is_active(bucket_key):
        return True
    bucket = COOKING_TIMES_BY_KEY.get(bucket_key)
    if bucket is None:
        logger.warning(f"알 수 없는 조리 시간 구간은 필터링하지 않습니다: {bucket_key}")
        return True
    return cooking_time_bucket(minutes).key == bucket.key


def build_predicates(query: FeedQuery) -> List[Predicate]:
    """활성화된 facet마다 하나의 조건을 만듭니다."""
    predicates: List[Predicate] = []
    if _is_active(query.category):
        predicates.append(lambda post: matches_facet(post.category, query.category))
    if _is_active(query.meat_type):
        predicates.append(lambda post: matches_facet(post.meat_type, query.meat_type))
    if _is_active(query.cooking_time):
        predicates.append(lambda post: matches_cooking_time(post.prep_time, query.cooking_time))
    return predicates


def filter_posts(posts: Sequence[FeedPost], query: FeedQuery) -> List[FeedPost]:
    """
    모든 활성 facet을 만족하는 게시물만 남깁니다 (AND 결합).
    입력 순서를 유지하는 안정 필터이며 입력 목록을 변경하지 않습니다.
    """
    predicates = build_predicates(query)
    if not predicates:
        return list(posts)
    return [post for post in posts if all(predicate(post) for predicate in predicates)]
