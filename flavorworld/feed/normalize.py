# flavorworld/feed/normalize.py
"""
서로 다른 형태의 게시물 원본을 FeedPost 하나로 정규화하는 경계 모듈.

- 서버 응답 (snake_case: recipe_id, user_name, created_at ...)
- 레거시 레코드 (camelCase: _id, userName, createdAt, prepTime ...)
- 중첩된 작성자 정보 (user.name, author.nickname ...)

정규화는 예외를 던지지 않습니다. 누락되었거나 형식이 잘못된 필드는 안전한 기본값으로 대체되며,
한 게시물의 문제로 전체 배치가 중단되지 않습니다.
"""
import logging
import re
import uuid
from typing import Any, Dict, Iterable, List, Optional

from flavorworld.feed.constants import (
    ANONYMOUS_USER_NAME, MEDIA_TYPES, POST_SOURCE_GROUP, POST_SOURCE_PERSONAL,
)
from flavorworld.feed.models import FeedPost
from flavorworld.utils.datetime_utils import DateTimeUtils

logger = logging.getLogger(__name__)

ID_FIELDS = ('post_id', 'recipe_id', '_id', 'id')
USER_NAME_FIELDS = ('user_name', 'userName', 'full_name', 'fullName')
USER_AVATAR_FIELDS = ('user_avatar', 'userAvatar')
USER_ID_FIELDS = ('user_id', 'userId')
CREATED_AT_FIELDS = ('created_at', 'createdAt')
PREP_TIME_FIELDS = ('prep_time', 'prepTime', 'cooking_time', 'cookingTime', 'cook_time', 'total_time')
MEAT_TYPE_FIELDS = ('meat_type', 'meatType')
GROUP_ID_FIELDS = ('group_id', 'groupId')
GROUP_NAME_FIELDS = ('group_name', 'groupName')
MEDIA_TYPE_FIELDS = ('media_type', 'mediaType')

_CONSUMED_FIELDS = frozenset(
    ID_FIELDS + USER_NAME_FIELDS + USER_AVATAR_FIELDS + USER_ID_FIELDS + CREATED_AT_FIELDS
    + PREP_TIME_FIELDS + MEAT_TYPE_FIELDS + GROUP_ID_FIELDS + GROUP_NAME_FIELDS + MEDIA_TYPE_FIELDS
    + ('title', 'description', 'category', 'servings', 'likes', 'comments', 'user', 'author',
       'has_timestamp', 'post_source', 'postSource', 'image', 'video')
)

_LEADING_INT = re.compile(r'^\s*(-?\d+)')


def _first_populated(raw: Dict[str, Any], fields: Iterable[str]) -> Any:
    for name in fields:
        value = raw.get(name)
        if value is not None and value != '':
            return value
    return None


def _as_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, str):
        return value
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    # ObjectId 등 문자열 표현이 식별자인 객체
    if not isinstance(value, (dict, list, tuple, set)):
        return str(value)
    return None


def parse_leading_int(value: Any) -> Optional[int]:
    """'45', 45, 45.7, '45 min' 처럼 표현된 값의 정수 부분을 반환합니다. 해석할 수 없으면 None."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if value == value and abs(value) != float('inf') else None
    if isinstance(value, str):
        match = _LEADING_INT.match(value)
        return int(match.group(1)) if match else None
    return None


def resolve_minutes(raw: Dict[str, Any]) -> int:
    """별칭 필드 중 처음으로 해석 가능한 값을 조리 시간(분)으로 사용합니다. 없으면 0."""
    for name in PREP_TIME_FIELDS:
        minutes = parse_leading_int(raw.get(name))
        if minutes is not None:
            return minutes
    return 0


def _nested(raw: Dict[str, Any], container: str, fields: Iterable[str]) -> Any:
    nested = raw.get(container)
    if isinstance(nested, dict):
        return _first_populated(nested, fields)
    return None


def _resolve_user_name(raw: Dict[str, Any]) -> str:
    name = (_first_populated(raw, USER_NAME_FIELDS)
            or _nested(raw, 'user', ('name', 'full_name', 'fullName'))
            or _nested(raw, 'author', ('nickname', 'name', 'full_name')))
    name = _as_text(name)
    return name if name and name.strip() else ANONYMOUS_USER_NAME


def _resolve_user_avatar(raw: Dict[str, Any]) -> Optional[str]:
    avatar = (_first_populated(raw, USER_AVATAR_FIELDS)
              or _nested(raw, 'user', ('avatar',))
              or _nested(raw, 'author', ('profile_image_url', 'avatar')))
    return avatar if isinstance(avatar, str) else None


def _resolve_likes(value: Any) -> List[str]:
    if not isinstance(value, (list, tuple)):
        return []
    likes: List[str] = []
    seen = set()
    for item in value:
        user_id = _as_text(item)
        if user_id and user_id not in seen:
            seen.add(user_id)
            likes.append(user_id)
    return likes


def _resolve_comments(value: Any) -> List[Dict[str, Any]]:
    if not isinstance(value, (list, tuple)):
        return []
    return [dict(item) for item in value if isinstance(item, dict)]


def _resolve_media_type(raw: Dict[str, Any], image: Optional[str], video: Optional[str]) -> str:
    media_type = _first_populated(raw, MEDIA_TYPE_FIELDS)
    if media_type in MEDIA_TYPES:
        return media_type
    if video:
        return 'video'
    if image:
        return 'image'
    return 'none'


def _fallback_post() -> FeedPost:
    return FeedPost(
        post_id=f"local-{uuid.uuid4().hex}",
        created_at=DateTimeUtils.now(),
        has_timestamp=False,
    )


def normalize_post(raw: Any) -> FeedPost:
    """
    원본 게시물 하나를 FeedPost로 변환합니다.
    이미 정규화된 FeedPost는 그대로 반환되므로 여러 번 적용해도 결과가 같습니다.
    """
    if isinstance(raw, FeedPost):
        return raw
    if not isinstance(raw, dict):
        logger.warning(f"dict가 아닌 게시물 레코드를 기본값으로 대체합니다: {type(raw).__name__}")
        return _fallback_post()

    try:
        post_id = _as_text(_first_populated(raw, ID_FIELDS)) or f"local-{uuid.uuid4().hex}"

        created_at = DateTimeUtils.coerce_datetime(_first_populated(raw, CREATED_AT_FIELDS))
        has_timestamp = created_at is not None and raw.get('has_timestamp', True) is not False
        if created_at is None:
            created_at = DateTimeUtils.now()

        group_id = _as_text(_first_populated(raw, GROUP_ID_FIELDS))
        group_name = _as_text(_first_populated(raw, GROUP_NAME_FIELDS))
        image = raw.get('image') if isinstance(raw.get('image'), str) else None
        video = raw.get('video') if isinstance(raw.get('video'), str) else None

        return FeedPost(
            post_id=post_id,
            created_at=created_at,
            has_timestamp=has_timestamp,
            title=_as_text(raw.get('title')) or '',
            description=_as_text(raw.get('description')) or '',
            category=_as_text(raw.get('category')),
            meat_type=_as_text(_first_populated(raw, MEAT_TYPE_FIELDS)),
            prep_time=resolve_minutes(raw),
            servings=parse_leading_int(raw.get('servings')),
            user_id=_as_text(_first_populated(raw, USER_ID_FIELDS)),
            user_name=_resolve_user_name(raw),
            user_avatar=_resolve_user_avatar(raw),
            likes=_resolve_likes(raw.get('likes')),
            comments=_resolve_comments(raw.get('comments')),
            group_id=group_id,
            group_name=group_name,
            post_source=POST_SOURCE_GROUP if group_id else POST_SOURCE_PERSONAL,
            media_type=_resolve_media_type(raw, image, video),
            image=image,
            video=video,
            extra={k: v for k, v in raw.items() if k not in _CONSUMED_FIELDS},
        )
    except Exception as e:
        logger.warning(f"게시물 정규화 실패, 기본값으로 대체합니다: {e}", exc_info=True)
        return _fallback_post()


def normalize_posts(raw_posts: Any) -> List[FeedPost]:
    """배열이 아닌 응답은 빈 목록으로 취급합니다."""
    if not isinstance(raw_posts, (list, tuple)):
        return []
    return [normalize_post(raw) for raw in raw_posts]
