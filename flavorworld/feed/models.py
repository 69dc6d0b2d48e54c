# flavorworld/feed/models.py
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, List, Dict, Any

from flavorworld.feed.constants import (
    ALL, SORT_NEWEST, FEED_PERSONALIZED, POST_SOURCE_PERSONAL, ANONYMOUS_USER_NAME,
)
from flavorworld.utils.datetime_utils import DateTimeUtils


@dataclass
class FeedPost:
    """
    피드 파이프라인 내부에서 사용하는 정규화된 게시물 레코드.
    서버 응답, 그룹 게시물, 레거시 레코드 등 서로 다른 형태의 원본은
    normalize_post()를 거쳐 모두 이 형태로 변환된 뒤에만 필터/정렬 단계로 전달됩니다.
    """
    post_id: str
    created_at: datetime
    user_name: str = ANONYMOUS_USER_NAME
    has_timestamp: bool = True
    title: str = ''
    description: str = ''
    category: Optional[str] = None
    meat_type: Optional[str] = None
    prep_time: int = 0
    servings: Optional[int] = None
    user_id: Optional[str] = None
    user_avatar: Optional[str] = None
    likes: List[str] = field(default_factory=list)
    comments: List[Dict[str, Any]] = field(default_factory=list)
    group_id: Optional[str] = None
    group_name: Optional[str] = None
    post_source: str = POST_SOURCE_PERSONAL
    media_type: str = 'none'
    image: Optional[str] = None
    video: Optional[str] = None
    extra: Dict[str, Any] = field(default_factory=dict)  # 파이프라인이 해석하지 않는 원본 필드

    @property
    def likes_count(self) -> int:
        return len(self.likes)

    def to_dict(self) -> Dict[str, Any]:
        """렌더링/직렬화용 dict. normalize_post()에 다시 넣으면 동일한 FeedPost가 됩니다."""
        data = dict(self.extra)
        data.update({
            'post_id': self.post_id,
            'title': self.title,
            'description': self.description,
            'category': self.category,
            'meat_type': self.meat_type,
            'prep_time': self.prep_time,
            'servings': self.servings,
            'user_id': self.user_id,
            'user_name': self.user_name,
            'user_avatar': self.user_avatar,
            'likes': list(self.likes),
            'comments': [dict(c) for c in self.comments],
            'created_at': DateTimeUtils.to_iso_string(self.created_at),
            'has_timestamp': self.has_timestamp,
            'group_id': self.group_id,
            'group_name': self.group_name,
            'post_source': self.post_source,
            'media_type': self.media_type,
            'image': self.image,
            'video': self.video,
        })
        return data


@dataclass
class FeedQuery:
    """
    한 번의 파이프라인 실행에 적용되는 사용자 선택값.
    전역 상태 대신 매 호출마다 명시적으로 전달됩니다.
    """
    feed_mode: str = FEED_PERSONALIZED
    category: str = ALL
    meat_type: str = ALL
    cooking_time: str = ALL
    sort_by: str = SORT_NEWEST

    def active_filters_count(self) -> int:
        """기본값과 다른 선택의 개수 (필터 배지 표시용)."""
        count = sum(1 for value in (self.category, self.meat_type, self.cooking_time) if value != ALL)
        if self.sort_by != SORT_NEWEST:
            count += 1
        return count

    def cleared(self) -> 'FeedQuery':
        """피드 모드는 유지하고 필터와 정렬만 기본값으로 되돌린 새 쿼리를 반환합니다."""
        return FeedQuery(feed_mode=self.feed_mode)
