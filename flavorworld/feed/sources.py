# flavorworld/feed/sources.py
import logging
from functools import partial
from typing import Any, Callable, Optional, Protocol

from flavorworld.feed.constants import FEED_ALL, FEED_FOLLOWING, FEED_PERSONALIZED


class PostSource(Protocol):
    """피드 원본을 제공하는 읽기 전용 엔드포인트 묶음 (FlavorWorldAPI가 구현)."""

    def get_feed(self, user_id: str) -> Any: ...

    def get_following_posts(self, user_id: str) -> Any: ...

    def get_all_posts(self) -> Any: ...


def select_source(feed_mode: str, user_id: Optional[str], source: PostSource) -> Optional[Callable[[], Any]]:
    """
    피드 모드에 맞는 조회 함수를 선택합니다. 반환된 함수를 호출해야 실제 요청이 발생합니다.
    - personalized: 내가 속한 그룹 + 팔로우한 작성자의 게시물
    - following: 팔로우한 작성자의 게시물
    - all: 전체 게시물

    사용자 ID가 필요한 모드에서 ID가 없거나 모드를 알 수 없으면 None을 반환합니다.
    호출 측은 이를 빈 피드로 취급해야 하며, 전체 게시물로 대체해서는 안 됩니다.
    """
    if feed_mode == FEED_ALL:
        return source.get_all_posts

    if feed_mode not in (FEED_PERSONALIZED, FEED_FOLLOWING):
        logging.warning(f"알 수 없는 피드 모드 요청을 무시합니다: {feed_mode}")
        return None

    if not user_id:
        logging.warning(f"사용자 ID 없이 '{feed_mode}' 피드를 요청했습니다. 빈 피드를 반환합니다.")
        return None

    if feed_mode == FEED_FOLLOWING:
        return partial(source.get_following_posts, user_id)
    return partial(source.get_feed, user_id)
