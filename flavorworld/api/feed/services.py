# flavorworld/api/feed/services.py
import logging
from firebase_admin import firestore
from typing import Optional, Dict, Any, List, Iterable

from flavorworld.api.groups.services import GroupService
from flavorworld.feed.constants import (
    FEED_PERSONALIZED, FEED_FOLLOWING, POST_SOURCE_GROUP, POST_SOURCE_PERSONAL, UNKNOWN_GROUP_NAME,
)
from flavorworld.utils.datetime_utils import DateTimeUtils, EPOCH_MIN

FEED_GROUPS = 'groups'
SERVER_FEED_TYPES = (FEED_PERSONALIZED, FEED_FOLLOWING, FEED_GROUPS)
FIRESTORE_IN_LIMIT = 30  # Firestore 'in' 쿼리 한 번에 허용되는 값의 최대 개수
UNKNOWN_USER_NAME = 'Unknown User'

class FeedService:
    """
    사용자 맞춤 피드를 구성하는 서비스 클래스.
    - following: 내가 팔로우한 사용자의 개인 레시피
    - groups: 내가 속한 그룹의 승인된 게시물
    - personalized: 위 두 가지를 합친 피드
    모든 게시물에는 작성자/그룹 정보(user_name, user_avatar, user_bio, post_source, group_name)가 덧붙여집니다.
    """
    def __init__(self, group_service: GroupService, db=None):
        self.db = db or firestore.client()
        self.users_ref = self.db.collection('users')
        self.recipes_ref = self.db.collection('recipes')
        self.group_service = group_service

    def _require_user(self, user_id: str) -> Dict[str, Any]:
        doc = self.users_ref.document(user_id).get()
        if not doc.exists:
            raise ValueError("사용자를 찾을 수 없습니다.")
        return doc.to_dict()

    def _query_in(self, field_name: str, values: List[str]) -> Iterable[Dict[str, Any]]:
        """'in' 쿼리를 Firestore 제한 개수 단위로 나누어 실행합니다."""
        for i in range(0, len(values), FIRESTORE_IN_LIMIT):
            chunk = values[i:i + FIRESTORE_IN_LIMIT]
            for doc in self.recipes_ref.where(field_name, 'in', chunk).stream():
                yield doc.to_dict()

    def _following_posts(self, following: List[str]) -> List[Dict[str, Any]]:
        return [post for post in self._query_in('user_id', following) if not post.get('group_id')]

    def _group_posts(self, group_ids: List[str]) -> List[Dict[str, Any]]:
        return [post for post in self._query_in('group_id', group_ids) if post.get('is_approved', True)]

    def _enrich(self, posts: List[Dict[str, Any]], group_names: Dict[str, str]) -> List[Dict[str, Any]]:
        """작성자 정보와 게시물 출처를 덧붙입니다. 작성자 조회 결과는 요청 단위로 캐시합니다."""
        authors: Dict[str, Optional[Dict[str, Any]]] = {}
        enriched = []
        for post in posts:
            author_id = post.get('user_id')
            if author_id not in authors:
                doc = self.users_ref.document(author_id).get() if author_id else None
                authors[author_id] = doc.to_dict() if doc is not None and doc.exists else None
            author = authors[author_id]

            post = dict(post)
            post['user_name'] = author.get('full_name') if author else (post.get('user_name') or UNKNOWN_USER_NAME)
            post['user_avatar'] = author.get('avatar') if author else post.get('user_avatar')
            post['user_bio'] = author.get('bio') if author else None
            if post.get('group_id'):
                post['post_source'] = POST_SOURCE_GROUP
                post['group_name'] = group_names.get(post['group_id']) or UNKNOWN_GROUP_NAME
            else:
                post['post_source'] = POST_SOURCE_PERSONAL
            enriched.append(post)
        return enriched

    def get_feed(self, user_id: str, feed_type: str = FEED_PERSONALIZED, limit: int = 50) -> List[Dict[str, Any]]:
        """
        피드 유형에 맞는 게시물을 최신순으로 반환합니다.
        :raises ValueError: 사용자가 존재하지 않는 경우
        """
        user = self._require_user(user_id)
        following = list(user.get('following') or [])
        groups = self.group_service.get_user_groups(user_id)
        group_names = {g['group_id']: g.get('name') for g in groups}

        posts: List[Dict[str, Any]] = []
        if feed_type in (FEED_PERSONALIZED, FEED_FOLLOWING):
            posts.extend(self._following_posts(following))
        if feed_type in (FEED_PERSONALIZED, FEED_GROUPS):
            posts.extend(self._group_posts(list(group_names)))

        enriched = self._enrich(posts, group_names)
        enriched.sort(key=lambda p: DateTimeUtils.coerce_datetime(p.get('created_at')) or EPOCH_MIN, reverse=True)
        logging.info(f"피드 구성 완료 (user_id: {user_id}, type: {feed_type}, posts: {len(enriched[:limit])})")
        return enriched[:limit]

    def get_stats(self, user_id: str) -> Dict[str, int]:
        """피드 구성 요소별 게시물 수를 집계합니다."""
        user = self._require_user(user_id)
        following = list(user.get('following') or [])
        group_ids = [g['group_id'] for g in self.group_service.get_user_groups(user_id)]

        following_posts_count = len(self._following_posts(following))
        group_posts_count = len(self._group_posts(group_ids))
        own_posts_count = sum(1 for _ in self.recipes_ref.where('user_id', '==', user_id).stream())
        return {
            'following_count': len(following),
            'groups_count': len(group_ids),
            'following_posts_count': following_posts_count,
            'group_posts_count': group_posts_count,
            'own_posts_count': own_posts_count,
            'total_feed_posts': following_posts_count + group_posts_count + own_posts_count,
        }
