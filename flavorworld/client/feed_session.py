# flavorworld/client/feed_session.py
"""
홈 화면 피드 상태 관리

FeedSession은 한 사용자의 피드 화면 상태(원본 게시물, 선택된 필터, 진행 중인 좋아요 요청)를 보관합니다.
- 조회 요청마다 버전 티켓을 발급하고, 응답 도착 시점에 티켓이 최신이 아니면 결과를 버립니다.
- 필터/정렬 변경은 네트워크 요청 없이 캐시된 원본에서 화면 목록을 다시 계산합니다.
- 좋아요는 게시물당 하나의 요청만 허용하며, 낙관적 갱신 후 서버 응답으로 확정하거나 되돌립니다.
"""

import logging
import threading
from dataclasses import replace
from typing import Callable, List, Optional

from flavorworld.client.api import ApiResult, ErrorKind, FlavorWorldAPI
from flavorworld.feed import FeedPost, FeedQuery, apply_filters_and_sort, normalize_posts, select_source
from flavorworld.feed.constants import FEED_MODES
from flavorworld.feed.mutations import toggle_like

logger = logging.getLogger(__name__)

FILTER_FIELDS = ('category', 'meat_type', 'cooking_time', 'sort_by')


class FeedSession:

    def __init__(self, api: FlavorWorldAPI, user_id: Optional[str] = None, query: Optional[FeedQuery] = None):
        self.api = api
        self.user_id = user_id
        self.query = query or FeedQuery()
        self.last_error: Optional[ApiResult] = None
        self._lock = threading.Lock()
        self._version = 0
        self._raw_posts: List[FeedPost] = []
        self._pending_likes = set()

    # --- 조회 ---
    @property
    def posts(self) -> List[FeedPost]:
        """현재 쿼리를 적용한 화면 표시용 목록"""
        with self._lock:
            raw_posts = list(self._raw_posts)
            query = self.query
        return apply_filters_and_sort(raw_posts, query)

    def begin_fetch(self) -> int:
        """새 조회 티켓을 발급합니다. 이전에 발급된 티켓은 모두 무효가 됩니다."""
        with self._lock:
            self._version += 1
            return self._version

    def cancel(self) -> None:
        """진행 중인 조회의 결과를 무시하도록 버전을 올립니다."""
        with self._lock:
            self._version += 1

    def complete_fetch(self, ticket: int, result: ApiResult) -> bool:
        """
        조회 결과를 반영합니다.
        :return: 결과가 반영되었으면 True, 이미 무효화된 티켓이면 False
        """
        with self._lock:
            if ticket != self._version:
                logger.debug(f"오래된 피드 응답을 버립니다 (ticket: {ticket}, current: {self._version})")
                return False
            if result.success:
                self._raw_posts = normalize_posts(result.data)
                self.last_error = None
            else:
                self.last_error = result
            return True

    def refresh(self) -> List[FeedPost]:
        """현재 피드 모드의 원본을 다시 조회하고 화면 목록을 반환합니다."""
        # 모드 선택과 티켓 발급은 한 번에 처리해야 이후의 set_mode()가 이 조회를 무효화할 수 있음
        with self._lock:
            fetch: Optional[Callable[[], ApiResult]] = select_source(self.query.feed_mode, self.user_id, self.api)
            self._version += 1
            ticket = self._version
        if fetch is None:
            self.complete_fetch(ticket, ApiResult.ok([]))
            return self.posts

        self.complete_fetch(ticket, fetch())
        return self.posts

    def set_mode(self, feed_mode: str) -> List[FeedPost]:
        """피드 모드를 바꾸고 새 원본을 조회합니다. 진행 중이던 이전 모드의 응답은 버려집니다."""
        if feed_mode not in FEED_MODES:
            raise ValueError(f"알 수 없는 피드 모드입니다: {feed_mode}")
        with self._lock:
            self.query = replace(self.query, feed_mode=feed_mode)
            self._raw_posts = []
            self._version += 1
        return self.refresh()

    def set_filters(self, **changes) -> List[FeedPost]:
        """카테고리/고기 종류/조리 시간/정렬을 바꾸고 캐시된 원본에서 목록을 다시 계산합니다."""
        unknown = set(changes) - set(FILTER_FIELDS)
        if unknown:
            raise ValueError(f"알 수 없는 필터 항목입니다: {sorted(unknown)}")
        with self._lock:
            self.query = replace(self.query, **changes)
        return self.posts

    def clear_filters(self) -> List[FeedPost]:
        with self._lock:
            self.query = self.query.cleared()
        return self.posts

    def _find_post(self, post_id: str) -> Optional[FeedPost]:
        return next((p for p in self._raw_posts if p.post_id == post_id), None)

    # --- 좋아요 ---
    def toggle_like(self, post_id: str) -> ApiResult:
        """
        좋아요를 토글합니다.
        1. 게시물의 likes를 즉시 변경 (낙관적 갱신)
        2. 서버 요청
        3. 응답에 서버의 likes가 있으면 성공/실패와 관계없이 그 값으로 교체
           (예: 다른 기기에서 이미 좋아요한 경우의 ALREADY_LIKED), 없이 실패하면 요청 전 값으로 복원
        같은 게시물에 대한 요청이 진행 중이면 새 토글은 거부됩니다.
        """
        if not self.user_id:
            return ApiResult.fail(ErrorKind.VALIDATION, "로그인이 필요합니다.")

        with self._lock:
            if post_id in self._pending_likes:
                return ApiResult.fail(ErrorKind.VALIDATION, "이전 요청을 처리하는 중입니다.")
            post = self._find_post(post_id)
            if post is None:
                return ApiResult.fail(ErrorKind.NOT_FOUND, "게시물을 찾을 수 없습니다.")
            previous_likes = list(post.likes)
            post.likes, liked = toggle_like(previous_likes, self.user_id)
            self._pending_likes.add(post_id)

        try:
            result = self.api.like_post(post_id) if liked else self.api.unlike_post(post_id)
        finally:
            with self._lock:
                self._pending_likes.discard(post_id)

        server_likes = result.data.get('likes') if isinstance(result.data, dict) else None
        with self._lock:
            post = self._find_post(post_id)
            if post is not None:
                if isinstance(server_likes, list):
                    post.likes = list(server_likes)
                elif not result.success:
                    post.likes = previous_likes
        if not result.success:
            logger.warning(f"좋아요 요청 실패 (post_id: {post_id}, error: {result.error})")
        return result

    def is_like_pending(self, post_id: str) -> bool:
        with self._lock:
            return post_id in self._pending_likes

    # --- 댓글 ---
    def add_comment(self, post_id: str, text: str) -> ApiResult:
        """댓글을 작성하고 성공 시 서버의 전체 댓글 목록을 반영합니다. 빈 댓글은 요청 없이 거부됩니다."""
        if not (text or '').strip():
            return ApiResult.fail(ErrorKind.VALIDATION, "댓글 내용을 입력해 주세요.")

        result = self.api.add_comment(post_id, text)
        if result.success and isinstance(result.data, dict):
            self._adopt_comments(post_id, result.data.get('comments'))
        return result

    def delete_comment(self, post_id: str, comment_id: str) -> ApiResult:
        """
        댓글을 삭제합니다.
        서버에 이미 없는 댓글(not_found)은 로컬 목록에서도 제거하고 결과는 그대로 반환합니다.
        """
        result = self.api.delete_comment(post_id, comment_id)
        if result.success and isinstance(result.data, dict):
            self._adopt_comments(post_id, result.data.get('comments'))
        elif result.error == ErrorKind.NOT_FOUND:
            with self._lock:
                post = self._find_post(post_id)
                if post is not None:
                    post.comments = [c for c in post.comments if c.get('comment_id') != comment_id]
        return result

    def _adopt_comments(self, post_id: str, comments) -> None:
        if not isinstance(comments, list):
            return
        with self._lock:
            post = self._find_post(post_id)
            if post is not None:
                post.comments = [dict(c) for c in comments if isinstance(c, dict)]
