# flavorworld/client/api.py
"""
FlavorWorld REST API 클라이언트

모든 메서드는 예외를 던지지 않고 ApiResult를 반환합니다.
- 네트워크 오류는 자동으로 재시도하지 않으며, 재시도를 안내하는 메시지를 담아 반환합니다.
- 좋아요/댓글 변경이 성공하면 서버가 돌려준 likes/comments 목록이 새로운 기준 상태가 됩니다.
"""

import logging
import os
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

import requests

from flavorworld.feed.constants import FEED_PERSONALIZED

logger = logging.getLogger(__name__)

DEFAULT_API_URL = 'http://127.0.0.1:5000/api'
DEFAULT_TIMEOUT = 10.0
NETWORK_ERROR_MESSAGE = "네트워크 연결을 확인한 뒤 다시 시도해 주세요."


class ErrorKind(Enum):
    """실패한 요청의 분류"""
    NETWORK = 'network'
    VALIDATION = 'validation'
    PERMISSION = 'permission'
    NOT_FOUND = 'not_found'
    SERVER = 'server'


@dataclass
class ApiResult:
    success: bool
    data: Any = None
    message: Optional[str] = None
    error: Optional[ErrorKind] = None

    @classmethod
    def ok(cls, data: Any = None, message: Optional[str] = None) -> 'ApiResult':
        return cls(success=True, data=data, message=message)

    @classmethod
    def fail(cls, error: ErrorKind, message: str, data: Any = None) -> 'ApiResult':
        return cls(success=False, data=data, message=message, error=error)


def _error_kind_for_status(status_code: int) -> ErrorKind:
    if status_code in (401, 403):
        return ErrorKind.PERMISSION
    if status_code == 404:
        return ErrorKind.NOT_FOUND
    if status_code >= 500:
        return ErrorKind.SERVER
    return ErrorKind.VALIDATION


class FlavorWorldAPI:
    """
    서버 API를 호출하는 얇은 클라이언트.
    base_url과 timeout은 인자로 주지 않으면 FLAVORWORLD_API_URL / FLAVORWORLD_API_TIMEOUT 환경 변수를 사용합니다.
    """

    def __init__(self, base_url: Optional[str] = None, timeout: Optional[float] = None,
                 session: Optional[requests.Session] = None):
        self.base_url = (base_url or os.getenv('FLAVORWORLD_API_URL', DEFAULT_API_URL)).rstrip('/')
        self.timeout = timeout if timeout is not None else float(os.getenv('FLAVORWORLD_API_TIMEOUT', DEFAULT_TIMEOUT))
        self.session = session or requests.Session()
        self.session.headers.update({'Accept': 'application/json'})
        self.access_token: Optional[str] = None
        self.refresh_token: Optional[str] = None
        self.user_id: Optional[str] = None

    # --- 내부 헬퍼 ---
    def set_token(self, access_token: Optional[str]) -> None:
        self.access_token = access_token
        if access_token:
            self.session.headers['Authorization'] = f'Bearer {access_token}'
        else:
            self.session.headers.pop('Authorization', None)

    def _request(self, method: str, path: str, **kwargs) -> ApiResult:
        url = f'{self.base_url}{path}'
        try:
            response = self.session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.RequestException as e:
            logger.warning(f"{method} {path} 요청 실패 (네트워크): {e}")
            return ApiResult.fail(ErrorKind.NETWORK, NETWORK_ERROR_MESSAGE)

        try:
            body = response.json() if response.content else None
        except ValueError:
            body = None

        if response.ok:
            return ApiResult.ok(body)

        message = None
        if isinstance(body, dict):
            message = body.get('message') or (str(body['details']) if body.get('details') else None)
        kind = _error_kind_for_status(response.status_code)
        logger.warning(f"{method} {path} 요청 실패: {response.status_code} {message}")
        return ApiResult.fail(kind, message or f"요청이 실패했습니다. (HTTP {response.status_code})", data=body)

    # --- 인증 ---
    def login(self, email: str, password: str) -> ApiResult:
        result = self._request('POST', '/auth/login', json={'email': email, 'password': password})
        if result.success:
            self.set_token(result.data.get('access_token'))
            self.refresh_token = result.data.get('refresh_token')
            self.user_id = result.data.get('user_id')
        return result

    # --- 피드 원본 ---
    def get_feed(self, user_id: str) -> ApiResult:
        return self._request('GET', '/feed', params={'userId': user_id, 'type': FEED_PERSONALIZED})

    def get_following_posts(self, user_id: str) -> ApiResult:
        return self._request('GET', '/feed/following', params={'userId': user_id})

    def get_all_posts(self) -> ApiResult:
        return self._request('GET', '/recipes')

    # --- 좋아요/댓글 ---
    def like_post(self, post_id: str) -> ApiResult:
        return self._request('POST', f'/recipes/{post_id}/like')

    def unlike_post(self, post_id: str) -> ApiResult:
        return self._request('DELETE', f'/recipes/{post_id}/like')

    def add_comment(self, post_id: str, text: str) -> ApiResult:
        text = (text or '').strip()
        if not text:
            return ApiResult.fail(ErrorKind.VALIDATION, "댓글 내용을 입력해 주세요.")
        return self._request('POST', f'/recipes/{post_id}/comments', json={'text': text})

    def delete_comment(self, post_id: str, comment_id: str) -> ApiResult:
        return self._request('DELETE', f'/recipes/{post_id}/comments/{comment_id}')
