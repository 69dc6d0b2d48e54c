# flavorworld/api/users/services.py
import logging
from typing import Optional, Dict, Any, List
from firebase_admin import firestore

from flavorworld.api.recipes.services import RecipeService
from flavorworld.core.errors import ConflictError
from flavorworld.models.notification import NotificationType
from flavorworld.services.notification_service import NotificationService

SEARCH_RESULT_LIMIT = 20

class UserService:
    """
    사용자 프로필과 팔로우 관계를 담당하는 서비스 클래스.
    - 팔로우 관계는 양쪽 사용자 문서의 followers/following 배열에 함께 기록합니다.
    - NotificationService와 RecipeService는 의존성 주입을 통해 받습니다.
    """
    def __init__(self, notification_service: NotificationService, recipe_service: RecipeService, db=None):
        self.db = db or firestore.client()
        self.users_ref = self.db.collection('users')
        self.notification_service = notification_service
        self.recipe_service = recipe_service

    def get_user_by_id(self, user_id: str) -> Optional[Dict[str, Any]]:
        """
        사용자 ID로 Firestore에서 사용자 문서를 찾아 딕셔너리로 반환합니다.
        :return: 사용자 데이터 딕셔너리 또는 None
        """
        if not user_id:
            return None
        doc = self.users_ref.document(user_id).get()
        return doc.to_dict() if doc.exists else None

    def _require_user(self, user_id: str) -> Dict[str, Any]:
        user = self.get_user_by_id(user_id)
        if not user:
            raise ValueError("사용자를 찾을 수 없습니다.")
        return user

    def get_user_profile(self, user_id: str) -> Optional[Dict[str, Any]]:
        """
        사용자 ID로 공개 프로필 정보와 팔로워/팔로잉/레시피 수를 함께 조회합니다.
        :return: 프로필 딕셔너리 또는 None
        """
        user_data = self.get_user_by_id(user_id)
        if not user_data:
            return None

        user_data['followers_count'] = len(user_data.get('followers') or [])
        user_data['following_count'] = len(user_data.get('following') or [])
        user_data['recipes_count'] = self.recipe_service.count_recipes_by_user(user_id)
        return user_data

    def update_user_profile(self, user_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        """이름, 소개, 아바타 중 전달된 항목만 수정합니다."""
        self._require_user(user_id)
        update_data = {k: v for k, v in data.items() if k in ('full_name', 'bio', 'avatar')}
        if update_data:
            self.users_ref.document(user_id).update(update_data)
            logging.info(f"프로필 수정 완료 (user_id: {user_id}, fields: {sorted(update_data)})")
        return self.get_user_profile(user_id)

    def delete_user(self, user_id: str) -> None:
        """
        사용자 문서를 삭제하고 다른 사용자들의 followers/following 배열에서 해당 ID를 제거합니다.
        작성한 레시피는 삭제하지 않습니다.
        :raises ValueError: 사용자가 존재하지 않는 경우
        """
        user = self._require_user(user_id)
        for field, other_ids in (('following', user.get('followers') or []),
                                 ('followers', user.get('following') or [])):
            for other_id in other_ids:
                other = self.get_user_by_id(other_id)
                if other and user_id in (other.get(field) or []):
                    self.users_ref.document(other_id).update(
                        {field: [uid for uid in other.get(field) if uid != user_id]})
        self.users_ref.document(user_id).delete()
        logging.info(f"계정 삭제 완료 (user_id: {user_id})")

    # --- 팔로우 ---
    def follow_user(self, user_id: str, target_id: str) -> Dict[str, int]:
        """
        target_id 사용자를 팔로우합니다.
        :raises ConflictError: 자기 자신을 팔로우하거나 이미 팔로우 중인 경우
        :raises ValueError: 사용자가 존재하지 않는 경우
        """
        if user_id == target_id:
            raise ConflictError("자기 자신을 팔로우할 수 없습니다.", error_code="CANNOT_FOLLOW_SELF")

        follower = self._require_user(user_id)
        target = self._require_user(target_id)
        if target_id in (follower.get('following') or []):
            raise ConflictError("이미 팔로우 중인 사용자입니다.", error_code="ALREADY_FOLLOWING")

        following = (follower.get('following') or []) + [target_id]
        followers = [uid for uid in (target.get('followers') or []) if uid != user_id] + [user_id]
        self.users_ref.document(user_id).update({'following': following})
        self.users_ref.document(target_id).update({'followers': followers})

        self.notification_service.create_notification(
            to_user_id=target_id, from_user_id=user_id,
            n_type=NotificationType.FOLLOW, message="회원님을 팔로우하기 시작했습니다."
        )
        logging.info(f"팔로우 완료: {user_id} -> {target_id}")
        return {'followers_count': len(followers), 'following_count': len(following)}

    def unfollow_user(self, user_id: str, target_id: str) -> Dict[str, int]:
        follower = self._require_user(user_id)
        target = self._require_user(target_id)
        if target_id not in (follower.get('following') or []):
            raise ConflictError("팔로우하지 않은 사용자입니다.", error_code="NOT_FOLLOWING")

        following = [uid for uid in follower.get('following') if uid != target_id]
        followers = [uid for uid in (target.get('followers') or []) if uid != user_id]
        self.users_ref.document(user_id).update({'following': following})
        self.users_ref.document(target_id).update({'followers': followers})
        logging.info(f"언팔로우 완료: {user_id} -> {target_id}")
        return {'followers_count': len(followers), 'following_count': len(following)}

    def _get_users(self, user_ids: List[str]) -> List[Dict[str, Any]]:
        users = []
        for uid in user_ids:
            user = self.get_user_by_id(uid)
            if user:
                users.append(user)
        return users

    def get_followers(self, user_id: str) -> List[Dict[str, Any]]:
        return self._get_users(self._require_user(user_id).get('followers') or [])

    def get_following(self, user_id: str) -> List[Dict[str, Any]]:
        return self._get_users(self._require_user(user_id).get('following') or [])

    def search_users(self, query: str, exclude_user_id: Optional[str] = None) -> List[Dict[str, Any]]:
        """이름 또는 이메일에 검색어가 포함된 사용자를 찾습니다. (대소문자 구분 없음)"""
        needle = (query or '').strip().casefold()
        if not needle:
            return []

        results = []
        for doc in self.users_ref.stream():
            user = doc.to_dict()
            if user.get('user_id') == exclude_user_id:
                continue
            haystacks = (user.get('full_name') or '', user.get('email') or '')
            if any(needle in value.casefold() for value in haystacks):
                results.append(user)
                if len(results) >= SEARCH_RESULT_LIMIT:
                    break
        return results
