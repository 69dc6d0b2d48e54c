# flavorworld/api/groups/services.py
import logging
import uuid
from dataclasses import asdict
from firebase_admin import firestore
from typing import Optional, Dict, Any, List

from flavorworld.api.recipes.services import RecipeService
from flavorworld.core.errors import ConflictError
from flavorworld.models.group import Group, GroupRole, GroupSettings
from flavorworld.models.notification import NotificationType
from flavorworld.services.notification_service import NotificationService
from flavorworld.utils.datetime_utils import DateTimeUtils, EPOCH_MIN

class GroupService:
    """
    요리 그룹(커뮤니티) 관련 비즈니스 로직을 담당하는 서비스 클래스.
    - 그룹 게시물은 'recipes' 컬렉션에 group_id와 함께 저장되므로 RecipeService를 주입받아 사용합니다.
    - 비공개 그룹 또는 승인이 필요한 그룹의 가입은 관리자 승인 대기 상태가 됩니다.
    """
    def __init__(self, notification_service: NotificationService, recipe_service: RecipeService, db=None):
        self.db = db or firestore.client()
        self.groups_ref = self.db.collection('groups')
        self.recipes_ref = self.db.collection('recipes')
        self.notification_service = notification_service
        self.recipe_service = recipe_service

    # --- 내부 헬퍼 ---
    def _require_group(self, group_id: str) -> Dict[str, Any]:
        doc = self.groups_ref.document(group_id).get()
        if not doc.exists:
            raise ValueError("그룹을 찾을 수 없습니다.")
        return doc.to_dict()

    @staticmethod
    def is_member(group: Dict[str, Any], user_id: str) -> bool:
        return user_id in (group.get('member_ids') or [])

    @staticmethod
    def is_admin(group: Dict[str, Any], user_id: str) -> bool:
        if group.get('creator_id') == user_id:
            return True
        return any(m.get('user_id') == user_id and m.get('role') == GroupRole.ADMIN.value
                   for m in group.get('members') or [])

    def _admin_ids(self, group: Dict[str, Any]) -> List[str]:
        admins = {m.get('user_id') for m in group.get('members') or [] if m.get('role') == GroupRole.ADMIN.value}
        admins.add(group.get('creator_id'))
        return sorted(uid for uid in admins if uid)

    def _add_member(self, group: Dict[str, Any], user_id: str, role: GroupRole = GroupRole.MEMBER) -> Dict[str, Any]:
        """멤버 목록에 사용자를 추가하고 가입 요청 목록에서 제거한 갱신 데이터를 반환합니다."""
        members = [m for m in group.get('members') or [] if m.get('user_id') != user_id]
        members.append({'user_id': user_id, 'role': role.value, 'joined_at': DateTimeUtils.now()})
        return {
            'members': members,
            'member_ids': [m['user_id'] for m in members],
            'pending_requests': [r for r in group.get('pending_requests') or [] if r.get('user_id') != user_id],
        }

    @staticmethod
    def with_counts(group: Dict[str, Any]) -> Dict[str, Any]:
        group['members_count'] = len(group.get('member_ids') or [])
        group['pending_count'] = len(group.get('pending_requests') or [])
        return group

    # --- 그룹 CRUD ---
    def create_group(self, user_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        """그룹을 생성합니다. 생성자는 자동으로 관리자 멤버가 됩니다."""
        settings = GroupSettings(**data.get('settings', {}))
        group = Group(
            group_id=str(uuid.uuid4()),
            name=data['name'].strip(),
            creator_id=user_id,
            description=data.get('description'),
            image=data.get('image'),
            is_private=data.get('is_private', False),
            category=data.get('category') or 'General',
            rules=data.get('rules'),
            settings=settings,
        )
        group_data = asdict(group)
        group_data.update(self._add_member(group_data, user_id, GroupRole.ADMIN))
        group_data = DateTimeUtils.for_firestore(group_data)

        self.groups_ref.document(group.group_id).set(group_data)
        logging.info(f"그룹 생성 완료 (group_id: {group.group_id}, creator: {user_id})")
        return self.with_counts(group_data)

    def get_group(self, group_id: str) -> Optional[Dict[str, Any]]:
        doc = self.groups_ref.document(group_id).get()
        return self.with_counts(doc.to_dict()) if doc.exists else None

    def list_groups(self, query: Optional[str] = None) -> List[Dict[str, Any]]:
        """그룹 목록을 최신순으로 조회합니다. 검색어가 있으면 이름/설명/카테고리로 필터링합니다."""
        needle = (query or '').strip().casefold()
        groups = []
        for doc in self.groups_ref.order_by('created_at', direction=firestore.Query.DESCENDING).stream():
            group = doc.to_dict()
            if needle:
                haystacks = (group.get('name'), group.get('description'), group.get('category'))
                if not any(needle in (value or '').casefold() for value in haystacks):
                    continue
            groups.append(self.with_counts(group))
        return groups

    def get_user_groups(self, user_id: str) -> List[Dict[str, Any]]:
        """사용자가 멤버로 속한 그룹 목록을 조회합니다."""
        return [doc.to_dict() for doc in self.groups_ref.where('member_ids', 'array_contains', user_id).stream()]

    # --- 가입/탈퇴 ---
    def join_group(self, group_id: str, user_id: str) -> str:
        """
        그룹 가입을 요청합니다.
        :return: 'joined' (즉시 가입) 또는 'pending' (관리자 승인 대기)
        :raises ConflictError: 이미 멤버이거나 가입 요청이 대기 중인 경우
        """
        group = self._require_group(group_id)
        if self.is_member(group, user_id):
            raise ConflictError("이미 그룹 멤버입니다.", error_code="ALREADY_MEMBER")
        if any(r.get('user_id') == user_id for r in group.get('pending_requests') or []):
            raise ConflictError("이미 가입 요청이 대기 중입니다.", error_code="REQUEST_PENDING")

        group_ref = self.groups_ref.document(group_id)
        needs_approval = group.get('is_private') or (group.get('settings') or {}).get('require_approval')
        if needs_approval:
            pending = (group.get('pending_requests') or []) + [{'user_id': user_id, 'requested_at': DateTimeUtils.now()}]
            group_ref.update({'pending_requests': pending})
            for admin_id in self._admin_ids(group):
                self.notification_service.create_notification(
                    to_user_id=admin_id, from_user_id=user_id,
                    n_type=NotificationType.GROUP_JOIN_REQUEST,
                    message=f"\"{group.get('name')}\" 그룹에 가입을 요청했습니다.",
                    group_id=group_id, group_name=group.get('name')
                )
            logging.info(f"그룹 가입 요청 등록 (group_id: {group_id}, user_id: {user_id})")
            return 'pending'

        group_ref.update(self._add_member(group, user_id))
        logging.info(f"그룹 가입 완료 (group_id: {group_id}, user_id: {user_id})")
        return 'joined'

    def respond_to_request(self, group_id: str, admin_id: str, target_user_id: str, action: str) -> Dict[str, Any]:
        """
        관리자가 가입 요청을 승인(approve)하거나 거절(reject)합니다.
        :raises PermissionError: 요청자가 그룹 관리자가 아닌 경우
        :raises ValueError: 그룹 또는 가입 요청이 없는 경우
        """
        group = self._require_group(group_id)
        if not self.is_admin(group, admin_id):
            raise PermissionError("가입 요청을 처리할 권한이 없습니다.")
        if not any(r.get('user_id') == target_user_id for r in group.get('pending_requests') or []):
            raise ValueError("가입 요청을 찾을 수 없습니다.")

        group_ref = self.groups_ref.document(group_id)
        if action == 'approve':
            group_ref.update(self._add_member(group, target_user_id))
            self.notification_service.create_notification(
                to_user_id=target_user_id, from_user_id=admin_id,
                n_type=NotificationType.GROUP_REQUEST_APPROVED,
                message=f"\"{group.get('name')}\" 그룹 가입 요청이 승인되었습니다.",
                group_id=group_id, group_name=group.get('name')
            )
        else:
            pending = [r for r in group.get('pending_requests') or [] if r.get('user_id') != target_user_id]
            group_ref.update({'pending_requests': pending})
        logging.info(f"가입 요청 처리 완료 (group_id: {group_id}, user_id: {target_user_id}, action: {action})")
        return self.with_counts(group_ref.get().to_dict())

    def leave_group(self, group_id: str, user_id: str) -> None:
        group = self._require_group(group_id)
        if group.get('creator_id') == user_id:
            raise ConflictError("그룹 생성자는 그룹을 떠날 수 없습니다.", error_code="CREATOR_CANNOT_LEAVE")
        if not self.is_member(group, user_id):
            raise ConflictError("그룹 멤버가 아닙니다.", error_code="NOT_MEMBER")

        members = [m for m in group.get('members') or [] if m.get('user_id') != user_id]
        self.groups_ref.document(group_id).update({
            'members': members,
            'member_ids': [m['user_id'] for m in members],
        })
        logging.info(f"그룹 탈퇴 완료 (group_id: {group_id}, user_id: {user_id})")

    # --- 그룹 게시물 ---
    def create_group_post(self, group_id: str, user_id: str, data: Dict[str, Any],
                          media: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """
        그룹에 레시피를 게시합니다.
        승인이 필요한 그룹에서 관리자가 아닌 멤버의 게시물은 승인 대기(is_approved=False) 상태로 저장됩니다.
        """
        group = self._require_group(group_id)
        if not self.is_member(group, user_id):
            raise PermissionError("그룹 멤버만 게시할 수 있습니다.")

        settings = group.get('settings') or {}
        is_admin = self.is_admin(group, user_id)
        if not settings.get('allow_member_posts', True) and not is_admin:
            raise PermissionError("이 그룹은 관리자만 게시할 수 있습니다.")

        is_approved = is_admin or not settings.get('require_approval', False)
        recipe = self.recipe_service.create_recipe(user_id, data, media, group_id=group_id, is_approved=is_approved)

        for admin_id in self._admin_ids(group):
            self.notification_service.create_notification(
                to_user_id=admin_id, from_user_id=user_id,
                n_type=NotificationType.GROUP_POST,
                message=f"\"{group.get('name')}\" 그룹에 새 레시피를 게시했습니다.",
                recipe_id=recipe['recipe_id'], group_id=group_id, group_name=group.get('name')
            )
        return recipe

    def get_group_posts(self, group_id: str, user_id: Optional[str] = None) -> List[Dict[str, Any]]:
        """
        그룹 게시물을 최신순으로 조회합니다.
        비공개 그룹은 멤버만 조회할 수 있고, 승인 대기 게시물은 관리자에게만 보입니다.
        """
        group = self._require_group(group_id)
        if group.get('is_private') and not self.is_member(group, user_id):
            raise PermissionError("비공개 그룹의 게시물은 멤버만 볼 수 있습니다.")

        show_pending = bool(user_id) and self.is_admin(group, user_id)
        posts = [doc.to_dict() for doc in self.recipes_ref.where('group_id', '==', group_id).stream()]
        posts = [p for p in posts if show_pending or p.get('is_approved', True)]
        posts.sort(key=lambda p: DateTimeUtils.coerce_datetime(p.get('created_at')) or EPOCH_MIN, reverse=True)
        return posts
