# flavorworld/api/recipes/services.py
import logging
import uuid
from dataclasses import asdict
from firebase_admin import firestore
from typing import Optional, Dict, Any, List

from flavorworld.core.errors import ConflictError
from flavorworld.feed.mutations import add_like, remove_like, append_comment, remove_comment
from flavorworld.models.notification import NotificationType
from flavorworld.models.recipe import Recipe, Comment
from flavorworld.services.notification_service import NotificationService
from flavorworld.utils.datetime_utils import DateTimeUtils

EDITABLE_FIELDS = ('title', 'description', 'ingredients', 'instructions', 'category', 'meat_type', 'prep_time', 'servings')
TEXT_FIELDS = ('title', 'description', 'ingredients', 'instructions')

class RecipeService:
    """
    레시피(게시물) 관련 비즈니스 로직을 담당하는 서비스 클래스.
    - 레시피 CRUD, 좋아요, 댓글, 저장(북마크) 로직을 포함합니다.
    - 좋아요와 댓글은 레시피 문서 내부 배열로 관리하며, 한 번에 하나의 문서만 갱신합니다.
    """
    def __init__(self, notification_service: NotificationService, db=None):
        self.db = db or firestore.client()
        self.recipes_ref = self.db.collection('recipes')
        self.users_ref = self.db.collection('users')
        self.groups_ref = self.db.collection('groups')
        self.notification_service = notification_service

    # --- 내부 헬퍼 ---
    def _get_recipe_doc(self, recipe_id: str) -> Dict[str, Any]:
        doc = self.recipes_ref.document(recipe_id).get()
        if not doc.exists:
            raise ValueError("레시피를 찾을 수 없습니다.")
        return doc.to_dict()

    def _get_user(self, user_id: str) -> Dict[str, Any]:
        doc = self.users_ref.document(user_id).get()
        if not doc.exists:
            raise ValueError("사용자를 찾을 수 없습니다.")
        return doc.to_dict()

    def _is_group_admin(self, group_id: Optional[str], user_id: str) -> bool:
        if not group_id:
            return False
        group_doc = self.groups_ref.document(group_id).get()
        if not group_doc.exists:
            return False
        group = group_doc.to_dict()
        if group.get('creator_id') == user_id:
            return True
        return any(m.get('user_id') == user_id and m.get('role') == 'admin' for m in group.get('members', []))

    # --- CRUD ---
    def create_recipe(self, user_id: str, data: Dict[str, Any], media: Optional[Dict[str, Any]] = None,
                      group_id: Optional[str] = None, is_approved: bool = True) -> Dict[str, Any]:
        """새로운 레시피를 생성하고 Firestore에 저장합니다."""
        author = self._get_user(user_id)

        recipe = Recipe(
            recipe_id=str(uuid.uuid4()),
            title=data['title'].strip(),
            description=data['description'].strip(),
            ingredients=data['ingredients'].strip(),
            instructions=data['instructions'].strip(),
            category=data['category'],
            meat_type=data['meat_type'],
            prep_time=data['prep_time'],
            servings=data['servings'],
            user_id=user_id,
            user_name=author.get('full_name'),
            user_avatar=author.get('avatar'),
            group_id=group_id,
            is_approved=is_approved,
        )
        if media:
            recipe.image = media.get('image')
            recipe.video = media.get('video')
            recipe.media_type = media.get('media_type', 'none')

        recipe_data = DateTimeUtils.for_firestore(asdict(recipe))
        self.recipes_ref.document(recipe.recipe_id).set(recipe_data)
        logging.info(f"레시피 생성 완료 (recipe_id: {recipe.recipe_id}, user_id: {user_id})")
        return recipe_data

    def get_recipe(self, recipe_id: str) -> Optional[Dict[str, Any]]:
        doc = self.recipes_ref.document(recipe_id).get()
        return doc.to_dict() if doc.exists else None

    def get_all_recipes(self) -> List[Dict[str, Any]]:
        """전체 개인 레시피를 최신순으로 조회합니다. (그룹 게시물 제외)"""
        query = self.recipes_ref.order_by('created_at', direction=firestore.Query.DESCENDING)
        return [doc.to_dict() for doc in query.stream() if not doc.to_dict().get('group_id')]

    def update_recipe(self, recipe_id: str, user_id: str, data: Dict[str, Any],
                      media: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """레시피 내용을 수정합니다. (작성자 본인만 가능, 전달된 필드만 갱신)"""
        recipe = self._get_recipe_doc(recipe_id)
        if recipe.get('user_id') != user_id:
            raise PermissionError("레시피를 수정할 권한이 없습니다.")

        update_data = {}
        for name in EDITABLE_FIELDS:
            if name in data and data[name] is not None:
                value = data[name]
                update_data[name] = value.strip() if name in TEXT_FIELDS else value
        if media:
            update_data.update(media)
        update_data['updated_at'] = DateTimeUtils.now()

        recipe_ref = self.recipes_ref.document(recipe_id)
        recipe_ref.update(update_data)
        logging.info(f"레시피 수정 완료 (recipe_id: {recipe_id})")
        return recipe_ref.get().to_dict()

    def delete_recipe(self, recipe_id: str, user_id: str) -> None:
        """레시피를 삭제합니다. 작성자 본인 또는 (그룹 게시물인 경우) 그룹 관리자만 가능합니다."""
        recipe = self._get_recipe_doc(recipe_id)
        if recipe.get('user_id') != user_id and not self._is_group_admin(recipe.get('group_id'), user_id):
            raise PermissionError("레시피를 삭제할 권한이 없습니다.")
        self.recipes_ref.document(recipe_id).delete()
        logging.info(f"레시피 삭제 완료 (recipe_id: {recipe_id}, by: {user_id})")

    def count_recipes_by_user(self, user_id: str) -> int:
        try:
            return sum(1 for _ in self.recipes_ref.where('user_id', '==', user_id).stream())
        except Exception as e:
            logging.error(f"사용자 레시피 수 집계 실패 (user_id: {user_id}): {e}", exc_info=True)
            return 0

    # --- 좋아요 ---
    def like_recipe(self, recipe_id: str, user_id: str) -> List[str]:
        """
        레시피에 좋아요를 추가하고 갱신된 좋아요 목록을 반환합니다.
        작성자가 아닌 사용자의 좋아요인 경우 작성자에게 알림을 생성합니다.
        """
        recipe = self._get_recipe_doc(recipe_id)
        likes = recipe.get('likes') or []
        if user_id in likes:
            raise ConflictError("이미 좋아요한 레시피입니다.", error_code="ALREADY_LIKED")

        new_likes = add_like(likes, user_id)
        self.recipes_ref.document(recipe_id).update({'likes': new_likes})

        self.notification_service.create_notification(
            to_user_id=recipe.get('user_id'), from_user_id=user_id,
            n_type=NotificationType.LIKE, message=f"회원님의 레시피 \"{recipe.get('title')}\"을(를) 좋아합니다.",
            recipe_id=recipe_id
        )
        return new_likes

    def unlike_recipe(self, recipe_id: str, user_id: str) -> List[str]:
        """좋아요를 취소합니다. 취소에 대해서는 알림을 만들지 않습니다."""
        recipe = self._get_recipe_doc(recipe_id)
        likes = recipe.get('likes') or []
        if user_id not in likes:
            raise ConflictError("좋아요하지 않은 레시피입니다.", error_code="NOT_LIKED")

        new_likes = remove_like(likes, user_id)
        self.recipes_ref.document(recipe_id).update({'likes': new_likes})
        return new_likes

    # --- 댓글 ---
    def add_comment(self, recipe_id: str, user_id: str, text: str) -> Dict[str, Any]:
        """
        댓글을 레시피의 댓글 배열 맨 뒤에 추가합니다.
        :return: {'comment': 새 댓글, 'comments': 갱신된 전체 댓글 목록}
        """
        text = (text or '').strip()
        if not text:
            raise ValueError("댓글 내용이 비어 있습니다.")

        recipe = self._get_recipe_doc(recipe_id)
        author = self._get_user(user_id)

        comment = DateTimeUtils.for_firestore(asdict(Comment(
            comment_id=str(uuid.uuid4()),
            user_id=user_id,
            user_name=author.get('full_name'),
            user_avatar=author.get('avatar'),
            text=text,
        )))
        new_comments = append_comment(recipe.get('comments'), comment)
        self.recipes_ref.document(recipe_id).update({'comments': new_comments})

        self.notification_service.create_notification(
            to_user_id=recipe.get('user_id'), from_user_id=user_id,
            n_type=NotificationType.COMMENT, message=f"회원님의 레시피에 댓글을 남겼습니다: {text[:50]}",
            recipe_id=recipe_id, comment_id=comment['comment_id']
        )
        return {'comment': comment, 'comments': new_comments}

    def delete_comment(self, recipe_id: str, comment_id: str, user_id: str) -> List[Dict[str, Any]]:
        """
        작성자 본인의 댓글을 삭제하고 남은 댓글 목록을 반환합니다.
        :raises ValueError: 레시피나 댓글이 없는 경우
        :raises PermissionError: 댓글 작성자가 아닌 경우
        """
        recipe = self._get_recipe_doc(recipe_id)
        new_comments = remove_comment(recipe.get('comments') or [], comment_id, user_id)
        self.recipes_ref.document(recipe_id).update({'comments': new_comments})
        logging.info(f"댓글 삭제 완료 (recipe_id: {recipe_id}, comment_id: {comment_id})")
        return new_comments

    # --- 저장(북마크) ---
    def save_recipe(self, recipe_id: str, user_id: str) -> None:
        self._get_recipe_doc(recipe_id)
        user = self._get_user(user_id)
        saved = user.get('saved_recipes') or []
        if any(item.get('recipe_id') == recipe_id for item in saved):
            raise ConflictError("이미 저장한 레시피입니다.", error_code="ALREADY_SAVED")
        saved = saved + [{'recipe_id': recipe_id, 'saved_at': DateTimeUtils.now()}]
        self.users_ref.document(user_id).update({'saved_recipes': saved})

    def unsave_recipe(self, recipe_id: str, user_id: str) -> None:
        user = self._get_user(user_id)
        saved = [item for item in (user.get('saved_recipes') or []) if item.get('recipe_id') != recipe_id]
        self.users_ref.document(user_id).update({'saved_recipes': saved})

    def get_saved_recipes(self, user_id: str) -> List[Dict[str, Any]]:
        """저장한 레시피를 최근 저장한 순서로 반환합니다. 삭제된 레시피는 건너뜁니다."""
        user = self._get_user(user_id)
        saved = sorted(user.get('saved_recipes') or [],
                       key=lambda item: DateTimeUtils.coerce_datetime(item.get('saved_at')) or DateTimeUtils.now(),
                       reverse=True)
        recipes = []
        for item in saved:
            recipe = self.get_recipe(item['recipe_id'])
            if recipe:
                recipe['saved_at'] = item.get('saved_at')
                recipes.append(recipe)
        return recipes
