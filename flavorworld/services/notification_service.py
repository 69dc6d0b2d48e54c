# flavorworld/services/notification_service.py
import logging
import uuid
from dataclasses import asdict
from firebase_admin import firestore
from typing import Optional, Dict, Any, List

from flavorworld.models.notification import Notification, NotificationType
from flavorworld.utils.datetime_utils import DateTimeUtils

class NotificationService:
    """
    알림 관련 비즈니스 로직을 담당하는 공용 서비스 클래스.
    좋아요/댓글/팔로우/그룹 이벤트가 발생한 도메인 서비스에서 주입받아 사용합니다.
    """
    def __init__(self, db=None):
        self.db = db or firestore.client()
        self.notifications_ref = self.db.collection('notifications')
        self.users_ref = self.db.collection('users')

    def create_notification(self, to_user_id: str, from_user_id: str, n_type: NotificationType, message: str,
                            **targets) -> Optional[str]:
        """
        알림을 생성하여 Firestore에 저장합니다.
        - 자기 자신에게 보내는 알림은 생성하지 않습니다.
        - 알림 생성 실패는 원래 요청(좋아요, 댓글 등)을 실패시키지 않도록 로그만 남깁니다.

        :param to_user_id: 알림을 받을 사용자 ID
        :param from_user_id: 알림을 유발한 사용자 ID
        :param n_type: 알림 유형 (NotificationType Enum)
        :param message: 알림에 표시될 문구
        :param targets: recipe_id, comment_id, group_id, group_name 등 알림 대상 정보
        :return: 생성된 알림 ID 또는 None
        """
        if not to_user_id or to_user_id == from_user_id:
            return None  # 자기 자신에게는 알림을 생성하지 않음

        try:
            sender_doc = self.users_ref.document(from_user_id).get()
            if not sender_doc.exists:
                logging.warning(f"알림 생성 실패: 발신자를 찾을 수 없음 (ID: {from_user_id})")
                return None
            sender_info = sender_doc.to_dict()

            notification = Notification(
                notification_id=str(uuid.uuid4()),
                type=n_type,
                from_user_id=from_user_id,
                to_user_id=to_user_id,
                message=message,
                from_user={"name": sender_info.get('full_name'), "avatar": sender_info.get('avatar')},
                **targets
            )

            # Enum 멤버를 문자열 값으로 변환하여 저장
            notification_dict = asdict(notification)
            notification_dict['type'] = notification.type.value

            self.notifications_ref.document(notification.notification_id).set(
                DateTimeUtils.for_firestore(notification_dict)
            )
            logging.info(f"{n_type.value} 알림 생성 완료: {from_user_id} -> {to_user_id}")
            return notification.notification_id

        except Exception as e:
            logging.error(f"알림 생성 중 오류 발생: {e}", exc_info=True)
            return None

    def get_notifications(self, user_id: str, limit: int = 50) -> List[Dict[str, Any]]:
        """사용자가 받은 알림을 최신순으로 조회합니다."""
        query = (self.notifications_ref
                 .where('to_user_id', '==', user_id)
                 .order_by('created_at', direction=firestore.Query.DESCENDING)
                 .limit(limit))
        return [doc.to_dict() for doc in query.stream()]

    def mark_as_read(self, notification_id: str, user_id: str) -> Dict[str, Any]:
        notification_ref = self.notifications_ref.document(notification_id)
        doc = notification_ref.get()
        if not doc.exists:
            raise ValueError("알림을 찾을 수 없습니다.")
        if doc.to_dict().get('to_user_id') != user_id:
            raise PermissionError("다른 사용자의 알림은 변경할 수 없습니다.")
        notification_ref.update({'read': True})
        return notification_ref.get().to_dict()

    def mark_all_as_read(self, user_id: str) -> int:
        """읽지 않은 알림을 모두 읽음 처리하고 변경된 개수를 반환합니다."""
        docs = list(self.notifications_ref
                    .where('to_user_id', '==', user_id)
                    .where('read', '==', False)
                    .stream())
        for doc in docs:
            self.notifications_ref.document(doc.id).update({'read': True})
        logging.info(f"알림 {len(docs)}건 읽음 처리 (user_id: {user_id})")
        return len(docs)

    def count_unread(self, user_id: str) -> int:
        docs = (self.notifications_ref
                .where('to_user_id', '==', user_id)
                .where('read', '==', False)
                .stream())
        return sum(1 for _ in docs)
