# flavorworld/models/notification.py
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Dict, Any, Optional

from flavorworld.utils.datetime_utils import DateTimeUtils

class NotificationType(Enum):
    """알림 유형을 정의하는 Enum 클래스"""
    LIKE = "like"
    COMMENT = "comment"
    FOLLOW = "follow"
    GROUP_POST = "group_post"
    GROUP_JOIN_REQUEST = "group_join_request"
    GROUP_REQUEST_APPROVED = "group_request_approved"

@dataclass
class Notification:
    """
    Firestore 'notifications' 컬렉션의 문서 구조를 정의하는 데이터클래스.
    """
    notification_id: str
    type: NotificationType
    from_user_id: str          # 알림을 유발한 사용자 ID
    to_user_id: str            # 알림을 받는 사용자 ID
    message: str
    from_user: Dict[str, Any] = field(default_factory=dict)  # {'name', 'avatar'}
    recipe_id: Optional[str] = None
    comment_id: Optional[str] = None
    group_id: Optional[str] = None
    group_name: Optional[str] = None
    read: bool = False
    created_at: datetime = field(default_factory=DateTimeUtils.now)
