# flavorworld/models/group.py
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional, List, Dict, Any

from flavorworld.utils.datetime_utils import DateTimeUtils

class GroupRole(Enum):
    ADMIN = "admin"
    MEMBER = "member"

@dataclass
class GroupSettings:
    allow_member_posts: bool = True
    require_approval: bool = False
    allow_invites: bool = True

@dataclass
class Group:
    """
    Firestore 'groups' 컬렉션의 문서 구조를 정의하는 데이터클래스.
    members: [{'user_id', 'role', 'joined_at'}], member_ids: 멤버 ID 목록,
    pending_requests: [{'user_id', 'requested_at'}]
    """
    group_id: str
    name: str
    creator_id: str
    description: Optional[str] = None
    image: Optional[str] = None
    is_private: bool = False
    category: str = 'General'
    rules: Optional[str] = None
    members: List[Dict[str, Any]] = field(default_factory=list)
    member_ids: List[str] = field(default_factory=list)  # array_contains 쿼리용
    pending_requests: List[Dict[str, Any]] = field(default_factory=list)
    settings: GroupSettings = field(default_factory=GroupSettings)
    created_at: datetime = field(default_factory=DateTimeUtils.now)
