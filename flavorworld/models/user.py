# flavorworld/models/user.py
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, List, Dict, Any

from flavorworld.utils.datetime_utils import DateTimeUtils

@dataclass
class User:
    """
    Firestore 'users' 컬렉션의 문서 구조를 정의하는 데이터클래스.
    """
    user_id: str
    email: str
    full_name: str
    password_hash: str
    bio: Optional[str] = None
    avatar: Optional[str] = None
    followers: List[str] = field(default_factory=list)
    following: List[str] = field(default_factory=list)
    saved_recipes: List[Dict[str, Any]] = field(default_factory=list)  # [{'recipe_id', 'saved_at'}]
    created_at: datetime = field(default_factory=DateTimeUtils.now)
