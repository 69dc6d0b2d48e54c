# flavorworld/models/recipe.py
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, List, Dict, Any

from flavorworld.utils.datetime_utils import DateTimeUtils

@dataclass
class Comment:
    """Recipe 문서 내부 'comments' 배열에 저장될 댓글. 배열 순서가 곧 작성 순서입니다."""
    comment_id: str
    user_id: str
    user_name: str
    text: str
    user_avatar: Optional[str] = None
    created_at: datetime = field(default_factory=DateTimeUtils.now)

@dataclass
class Recipe:
    """
    Firestore 'recipes' 컬렉션의 문서 구조를 정의하는 데이터클래스.
    그룹 게시물도 같은 컬렉션에 저장되며 group_id로 구분합니다.
    """
    recipe_id: str
    title: str
    description: str
    ingredients: str
    instructions: str
    category: str
    meat_type: str
    prep_time: int
    servings: int
    user_id: str
    user_name: str
    user_avatar: Optional[str] = None
    image: Optional[str] = None       # base64 data URL
    video: Optional[str] = None       # base64 data URL
    media_type: str = 'none'          # 'none' | 'image' | 'video'
    likes: List[str] = field(default_factory=list)
    comments: List[Dict[str, Any]] = field(default_factory=list)
    group_id: Optional[str] = None
    is_approved: bool = True
    created_at: datetime = field(default_factory=DateTimeUtils.now)
    updated_at: datetime = field(default_factory=DateTimeUtils.now)
