# flavorworld/feed/constants.py
from dataclasses import dataclass
from typing import Optional

ALL = 'all'

RECIPE_CATEGORIES = (
    'Asian', 'Italian', 'Mexican', 'Indian', 'Mediterranean',
    'American', 'French', 'Chinese', 'Japanese', 'Thai',
    'Middle Eastern', 'Greek', 'Spanish', 'Korean', 'Vietnamese', 'Dessert',
)

MEAT_TYPES = (
    'Vegetarian', 'Vegan', 'Chicken', 'Beef', 'Pork',
    'Fish', 'Seafood', 'Lamb', 'Turkey', 'Mixed',
)

MEDIA_TYPES = ('none', 'image', 'video')


@dataclass(frozen=True)
class CookingTimeBucket:
    """
    조리 시간 구간. 경계값이 두 구간에 동시에 속하지 않도록
    하한(min)은 배타적(>)이고 상한(max)은 포함(<=)입니다.
    """
    key: str
    label: str
    min: Optional[int] = None
    max: Optional[int] = None

    def contains(self, minutes: int) -> bool:
        if self.min is not None and minutes <= self.min:
            return False
        if self.max is not None and minutes > self.max:
            return False
        return True


COOKING_TIMES = (
    CookingTimeBucket('quick', 'Under 30 min', max=30),
    CookingTimeBucket('medium', '30-60 min', min=30, max=60),
    CookingTimeBucket('long', '1-2 hours', min=60, max=120),
    CookingTimeBucket('very_long', 'Over 2 hours', min=120),
)
COOKING_TIMES_BY_KEY = {bucket.key: bucket for bucket in COOKING_TIMES}

FEED_PERSONALIZED = 'personalized'
FEED_FOLLOWING = 'following'
FEED_ALL = 'all'
FEED_MODES = (FEED_PERSONALIZED, FEED_FOLLOWING, FEED_ALL)

SORT_NEWEST = 'newest'
SORT_OLDEST = 'oldest'
SORT_POPULAR = 'popular'
SORT_KEYS = (SORT_NEWEST, SORT_OLDEST, SORT_POPULAR)

POST_SOURCE_PERSONAL = 'personal'
POST_SOURCE_GROUP = 'group'

ANONYMOUS_USER_NAME = 'Anonymous'
UNKNOWN_GROUP_NAME = 'Unknown Group'
