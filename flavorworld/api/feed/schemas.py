# flavorworld/api/feed/schemas.py
from marshmallow import Schema, fields, validate, EXCLUDE

from flavorworld.api.recipes.schemas import RecipeResponseSchema
from flavorworld.api.feed.services import SERVER_FEED_TYPES
from flavorworld.feed.constants import FEED_PERSONALIZED

class FeedQuerySchema(Schema):
    """GET /api/feed 쿼리 파라미터의 유효성을 검사합니다."""
    class Meta:
        unknown = EXCLUDE

    user_id = fields.Str(data_key='userId', load_default=None)
    type = fields.Str(load_default=FEED_PERSONALIZED, validate=validate.OneOf(SERVER_FEED_TYPES))
    limit = fields.Int(load_default=50, validate=validate.Range(min=1, max=200))

class FeedPostSchema(RecipeResponseSchema):
    """피드 게시물 응답 형식. 레시피 응답에 작성자/출처 정보가 추가됩니다."""
    user_bio = fields.Str(allow_none=True)
    post_source = fields.Str()
    group_name = fields.Str(allow_none=True)

class FeedStatsSchema(Schema):
    following_count = fields.Int()
    groups_count = fields.Int()
    following_posts_count = fields.Int()
    group_posts_count = fields.Int()
    own_posts_count = fields.Int()
    total_feed_posts = fields.Int()
