# flavorworld/api/recipes/schemas.py
from marshmallow import Schema, fields, validate, validates, validates_schema, ValidationError, EXCLUDE

from flavorworld.feed.constants import RECIPE_CATEGORIES, MEAT_TYPES, MEDIA_TYPES

TEXT_FIELDS = ('title', 'description', 'ingredients', 'instructions')

# --- 재사용을 위한 중첩 스키마 ---
class CommentSchema(Schema):
    """레시피 응답에 포함될 댓글 스키마."""
    comment_id = fields.Str(required=True)
    user_id = fields.Str(required=True)
    user_name = fields.Str(allow_none=True)
    user_avatar = fields.Str(allow_none=True)
    text = fields.Str(required=True)
    created_at = fields.DateTime(allow_none=True)

# --- API 요청/응답 스키마 ---

class RecipeCreateSchema(Schema):
    """
    POST /api/recipes 요청 본문의 유효성을 검사합니다.
    JSON과 multipart/form-data 모두 같은 스키마를 사용하며, 폼 값은 문자열이므로 숫자로 변환됩니다.
    """
    class Meta:
        unknown = EXCLUDE

    title = fields.Str(required=True, validate=validate.Length(min=1, max=200))
    description = fields.Str(required=True, validate=validate.Length(min=1, max=2000))
    ingredients = fields.Str(required=True, validate=validate.Length(min=1))
    instructions = fields.Str(required=True, validate=validate.Length(min=1))
    category = fields.Str(required=True, validate=validate.OneOf(RECIPE_CATEGORIES))
    meat_type = fields.Str(required=True, data_key='meatType', validate=validate.OneOf(MEAT_TYPES))
    prep_time = fields.Int(required=True, data_key='prepTime', validate=validate.Range(min=0))
    servings = fields.Int(required=True, validate=validate.Range(min=1))

    @validates_schema(skip_on_field_errors=False)
    def validate_text_fields(self, data, **kwargs):
        """앞뒤 공백을 제거했을 때 비어 있는 텍스트 필드는 거부합니다. (수정 요청은 전달된 필드만 검사)"""
        errors = {name: ["공백만으로 된 값은 입력할 수 없습니다."]
                  for name in TEXT_FIELDS if isinstance(data.get(name), str) and not data[name].strip()}
        if errors:
            raise ValidationError(errors)

class RecipeUpdateSchema(RecipeCreateSchema):
    """PUT /api/recipes/{recipe_id} 요청 본문. 전달된 필드만 수정합니다."""
    class Meta:
        unknown = EXCLUDE

    title = fields.Str(validate=validate.Length(min=1, max=200))
    description = fields.Str(validate=validate.Length(min=1, max=2000))
    ingredients = fields.Str(validate=validate.Length(min=1))
    instructions = fields.Str(validate=validate.Length(min=1))
    category = fields.Str(validate=validate.OneOf(RECIPE_CATEGORIES))
    meat_type = fields.Str(data_key='meatType', validate=validate.OneOf(MEAT_TYPES))
    prep_time = fields.Int(data_key='prepTime', validate=validate.Range(min=0))
    servings = fields.Int(validate=validate.Range(min=1))

class CommentCreateSchema(Schema):
    """POST /api/recipes/{recipe_id}/comments 요청 본문."""
    class Meta:
        unknown = EXCLUDE

    text = fields.Str(required=True, validate=validate.Length(min=1, max=1000, error="댓글은 1~1000자 사이여야 합니다."))

    @validates('text')
    def validate_text(self, value, **kwargs):
        if not value.strip():
            raise ValidationError("댓글 내용이 비어 있습니다.")

class RecipeResponseSchema(Schema):
    """레시피 정보 응답을 위한 최종 JSON 형식을 정의합니다."""
    recipe_id = fields.Str(dump_only=True)
    title = fields.Str(required=True)
    description = fields.Str(required=True)
    ingredients = fields.Str()
    instructions = fields.Str()
    category = fields.Str()
    meat_type = fields.Str()
    prep_time = fields.Int()
    servings = fields.Int()
    user_id = fields.Str(required=True)
    user_name = fields.Str(allow_none=True)
    user_avatar = fields.Str(allow_none=True)
    image = fields.Str(allow_none=True)
    video = fields.Str(allow_none=True)
    media_type = fields.Str(validate=validate.OneOf(MEDIA_TYPES))
    likes = fields.List(fields.Str())
    comments = fields.List(fields.Nested(CommentSchema))
    group_id = fields.Str(allow_none=True)
    is_approved = fields.Bool()
    created_at = fields.DateTime()
    updated_at = fields.DateTime()

    # 서비스/피드 로직에서 채워주는 응답 전용 필드
    likes_count = fields.Method('get_likes_count', dump_only=True)
    comments_count = fields.Method('get_comments_count', dump_only=True)
    saved_at = fields.DateTime(dump_only=True)

    def get_likes_count(self, obj):
        return len(obj.get('likes') or [])

    def get_comments_count(self, obj):
        return len(obj.get('comments') or [])
