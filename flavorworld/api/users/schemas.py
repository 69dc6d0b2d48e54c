# flavorworld/api/users/schemas.py
from marshmallow import Schema, fields, validate, EXCLUDE

class UserPublicResponseSchema(Schema):
    """
    다른 사용자에게 공개되는 사용자 정보 형식을 정의합니다.
    password_hash, saved_recipes 등은 응답에서 제외됩니다.
    """
    user_id = fields.Str(required=True)
    full_name = fields.Str(required=True)
    email = fields.Email()
    bio = fields.Str(allow_none=True)
    avatar = fields.Str(allow_none=True)
    followers_count = fields.Int(dump_default=0)
    following_count = fields.Int(dump_default=0)
    recipes_count = fields.Int(dump_default=0)
    created_at = fields.DateTime()

class UserSummarySchema(Schema):
    """팔로워/팔로잉/검색 목록에 사용되는 요약 형식입니다."""
    user_id = fields.Str(required=True)
    full_name = fields.Str(required=True)
    bio = fields.Str(allow_none=True)
    avatar = fields.Str(allow_none=True)

class UserUpdateSchema(Schema):
    """PUT /api/users/me 요청 본문의 유효성을 검사합니다."""
    class Meta:
        unknown = EXCLUDE

    full_name = fields.Str(data_key='fullName', validate=validate.Length(min=1, max=100))
    bio = fields.Str(allow_none=True, validate=validate.Length(max=500))
    avatar = fields.Str(allow_none=True)
