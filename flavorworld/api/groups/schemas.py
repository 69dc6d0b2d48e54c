# flavorworld/api/groups/schemas.py
from marshmallow import Schema, fields, validate, validates, ValidationError, EXCLUDE

class GroupSettingsSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    allow_member_posts = fields.Bool(data_key='allowMemberPosts')
    require_approval = fields.Bool(data_key='requireApproval')
    allow_invites = fields.Bool(data_key='allowInvites')

class GroupCreateSchema(Schema):
    """POST /api/groups 요청 본문의 유효성을 검사합니다."""
    class Meta:
        unknown = EXCLUDE

    name = fields.Str(required=True, validate=validate.Length(min=1, max=100))
    description = fields.Str(allow_none=True, validate=validate.Length(max=1000))
    category = fields.Str(allow_none=True)
    rules = fields.Str(allow_none=True)
    image = fields.Str(allow_none=True)
    is_private = fields.Bool(data_key='isPrivate', load_default=False)
    settings = fields.Nested(GroupSettingsSchema, load_default=dict)

    @validates('name')
    def validate_name(self, value, **kwargs):
        if not value.strip():
            raise ValidationError("그룹 이름은 공백만으로 지정할 수 없습니다.")

class JoinRequestActionSchema(Schema):
    """PUT /api/groups/{group_id}/requests/{user_id} 요청 본문."""
    action = fields.Str(required=True, validate=validate.OneOf(['approve', 'reject']))

class GroupMemberSchema(Schema):
    user_id = fields.Str(required=True)
    role = fields.Str(required=True)
    joined_at = fields.DateTime()

class GroupResponseSchema(Schema):
    """그룹 정보 응답을 위한 최종 JSON 형식을 정의합니다."""
    group_id = fields.Str(required=True)
    name = fields.Str(required=True)
    description = fields.Str(allow_none=True)
    category = fields.Str()
    rules = fields.Str(allow_none=True)
    image = fields.Str(allow_none=True)
    is_private = fields.Bool()
    creator_id = fields.Str(required=True)
    members = fields.List(fields.Nested(GroupMemberSchema))
    settings = fields.Dict()
    members_count = fields.Int(dump_default=0)
    pending_count = fields.Int(dump_default=0)
    created_at = fields.DateTime()
