# flavorworld/api/notifications/schemas.py
from marshmallow import Schema, fields

class NotificationSenderSchema(Schema):
    name = fields.Str(allow_none=True)
    avatar = fields.Str(allow_none=True)

class NotificationResponseSchema(Schema):
    """알림 응답을 위한 최종 JSON 형식을 정의합니다."""
    notification_id = fields.Str(required=True)
    type = fields.Str(required=True)
    message = fields.Str(required=True)
    from_user_id = fields.Str(required=True)
    from_user = fields.Nested(NotificationSenderSchema)
    recipe_id = fields.Str(allow_none=True)
    comment_id = fields.Str(allow_none=True)
    group_id = fields.Str(allow_none=True)
    group_name = fields.Str(allow_none=True)
    read = fields.Bool()
    created_at = fields.DateTime()
