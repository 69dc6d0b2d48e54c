# flavorworld/api/auth/schemas.py
from marshmallow import Schema, fields, validate, EXCLUDE

class RegisterSchema(Schema):
    """회원가입 요청의 유효성을 검사하는 스키마"""
    class Meta:
        unknown = EXCLUDE

    full_name = fields.Str(
        required=True, data_key='fullName',
        validate=validate.Length(min=1, max=100),
        metadata={"description": "표시 이름"}
    )
    email = fields.Email(required=True)
    password = fields.Str(
        required=True, load_only=True,
        validate=validate.Length(min=6, error="비밀번호는 6자 이상이어야 합니다.")
    )

class LoginSchema(Schema):
    """이메일 로그인 요청의 유효성을 검사하는 스키마"""
    class Meta:
        unknown = EXCLUDE

    email = fields.Email(required=True)
    password = fields.Str(required=True, load_only=True)

class LogoutRequestSchema(Schema):
    """로그아웃 요청의 유효성을 검사하는 스키마"""
    access_token = fields.Str(required=True)
    refresh_token = fields.Str(required=True)

class ChangePasswordSchema(Schema):
    """비밀번호 변경 요청의 유효성을 검사하는 스키마"""
    class Meta:
        unknown = EXCLUDE

    current_password = fields.Str(
        required=True, load_only=True, data_key='currentPassword',
        validate=validate.Length(min=1)
    )
    # 8자 이상, 대문자/소문자/숫자/특수문자 각 1자 이상
    new_password = fields.Str(
        required=True, load_only=True, data_key='newPassword',
        validate=validate.Regexp(
            r'^(?=.*[a-z])(?=.*[A-Z])(?=.*\d)(?=.*[^\da-zA-Z]).{8,}$',
            error="비밀번호는 8자 이상이며 대문자, 소문자, 숫자, 특수문자를 모두 포함해야 합니다."
        )
    )
