# flavorworld/api/auth/routes.py

import logging
import jwt
from flask import Blueprint, request, jsonify, current_app
from flask_jwt_extended import (
    create_access_token,
    create_refresh_token,
    jwt_required,
    get_jwt_identity,
)
from marshmallow import ValidationError

from flavorworld.api.auth.schemas import RegisterSchema, LoginSchema, LogoutRequestSchema, ChangePasswordSchema
from flavorworld.api.users.schemas import UserPublicResponseSchema
from flavorworld.core.errors import ConflictError
from .services import auth_service

auth_bp = Blueprint('auth_bp', __name__)

def _token_response(user: dict, status: int):
    identity = user['user_id']
    return jsonify({
        "access_token": create_access_token(identity=identity),
        "refresh_token": create_refresh_token(identity=identity),
        "user_id": identity,
        "user_info": UserPublicResponseSchema().dump(user)
    }), status

@auth_bp.route('/register', methods=['POST'])
def register():
    """이메일 회원가입 후 바로 로그인 토큰을 발급합니다."""
    try:
        data = RegisterSchema().load(request.get_json(silent=True) or {})
        user = auth_service.register_user(data['email'], data['password'], data['full_name'])
        return _token_response(user, 201)
    except ValidationError as e:
        return jsonify({"error_code": "VALIDATION_ERROR", "details": e.messages}), 400
    except ConflictError as e:
        return jsonify({"error_code": e.error_code, "message": str(e)}), 400
    except Exception as e:
        logging.error(f"회원가입 중 예외 발생: {e}", exc_info=True)
        return jsonify({"error_code": "INTERNAL_SERVER_ERROR", "message": "서버 내부 오류가 발생했습니다."}), 500

@auth_bp.route('/login', methods=['POST'])
def login():
    """이메일/비밀번호 로그인을 처리합니다."""
    try:
        data = LoginSchema().load(request.get_json(silent=True) or {})
    except ValidationError as e:
        return jsonify({"error_code": "VALIDATION_ERROR", "details": e.messages}), 400

    user = auth_service.authenticate(data['email'], data['password'])
    if not user:
        return jsonify({"error_code": "INVALID_CREDENTIALS", "message": "이메일 또는 비밀번호가 올바르지 않습니다."}), 401
    return _token_response(user, 200)


# --- 비밀번호 변경 엔드포인트 ---
@auth_bp.route('/change-password', methods=['PUT', 'PATCH'])
@jwt_required()
def change_password():
    """현재 비밀번호를 확인한 뒤 로그인된 사용자의 비밀번호를 변경합니다."""
    user_id = get_jwt_identity()
    try:
        data = ChangePasswordSchema().load(request.get_json(silent=True) or {})
        auth_service.change_password(user_id, data['current_password'], data['new_password'])
        return jsonify({"message": "비밀번호가 변경되었습니다."}), 200
    except ValidationError as e:
        return jsonify({"error_code": "VALIDATION_ERROR", "details": e.messages}), 400
    except PermissionError as e:
        return jsonify({"error_code": "INVALID_CURRENT_PASSWORD", "message": str(e)}), 401
    except ConflictError as e:
        return jsonify({"error_code": e.error_code, "message": str(e)}), 400
    except ValueError as e:
        return jsonify({"error_code": "USER_NOT_FOUND", "message": str(e)}), 404
    except Exception as e:
        logging.error(f"비밀번호 변경 중 예외 발생 (user_id: {user_id}): {e}", exc_info=True)
        return jsonify({"error_code": "INTERNAL_SERVER_ERROR", "message": "서버 내부 오류가 발생했습니다."}), 500


# --- 토큰 재발급 엔드포인트 ---
@auth_bp.route('/token/refresh', methods=['POST'])
@jwt_required(refresh=True) # Refresh Token만 허용하는 데코레이터
def refresh_token():
    """유효한 Refresh Token으로 새로운 Access Token을 발급합니다."""
    # 서명, 만료, 토큰 타입, Blocklist 여부는 데코레이터와 등록된 콜백이 검증합니다.
    current_user_id = get_jwt_identity()
    new_access_token = create_access_token(identity=current_user_id)
    return jsonify(access_token=new_access_token), 200


# --- 로그아웃 엔드포인트 ---
@auth_bp.route('/logout', methods=['POST'])
def logout():
    """로그아웃. 전달받은 Access/Refresh 토큰을 무효화 목록에 추가합니다."""
    try:
        data = LogoutRequestSchema().load(request.get_json(silent=True) or {})

        secret_key = current_app.config['JWT_SECRET_KEY']
        algorithm = current_app.config.get('JWT_ALGORITHM', 'HS256')

        # 만료된 토큰도 무효화할 수 있도록 만료 검증은 생략합니다.
        decoded_access = jwt.decode(data['access_token'], secret_key, algorithms=[algorithm], options={"verify_exp": False})
        decoded_refresh = jwt.decode(data['refresh_token'], secret_key, algorithms=[algorithm], options={"verify_exp": False})

        auth_service.logout_user(decoded_access['jti'], decoded_access['exp'],
                                 decoded_refresh['jti'], decoded_refresh['exp'])
        return jsonify({"message": "로그아웃 되었습니다."}), 200

    except ValidationError as e:
        return jsonify({"error_code": "VALIDATION_ERROR", "details": e.messages}), 400
    except jwt.PyJWTError as e:
        logging.error(f"JWT 해독 오류 발생: {e}", exc_info=True)
        return jsonify({"error_code": "INVALID_TOKEN", "message": "유효하지 않은 토큰입니다."}), 422
    except Exception as e:
        logging.error(f"로그아웃 처리 중 오류 발생: {e}", exc_info=True)
        return jsonify({"error_code": "LOGOUT_FAILED", "message": "로그아웃 처리 중 오류가 발생했습니다."}), 500
