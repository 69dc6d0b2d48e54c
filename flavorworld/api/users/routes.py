# flavorworld/api/users/routes.py
import logging
from flask import Blueprint, request, jsonify, current_app
from flask_jwt_extended import jwt_required, get_jwt_identity
from marshmallow import ValidationError

from flavorworld.api.users.schemas import UserPublicResponseSchema, UserSummarySchema, UserUpdateSchema
from flavorworld.core.errors import ConflictError

users_bp = Blueprint('users_bp', __name__)

@users_bp.route('/search', methods=['GET'])
@jwt_required(optional=True)
def search_users():
    """이름 또는 이메일로 사용자를 검색합니다. 로그인한 경우 본인은 결과에서 제외됩니다."""
    user_service = current_app.services['users']
    query = request.args.get('q', '', type=str)
    users = user_service.search_users(query, exclude_user_id=get_jwt_identity())
    return jsonify(UserSummarySchema(many=True).dump(users)), 200

@users_bp.route('/me', methods=['PUT'])
@jwt_required()
def update_my_profile():
    """현재 로그인된 사용자의 이름, 소개, 아바타를 수정합니다."""
    user_service = current_app.services['users']
    user_id = get_jwt_identity()
    try:
        data = UserUpdateSchema().load(request.get_json(silent=True) or {})
        updated_user = user_service.update_user_profile(user_id, data)
        return jsonify(UserPublicResponseSchema().dump(updated_user)), 200
    except ValidationError as err:
        return jsonify({"error_code": "VALIDATION_ERROR", "details": err.messages}), 400
    except ValueError as e:
        return jsonify({"error_code": "USER_NOT_FOUND", "message": str(e)}), 404
    except Exception as e:
        logging.error(f"프로필 수정 중 오류 발생 (user_id: {user_id}): {e}", exc_info=True)
        return jsonify({"error_code": "INTERNAL_SERVER_ERROR", "message": "프로필 수정 중 서버 오류가 발생했습니다."}), 500

@users_bp.route('/me', methods=['DELETE'])
@jwt_required()
def delete_my_account():
    """현재 로그인된 사용자의 계정을 삭제합니다."""
    user_service = current_app.services['users']
    user_id = get_jwt_identity()
    try:
        user_service.delete_user(user_id)
        return jsonify({"message": "계정이 삭제되었습니다.", "deleted": True, "user_id": user_id}), 200
    except ValueError as e:
        return jsonify({"error_code": "USER_NOT_FOUND", "message": str(e)}), 404
    except Exception as e:
        logging.error(f"계정 삭제 중 오류 발생 (user_id: {user_id}): {e}", exc_info=True)
        return jsonify({"error_code": "INTERNAL_SERVER_ERROR", "message": "계정 삭제 중 서버 오류가 발생했습니다."}), 500

@users_bp.route('/<string:user_id>', methods=['GET'])
def get_user_profile(user_id: str):
    """특정 사용자의 공개 프로필 정보(팔로워/팔로잉/레시피 수 포함)를 조회합니다."""
    user_service = current_app.services['users']
    try:
        user_profile = user_service.get_user_profile(user_id)
        if not user_profile:
            return jsonify({"error_code": "USER_NOT_FOUND", "message": "사용자를 찾을 수 없습니다."}), 404
        return jsonify(UserPublicResponseSchema().dump(user_profile)), 200
    except Exception as e:
        logging.error(f"사용자 프로필 조회 중 오류 발생 (user_id: {user_id}): {e}", exc_info=True)
        return jsonify({"error_code": "PROFILE_FETCH_FAILED", "message": "프로필 조회 중 오류가 발생했습니다."}), 500

@users_bp.route('/<string:user_id>/follow', methods=['POST'])
@jwt_required()
def follow_user(user_id: str):
    user_service = current_app.services['users']
    current_user_id = get_jwt_identity()
    try:
        counts = user_service.follow_user(current_user_id, user_id)
        return jsonify({"message": "팔로우했습니다.", **counts}), 200
    except ConflictError as e:
        return jsonify({"error_code": e.error_code, "message": str(e)}), 400
    except ValueError as e:
        return jsonify({"error_code": "USER_NOT_FOUND", "message": str(e)}), 404

@users_bp.route('/<string:user_id>/follow', methods=['DELETE'])
@jwt_required()
def unfollow_user(user_id: str):
    user_service = current_app.services['users']
    current_user_id = get_jwt_identity()
    try:
        counts = user_service.unfollow_user(current_user_id, user_id)
        return jsonify({"message": "팔로우를 취소했습니다.", **counts}), 200
    except ConflictError as e:
        return jsonify({"error_code": e.error_code, "message": str(e)}), 400
    except ValueError as e:
        return jsonify({"error_code": "USER_NOT_FOUND", "message": str(e)}), 404

@users_bp.route('/<string:user_id>/followers', methods=['GET'])
def get_followers(user_id: str):
    user_service = current_app.services['users']
    try:
        return jsonify(UserSummarySchema(many=True).dump(user_service.get_followers(user_id))), 200
    except ValueError as e:
        return jsonify({"error_code": "USER_NOT_FOUND", "message": str(e)}), 404

@users_bp.route('/<string:user_id>/following', methods=['GET'])
def get_following(user_id: str):
    user_service = current_app.services['users']
    try:
        return jsonify(UserSummarySchema(many=True).dump(user_service.get_following(user_id))), 200
    except ValueError as e:
        return jsonify({"error_code": "USER_NOT_FOUND", "message": str(e)}), 404
