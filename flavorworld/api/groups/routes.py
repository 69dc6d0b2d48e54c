# flavorworld/api/groups/routes.py
import logging
from flask import Blueprint, request, jsonify, Response, current_app
from flask_jwt_extended import jwt_required, get_jwt_identity
from marshmallow import ValidationError

from flavorworld.api.groups.schemas import GroupCreateSchema, GroupResponseSchema, JoinRequestActionSchema
from flavorworld.api.recipes.routes import request_payload
from flavorworld.api.recipes.schemas import RecipeCreateSchema, RecipeResponseSchema
from flavorworld.core.errors import ConflictError, MediaError

groups_bp = Blueprint('groups_bp', __name__)

@groups_bp.route('', methods=['POST'])
@jwt_required()
def create_group():
    group_service = current_app.services['groups']
    user_id = get_jwt_identity()
    try:
        data = GroupCreateSchema().load(request.get_json(silent=True) or {})
        group = group_service.create_group(user_id, data)
        return jsonify(GroupResponseSchema().dump(group)), 201
    except ValidationError as err:
        return jsonify({"error_code": "VALIDATION_ERROR", "details": err.messages}), 400
    except Exception as e:
        logging.error(f"그룹 생성 중 오류 발생 (user_id: {user_id}): {e}", exc_info=True)
        return jsonify({"error_code": "GROUP_CREATION_FAILED", "message": "그룹 생성 중 오류가 발생했습니다."}), 500

@groups_bp.route('', methods=['GET'])
def list_groups():
    """그룹 목록을 조회합니다. ?q= 로 이름/설명/카테고리를 검색할 수 있습니다."""
    group_service = current_app.services['groups']
    groups = group_service.list_groups(request.args.get('q', None, type=str))
    return jsonify(GroupResponseSchema(many=True).dump(groups)), 200

@groups_bp.route('/<string:group_id>', methods=['GET'])
def get_group(group_id: str):
    group_service = current_app.services['groups']
    group = group_service.get_group(group_id)
    if not group:
        return jsonify({"error_code": "GROUP_NOT_FOUND", "message": "그룹을 찾을 수 없습니다."}), 404
    return jsonify(GroupResponseSchema().dump(group)), 200

@groups_bp.route('/<string:group_id>/join', methods=['POST'])
@jwt_required()
def join_group(group_id: str):
    """
    그룹에 가입합니다.
    - 공개 그룹: 즉시 멤버가 되며 status='joined'
    - 비공개/승인 필요 그룹: 관리자 승인 대기 상태가 되며 status='pending'
    """
    group_service = current_app.services['groups']
    user_id = get_jwt_identity()
    try:
        status = group_service.join_group(group_id, user_id)
        return jsonify({"status": status}), 200
    except ConflictError as e:
        return jsonify({"error_code": e.error_code, "message": str(e)}), 400
    except ValueError as e:
        return jsonify({"error_code": "GROUP_NOT_FOUND", "message": str(e)}), 404

@groups_bp.route('/<string:group_id>/join', methods=['DELETE'])
@jwt_required()
def leave_group(group_id: str):
    group_service = current_app.services['groups']
    user_id = get_jwt_identity()
    try:
        group_service.leave_group(group_id, user_id)
        return Response(status=204)
    except ConflictError as e:
        return jsonify({"error_code": e.error_code, "message": str(e)}), 400
    except ValueError as e:
        return jsonify({"error_code": "GROUP_NOT_FOUND", "message": str(e)}), 404

@groups_bp.route('/<string:group_id>/requests/<string:user_id>', methods=['PUT'])
@jwt_required()
def respond_to_request(group_id: str, user_id: str):
    """가입 요청을 승인하거나 거절합니다. (그룹 관리자만 가능)"""
    group_service = current_app.services['groups']
    admin_id = get_jwt_identity()
    try:
        data = JoinRequestActionSchema().load(request.get_json(silent=True) or {})
        group = group_service.respond_to_request(group_id, admin_id, user_id, data['action'])
        return jsonify(GroupResponseSchema().dump(group)), 200
    except ValidationError as err:
        return jsonify({"error_code": "VALIDATION_ERROR", "details": err.messages}), 400
    except PermissionError as e:
        return jsonify({"error_code": "FORBIDDEN", "message": str(e)}), 403
    except ValueError as e:
        return jsonify({"error_code": "NOT_FOUND", "message": str(e)}), 404

@groups_bp.route('/<string:group_id>/posts', methods=['POST'])
@jwt_required()
def create_group_post(group_id: str):
    group_service = current_app.services['groups']
    media_service = current_app.services['media']
    user_id = get_jwt_identity()
    try:
        payload = request_payload()
        data = RecipeCreateSchema().load(payload)
        media = media_service.resolve_media(request.files, payload)
        recipe = group_service.create_group_post(group_id, user_id, data, media)
        return jsonify(RecipeResponseSchema().dump(recipe)), 201
    except ValidationError as err:
        return jsonify({"error_code": "VALIDATION_ERROR", "details": err.messages}), 400
    except MediaError as e:
        return jsonify({"error_code": "INVALID_MEDIA", "message": str(e)}), 400
    except PermissionError as e:
        return jsonify({"error_code": "FORBIDDEN", "message": str(e)}), 403
    except ValueError as e:
        return jsonify({"error_code": "NOT_FOUND", "message": str(e)}), 404

@groups_bp.route('/<string:group_id>/posts', methods=['GET'])
@jwt_required(optional=True)
def get_group_posts(group_id: str):
    group_service = current_app.services['groups']
    try:
        posts = group_service.get_group_posts(group_id, get_jwt_identity())
        return jsonify(RecipeResponseSchema(many=True).dump(posts)), 200
    except PermissionError as e:
        return jsonify({"error_code": "FORBIDDEN", "message": str(e)}), 403
    except ValueError as e:
        return jsonify({"error_code": "GROUP_NOT_FOUND", "message": str(e)}), 404
