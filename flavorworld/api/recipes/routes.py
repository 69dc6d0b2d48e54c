# flavorworld/api/recipes/routes.py
import logging
from flask import Blueprint, request, jsonify, Response, current_app
from flask_jwt_extended import jwt_required, get_jwt_identity
from marshmallow import ValidationError

from flavorworld.api.recipes.schemas import (
    RecipeCreateSchema, RecipeUpdateSchema, RecipeResponseSchema, CommentCreateSchema, CommentSchema
)
from flavorworld.core.errors import ConflictError, MediaError

recipes_bp = Blueprint('recipes_bp', __name__)

def request_payload() -> dict:
    """JSON 본문 또는 multipart 폼 데이터를 dict로 반환합니다."""
    if request.is_json:
        return request.get_json(silent=True) or {}
    return request.form.to_dict()

# --- CRUD ---

@recipes_bp.route('', methods=['POST'])
@jwt_required()
def create_recipe():
    """
    새 레시피를 작성합니다.
    - 이미지/동영상은 multipart 파일('media', 'image', 'video') 또는 본문의 data URL로 전달할 수 있습니다.
    """
    recipe_service = current_app.services['recipes']
    media_service = current_app.services['media']
    user_id = get_jwt_identity()
    try:
        payload = request_payload()
        data = RecipeCreateSchema().load(payload)
        media = media_service.resolve_media(request.files, payload)
        recipe = recipe_service.create_recipe(user_id, data, media)
        return jsonify(RecipeResponseSchema().dump(recipe)), 201
    except ValidationError as err:
        return jsonify({"error_code": "VALIDATION_ERROR", "details": err.messages}), 400
    except MediaError as e:
        return jsonify({"error_code": "INVALID_MEDIA", "message": str(e)}), 400
    except ValueError as e:  # 작성자 정보가 없는 경우
        return jsonify({"error_code": "USER_NOT_FOUND", "message": str(e)}), 404
    except Exception as e:
        logging.error(f"레시피 생성 중 오류 발생 (user_id: {user_id}): {e}", exc_info=True)
        return jsonify({"error_code": "RECIPE_CREATION_FAILED", "message": "레시피 생성 중 오류가 발생했습니다."}), 500

@recipes_bp.route('', methods=['GET'])
def get_recipes():
    """전체 개인 레시피를 최신순으로 조회합니다."""
    recipe_service = current_app.services['recipes']
    try:
        recipes = recipe_service.get_all_recipes()
        return jsonify(RecipeResponseSchema(many=True).dump(recipes)), 200
    except Exception as e:
        logging.error(f"레시피 목록 조회 중 오류 발생: {e}", exc_info=True)
        return jsonify({"error_code": "INTERNAL_SERVER_ERROR", "message": "레시피 목록 조회 중 오류가 발생했습니다."}), 500

@recipes_bp.route('/saved', methods=['GET'])
@jwt_required()
def get_saved_recipes():
    recipe_service = current_app.services['recipes']
    user_id = get_jwt_identity()
    try:
        recipes = recipe_service.get_saved_recipes(user_id)
        return jsonify(RecipeResponseSchema(many=True).dump(recipes)), 200
    except ValueError as e:
        return jsonify({"error_code": "USER_NOT_FOUND", "message": str(e)}), 404

@recipes_bp.route('/<string:recipe_id>', methods=['GET'])
def get_recipe(recipe_id: str):
    recipe_service = current_app.services['recipes']
    recipe = recipe_service.get_recipe(recipe_id)
    if not recipe:
        return jsonify({"error_code": "RECIPE_NOT_FOUND", "message": "레시피를 찾을 수 없습니다."}), 404
    return jsonify(RecipeResponseSchema().dump(recipe)), 200

@recipes_bp.route('/<string:recipe_id>', methods=['PUT'])
@jwt_required()
def update_recipe(recipe_id: str):
    """레시피를 수정합니다. (작성자 본인만 가능)"""
    recipe_service = current_app.services['recipes']
    media_service = current_app.services['media']
    user_id = get_jwt_identity()
    try:
        payload = request_payload()
        data = RecipeUpdateSchema().load(payload)
        media = media_service.resolve_media(request.files, payload)
        recipe = recipe_service.update_recipe(recipe_id, user_id, data, media)
        return jsonify(RecipeResponseSchema().dump(recipe)), 200
    except ValidationError as err:
        return jsonify({"error_code": "VALIDATION_ERROR", "details": err.messages}), 400
    except MediaError as e:
        return jsonify({"error_code": "INVALID_MEDIA", "message": str(e)}), 400
    except PermissionError as e:
        return jsonify({"error_code": "FORBIDDEN", "message": str(e)}), 403
    except ValueError as e:
        return jsonify({"error_code": "RECIPE_NOT_FOUND", "message": str(e)}), 404

@recipes_bp.route('/<string:recipe_id>', methods=['DELETE'])
@jwt_required()
def delete_recipe(recipe_id: str):
    """레시피를 삭제합니다. (작성자 본인 또는 그룹 관리자)"""
    recipe_service = current_app.services['recipes']
    user_id = get_jwt_identity()
    try:
        recipe_service.delete_recipe(recipe_id, user_id)
        return Response(status=204)
    except PermissionError as e:
        return jsonify({"error_code": "FORBIDDEN", "message": str(e)}), 403
    except ValueError as e:
        return jsonify({"error_code": "RECIPE_NOT_FOUND", "message": str(e)}), 404

# --- 좋아요 ---

def _like_conflict_response(recipe_service, recipe_id: str, error: ConflictError):
    """이미 반영된 좋아요 상태와 충돌한 경우, 클라이언트가 맞출 수 있도록 현재 likes를 함께 반환합니다."""
    likes = (recipe_service.get_recipe(recipe_id) or {}).get('likes') or []
    return jsonify({"error_code": error.error_code, "message": str(error), "likes": likes, "likes_count": len(likes)}), 400

@recipes_bp.route('/<string:recipe_id>/like', methods=['POST'])
@jwt_required()
def like_recipe(recipe_id: str):
    """
    레시피에 좋아요를 누릅니다.
    - 응답의 likes 목록이 클라이언트의 새로운 기준 상태가 됩니다.
    """
    recipe_service = current_app.services['recipes']
    user_id = get_jwt_identity()
    try:
        likes = recipe_service.like_recipe(recipe_id, user_id)
        return jsonify({"likes": likes, "likes_count": len(likes)}), 200
    except ConflictError as e:
        return _like_conflict_response(recipe_service, recipe_id, e)
    except ValueError as e:
        return jsonify({"error_code": "RECIPE_NOT_FOUND", "message": str(e)}), 404
    except Exception as e:
        logging.error(f"좋아요 처리 중 오류 발생 (recipe_id: {recipe_id}): {e}", exc_info=True)
        return jsonify({"error_code": "LIKE_FAILED", "message": "좋아요 처리 중 오류가 발생했습니다."}), 500

@recipes_bp.route('/<string:recipe_id>/like', methods=['DELETE'])
@jwt_required()
def unlike_recipe(recipe_id: str):
    recipe_service = current_app.services['recipes']
    user_id = get_jwt_identity()
    try:
        likes = recipe_service.unlike_recipe(recipe_id, user_id)
        return jsonify({"likes": likes, "likes_count": len(likes)}), 200
    except ConflictError as e:
        return _like_conflict_response(recipe_service, recipe_id, e)
    except ValueError as e:
        return jsonify({"error_code": "RECIPE_NOT_FOUND", "message": str(e)}), 404
    except Exception as e:
        logging.error(f"좋아요 취소 중 오류 발생 (recipe_id: {recipe_id}): {e}", exc_info=True)
        return jsonify({"error_code": "UNLIKE_FAILED", "message": "좋아요 취소 중 오류가 발생했습니다."}), 500

# --- 댓글 ---

@recipes_bp.route('/<string:recipe_id>/comments', methods=['POST'])
@jwt_required()
def add_comment(recipe_id: str):
    """
    레시피에 댓글을 작성합니다.
    - 성공 시, 새 댓글과 갱신된 전체 댓글 목록을 201 Created 상태 코드와 함께 반환합니다.
    """
    recipe_service = current_app.services['recipes']
    user_id = get_jwt_identity()
    try:
        data = CommentCreateSchema().load(request.get_json(silent=True) or {})
        result = recipe_service.add_comment(recipe_id, user_id, data['text'])
        comments = result['comments']
        return jsonify({
            "comment": CommentSchema().dump(result['comment']),
            "comments": CommentSchema(many=True).dump(comments),
            "comments_count": len(comments)
        }), 201
    except ValidationError as err:
        return jsonify({"error_code": "VALIDATION_ERROR", "details": err.messages}), 400
    except ValueError as e:  # 레시피가 없거나 작성자 정보가 없는 경우
        return jsonify({"error_code": "RESOURCE_NOT_FOUND", "message": str(e)}), 404
    except Exception as e:
        logging.error(f"댓글 생성 중 오류 발생 (recipe_id: {recipe_id}): {e}", exc_info=True)
        return jsonify({"error_code": "COMMENT_CREATION_FAILED", "message": "댓글 생성 중 오류가 발생했습니다."}), 500

@recipes_bp.route('/<string:recipe_id>/comments/<string:comment_id>', methods=['DELETE'])
@jwt_required()
def delete_comment(recipe_id: str, comment_id: str):
    """댓글을 삭제합니다. (작성자 본인만 가능)"""
    recipe_service = current_app.services['recipes']
    user_id = get_jwt_identity()
    try:
        comments = recipe_service.delete_comment(recipe_id, comment_id, user_id)
        return jsonify({
            "comments": CommentSchema(many=True).dump(comments),
            "comments_count": len(comments)
        }), 200
    except PermissionError as e:
        return jsonify({"error_code": "FORBIDDEN", "message": str(e)}), 403
    except ValueError as e:
        return jsonify({"error_code": "COMMENT_NOT_FOUND", "message": str(e)}), 404

# --- 저장(북마크) ---

@recipes_bp.route('/<string:recipe_id>/save', methods=['POST'])
@jwt_required()
def save_recipe(recipe_id: str):
    recipe_service = current_app.services['recipes']
    user_id = get_jwt_identity()
    try:
        recipe_service.save_recipe(recipe_id, user_id)
        return jsonify({"message": "레시피를 저장했습니다."}), 200
    except ConflictError as e:
        return jsonify({"error_code": e.error_code, "message": str(e)}), 400
    except ValueError as e:
        return jsonify({"error_code": "RESOURCE_NOT_FOUND", "message": str(e)}), 404

@recipes_bp.route('/<string:recipe_id>/save', methods=['DELETE'])
@jwt_required()
def unsave_recipe(recipe_id: str):
    recipe_service = current_app.services['recipes']
    user_id = get_jwt_identity()
    try:
        recipe_service.unsave_recipe(recipe_id, user_id)
        return Response(status=204)
    except ValueError as e:
        return jsonify({"error_code": "USER_NOT_FOUND", "message": str(e)}), 404
