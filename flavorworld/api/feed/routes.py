# flavorworld/api/feed/routes.py
import logging
from typing import Optional
from flask import Blueprint, request, jsonify, current_app
from flask_jwt_extended import jwt_required, get_jwt_identity
from marshmallow import ValidationError

from flavorworld.api.feed.schemas import FeedQuerySchema, FeedPostSchema, FeedStatsSchema
from flavorworld.api.feed.services import FEED_GROUPS
from flavorworld.feed.constants import FEED_FOLLOWING

feed_bp = Blueprint('feed_bp', __name__)

def _feed_response(forced_type: Optional[str] = None):
    """
    피드 요청을 처리하는 공통 함수.
    userId 쿼리 파라미터가 없으면 JWT의 사용자 ID를 사용하며, 둘 다 없으면 400을 반환합니다.
    """
    feed_service = current_app.services['feed']
    try:
        params = FeedQuerySchema().load(request.args)
    except ValidationError as err:
        return jsonify({"error_code": "VALIDATION_ERROR", "details": err.messages}), 400

    user_id = params['user_id'] or get_jwt_identity()
    if not user_id:
        return jsonify({"error_code": "USER_ID_REQUIRED", "message": "사용자 ID가 필요합니다."}), 400

    feed_type = forced_type or params['type']
    try:
        posts = feed_service.get_feed(user_id, feed_type, params['limit'])
        return jsonify(FeedPostSchema(many=True).dump(posts)), 200
    except ValueError as e:
        return jsonify({"error_code": "USER_NOT_FOUND", "message": str(e)}), 404
    except Exception as e:
        logging.error(f"피드 조회 중 오류 발생 (user_id: {user_id}, type: {feed_type}): {e}", exc_info=True)
        return jsonify({"error_code": "FEED_FETCH_FAILED", "message": "피드를 불러오는 중 오류가 발생했습니다."}), 500

@feed_bp.route('', methods=['GET'])
@jwt_required(optional=True)
def get_feed():
    """맞춤 피드를 조회합니다. ?type=personalized|following|groups"""
    return _feed_response()

@feed_bp.route('/following', methods=['GET'])
@jwt_required(optional=True)
def get_following_feed():
    return _feed_response(FEED_FOLLOWING)

@feed_bp.route('/groups', methods=['GET'])
@jwt_required(optional=True)
def get_groups_feed():
    return _feed_response(FEED_GROUPS)

@feed_bp.route('/stats', methods=['GET'])
@jwt_required(optional=True)
def get_feed_stats():
    feed_service = current_app.services['feed']
    user_id = request.args.get('userId', None, type=str) or get_jwt_identity()
    if not user_id:
        return jsonify({"error_code": "USER_ID_REQUIRED", "message": "사용자 ID가 필요합니다."}), 400
    try:
        return jsonify(FeedStatsSchema().dump(feed_service.get_stats(user_id))), 200
    except ValueError as e:
        return jsonify({"error_code": "USER_NOT_FOUND", "message": str(e)}), 404
