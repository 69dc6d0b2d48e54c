# flavorworld/api/notifications/routes.py
from flask import Blueprint, request, jsonify, current_app
from flask_jwt_extended import jwt_required, get_jwt_identity

from flavorworld.api.notifications.schemas import NotificationResponseSchema

notifications_bp = Blueprint('notifications_bp', __name__)

@notifications_bp.route('', methods=['GET'])
@jwt_required()
def get_notifications():
    """현재 사용자가 받은 알림을 최신순으로 조회합니다."""
    notification_service = current_app.services['notifications']
    limit = request.args.get('limit', 50, type=int)
    notifications = notification_service.get_notifications(get_jwt_identity(), limit)
    return jsonify(NotificationResponseSchema(many=True).dump(notifications)), 200

@notifications_bp.route('/unread-count', methods=['GET'])
@jwt_required()
def get_unread_count():
    notification_service = current_app.services['notifications']
    return jsonify({"count": notification_service.count_unread(get_jwt_identity())}), 200

@notifications_bp.route('/mark-all-read', methods=['PUT'])
@jwt_required()
def mark_all_read():
    notification_service = current_app.services['notifications']
    updated = notification_service.mark_all_as_read(get_jwt_identity())
    return jsonify({"message": "모든 알림을 읽음 처리했습니다.", "updated": updated}), 200

@notifications_bp.route('/<string:notification_id>/read', methods=['PUT'])
@jwt_required()
def mark_read(notification_id: str):
    notification_service = current_app.services['notifications']
    try:
        notification = notification_service.mark_as_read(notification_id, get_jwt_identity())
        return jsonify(NotificationResponseSchema().dump(notification)), 200
    except PermissionError as e:
        return jsonify({"error_code": "FORBIDDEN", "message": str(e)}), 403
    except ValueError as e:
        return jsonify({"error_code": "NOTIFICATION_NOT_FOUND", "message": str(e)}), 404
