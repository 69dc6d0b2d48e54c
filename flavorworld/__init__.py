# flavorworld/__init__.py

# =====================================================================================
# 1. 환경 변수 로드 (가장 먼저 실행)
# =====================================================================================
from dotenv import load_dotenv
load_dotenv()

# =====================================================================================
# 2. 모듈 임포트 (Module Imports)
# =====================================================================================
import os
import logging
from flask import Flask, jsonify
from marshmallow import ValidationError
from werkzeug.exceptions import HTTPException
from flask_jwt_extended import JWTManager
import firebase_admin
from firebase_admin import credentials

# - 설정
from flavorworld.core.config import config_by_name

# - API 블루프린트
from flavorworld.api.auth.routes import auth_bp
from flavorworld.api.users.routes import users_bp
from flavorworld.api.recipes.routes import recipes_bp
from flavorworld.api.feed.routes import feed_bp
from flavorworld.api.groups.routes import groups_bp
from flavorworld.api.notifications.routes import notifications_bp

# - 서비스 모듈
from flavorworld.services.media_service import MediaService
from flavorworld.services.notification_service import NotificationService
from flavorworld.api.auth.services import auth_service
from flavorworld.api.recipes.services import RecipeService
from flavorworld.api.users.services import UserService
from flavorworld.api.groups.services import GroupService
from flavorworld.api.feed.services import FeedService

def create_app(config_name=None, db=None):
    """
    Flask 애플리케이션 팩토리 함수.
    :param config_name: 'development' | 'testing' | 'production' (기본값은 FLASK_ENV)
    :param db: Firestore 클라이언트. 지정하지 않으면 Firebase를 초기화한 뒤 기본 클라이언트를 사용합니다.
    """
    # =====================================================================================
    # 3. Flask 앱 생성 및 기본 설정
    # =====================================================================================
    config_name = config_name or os.getenv('FLASK_ENV', 'development')

    app = Flask(__name__)
    app.config.from_object(config_by_name[config_name])
    app.json.ensure_ascii = False

    if not app.config.get('JWT_SECRET_KEY'):
        raise ValueError("필수 환경 변수가 설정되지 않았습니다: JWT_SECRET_KEY")

    # =====================================================================================
    # 4. 확장 기능 및 외부 서비스 초기화
    # =====================================================================================
    jwt = JWTManager(app)

    if db is None and not firebase_admin._apps:
        cred_path = app.config['FIREBASE_CREDENTIALS_PATH']
        if not cred_path or not os.path.exists(cred_path):
            raise FileNotFoundError(f"Firebase 인증 파일을 찾을 수 없습니다: {cred_path}")
        cred = credentials.Certificate(cred_path)
        options = {'projectId': app.config['FIREBASE_PROJECT_ID']} if app.config.get('FIREBASE_PROJECT_ID') else None
        firebase_admin.initialize_app(cred, options)

    # =====================================================================================
    # 5. 서비스 인스턴스 생성 및 'app.services'에 저장 (의존성 주입)
    # =====================================================================================
    app.services = {}

    # 5-1. 의존성이 없거나 다른 서비스의 기반이 되는 공용/핵심 서비스 먼저 생성
    media_instance = MediaService()
    media_instance.init_app(app)
    app.services['media'] = media_instance
    app.services['notifications'] = NotificationService(db=db)

    # 5-2. 다른 서비스를 주입받아야 하는 도메인 서비스 생성
    app.services['recipes'] = RecipeService(notification_service=app.services['notifications'], db=db)
    app.services['users'] = UserService(
        notification_service=app.services['notifications'],
        recipe_service=app.services['recipes'],
        db=db
    )
    app.services['groups'] = GroupService(
        notification_service=app.services['notifications'],
        recipe_service=app.services['recipes'],
        db=db
    )
    app.services['feed'] = FeedService(group_service=app.services['groups'], db=db)

    # - 인증 서비스 (앱 컨텍스트 필요)
    auth_service.init_app(app, db=db)

    @jwt.token_in_blocklist_loader
    def check_if_token_revoked(jwt_header, jwt_payload):
        return auth_service.is_token_revoked(jwt_payload)

    # =====================================================================================
    # 6. 블루프린트 등록
    # =====================================================================================
    app.register_blueprint(auth_bp, url_prefix='/api/auth')
    app.register_blueprint(users_bp, url_prefix='/api/users')
    app.register_blueprint(recipes_bp, url_prefix='/api/recipes')
    app.register_blueprint(feed_bp, url_prefix='/api/feed')
    app.register_blueprint(groups_bp, url_prefix='/api/groups')
    app.register_blueprint(notifications_bp, url_prefix='/api/notifications')

    # =====================================================================================
    # 7. 전역 에러 핸들러 설정
    # =====================================================================================
    @app.errorhandler(ValidationError)
    def handle_marshmallow_validation(err):
        response = {"error_code": "VALIDATION_ERROR", "details": err.messages}
        return jsonify(response), 400

    @app.errorhandler(Exception)
    def handle_generic_exception(err):
        # 404/405 등 HTTP 예외는 원래 상태 코드를 유지
        if isinstance(err, HTTPException):
            return err
        # 다른 핸들러에서 처리되지 않은 모든 예외를 여기서 처리
        logging.error(f"An unhandled exception occurred: {err}", exc_info=True)
        response = {"error_code": "INTERNAL_SERVER_ERROR", "message": "서버 내부에서 예상치 못한 오류가 발생했습니다."}
        return jsonify(response), 500

    # =====================================================================================
    # 8. 로깅 및 앱 반환
    # =====================================================================================
    if not app.debug:
        logging.basicConfig(level=logging.INFO, format='%(asctime)s %(levelname)s: %(message)s [in %(pathname)s:%(lineno)d]')

    logging.info(f"Flask app created for '{config_name}' environment.")

    return app
