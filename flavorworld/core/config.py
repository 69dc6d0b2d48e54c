# flavorworld/core/config.py

import os
from datetime import timedelta

class Config:
    """모든 환경 설정의 기반이 되는 공통 설정 클래스입니다."""
    # JWT 토큰 서명에 사용되는 비밀 키입니다. .env 파일에서 읽어옵니다.
    JWT_SECRET_KEY = os.getenv('JWT_SECRET_KEY')
    JWT_ACCESS_TOKEN_EXPIRES = timedelta(hours=int(os.getenv('JWT_ACCESS_TOKEN_HOURS', 1)))
    JWT_REFRESH_TOKEN_EXPIRES = timedelta(days=int(os.getenv('JWT_REFRESH_TOKEN_DAYS', 14)))

    FIREBASE_PROJECT_ID = os.getenv('FIREBASE_PROJECT_ID')

    # 레시피 미디어는 base64 data URL로 문서에 직접 저장되므로 크기를 제한합니다.
    MAX_IMAGE_BYTES = int(os.getenv('MAX_IMAGE_BYTES', 7 * 1024 * 1024))
    MAX_VIDEO_BYTES = int(os.getenv('MAX_VIDEO_BYTES', 35 * 1024 * 1024))
    MAX_CONTENT_LENGTH = 50 * 1024 * 1024

class DevelopmentConfig(Config):
    """개발 환경을 위한 설정 클래스입니다."""
    DEBUG = True
    FIREBASE_CREDENTIALS_PATH = os.getenv('DEV_FIREBASE_CREDENTIALS_PATH')

class TestingConfig(Config):
    """테스트 환경을 위한 설정 클래스입니다."""
    TESTING = True
    DEBUG = False
    JWT_SECRET_KEY = os.getenv('TEST_JWT_SECRET_KEY', 'flavorworld-test-secret-key-with-32-bytes')
    FIREBASE_CREDENTIALS_PATH = os.getenv('TEST_FIREBASE_CREDENTIALS_PATH')

class ProductionConfig(Config):
    """운영 환경을 위한 설정 클래스입니다."""
    DEBUG = False
    FIREBASE_CREDENTIALS_PATH = os.getenv('FIREBASE_CREDENTIALS_PATH')

# FLASK_ENV 값에 따라 create_app에서 적절한 설정을 선택하는 데 사용됩니다.
config_by_name = dict(
    development=DevelopmentConfig,
    testing=TestingConfig,
    production=ProductionConfig
)
