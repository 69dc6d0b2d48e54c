# flavorworld/api/auth/services.py
import uuid
import logging
from datetime import datetime, timezone
from typing import Dict, Any, Optional
from dataclasses import asdict
from firebase_admin import firestore
from flask import Flask
from werkzeug.security import generate_password_hash, check_password_hash

from flavorworld.core.errors import ConflictError
from flavorworld.models.user import User
from flavorworld.utils.datetime_utils import DateTimeUtils

class AuthService:
    def __init__(self):
        self.db = None
        self.users_ref = None
        self.revoked_tokens_ref = None
        self.app: Optional[Flask] = None

    def init_app(self, app: Flask, db=None):
        """앱 초기화 과정에서 호출되어 DB 연결 및 앱 컨텍스트를 설정합니다."""
        self.db = db or firestore.client()
        self.users_ref = self.db.collection('users')
        self.revoked_tokens_ref = self.db.collection('revoked_tokens')
        self.app = app

    def _find_by_email(self, email: str) -> Optional[Dict[str, Any]]:
        query = self.users_ref.where('email', '==', email.strip().lower()).limit(1).stream()
        user_doc = next(iter(query), None)
        return user_doc.to_dict() if user_doc else None

    def register_user(self, email: str, password: str, full_name: str) -> Dict[str, Any]:
        """
        이메일/비밀번호로 새 사용자를 등록합니다.
        :raises ConflictError: 이미 가입된 이메일인 경우
        """
        if self._find_by_email(email):
            raise ConflictError("이미 가입된 이메일입니다.", error_code="EMAIL_ALREADY_EXISTS")

        new_user = User(
            user_id=str(uuid.uuid4()),
            email=email.strip().lower(),
            full_name=full_name.strip(),
            password_hash=generate_password_hash(password),
        )
        # Firestore 호환 변환 후 저장
        user_data = DateTimeUtils.for_firestore(asdict(new_user))
        self.users_ref.document(new_user.user_id).set(user_data)
        logging.info(f"신규 사용자 등록 완료 (user_id: {new_user.user_id})")
        return user_data

    def authenticate(self, email: str, password: str) -> Optional[Dict[str, Any]]:
        """이메일과 비밀번호가 일치하면 사용자 데이터를, 아니면 None을 반환합니다."""
        user = self._find_by_email(email)
        if not user or not check_password_hash(user.get('password_hash', ''), password):
            logging.warning(f"로그인 실패: 이메일 또는 비밀번호 불일치 ({email})")
            return None
        return user

    def change_password(self, user_id: str, current_password: str, new_password: str):
        """
        현재 비밀번호를 확인한 뒤 새 비밀번호로 교체합니다.
        :raises ValueError: 사용자가 존재하지 않는 경우
        :raises PermissionError: 현재 비밀번호가 일치하지 않는 경우
        :raises ConflictError: 새 비밀번호가 현재 비밀번호와 같은 경우
        """
        doc = self.users_ref.document(user_id).get()
        if not doc.exists:
            raise ValueError("사용자를 찾을 수 없습니다.")
        if not check_password_hash(doc.to_dict().get('password_hash') or '', current_password):
            logging.warning(f"비밀번호 변경 실패: 현재 비밀번호 불일치 (user_id: {user_id})")
            raise PermissionError("현재 비밀번호가 올바르지 않습니다.")
        if current_password == new_password:
            raise ConflictError("새 비밀번호는 현재 비밀번호와 달라야 합니다.", error_code="SAME_PASSWORD")

        self.users_ref.document(user_id).update({'password_hash': generate_password_hash(new_password)})
        logging.info(f"비밀번호 변경 완료 (user_id: {user_id})")

    # --- Blocklist 관련 로직 ---
    def add_token_to_blocklist(self, jti: str, expires: datetime):
        """전달받은 토큰의 jti를 만료 시간과 함께 Firestore에 저장합니다."""
        try:
            token_data = {
                'revoked_at': DateTimeUtils.now(),
                'expires_at': expires
            }
            # Firestore 호환 변환 후 저장
            token_data = DateTimeUtils.for_firestore(token_data)
            self.revoked_tokens_ref.document(jti).set(token_data)
        except Exception as e:
            logging.error(f"Blocklist 토큰 추가 실패 (jti: {jti}): {e}", exc_info=True)
            raise

    def is_token_revoked(self, jwt_payload: dict) -> bool:
        """jti를 이용해 해당 토큰이 무효화 목록에 있는지 확인합니다."""
        jti = jwt_payload['jti']
        doc = self.revoked_tokens_ref.document(jti).get()
        return doc.exists

    def logout_user(self, access_jti: str, access_exp: int, refresh_jti: str, refresh_exp: int):
        """Access 토큰과 Refresh 토큰을 모두 Blocklist에 추가합니다."""
        self.add_token_to_blocklist(access_jti, datetime.fromtimestamp(access_exp, tz=timezone.utc))
        self.add_token_to_blocklist(refresh_jti, datetime.fromtimestamp(refresh_exp, tz=timezone.utc))
        logging.info(f"사용자 로그아웃 처리 완료. JTI: {access_jti[:8]}..., {refresh_jti[:8]}...")

auth_service = AuthService()
