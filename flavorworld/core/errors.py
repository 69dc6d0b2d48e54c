# flavorworld/core/errors.py
#
# 서비스 계층의 예외 규약:
# - ValueError: 대상 리소스가 없음 (404)
# - PermissionError: 소유자/관리자가 아님 (403)
# - ConflictError: 현재 상태와 요청이 충돌함 (400, 예: 이미 좋아요한 레시피)
# - MediaError: 미디어 형식/크기 오류 (400). ValueError의 하위 클래스이므로 먼저 처리해야 합니다.

class ConflictError(Exception):
    """요청이 리소스의 현재 상태와 충돌할 때 발생합니다."""

    def __init__(self, message: str, error_code: str = "CONFLICT"):
        super().__init__(message)
        self.error_code = error_code

class MediaError(ValueError):
    """업로드된 미디어의 형식이나 크기가 허용 범위를 벗어났을 때 발생합니다. (400)"""
