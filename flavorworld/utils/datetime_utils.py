# flavorworld/utils/datetime_utils.py
"""
시간/날짜 처리 유틸리티

- 저장과 비교는 모두 UTC timezone-aware datetime으로 합니다.
- 서버 응답, Firestore 문서, 레거시 레코드가 쓰는 여러 날짜 표현(ISO 문자열, epoch 숫자, date)을
  coerce_datetime() 하나로 통일합니다.
"""

import logging
from datetime import datetime, date, timezone, time
from typing import Any, Optional
from dateutil import parser as dateutil_parser

logger = logging.getLogger(__name__)

# 작성 시각이 없는 게시물의 정렬 기준값
EPOCH_MIN = datetime.min.replace(tzinfo=timezone.utc)

# 이 값보다 큰 epoch 숫자는 밀리초 단위로 간주
_EPOCH_MILLIS_THRESHOLD = 1e11


def _as_utc(value: datetime) -> datetime:
    # naive datetime은 UTC로 가정
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _start_of_day(value: date) -> datetime:
    return datetime.combine(value, time.min).replace(tzinfo=timezone.utc)


class DateTimeUtils:

    @staticmethod
    def now() -> datetime:
        return datetime.now(timezone.utc)

    @staticmethod
    def parse_iso_datetime(iso_string: str) -> datetime:
        """
        ISO 8601 문자열을 UTC datetime으로 파싱합니다.
        예) 2024-01-15, 2024-01-15T10:30:00Z, 2024-01-15T10:30:00.123456+09:00
        :raises ValueError: 빈 문자열이거나 ISO 형식이 아닌 경우
        """
        if not iso_string:
            raise ValueError("빈 문자열은 날짜로 변환할 수 없습니다.")
        try:
            return _as_utc(dateutil_parser.isoparse(iso_string))
        except (ValueError, OverflowError) as e:
            logger.warning(f"ISO 날짜 파싱 실패: {iso_string!r} ({e})")
            raise ValueError(f"잘못된 ISO 날짜 형식입니다: {iso_string}") from e

    @staticmethod
    def to_iso_string(dt: datetime) -> str:
        """UTC ISO 문자열로 변환합니다. 오프셋은 'Z'로 표기합니다."""
        return _as_utc(dt).isoformat().replace('+00:00', 'Z')

    @staticmethod
    def coerce_datetime(value: Any) -> Optional[datetime]:
        """
        datetime / date / epoch(초 또는 밀리초) / ISO 문자열을 UTC datetime으로 변환합니다.
        변환할 수 없는 값은 None을 반환하며, 예외를 던지지 않습니다.
        """
        if value is None or isinstance(value, bool):
            return None
        try:
            if isinstance(value, datetime):
                return _as_utc(value)
            if isinstance(value, date):
                return _start_of_day(value)
            if isinstance(value, (int, float)):
                seconds = value / 1000.0 if abs(value) > _EPOCH_MILLIS_THRESHOLD else float(value)
                return datetime.fromtimestamp(seconds, tz=timezone.utc)
            if isinstance(value, str) and value.strip():
                return DateTimeUtils.parse_iso_datetime(value.strip())
        except (ValueError, OverflowError, OSError):
            logger.debug(f"날짜로 변환할 수 없는 값을 무시합니다: {value!r}")
        return None

    @staticmethod
    def for_firestore(obj: Any) -> Any:
        """
        Firestore에 쓰기 전 dict/list를 재귀적으로 돌며
        date는 00:00 UTC datetime으로, naive datetime은 UTC aware datetime으로 바꿉니다.
        """
        if isinstance(obj, datetime):
            return _as_utc(obj)
        if isinstance(obj, date):
            return _start_of_day(obj)
        if isinstance(obj, dict):
            return {key: DateTimeUtils.for_firestore(value) for key, value in obj.items()}
        if isinstance(obj, list):
            return [DateTimeUtils.for_firestore(item) for item in obj]
        return obj
