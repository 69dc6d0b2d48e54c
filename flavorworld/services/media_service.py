# flavorworld/services/media_service.py
import base64
import logging
import re
from typing import Optional, Dict, Any
from flask import Flask
from werkzeug.datastructures import FileStorage

from flavorworld.core.errors import MediaError

_DATA_URL_PATTERN = re.compile(r'^data:(?P<mime>(image|video)/[\w.+-]+);base64,(?P<payload>[A-Za-z0-9+/=\s]+)$')

class MediaService:
    """
    레시피 이미지/동영상을 base64 data URL로 변환하는 서비스 클래스입니다.
    별도의 파일 스토리지 없이 레시피 문서에 미디어를 직접 저장합니다.
    """

    def __init__(self):
        self.max_image_bytes = None
        self.max_video_bytes = None

    def init_app(self, app: Flask):
        """
        Flask 앱 초기화 과정에서 호출되어 업로드 크기 제한을 설정합니다.
        이 메서드는 create_app에서 단 한 번만 호출됩니다.
        """
        self.max_image_bytes = app.config['MAX_IMAGE_BYTES']
        self.max_video_bytes = app.config['MAX_VIDEO_BYTES']
        logging.info("MediaService: 미디어 업로드 설정이 초기화되었습니다.")

    def _limit_for(self, kind: str) -> Optional[int]:
        return self.max_video_bytes if kind == 'video' else self.max_image_bytes

    def encode_upload(self, file: FileStorage) -> Dict[str, Any]:
        """
        multipart로 업로드된 파일을 data URL로 변환합니다.
        :return: {'image' 또는 'video': data URL, 'media_type': 'image' | 'video'}
        :raises MediaError: 지원하지 않는 MIME 타입이거나 크기 제한을 초과한 경우
        """
        mimetype = file.mimetype or ''
        kind = mimetype.split('/')[0]
        if kind not in ('image', 'video'):
            raise MediaError(f"지원하지 않는 파일 형식입니다: {mimetype or 'unknown'}")

        content = file.read()
        limit = self._limit_for(kind)
        if limit is not None and len(content) > limit:
            raise MediaError(f"파일 크기가 제한({limit} bytes)을 초과했습니다.")

        data_url = f"data:{mimetype};base64,{base64.b64encode(content).decode('ascii')}"
        logging.info(f"미디어 변환 완료: {mimetype}, {len(content)} bytes")
        return {kind: data_url, 'media_type': kind}

    def validate_data_url(self, data_url: str) -> Dict[str, Any]:
        """
        JSON 본문으로 전달된 data URL의 형식과 크기를 검증합니다.
        :raises MediaError: data URL 형식이 아니거나 크기 제한을 초과한 경우
        """
        match = _DATA_URL_PATTERN.match(data_url or '')
        if not match:
            raise MediaError("미디어는 image/* 또는 video/* 형식의 base64 data URL이어야 합니다.")

        kind = match.group('mime').split('/')[0]
        payload = re.sub(r'\s', '', match.group('payload'))
        decoded_size = len(payload) * 3 // 4 - payload.count('=')
        limit = self._limit_for(kind)
        if limit is not None and decoded_size > limit:
            raise MediaError(f"파일 크기가 제한({limit} bytes)을 초과했습니다.")
        return {kind: data_url, 'media_type': kind}

    def resolve_media(self, files, payload: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """
        요청에서 미디어를 하나 찾아 반환합니다. 파일 업로드가 본문의 data URL보다 우선합니다.
        이미지와 동영상은 동시에 저장하지 않으므로 반환값에는 반대쪽 필드가 None으로 포함됩니다.
        미디어가 없으면 None을 반환합니다.
        """
        media = None
        for field_name in ('media', 'image', 'video'):
            file = files.get(field_name) if files else None
            if file and file.filename:
                media = self.encode_upload(file)
                break

        if media is None:
            for field_name in ('image', 'video'):
                value = payload.get(field_name)
                if isinstance(value, str) and value:
                    media = self.validate_data_url(value)
                    break

        if media is None:
            return None
        return {'image': media.get('image'), 'video': media.get('video'), 'media_type': media['media_type']}
