"""
Validation Service: 업로드 파일 + 프롬프트 검증.

규칙:
- 검증 실패는 provider 호출 전에 UploadRejectError로 즉시 중단
- 4MB 초과 → FILE_TOO_LARGE (정확히 4MB는 허용)
- PNG/JPEG 이외 → UNSUPPORTED_FILE_TYPE
- 이미지 또는 프롬프트 누락 → PROMPT_OR_IMAGE_MISSING
"""

from pathlib import Path

from src.core.images import sniff_image_type
from src.domain.constants import (
    UPLOAD_ALLOWED_TYPES,
    UPLOAD_MAX_BYTES,
)
from src.domain.errors import (
    MSG_FILE_TOO_LARGE,
    MSG_PROMPT_OR_IMAGE_MISSING,
    MSG_UNSUPPORTED_FILE_TYPE,
    ErrorCodes,
    UploadRejectError,
)
from src.domain.schemas import UploadedImage

# 브라우저별 비표준 MIME 표기 정규화
_MIME_ALIASES = {
    "image/jpg": "image/jpeg",
    "image/pjpeg": "image/jpeg",
    "image/x-png": "image/png",
}

_EXTENSION_TYPES = {
    ".png": "image/png",
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
}


def format_max_size(max_bytes: int) -> str:
    """바이트 → "4MB" 형식 (메시지용)."""
    mb = max_bytes / (1024 * 1024)
    return f"{mb:g}"


def resolve_image_type(
    filename: str,
    content_type: str | None,
    data: bytes,
) -> str | None:
    """
    업로드 파일의 이미지 타입 결정.

    우선순위:
    1. 매직 바이트 (실제 내용)
    2. 요청의 Content-Type
    3. 파일 확장자

    Returns:
        "image/png" | "image/jpeg" | 그 외 MIME | None
    """
    sniffed = sniff_image_type(data)
    if sniffed:
        return sniffed

    if content_type:
        normalized = content_type.split(";")[0].strip().lower()
        normalized = _MIME_ALIASES.get(normalized, normalized)
        if normalized and normalized != "application/octet-stream":
            return normalized

    return _EXTENSION_TYPES.get(Path(filename).suffix.lower())


def validate_image_upload(
    filename: str | None,
    content_type: str | None,
    data: bytes | None,
    max_bytes: int = UPLOAD_MAX_BYTES,
    allowed_types: tuple[str, ...] | list[str] = UPLOAD_ALLOWED_TYPES,
) -> UploadedImage:
    """
    파일 선택기로 받은 파일 검증.

    Args:
        filename: 원본 파일명
        content_type: 요청 Content-Type
        data: 파일 바이트
        max_bytes: 최대 허용 크기 (기본 4MB)
        allowed_types: 허용 MIME 타입

    Returns:
        UploadedImage

    Raises:
        UploadRejectError: IMAGE_MISSING, FILE_TOO_LARGE, UNSUPPORTED_FILE_TYPE
    """
    if not filename or not data:
        raise UploadRejectError(
            ErrorCodes.IMAGE_MISSING,
            MSG_PROMPT_OR_IMAGE_MISSING,
            filename=filename,
        )

    if len(data) > max_bytes:
        raise UploadRejectError(
            ErrorCodes.FILE_TOO_LARGE,
            MSG_FILE_TOO_LARGE.format(max_mb=format_max_size(max_bytes)),
            filename=filename,
            size=len(data),
            max_bytes=max_bytes,
        )

    image_type = resolve_image_type(filename, content_type, data)
    if image_type not in allowed_types:
        raise UploadRejectError(
            ErrorCodes.UNSUPPORTED_FILE_TYPE,
            MSG_UNSUPPORTED_FILE_TYPE,
            filename=filename,
            content_type=content_type,
        )

    return UploadedImage(filename=filename, content_type=image_type, data=data)


def validate_generate_request(
    image: UploadedImage | None,
    prompt: str | None,
) -> tuple[UploadedImage, str]:
    """
    Generate 요청 검증.

    Args:
        image: 검증된 업로드 이미지 (없으면 None)
        prompt: 사용자 프롬프트

    Returns:
        (이미지, 앞뒤 공백을 제거한 프롬프트)

    Raises:
        UploadRejectError: PROMPT_OR_IMAGE_MISSING
    """
    cleaned = (prompt or "").strip()
    if image is None or not cleaned:
        raise UploadRejectError(
            ErrorCodes.PROMPT_OR_IMAGE_MISSING,
            MSG_PROMPT_OR_IMAGE_MISSING,
            has_image=image is not None,
            has_prompt=bool(cleaned),
        )
    return image, cleaned
