"""
Domain Constants: 에디터 전역 상수.

업로드 제한, 다운로드 파일명, 기본 프롬프트 등
default.yaml에 값이 없을 때 사용하는 기본값.
"""

import os

# =============================================================================
# Upload Policy (업로드 정책)
# =============================================================================
# 파일 선택기: PNG/JPEG, 최대 4MB
# 정확히 4MB는 허용, 초과 시 reject

UPLOAD_MAX_SIZE_MB = 4
UPLOAD_MAX_BYTES = UPLOAD_MAX_SIZE_MB * 1024 * 1024

UPLOAD_ALLOWED_TYPES = ("image/png", "image/jpeg")

# =============================================================================
# Editor Defaults (에디터 기본값)
# =============================================================================

DEFAULT_PROMPT = (
    "Set a professional, blurred office background "
    "and ensure business casual attire."
)
PROMPT_PLACEHOLDER = (
    "e.g., Add a retro filter, remove the person in the background..."
)

# 다운로드 시 브라우저에 저장되는 파일명
DOWNLOAD_FILENAME = "edited-employee-photo.png"

# =============================================================================
# AI Model Defaults
# =============================================================================

DEFAULT_IMAGE_MODEL = "gemini-2.5-flash-image-preview"
DEFAULT_IMAGE_FALLBACK_MODEL: str | None = None

# =============================================================================
# ID Prefixes
# =============================================================================

RUN_ID_PREFIX = "EDIT-"

# =============================================================================
# MIME Types
# =============================================================================

MIME_TYPES = {
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".png": "image/png",
}


def get_mime_type(filename: str) -> str:
    """
    파일명에서 MIME 타입 추출.

    Args:
        filename: 파일명 (확장자 포함)

    Returns:
        MIME 타입 문자열 (알 수 없으면 octet-stream)
    """
    ext = os.path.splitext(filename)[1].lower()
    return MIME_TYPES.get(ext, "application/octet-stream")
