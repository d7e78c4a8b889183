"""
이미지 인코딩: bytes → base64 / data URL

미리보기, 결과 이미지, 다운로드 링크는 모두 data URL:
- data URL = "data:<mime>;base64,<payload>"
"""

import base64

PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"
JPEG_SIGNATURE = b"\xff\xd8\xff"


def encode_base64(data: bytes) -> str:
    """bytes → base64 문자열 (접두사 없음)."""
    return base64.b64encode(data).decode("ascii")


def to_data_url(data: bytes, mime_type: str) -> str:
    """
    bytes → data URL.

    Args:
        data: 이미지 바이트
        mime_type: MIME 타입 (예: image/png)

    Returns:
        "data:image/png;base64,iVBORw0KGgo..."
    """
    return f"data:{mime_type};base64,{encode_base64(data)}"


def sniff_image_type(data: bytes) -> str | None:
    """
    매직 바이트로 이미지 타입 추정.

    Returns:
        "image/png" | "image/jpeg" | None
    """
    if data.startswith(PNG_SIGNATURE):
        return "image/png"
    if data.startswith(JPEG_SIGNATURE):
        return "image/jpeg"
    return None
