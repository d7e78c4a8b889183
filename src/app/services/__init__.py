"""
Application Services.

역할:
- validate: 업로드 파일/프롬프트 검증
- editor: 파일 선택 + 원격 편집 호출 → 화면 상태
"""

from .editor import EditOutcome, ImageEditService
from .validate import validate_generate_request, validate_image_upload

__all__ = [
    "ImageEditService",
    "EditOutcome",
    "validate_image_upload",
    "validate_generate_request",
]
