"""
Error definitions for the editor.

에러 종류는 두 가지뿐:
- 업로드/입력 검증 실패 → UploadRejectError (네트워크 호출 전 차단)
- 원격 호출 실패 → providers.base.ImageEditError

둘 다 message를 그대로 화면에 표시한다.
"""

from typing import Any


class UploadRejectError(Exception):
    """
    업로드/입력 검증 실패 시 발생하는 에러.

    provider 호출 전에 즉시 중단:
    - 4MB 초과 파일
    - 이미지 누락
    - 프롬프트 누락
    - PNG/JPEG 이외 형식

    Usage:
        raise UploadRejectError(
            ErrorCodes.FILE_TOO_LARGE,
            "File size must be less than 4MB.",
            size=5_000_000,
        )
    """

    def __init__(self, code: str, message: str, **context: Any) -> None:
        self.code = code
        self.message = message
        self.context = context
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        ctx_str = ", ".join(f"{k}={v!r}" for k, v in self.context.items())
        if ctx_str:
            return f"[{self.code}] {self.message} ({ctx_str})"
        return f"[{self.code}] {self.message}"

    def to_dict(self) -> dict[str, Any]:
        """로그/JSON 직렬화용."""
        return {
            "code": self.code,
            "message": self.message,
            **self.context,
        }


# =============================================================================
# Error Codes
# =============================================================================

class ErrorCodes:
    """에러 코드 상수."""

    # === Upload validation ===
    FILE_TOO_LARGE = "FILE_TOO_LARGE"
    UNSUPPORTED_FILE_TYPE = "UNSUPPORTED_FILE_TYPE"
    IMAGE_MISSING = "IMAGE_MISSING"
    PROMPT_OR_IMAGE_MISSING = "PROMPT_OR_IMAGE_MISSING"

    # === Remote call ===
    EDIT_FAILED = "EDIT_FAILED"
    EDIT_TIMEOUT = "EDIT_TIMEOUT"
    NO_IMAGE_RETURNED = "NO_IMAGE_RETURNED"
    AUTH_OR_INPUT_ERROR = "AUTH_OR_INPUT_ERROR"
    NO_FALLBACK = "NO_FALLBACK"
    FALLBACK_FAILED = "FALLBACK_FAILED"
    GEMINI_NOT_INSTALLED = "GEMINI_NOT_INSTALLED"


# =============================================================================
# User-facing messages
# =============================================================================

MSG_FILE_TOO_LARGE = "File size must be less than {max_mb}MB."
MSG_PROMPT_OR_IMAGE_MISSING = "Please upload an image and provide an editing prompt."
MSG_UNSUPPORTED_FILE_TYPE = "Only PNG and JPEG images are supported."
MSG_UNKNOWN_ERROR = "An unknown error occurred."
