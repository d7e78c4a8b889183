"""
AI Provider 추상 인터페이스.

모델 교체 가능하게 설계:
- Provider 추상화로 이미지 편집 서비스 교체
- model_requested + model_used 필수 기록

외부 생성형 이미지 서비스는 불투명한 협력자로 취급.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any

from src.core.images import to_data_url

# =============================================================================
# Result Data Classes
# =============================================================================

@dataclass
class ImageEditResult:
    """
    이미지 편집 결과.

    필수 키:
    - model_requested: config에 설정된 모델
    - model_used: 실제 호출된 모델 (fallback 시 다를 수 있음)
    - fallback_triggered: fallback 발생 여부
    """
    success: bool
    image_bytes: bytes | None = field(default=None, repr=False)
    mime_type: str | None = None
    text: str | None = None  # 이미지와 함께 반환된 설명 텍스트

    # 모델 추적
    model_requested: str | None = None
    model_used: str | None = None
    fallback_triggered: bool = False

    processed_at: str | None = None
    error_message: str | None = None
    error_code: str | None = None

    def to_data_url(self) -> str | None:
        """결과 이미지를 <img src>용 data URL로 변환."""
        if not self.image_bytes:
            return None
        return to_data_url(self.image_bytes, self.mime_type or "image/png")

    def to_dict(self) -> dict[str, Any]:
        # image_bytes는 제외 (로그/JSON 용량)
        result = {
            "success": self.success,
            "mime_type": self.mime_type,
            "image_size": len(self.image_bytes) if self.image_bytes else None,
            "text": self.text,
            "model_requested": self.model_requested,
            "model_used": self.model_used,
            "fallback_triggered": self.fallback_triggered,
            "processed_at": self.processed_at,
            "error_message": self.error_message,
            "error_code": self.error_code,
        }
        return {k: v for k, v in result.items() if v is not None}


# =============================================================================
# Provider Exceptions
# =============================================================================

class ProviderError(Exception):
    """Provider 관련 에러."""

    def __init__(self, code: str, message: str, **context: Any) -> None:
        self.code = code
        self.message = message
        self.context = context
        super().__init__(f"[{code}] {message}")


class ImageEditError(ProviderError):
    """이미지 편집 호출 관련 에러."""
    pass


# =============================================================================
# Abstract Providers
# =============================================================================

class ImageEditProvider(ABC):
    """
    이미지 편집 Provider 추상 인터페이스.

    역할: 원본 이미지 + 프롬프트 → 편집된 이미지
    """

    model: str

    @abstractmethod
    async def edit_image(
        self,
        image_bytes: bytes,
        mime_type: str,
        prompt: str,
    ) -> ImageEditResult:
        """
        프롬프트에 따라 이미지 편집.

        Args:
            image_bytes: 원본 이미지 바이트
            mime_type: 원본 MIME 타입 (image/png, image/jpeg)
            prompt: 편집 지시문

        Returns:
            ImageEditResult (success=True, image_bytes 포함)

        Raises:
            ImageEditError: 원격 호출 실패 또는 이미지 미반환
        """
        ...
