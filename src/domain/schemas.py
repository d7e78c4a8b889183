"""
Data schemas for the editor.

브라우저 탭 하나의 일시적 UI 상태만 표현한다.
영속화 없음, 식별자 없음 (run log 제외).
"""

from dataclasses import dataclass, field
from typing import Any

from src.core.images import to_data_url
from src.domain.constants import DEFAULT_PROMPT

# =============================================================================
# Upload
# =============================================================================

@dataclass
class UploadedImage:
    """검증을 통과한 업로드 이미지."""
    filename: str
    content_type: str  # image/png | image/jpeg
    data: bytes = field(repr=False)

    @property
    def size(self) -> int:
        return len(self.data)

    def to_data_url(self) -> str:
        """미리보기 <img src>용 data URL."""
        return to_data_url(self.data, self.content_type)


# =============================================================================
# Editor State
# =============================================================================

@dataclass
class EditorState:
    """
    에디터 UI 상태.

    불변 조건: result / error / loading 중 최대 하나만 의미 있게 활성.
    - 결과가 있으면 error는 None
    - 에러가 있으면 result_url은 None (이전 이미지 잔존 금지)
    """
    original: UploadedImage | None = None
    prompt: str = DEFAULT_PROMPT
    result_url: str | None = None
    result_mime_type: str | None = None
    error: str | None = None
    is_loading: bool = False

    @property
    def can_generate(self) -> bool:
        """Generate 버튼 활성 여부."""
        return self.original is not None and not self.is_loading

    @property
    def original_preview_url(self) -> str | None:
        if self.original is None:
            return None
        return self.original.to_data_url()

    def with_result(self, result_url: str, mime_type: str | None = None) -> "EditorState":
        """성공 상태로 전이 (에러 제거)."""
        return EditorState(
            original=self.original,
            prompt=self.prompt,
            result_url=result_url,
            result_mime_type=mime_type,
            error=None,
            is_loading=False,
        )

    def with_error(self, message: str) -> "EditorState":
        """실패 상태로 전이 (결과 이미지 제거)."""
        return EditorState(
            original=self.original,
            prompt=self.prompt,
            result_url=None,
            result_mime_type=None,
            error=message,
            is_loading=False,
        )


# =============================================================================
# Run Log
# =============================================================================

@dataclass
class EditRunLog:
    """
    Generate 1회 호출 기록.

    프롬프트 원문은 저장하지 않고 hash만 기록.
    """
    run_id: str
    started_at: str
    result: str  # pending | success | failed | rejected
    finished_at: str | None = None
    input_filename: str | None = None
    input_size: int | None = None
    input_mime_type: str | None = None
    prompt_hash: str | None = None
    model_requested: str | None = None
    model_used: str | None = None
    fallback_triggered: bool = False
    output_mime_type: str | None = None
    output_size: int | None = None
    error_code: str | None = None
    error_message: str | None = None
    duration_ms: int | None = None

    def to_dict(self) -> dict[str, Any]:
        """JSON 직렬화용."""
        return {
            "run_id": self.run_id,
            "started_at": self.started_at,
            "finished_at": self.finished_at,
            "result": self.result,
            "input_filename": self.input_filename,
            "input_size": self.input_size,
            "input_mime_type": self.input_mime_type,
            "prompt_hash": self.prompt_hash,
            "model_requested": self.model_requested,
            "model_used": self.model_used,
            "fallback_triggered": self.fallback_triggered,
            "output_mime_type": self.output_mime_type,
            "output_size": self.output_size,
            "error_code": self.error_code,
            "error_message": self.error_message,
            "duration_ms": self.duration_ms,
        }
