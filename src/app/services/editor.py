"""
Editor Service: 파일 선택 → 검증 → 원격 편집 호출 → 결과 상태.

흐름:
- select: 파일 선택 시 크기/형식 검증, 미리보기 상태 생성
- generate: 검증 → provider 1회 호출 → 결과 또는 에러 상태

원격 호출 실패는 예외로 올리지 않고 EditorState.error에 메시지 그대로 담는다.
"""

import asyncio
import logging
from dataclasses import dataclass
from pathlib import Path

from src.app.providers.base import ImageEditError, ImageEditProvider, ImageEditResult
from src.app.providers.gemini import GeminiImageEditProvider
from src.core.logging import complete_run_log, create_run_log, save_run_log
from src.domain.constants import (
    DEFAULT_IMAGE_FALLBACK_MODEL,
    DEFAULT_IMAGE_MODEL,
    DEFAULT_PROMPT,
    UPLOAD_ALLOWED_TYPES,
    UPLOAD_MAX_SIZE_MB,
)
from src.domain.errors import MSG_UNKNOWN_ERROR, ErrorCodes, UploadRejectError
from src.domain.schemas import EditorState, EditRunLog, UploadedImage

from .validate import validate_generate_request, validate_image_upload

logger = logging.getLogger(__name__)


@dataclass
class EditOutcome:
    """generate 결과: 화면 상태 + run log."""
    state: EditorState
    run_log: EditRunLog
    result: ImageEditResult | None = None
    error_code: str | None = None

    @property
    def success(self) -> bool:
        return self.state.result_url is not None


class ImageEditService:
    """
    이미지 편집 서비스.

    config 예시 (default.yaml):
        upload:
          max_size_mb: 4
        ai:
          image_edit:
            model: gemini-2.5-flash-image-preview
            fallback: null
            timeout: null
            max_retries: 0
    """

    def __init__(
        self,
        config: dict,
        provider: ImageEditProvider | None = None,
        run_log_dir: Path | None = None,
    ):
        """
        Args:
            config: 설정 (upload, editor, ai.image_edit 포함)
            provider: 이미지 편집 Provider (None이면 config 기반 생성)
            run_log_dir: run log 저장 디렉터리 (None이면 저장 안 함)
        """
        self.config = config
        self.run_log_dir = run_log_dir

        edit_config = (config.get("ai") or {}).get("image_edit") or {}
        self.timeout: float | None = edit_config.get("timeout")

        if provider is not None:
            self.provider = provider
        else:
            self.provider = GeminiImageEditProvider(
                model=edit_config.get("model", DEFAULT_IMAGE_MODEL),
                fallback=edit_config.get("fallback", DEFAULT_IMAGE_FALLBACK_MODEL),
                max_retries=int(edit_config.get("max_retries") or 0),
            )

        upload_config = config.get("upload") or {}
        max_size_mb = upload_config.get("max_size_mb", UPLOAD_MAX_SIZE_MB)
        self.max_bytes = int(max_size_mb * 1024 * 1024)
        self.allowed_types = tuple(
            upload_config.get("allowed_types", UPLOAD_ALLOWED_TYPES)
        )

    @property
    def default_prompt(self) -> str:
        editor_config = self.config.get("editor") or {}
        return str(editor_config.get("default_prompt", DEFAULT_PROMPT))

    def validate_upload(
        self,
        filename: str | None,
        content_type: str | None,
        data: bytes | None,
    ) -> UploadedImage:
        """설정값(max_bytes, allowed_types)으로 업로드 검증."""
        return validate_image_upload(
            filename,
            content_type,
            data,
            max_bytes=self.max_bytes,
            allowed_types=self.allowed_types,
        )

    def select(
        self,
        filename: str | None,
        content_type: str | None,
        data: bytes | None,
    ) -> EditorState:
        """
        파일 선택 처리.

        - 검증 실패: error 상태, original 없음 (Generate 비활성)
        - 검증 성공: 미리보기 상태, 이전 결과/에러 제거

        provider는 호출하지 않는다.
        """
        try:
            image = self.validate_upload(filename, content_type, data)
        except UploadRejectError as e:
            logger.info(f"Upload rejected: {e}")
            return EditorState(original=None, prompt=self.default_prompt, error=e.message)

        return EditorState(original=image, prompt=self.default_prompt)

    async def generate(
        self,
        image: UploadedImage | None,
        prompt: str | None,
    ) -> EditOutcome:
        """
        편집 이미지 생성.

        Args:
            image: 검증된 업로드 이미지 (없으면 None)
            prompt: 사용자 프롬프트

        Returns:
            EditOutcome (성공 시 state.result_url, 실패 시 state.error)
        """
        state = EditorState(original=image, prompt=prompt or "", is_loading=True)
        run_log = create_run_log(
            input_filename=image.filename if image else None,
            input_size=image.size if image else None,
            input_mime_type=image.content_type if image else None,
            prompt=prompt,
        )

        # 1. 입력 검증 (실패 시 provider 호출 없음)
        try:
            checked_image, cleaned_prompt = validate_generate_request(image, prompt)
        except UploadRejectError as e:
            complete_run_log(
                run_log, "rejected", error_code=e.code, error_message=e.message
            )
            self._persist(run_log)
            return EditOutcome(
                state=state.with_error(e.message), run_log=run_log, error_code=e.code
            )

        # 2. 원격 호출 (1회)
        try:
            result = await self._call_provider(checked_image, cleaned_prompt)
        except Exception as e:
            code, message = self._describe_failure(e)
            complete_run_log(
                run_log,
                "failed",
                model_requested=self.provider.model,
                error_code=code,
                error_message=message,
            )
            self._persist(run_log)
            return EditOutcome(
                state=state.with_error(message), run_log=run_log, error_code=code
            )

        # 3. 결과 상태
        result_url = result.to_data_url()
        if result_url is None:
            message = "The model did not return an image."
            complete_run_log(
                run_log,
                "failed",
                model_requested=result.model_requested,
                model_used=result.model_used,
                error_code=ErrorCodes.NO_IMAGE_RETURNED,
                error_message=message,
            )
            self._persist(run_log)
            return EditOutcome(
                state=state.with_error(message),
                run_log=run_log,
                result=result,
                error_code=ErrorCodes.NO_IMAGE_RETURNED,
            )

        complete_run_log(
            run_log,
            "success",
            model_requested=result.model_requested,
            model_used=result.model_used,
            fallback_triggered=result.fallback_triggered,
            output_mime_type=result.mime_type,
            output_size=len(result.image_bytes or b""),
        )
        self._persist(run_log)
        return EditOutcome(
            state=state.with_result(result_url, result.mime_type),
            run_log=run_log,
            result=result,
        )

    async def _call_provider(
        self,
        image: UploadedImage,
        prompt: str,
    ) -> ImageEditResult:
        """provider 호출 (timeout 설정 시 적용)."""
        call = self.provider.edit_image(image.data, image.content_type, prompt)
        if not self.timeout:
            return await call
        return await asyncio.wait_for(call, timeout=self.timeout)

    def _describe_failure(self, error: Exception) -> tuple[str, str]:
        """예외 → (에러 코드, 화면 메시지)."""
        if isinstance(error, ImageEditError):
            logger.warning(f"Image edit failed: {error}")
            return error.code, error.message

        if isinstance(error, TimeoutError):
            logger.warning(f"Image edit timed out after {self.timeout}s")
            return (
                ErrorCodes.EDIT_TIMEOUT,
                f"The image service did not respond within {self.timeout:g} seconds.",
            )

        logger.error(f"Image edit failed with unexpected error: {error}", exc_info=True)
        return ErrorCodes.EDIT_FAILED, str(error) or MSG_UNKNOWN_ERROR

    def _persist(self, run_log: EditRunLog) -> None:
        """run_log_dir 설정 시 run log 저장 (실패해도 응답은 유지)."""
        if self.run_log_dir is None:
            return
        try:
            save_run_log(run_log, self.run_log_dir)
        except OSError as e:
            logger.warning(f"Failed to save run log {run_log.run_id}: {e}")
