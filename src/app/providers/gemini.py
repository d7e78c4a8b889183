"""
Google Gemini Image Edit Provider.

Fallback 예외 정책:
- FALLBACK_ERRORS: NotFound, ServiceUnavailable, ResourceExhausted → fallback
- REJECT_IMMEDIATELY: InvalidArgument, PermissionDenied, Unauthenticated → 즉시 reject
"""

import asyncio
import logging
import os
from datetime import UTC, datetime
from typing import Any

from src.domain.errors import ErrorCodes

from .base import ImageEditError, ImageEditProvider, ImageEditResult

logger = logging.getLogger(__name__)

# 재시도 대기 (초)
RETRY_INITIAL_DELAY = 1.0
RETRY_MAX_DELAY = 30.0

# =============================================================================
# Exception Mapping
# =============================================================================

# Fallback 타는 예외
FALLBACK_ERRORS: tuple[type[Exception], ...] = ()

# 즉시 reject하는 예외
REJECT_IMMEDIATELY: tuple[type[Exception], ...] = ()

# Google API 예외 동적 로드
try:
    from google.api_core.exceptions import (
        InvalidArgument,
        NotFound,
        PermissionDenied,
        ResourceExhausted,
        ServiceUnavailable,
        Unauthenticated,
    )

    FALLBACK_ERRORS = (
        NotFound,           # 모델명 오류/미지원
        ServiceUnavailable,  # 5xx
        ResourceExhausted,   # 429 쿼터/레이트리밋
    )

    REJECT_IMMEDIATELY = (
        InvalidArgument,    # 입력 오류
        PermissionDenied,   # 인증 오류
        Unauthenticated,    # API 키 오류
    )
except ImportError:
    pass


class GeminiImageEditProvider(ImageEditProvider):
    """
    Gemini 이미지 편집 Provider.

    Usage:
        provider = GeminiImageEditProvider(
            model="gemini-2.5-flash-image-preview",
            fallback=None,
        )
        result = await provider.edit_image(image_bytes, "image/jpeg", prompt)
    """

    def __init__(
        self,
        model: str = "gemini-2.5-flash-image-preview",
        fallback: str | None = None,
        api_key: str | None = None,
        max_retries: int = 0,
    ):
        """
        Args:
            model: 기본 모델 ID (config에서 주입)
            fallback: Fallback 모델 (None이면 재시도 없이 실패)
            api_key: API 키 (환경변수 GOOGLE_API_KEY 사용 가능)
            max_retries: 일시 오류 재시도 횟수 (0이면 1회 호출)
        """
        self.model = model
        self.fallback = fallback
        self.api_key = api_key or os.environ.get("GOOGLE_API_KEY")
        self.max_retries = max_retries
        self._client: Any = None

    def _get_client(self) -> Any:
        """Gemini 클라이언트 (lazy init)."""
        if self._client is None:
            try:
                import google.generativeai as genai
                genai.configure(api_key=self.api_key)
                self._client = genai
            except ImportError as e:
                raise ImageEditError(
                    ErrorCodes.GEMINI_NOT_INSTALLED,
                    "google-generativeai package not installed. "
                    "Run: pip install google-generativeai",
                ) from e
        return self._client

    async def edit_image(
        self,
        image_bytes: bytes,
        mime_type: str,
        prompt: str,
    ) -> ImageEditResult:
        """
        원본 이미지 + 프롬프트로 편집된 이미지 생성.

        Fallback 정책:
        - FALLBACK_ERRORS → fallback 모델로 재시도
        - REJECT_IMMEDIATELY → 즉시 에러
        - 이미지 미반환 → NO_IMAGE_RETURNED (fallback 안 함)
        """
        model_requested = self.model

        # 1차 시도: 기본 모델
        try:
            result = await self._call_with_retry(
                self.model, image_bytes, mime_type, prompt
            )
            result.model_requested = model_requested
            result.model_used = self.model
            result.fallback_triggered = False
            return result

        except ImageEditError:
            raise

        except FALLBACK_ERRORS as e:
            logger.warning(
                f"Primary model ({self.model}) failed with fallback error: {e}. "
                f"Attempting fallback..."
            )

            if self.fallback is None:
                raise ImageEditError(
                    ErrorCodes.NO_FALLBACK,
                    self._get_user_friendly_error_message(e),
                    model=self.model,
                ) from e

            try:
                logger.info(f"Trying fallback model: {self.fallback}")
                result = await self._call_with_retry(
                    self.fallback, image_bytes, mime_type, prompt
                )
                result.model_requested = model_requested
                result.model_used = self.fallback
                result.fallback_triggered = True
                logger.info("Fallback model succeeded")
                return result
            except ImageEditError:
                raise
            except Exception as fallback_error:
                logger.error(f"Fallback model also failed: {fallback_error}")
                raise ImageEditError(
                    ErrorCodes.FALLBACK_FAILED,
                    f"{self._get_user_friendly_error_message(fallback_error)} "
                    f"Both the primary and the fallback model failed.",
                    primary_model=self.model,
                    fallback_model=self.fallback,
                ) from fallback_error

        except REJECT_IMMEDIATELY as e:
            logger.error(f"Authentication or input error: {e}", exc_info=True)
            raise ImageEditError(
                ErrorCodes.AUTH_OR_INPUT_ERROR,
                self._get_user_friendly_error_message(e),
                model=self.model,
            ) from e

        except Exception as e:
            logger.error(f"Image edit failed with unexpected error: {e}", exc_info=True)
            raise ImageEditError(
                ErrorCodes.EDIT_FAILED,
                self._get_user_friendly_error_message(e),
                model=self.model,
            ) from e

    async def _call_with_retry(
        self,
        model: str,
        image_bytes: bytes,
        mime_type: str,
        prompt: str,
    ) -> ImageEditResult:
        """
        같은 모델로 일시 오류(FALLBACK_ERRORS)만 max_retries만큼 재시도.

        대기 시간: RETRY_INITIAL_DELAY부터 2배씩, RETRY_MAX_DELAY 상한.
        마지막 시도의 예외는 그대로 올려 fallback 판단에 넘긴다.
        """
        delay = RETRY_INITIAL_DELAY
        attempts = max(self.max_retries, 0) + 1
        attempt = 1

        while True:
            try:
                result = await self._call_api(model, image_bytes, mime_type, prompt)
            except FALLBACK_ERRORS as e:
                if attempt >= attempts:
                    raise
                logger.warning(
                    f"[{model}] attempt {attempt}/{attempts} failed: {e}. "
                    f"Retrying in {delay:.1f}s..."
                )
                await asyncio.sleep(delay)
                delay = min(delay * 2, RETRY_MAX_DELAY)
                attempt += 1
                continue

            if attempt > 1:
                logger.info(f"[{model}] succeeded on attempt {attempt}/{attempts}")
            return result

    def _get_user_friendly_error_message(self, error: Exception) -> str:
        """
        사용자에게 보여줄 에러 메시지 생성.

        안내 문장 뒤에 원격 서비스의 원본 메시지를 그대로 붙인다.
        """
        detail = str(error) or "An unknown error occurred."

        try:
            from google.api_core.exceptions import (
                InvalidArgument,
                PermissionDenied,
                ResourceExhausted,
                ServiceUnavailable,
                Unauthenticated,
            )
        except ImportError:
            return detail

        if isinstance(error, Unauthenticated):
            hint = (
                "Google API authentication failed. "
                "Check the GOOGLE_API_KEY environment variable."
            )
        elif isinstance(error, PermissionDenied):
            hint = "The API key is not allowed to perform this request."
        elif isinstance(error, ResourceExhausted):
            hint = "API quota exceeded. Please try again later."
        elif isinstance(error, ServiceUnavailable):
            hint = "The image service is temporarily unavailable. Please try again later."
        elif isinstance(error, InvalidArgument):
            hint = "The request was rejected by the image service."
        else:
            return detail

        return f"{hint} ({detail})"

    async def _call_api(
        self,
        model: str,
        image_bytes: bytes,
        mime_type: str,
        prompt: str,
    ) -> ImageEditResult:
        """실제 Gemini API 호출."""
        now = datetime.now(UTC).isoformat()

        genai = self._get_client()
        model_instance = genai.GenerativeModel(model)

        image_part = {
            "mime_type": mime_type,
            "data": image_bytes,
        }

        # SDK 호출은 동기 → 이벤트 루프 블로킹 방지
        response = await asyncio.to_thread(
            model_instance.generate_content, [image_part, prompt]
        )

        return self._parse_response(response, processed_at=now)

    def _parse_response(self, response: Any, processed_at: str) -> ImageEditResult:
        """
        응답에서 첫 번째 inline 이미지 추출.

        Raises:
            ImageEditError: NO_IMAGE_RETURNED
        """
        texts: list[str] = []

        for candidate in getattr(response, "candidates", None) or []:
            content = getattr(candidate, "content", None)
            for part in getattr(content, "parts", None) or []:
                inline_data = getattr(part, "inline_data", None)
                data = getattr(inline_data, "data", None) if inline_data else None
                if data:
                    return ImageEditResult(
                        success=True,
                        image_bytes=data,
                        mime_type=getattr(inline_data, "mime_type", None) or "image/png",
                        text="\n".join(texts) or None,
                        processed_at=processed_at,
                    )
                text = getattr(part, "text", None)
                if text:
                    texts.append(text)

        message = "The model did not return an image."
        feedback = getattr(response, "prompt_feedback", None)
        block_reason = getattr(feedback, "block_reason", None) if feedback else None
        if block_reason:
            message += f" Reason: {block_reason}"
        elif texts:
            message += f" Response: {' '.join(texts)}"

        raise ImageEditError(ErrorCodes.NO_IMAGE_RETURNED, message)
