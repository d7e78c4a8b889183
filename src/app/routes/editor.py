"""
Editor Routes: 사진 업로드 → 프롬프트 → 편집 이미지 (메인 기능).

- GET / → 에디터 화면 (HTMX)
- POST /api/editor/select → 파일 선택 시 검증 + 미리보기 조각
- POST /api/editor/generate → 편집 이미지 생성 결과 조각
- POST /api/editor/edit → JSON API (HTMX 없이 호출하는 클라이언트용)

화면 상태는 브라우저가 보유한다 (선택 파일, 프롬프트, 진행 중 플래그).
서버는 요청마다 EditorState를 다시 만들어 해당 조각만 렌더링한다.
"""

import logging
from pathlib import Path
from typing import Any

from fastapi import APIRouter, File, Form, HTTPException, Request, UploadFile
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates

from src.app.services.editor import ImageEditService
from src.domain.constants import DOWNLOAD_FILENAME, PROMPT_PLACEHOLDER
from src.domain.errors import UploadRejectError
from src.domain.schemas import EditorState, UploadedImage

logger = logging.getLogger(__name__)

# Jinja2 템플릿 설정
_templates_dir = Path(__file__).parent.parent / "templates"
jinja_templates = Jinja2Templates(directory=_templates_dir)

# Routers
router = APIRouter()  # HTML pages
api_router = APIRouter()  # API endpoints


# =============================================================================
# Helpers
# =============================================================================


def get_edit_service(request: Request) -> ImageEditService:
    """lifespan에서 생성된 ImageEditService (없으면 config로 생성)."""
    service: ImageEditService | None = getattr(request.app.state, "edit_service", None)
    if service is None:
        config: dict = getattr(request.app.state, "config", {}) or {}
        service = ImageEditService(config)
        request.app.state.edit_service = service
    return service


def _page_context(request: Request) -> dict[str, Any]:
    """모든 조각이 공유하는 템플릿 변수."""
    config: dict = getattr(request.app.state, "config", {}) or {}
    app_config = config.get("app") or {}
    editor_config = config.get("editor") or {}
    service = get_edit_service(request)
    return {
        "app_title": app_config.get("title", "HR Employee Photo Standardizer"),
        "app_subtitle": app_config.get(
            "subtitle",
            "Upload an employee photo, then use a text prompt to standardize "
            "the background and attire.",
        ),
        "footer": app_config.get("footer", "Powered by Gemini API."),
        "download_filename": editor_config.get("download_filename", DOWNLOAD_FILENAME),
        "prompt_placeholder": PROMPT_PLACEHOLDER,
        "max_size_label": f"{service.max_bytes / (1024 * 1024):g}MB",
    }


async def read_upload(
    service: ImageEditService,
    file: UploadFile | None,
) -> UploadedImage:
    """
    UploadFile → UploadedImage (검증 포함).

    max_bytes + 1 바이트까지만 읽는다 (초과 여부만 판단).

    Raises:
        UploadRejectError
    """
    if file is None:
        return service.validate_upload(None, None, None)

    data = await file.read(service.max_bytes + 1)
    return service.validate_upload(file.filename, file.content_type, data)


def render_fragment(
    request: Request,
    template_name: str,
    state: EditorState,
    status_code: int = 200,
) -> HTMLResponse:
    """HTMX 조각 렌더링."""
    return jinja_templates.TemplateResponse(
        request,
        template_name,
        {**_page_context(request), "state": state},
        status_code=status_code,
    )


# =============================================================================
# Page Routes (HTML)
# =============================================================================


@router.get("/", response_class=HTMLResponse)
async def editor_page(request: Request) -> HTMLResponse:
    """
    에디터 화면.

    초기 상태: 파일 없음, 기본 프롬프트, Generate 비활성.
    """
    service = get_edit_service(request)
    state = EditorState(prompt=service.default_prompt)
    return render_fragment(request, "editor.html", state)


# =============================================================================
# API Routes (HTMX fragments)
# =============================================================================


@api_router.post("/select", response_class=HTMLResponse)
async def select_file(
    request: Request,
    file: UploadFile | None = File(None),
) -> HTMLResponse:
    """
    파일 선택 (input change).

    Provider는 호출하지 않는다.
    - 4MB 초과/형식 오류: 에러 표시, Generate 비활성
    - 정상: 파일명 + 미리보기, 이전 결과 제거, Generate 활성
    """
    service = get_edit_service(request)

    if file is None:
        state = service.select(None, None, None)
    else:
        data = await file.read(service.max_bytes + 1)
        state = service.select(file.filename, file.content_type, data)

    return render_fragment(request, "partials/selection.html", state)


@api_router.post("/generate", response_class=HTMLResponse)
async def generate_image(
    request: Request,
    file: UploadFile | None = File(None),
    prompt: str = Form(""),
) -> HTMLResponse:
    """
    편집 이미지 생성 (Generate 버튼).

    - 검증 실패: 에러 표시, provider 호출 없음
    - 원격 실패: 에러 메시지 그대로 표시, 이전 이미지 제거
    - 성공: 결과 이미지 + 다운로드 링크
    """
    service = get_edit_service(request)

    try:
        image: UploadedImage | None = await read_upload(service, file)
    except UploadRejectError as e:
        logger.info(f"Generate rejected: {e}")
        state = EditorState(prompt=prompt, error=e.message)
        return render_fragment(request, "partials/result.html", state)

    outcome = await service.generate(image, prompt)
    return render_fragment(request, "partials/result.html", outcome.state)


# =============================================================================
# API Routes (JSON)
# =============================================================================


@api_router.post("/edit")
async def edit_image(
    request: Request,
    file: UploadFile | None = File(None),
    prompt: str = Form(""),
) -> dict[str, Any]:
    """
    JSON API.

    Returns:
        {success, image_url, mime_type, model_used, fallback_triggered, run_id}

    Raises:
        HTTPException 400: 검증 실패
        HTTPException 502: 원격 호출 실패
    """
    service = get_edit_service(request)

    try:
        image = await read_upload(service, file)
    except UploadRejectError as e:
        raise HTTPException(
            status_code=400,
            detail={"code": e.code, "message": e.message},
        ) from None

    outcome = await service.generate(image, prompt)

    if not outcome.success:
        status_code = 400 if outcome.run_log.result == "rejected" else 502
        raise HTTPException(
            status_code=status_code,
            detail={
                "code": outcome.error_code,
                "message": outcome.state.error,
                "run_id": outcome.run_log.run_id,
            },
        )

    result = outcome.result
    return {
        "success": True,
        "image_url": outcome.state.result_url,
        "mime_type": outcome.state.result_mime_type,
        "model_used": result.model_used if result else None,
        "fallback_triggered": result.fallback_triggered if result else False,
        "text": result.text if result else None,
        "run_id": outcome.run_log.run_id,
    }
