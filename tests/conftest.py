"""
Pytest fixtures for the editor tests.

구성:
- 경로/설정 fixture
- 샘플 이미지 (PNG, JPEG, 4MB 초과)
- 가짜 이미지 편집 provider (네트워크 호출 없음)
- 브라우저 테스트용 live_server
"""

import base64
import threading
import time
from collections.abc import Callable, Generator
from pathlib import Path

import httpx
import pytest
import uvicorn
import yaml

from src.app.providers.base import ImageEditProvider, ImageEditResult
from src.domain.constants import UPLOAD_MAX_BYTES

# 1x1 white pixel PNG (valid minimal PNG)
TINY_PNG = base64.b64decode(
    "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAYAAAAfFcSJAAAADUlEQVR42mP8/5+hHgAHggJ/PchI7wAAAABJRU5ErkJggg=="
)

# =============================================================================
# Path Fixtures
# =============================================================================

@pytest.fixture
def project_root() -> Path:
    """프로젝트 루트 경로."""
    return Path(__file__).parent.parent


@pytest.fixture
def default_config_path(project_root: Path) -> Path:
    """default.yaml 경로."""
    return project_root / "default.yaml"


@pytest.fixture
def default_config(default_config_path: Path) -> dict:
    """기본 설정 로드."""
    with open(default_config_path, encoding="utf-8") as f:
        return yaml.safe_load(f)


@pytest.fixture
def test_config() -> dict:
    """테스트용 설정 (timeout/재시도 없음)."""
    return {
        "upload": {
            "max_size_mb": 4,
            "allowed_types": ["image/png", "image/jpeg"],
        },
        "editor": {
            "default_prompt": "Make the background plain white.",
            "download_filename": "edited-employee-photo.png",
        },
        "ai": {
            "image_edit": {
                "model": "test-image-model",
                "fallback": None,
                "timeout": None,
                "max_retries": 0,
            },
        },
    }


# =============================================================================
# Image Fixtures
# =============================================================================

@pytest.fixture
def png_bytes() -> bytes:
    """정상 PNG 바이트."""
    return TINY_PNG


@pytest.fixture
def jpeg_bytes() -> bytes:
    """JPEG 매직 바이트로 시작하는 모의 JPEG."""
    return b"\xff\xd8\xff\xe0" + b"\x00" * 64 + b"\xff\xd9"


@pytest.fixture
def oversized_png_bytes() -> bytes:
    """4MB를 1바이트 초과하는 PNG."""
    return TINY_PNG + b"\x00" * (UPLOAD_MAX_BYTES + 1 - len(TINY_PNG))


@pytest.fixture
def exact_limit_png_bytes() -> bytes:
    """정확히 4MB인 PNG (허용 경계)."""
    return TINY_PNG + b"\x00" * (UPLOAD_MAX_BYTES - len(TINY_PNG))


# =============================================================================
# Provider Fixtures
# =============================================================================

class FakeImageEditProvider(ImageEditProvider):
    """
    가짜 이미지 편집 provider.

    - error 지정 시 해당 예외 발생
    - 아니면 result (기본: 작은 PNG) 반환
    - 호출 내역은 calls에 기록
    """

    def __init__(
        self,
        result: ImageEditResult | None = None,
        error: Exception | None = None,
        model: str = "fake-image-model",
    ):
        self.model = model
        self.result = result
        self.error = error
        self.calls: list[dict] = []

    async def edit_image(
        self,
        image_bytes: bytes,
        mime_type: str,
        prompt: str,
    ) -> ImageEditResult:
        self.calls.append(
            {"image_bytes": image_bytes, "mime_type": mime_type, "prompt": prompt}
        )
        if self.error is not None:
            raise self.error
        if self.result is not None:
            return self.result
        return ImageEditResult(
            success=True,
            image_bytes=TINY_PNG,
            mime_type="image/png",
            model_requested=self.model,
            model_used=self.model,
        )


@pytest.fixture
def make_provider() -> Callable[..., FakeImageEditProvider]:
    """FakeImageEditProvider 팩토리."""
    return FakeImageEditProvider


@pytest.fixture
def fake_provider() -> FakeImageEditProvider:
    """성공 응답을 돌려주는 기본 provider."""
    return FakeImageEditProvider()


# =============================================================================
# Browser Test Fixtures
# =============================================================================

@pytest.fixture(scope="session")
def live_server() -> Generator[str, None, None]:
    """
    FastAPI 앱을 백그라운드에서 실행하는 fixture.

    Returns:
        서버 URL (예: "http://localhost:8765")
    """
    from src.app.main import app

    # 테스트용 포트
    port = 8765
    host = "127.0.0.1"

    # 별도 스레드에서 서버 실행
    config = uvicorn.Config(app, host=host, port=port, log_level="error")
    server = uvicorn.Server(config)

    def run_server() -> None:
        import asyncio
        asyncio.run(server.serve())

    thread = threading.Thread(target=run_server, daemon=True)
    thread.start()

    # 서버가 준비될 때까지 대기
    base_url = f"http://{host}:{port}"
    max_attempts = 30
    for _ in range(max_attempts):
        try:
            response = httpx.get(f"{base_url}/health", timeout=1.0)
            if response.status_code == 200:
                break
        except httpx.HTTPError:
            time.sleep(0.1)
    else:
        raise RuntimeError("Failed to start test server")

    yield base_url

    # 서버 종료
    server.should_exit = True
