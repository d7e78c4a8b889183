"""
FastAPI 애플리케이션 진입점.

실행:
- 개발: uv run uvicorn src.app.main:app --reload
- 프로덕션: uv run uvicorn src.app.main:app
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles

# Routes
from src.app.routes import editor
from src.app.services.editor import ImageEditService

PROJECT_ROOT = Path(__file__).parent.parent.parent

# =============================================================================
# Configuration
# =============================================================================


def load_config(config_path: Path | None = None) -> dict:
    """설정 파일 로드."""
    if config_path is None:
        # 프로젝트 루트의 default.yaml
        config_path = PROJECT_ROOT / "default.yaml"

    if not config_path.exists():
        return {}

    with open(config_path, encoding="utf-8") as f:
        data: dict[Any, Any] = yaml.safe_load(f) or {}
        return data


def configure_logging(config: dict) -> None:
    """logging.level 설정 적용 (기본 INFO)."""
    level_name = str((config.get("logging") or {}).get("level", "INFO")).upper()
    logging.basicConfig(
        level=getattr(logging, level_name, logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def resolve_run_log_dir(config: dict) -> Path | None:
    """logging.run_log_dir (상대 경로는 프로젝트 루트 기준)."""
    run_log_dir = (config.get("logging") or {}).get("run_log_dir")
    if not run_log_dir:
        return None
    path = Path(run_log_dir)
    return path if path.is_absolute() else PROJECT_ROOT / path


# =============================================================================
# Lifespan
# =============================================================================


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    애플리케이션 생명주기 관리.

    시작 시: .env 로드, 설정 로드, ImageEditService 생성
    종료 시: 정리할 리소스 없음
    """
    # Startup
    load_dotenv()
    app.state.config = load_config()
    configure_logging(app.state.config)
    app.state.edit_service = ImageEditService(
        app.state.config,
        run_log_dir=resolve_run_log_dir(app.state.config),
    )

    yield


# =============================================================================
# App Instance
# =============================================================================

app = FastAPI(
    title="HR Employee Photo Standardizer",
    description="직원 사진 업로드 → 프롬프트 → 배경/복장 표준화 이미지",
    version="0.1.0",
    lifespan=lifespan,
)

# Static files (CSS, JS)
static_dir = Path(__file__).parent / "static"
if static_dir.exists():
    app.mount("/static", StaticFiles(directory=static_dir), name="static")


# =============================================================================
# Routes
# =============================================================================

# 페이지 라우트 (HTML)
app.include_router(editor.router, prefix="", tags=["Editor"])

# API 라우트
app.include_router(editor.api_router, prefix="/api/editor", tags=["Editor API"])


@app.get("/health")
async def health() -> dict[str, str]:
    """헬스 체크."""
    return {"status": "ok"}


# =============================================================================
# CLI Entry Point
# =============================================================================

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "src.app.main:app",
        host="127.0.0.1",
        port=8000,
        reload=True,
    )
