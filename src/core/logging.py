"""
Run logging: generate 호출 기록

규칙:
- generate 1회 = run log 1개 (성공/실패/거절 모두)
- 프롬프트 원문 대신 prompt_hash만 기록
- run_log_dir 설정 시에만 파일 저장 (원자적 쓰기)
"""

import hashlib
import json
import logging
import os
import tempfile
from datetime import UTC, datetime
from pathlib import Path

from src.core.ids import generate_run_id
from src.domain.schemas import EditRunLog

logger = logging.getLogger(__name__)


# =============================================================================
# Run Log Management
# =============================================================================


def compute_prompt_hash(prompt: str) -> str:
    """프롬프트 SHA-256 해시 (앞 16자리)."""
    return f"sha256:{hashlib.sha256(prompt.encode()).hexdigest()[:16]}"


def create_run_log(
    input_filename: str | None = None,
    input_size: int | None = None,
    input_mime_type: str | None = None,
    prompt: str | None = None,
) -> EditRunLog:
    """
    새 EditRunLog 생성.

    Args:
        input_filename: 업로드 파일명
        input_size: 업로드 바이트 수
        input_mime_type: 업로드 MIME 타입
        prompt: 사용자 프롬프트 (hash만 기록)

    Returns:
        초기화된 EditRunLog
    """
    now = datetime.now(UTC).isoformat()

    return EditRunLog(
        run_id=generate_run_id(),
        started_at=now,
        result="pending",
        input_filename=input_filename,
        input_size=input_size,
        input_mime_type=input_mime_type,
        prompt_hash=compute_prompt_hash(prompt) if prompt else None,
    )


def complete_run_log(
    run_log: EditRunLog,
    result: str,
    model_requested: str | None = None,
    model_used: str | None = None,
    fallback_triggered: bool = False,
    output_mime_type: str | None = None,
    output_size: int | None = None,
    error_code: str | None = None,
    error_message: str | None = None,
) -> None:
    """
    EditRunLog 완료 처리.

    Args:
        run_log: EditRunLog 인스턴스
        result: "success" | "failed" | "rejected"
        model_requested: config에 설정된 모델
        model_used: 실제 호출된 모델
        fallback_triggered: fallback 발생 여부
        output_mime_type: 결과 이미지 MIME 타입
        output_size: 결과 이미지 바이트 수
        error_code: 에러 코드 (실패 시)
        error_message: 에러 메시지 (실패 시)
    """
    finished = datetime.now(UTC)
    run_log.finished_at = finished.isoformat()
    run_log.result = result
    run_log.model_requested = model_requested
    run_log.model_used = model_used
    run_log.fallback_triggered = fallback_triggered
    run_log.output_mime_type = output_mime_type
    run_log.output_size = output_size

    started = datetime.fromisoformat(run_log.started_at)
    run_log.duration_ms = int((finished - started).total_seconds() * 1000)

    if result != "success":
        run_log.error_code = error_code
        run_log.error_message = error_message

    logger.info(
        f"Edit run {run_log.run_id} finished: result={result} "
        f"model_used={model_used} duration_ms={run_log.duration_ms}"
    )


def save_run_log(run_log: EditRunLog, logs_dir: Path) -> Path:
    """
    EditRunLog를 파일로 저장.

    Args:
        run_log: EditRunLog 인스턴스
        logs_dir: 로그 디렉터리 경로

    Returns:
        저장된 파일 경로
    """
    logs_dir.mkdir(parents=True, exist_ok=True)
    log_path = logs_dir / f"run_{run_log.run_id}.json"
    atomic_write_json(log_path, run_log.to_dict())
    return log_path


# =============================================================================
# Atomic Write
# =============================================================================


def atomic_write_json(path: Path, data: dict) -> None:
    """
    원자적 JSON 쓰기.

    동작:
    - 중간 상태 없음: temp → rename
    - fsync 실패 시 경고 남기고 계속 진행
    - 실패 시 cleanup: temp 파일 삭제

    Args:
        path: 저장할 파일 경로
        data: JSON 직렬화할 데이터
    """
    dir_path = path.parent
    dir_path.mkdir(parents=True, exist_ok=True)

    temp_path = None
    try:
        with tempfile.NamedTemporaryFile(
            mode="w",
            dir=dir_path,
            suffix=".tmp",
            delete=False,
            encoding="utf-8",
        ) as f:
            temp_path = Path(f.name)
            json.dump(data, f, indent=2, ensure_ascii=False)
            f.flush()
            try:
                os.fsync(f.fileno())
            except OSError as e:
                logger.warning(f"File fsync failed for {path}: {e}.")

        os.replace(temp_path, path)

    except Exception:
        if temp_path and temp_path.exists():
            try:
                temp_path.unlink()
            except OSError:
                pass
        raise
