"""
ID 생성: run_id

Generate 호출마다 새 run_id 발급 (run log 파일명에 사용).
"""

import uuid
from datetime import UTC, datetime

from src.domain.constants import RUN_ID_PREFIX


def generate_run_id() -> str:
    """
    Run ID 생성.

    고유성 보장: UUID v4
    포맷: EDIT-{timestamp}-{uuid[:8]}

    Returns:
        run_id 문자열
    """
    now = datetime.now(UTC)
    timestamp = now.strftime("%Y%m%d%H%M%S")
    unique = uuid.uuid4().hex[:8]

    return f"{RUN_ID_PREFIX}{timestamp}-{unique}"
