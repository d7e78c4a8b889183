"""
브라우저 테스트 설정 (pytest-playwright).

- 뷰포트 1280x720
- 실패 시 tests/e2e/artifacts/ 에 스크린샷 + HTML 저장
  (HTML의 사진 data URL 본문과 Google API 키는 가림)
"""

import re
from datetime import datetime
from pathlib import Path

import pytest

ARTIFACTS_DIR = Path(__file__).parent / "artifacts"

_DATA_URL_BODY = re.compile(r"(data:image/[a-z]+;base64,)[A-Za-z0-9+/=]{64,}")
_GOOGLE_API_KEY = re.compile(r"AIza[0-9A-Za-z_-]{20,}")


def redact_html(html: str) -> str:
    """업로드 사진 본문과 API 키 제거."""
    html = _DATA_URL_BODY.sub(r"\1[TRUNCATED]", html)
    return _GOOGLE_API_KEY.sub("[MASKED_API_KEY]", html)


@pytest.fixture(scope="session")
def browser_context_args(browser_context_args: dict) -> dict:
    return {**browser_context_args, "viewport": {"width": 1280, "height": 720}}


@pytest.hookimpl(hookwrapper=True)
def pytest_runtest_makereport(item, call):
    """브라우저 테스트 실패 시 화면 저장."""
    outcome = yield
    rep = outcome.get_result()
    page = item.funcargs.get("page")
    if rep.when != "call" or not rep.failed or page is None:
        return

    ARTIFACTS_DIR.mkdir(exist_ok=True)
    stamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    base = ARTIFACTS_DIR / f"{item.name.split('[')[0]}_{stamp}"

    page.screenshot(path=f"{base}.png", full_page=True)
    Path(f"{base}.html").write_text(redact_html(page.content()), encoding="utf-8")
