"""
App layer: UI 서버 (FastAPI + HTMX).

역할:
- 에디터 화면, 파일 선택, 편집 요청
- 외부 이미지 편집 서비스 호출 (providers)

주의: 폴더 구분
- src/app/templates/ → Jinja2 HTML (HTMX)
- src/app/static/ → CSS, JS
"""
