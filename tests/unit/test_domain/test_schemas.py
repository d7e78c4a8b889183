"""
test_schemas.py - EditorState / UploadedImage 테스트

DoD:
- Generate 버튼: 파일 없음 또는 진행 중이면 비활성
- result / error 동시 활성 없음 (이전 이미지 잔존 금지)
"""

from src.core.images import encode_base64
from src.domain.constants import DEFAULT_PROMPT
from src.domain.schemas import EditorState, UploadedImage


def _image(data: bytes) -> UploadedImage:
    return UploadedImage(filename="photo.png", content_type="image/png", data=data)


class TestUploadedImage:
    """UploadedImage 테스트."""

    def test_size(self, png_bytes):
        assert _image(png_bytes).size == len(png_bytes)

    def test_to_data_url(self, png_bytes):
        url = _image(png_bytes).to_data_url()

        assert url.startswith("data:image/png;base64,")
        assert url.endswith(encode_base64(png_bytes))

    def test_repr_hides_bytes(self, png_bytes):
        """repr에 바이트 원문이 찍히지 않음."""
        assert "data=" not in repr(_image(png_bytes))


class TestEditorStateCanGenerate:
    """can_generate 테스트."""

    def test_initial_state_disabled(self):
        """초기 상태: 파일 없음 → 비활성."""
        state = EditorState()

        assert state.prompt == DEFAULT_PROMPT
        assert state.can_generate is False

    def test_enabled_with_file(self, png_bytes):
        assert EditorState(original=_image(png_bytes)).can_generate is True

    def test_disabled_while_loading(self, png_bytes):
        """진행 중이면 비활성."""
        state = EditorState(original=_image(png_bytes), is_loading=True)

        assert state.can_generate is False

    def test_preview_url(self, png_bytes):
        assert EditorState().original_preview_url is None
        assert EditorState(original=_image(png_bytes)).original_preview_url.startswith(
            "data:image/png"
        )


class TestEditorStateTransitions:
    """with_result / with_error 테스트."""

    def test_with_result_clears_error_and_loading(self, png_bytes):
        state = EditorState(original=_image(png_bytes), error="old", is_loading=True)

        new_state = state.with_result("data:image/png;base64,AAA", "image/png")

        assert new_state.result_url == "data:image/png;base64,AAA"
        assert new_state.error is None
        assert new_state.is_loading is False
        assert new_state.can_generate is True

    def test_with_error_clears_stale_image(self, png_bytes):
        """실패 시 이전 결과 이미지 제거."""
        state = EditorState(
            original=_image(png_bytes),
            result_url="data:image/png;base64,OLD",
            is_loading=True,
        )

        new_state = state.with_error("Network down")

        assert new_state.error == "Network down"
        assert new_state.result_url is None
        assert new_state.is_loading is False

    def test_transitions_keep_original(self, png_bytes):
        image = _image(png_bytes)
        state = EditorState(original=image, prompt="p")

        assert state.with_error("x").original is image
        assert state.with_result("data:,").prompt == "p"
