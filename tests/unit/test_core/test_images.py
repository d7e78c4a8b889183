"""
test_images.py - 이미지 인코딩 테스트

DoD:
- base64 인코딩은 data: 접두사 없음
- data URL = data:<mime>;base64,<payload>
- 매직 바이트로 PNG/JPEG 판별
"""

import base64

from src.core.images import encode_base64, sniff_image_type, to_data_url


class TestEncodeBase64:
    """encode_base64 테스트."""

    def test_no_data_url_prefix(self, png_bytes):
        """접두사 없이 순수 base64만 반환."""
        encoded = encode_base64(png_bytes)

        assert not encoded.startswith("data:")
        assert base64.b64decode(encoded) == png_bytes

    def test_empty_bytes(self):
        """빈 바이트 → 빈 문자열."""
        assert encode_base64(b"") == ""


class TestDataUrl:
    """to_data_url 테스트."""

    def test_to_data_url_format(self):
        """data:<mime>;base64,<payload> 형식."""
        url = to_data_url(b"abc", "image/png")

        assert url == "data:image/png;base64,YWJj"

    def test_keeps_mime_type(self, png_bytes):
        url = to_data_url(png_bytes, "image/jpeg")

        assert url.startswith("data:image/jpeg;base64,")
        assert url.endswith(encode_base64(png_bytes))


class TestSniffImageType:
    """sniff_image_type 테스트."""

    def test_png(self, png_bytes):
        assert sniff_image_type(png_bytes) == "image/png"

    def test_jpeg(self, jpeg_bytes):
        assert sniff_image_type(jpeg_bytes) == "image/jpeg"

    def test_unknown(self):
        """GIF 등 그 외 형식 → None."""
        assert sniff_image_type(b"GIF89a...") is None
        assert sniff_image_type(b"") is None
