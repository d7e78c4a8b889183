"""
test_errors.py - UploadRejectError 테스트
"""

from src.domain.errors import ErrorCodes, UploadRejectError


class TestUploadRejectError:
    """UploadRejectError 테스트."""

    def test_attributes(self):
        error = UploadRejectError(ErrorCodes.FILE_TOO_LARGE, "too big", size=10)

        assert error.code == "FILE_TOO_LARGE"
        assert error.message == "too big"
        assert error.context == {"size": 10}

    def test_str_includes_code_and_context(self):
        error = UploadRejectError("CODE", "msg", size=10)

        assert str(error) == "[CODE] msg (size=10)"

    def test_str_without_context(self):
        assert str(UploadRejectError("CODE", "msg")) == "[CODE] msg"

    def test_to_dict(self):
        error = UploadRejectError("CODE", "msg", filename="a.png")

        assert error.to_dict() == {
            "code": "CODE",
            "message": "msg",
            "filename": "a.png",
        }
