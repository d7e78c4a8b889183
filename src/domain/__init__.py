"""Domain layer: errors, constants and schemas."""

from .errors import ErrorCodes, UploadRejectError
from .schemas import EditorState, EditRunLog, UploadedImage

__all__ = [
    "ErrorCodes",
    "UploadRejectError",
    "EditorState",
    "EditRunLog",
    "UploadedImage",
]
