"""
AI Provider Abstraction.

모델 교체 가능하게 설계.
모델명은 config만 SSOT.
"""

from .base import ImageEditError, ImageEditProvider, ImageEditResult, ProviderError
from .gemini import GeminiImageEditProvider

__all__ = [
    "ImageEditProvider",
    "ImageEditResult",
    "ImageEditError",
    "ProviderError",
    "GeminiImageEditProvider",
]
