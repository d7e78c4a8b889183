"""
Core layer: 도메인 독립 유틸리티.

역할:
- 이미지 인코딩 (base64 / data URL)
- run_id 발급
- run log (src.core.logging, 직접 import)
"""

from .ids import generate_run_id
from .images import encode_base64, sniff_image_type, to_data_url

__all__ = [
    # ids
    "generate_run_id",
    # images
    "encode_base64",
    "to_data_url",
    "sniff_image_type",
]
