"""Image providers 模块。

imagegen-plugin shared/image/providers v0.1.0

提供图像生成 provider 协议和具体实现。
"""

from __future__ import annotations

from typing import Protocol

from ..types import ImageGenerationRequest, ImageGenerationResult
from .openai_dalle import OpenAIDalleProvider

__all__ = [
    "ImageGenerationProvider",
    "OpenAIDalleProvider",
]


class ImageGenerationProvider(Protocol):
    """图像生成 provider 协议。"""

    name: str

    async def generate(
        self,
        request: ImageGenerationRequest,
        output_path: str,
    ) -> ImageGenerationResult:
        ...
