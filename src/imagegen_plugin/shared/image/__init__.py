"""Image 模块。

imagegen-plugin shared/image v0.1.0

直连图像生成 API 的封装：请求构建、错误分类、图片落盘。
"""

from __future__ import annotations

from .config import (
    DEFAULT_PROVIDER,
    SUPPORTED_PROVIDERS,
    ensure_output_dir,
    get_generated_dir,
    resolve_provider,
)
from .errors import (
    ImageAPIError,
    ImageConfigError,
    ImageContentPolicyError,
    ImageError,
    ImageNoDataError,
    ImageRateLimitError,
    ImageTimeoutError,
)
from .providers import ImageGenerationProvider, OpenAIDalleProvider
from .types import (
    ImageGenerationRequest,
    ImageGenerationResult,
    resolve_size,
)

__all__ = [
    # Config
    "DEFAULT_PROVIDER",
    "SUPPORTED_PROVIDERS",
    "ensure_output_dir",
    "get_generated_dir",
    "resolve_provider",
    # Errors
    "ImageError",
    "ImageConfigError",
    "ImageAPIError",
    "ImageRateLimitError",
    "ImageContentPolicyError",
    "ImageNoDataError",
    "ImageTimeoutError",
    # Providers
    "ImageGenerationProvider",
    "OpenAIDalleProvider",
    # Types
    "ImageGenerationRequest",
    "ImageGenerationResult",
    "resolve_size",
]
