"""Image 模块异常类。

imagegen-plugin shared/image v0.1.0
"""

from __future__ import annotations

__all__ = [
    "ImageError",
    "ImageConfigError",
    "ImageAPIError",
    "ImageRateLimitError",
    "ImageContentPolicyError",
    "ImageNoDataError",
    "ImageTimeoutError",
]


class ImageError(Exception):
    """Image 模块基础异常。"""
    pass


class ImageConfigError(ImageError):
    """配置错误（如未知 provider、缺少 API key）。"""
    pass


class ImageAPIError(ImageError):
    """API 调用错误。

    Attributes:
        status_code: HTTP 状态码（网络错误时为 0）
        message: 错误消息（已包含上游 detail）
        api_url: 请求的 API 完整路径
    """

    def __init__(self, status_code: int, message: str, api_url: str = "") -> None:
        self.status_code = status_code
        self.message = message
        self.api_url = api_url
        super().__init__(message)


class ImageRateLimitError(ImageAPIError):
    """429 限流。是否重试由调用方决定。

    Attributes:
        retry_after: 上游建议的重试等待时间（秒）
    """

    def __init__(
        self,
        message: str,
        retry_after: float | None = None,
        api_url: str = "",
    ) -> None:
        super().__init__(429, message, api_url)
        self.retry_after = retry_after


class ImageContentPolicyError(ImageAPIError):
    """400 且上游提示违反内容策略。"""

    def __init__(self, message: str, api_url: str = "") -> None:
        super().__init__(400, message, api_url)


class ImageNoDataError(ImageError):
    """成功响应中没有图片数据。"""
    pass


class ImageTimeoutError(ImageError):
    """请求超时（已中止）。"""

    def __init__(self, timeout: float, api_url: str = "") -> None:
        self.timeout = timeout
        self.api_url = api_url
        super().__init__(f"Request timed out after {timeout:g} seconds")
