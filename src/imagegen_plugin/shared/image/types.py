"""Image 模块类型定义。

imagegen-plugin shared/image v0.1.0
"""

from __future__ import annotations

from dataclasses import dataclass

__all__ = [
    "DEFAULT_SIZE",
    "DEFAULT_QUALITY",
    "DEFAULT_STYLE",
    "SIZE_MAP",
    "ImageGenerationRequest",
    "ImageGenerationResult",
    "resolve_size",
]

DEFAULT_SIZE = "1024x1024"
DEFAULT_QUALITY = "standard"
DEFAULT_STYLE = "natural"

# 参数映射：简写 / 规范写法 -> size
SIZE_MAP = {
    "256": "256x256",
    "512": "512x512",
    "1024": "1024x1024",
    "256x256": "256x256",
    "512x512": "512x512",
    "1024x1024": "1024x1024",
}


def resolve_size(size: str | None) -> str:
    """将 size 映射到规范的 WxH 格式。

    无法识别的值（包括 None）回退到 1024x1024，不报错。

    Args:
        size: 简写（如 "512"）或 WxH 字符串

    Returns:
        规范 size（如 "512x512"）
    """
    if size is None:
        return DEFAULT_SIZE
    return SIZE_MAP.get(size, DEFAULT_SIZE)


@dataclass(frozen=True)
class ImageGenerationRequest:
    """直连 provider 的生成请求。

    Attributes:
        prompt: 提示词
        size: 尺寸（简写或 WxH，可选）
        quality: 图片质量（standard/hd，可选）
        style: 风格（natural/vivid，可选）
    """
    prompt: str
    size: str | None = None
    quality: str | None = None
    style: str | None = None


@dataclass(frozen=True)
class ImageGenerationResult:
    """生成结果。

    Attributes:
        file_path: 落盘路径
        size_bytes: 写入的字节数（等于解码后的 payload 长度）
        revised_prompt: provider 改写后的提示词
    """
    file_path: str
    size_bytes: int
    revised_prompt: str | None = None

    def to_dict(self, provider: str = "") -> dict[str, object]:
        """转换为工具响应的 JSON payload。"""
        data: dict[str, object] = {
            "filePath": self.file_path,
            "sizeBytes": self.size_bytes,
        }
        if provider:
            data["provider"] = provider
        if self.revised_prompt:
            data["revisedPrompt"] = self.revised_prompt
        return data
