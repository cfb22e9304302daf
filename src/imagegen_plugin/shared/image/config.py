"""Image 模块配置。

imagegen-plugin shared/image v0.1.0

环境变量:
    OPENAI_API_KEY: 插件配置未提供 apiKey 时使用的 OpenAI key
    WOPR_HOME: 宿主数据目录（默认 ~/.wopr），图片落盘到
        $WOPR_HOME/attachments/generated/
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import TYPE_CHECKING

from .errors import ImageConfigError
from .providers import ImageGenerationProvider, OpenAIDalleProvider

if TYPE_CHECKING:
    from ...config import ImageGenPluginConfig

__all__ = [
    "DEFAULT_PROVIDER",
    "SUPPORTED_PROVIDERS",
    "get_generated_dir",
    "ensure_output_dir",
    "resolve_provider",
]

DEFAULT_PROVIDER = "openai-dalle"

SUPPORTED_PROVIDERS = frozenset({DEFAULT_PROVIDER})


def get_generated_dir() -> Path:
    """获取生成图片的目录（不创建）。"""
    wopr_home = os.environ.get("WOPR_HOME")
    if wopr_home:
        base = Path(wopr_home)
    else:
        base = Path(os.environ.get("HOME", "/tmp")) / ".wopr"
    return base / "attachments" / "generated"


def ensure_output_dir() -> Path:
    """确保输出目录存在，已存在时不报错。"""
    output_dir = get_generated_dir()
    output_dir.mkdir(parents=True, exist_ok=True)
    return output_dir


def resolve_provider(config: "ImageGenPluginConfig") -> ImageGenerationProvider:
    """根据插件配置解析 provider。

    Raises:
        ImageConfigError: 未知 provider 或缺少 API key
    """
    provider_name = config.provider or DEFAULT_PROVIDER
    api_key = config.api_key or os.environ.get("OPENAI_API_KEY")

    if provider_name == "openai-dalle":
        if not api_key:
            raise ImageConfigError(
                "OpenAI API key not configured. Set apiKey in plugin config, "
                "or set the OPENAI_API_KEY environment variable."
            )
        return OpenAIDalleProvider(api_key)

    raise ImageConfigError(
        f"Unknown image generation provider: {provider_name}. "
        f"Supported: {', '.join(sorted(SUPPORTED_PROVIDERS))}"
    )
