"""imagegen-plugin 配置管理。

宿主插件配置（camelCase 键）通过 from_mapping 读取；独立运行的
MCP Server 从环境变量加载。

环境变量:
    IMAGEGEN_PROVIDER: 图像 provider（默认 openai-dalle）
    IMAGEGEN_API_KEY: provider API key（未设置时回退 OPENAI_API_KEY）
    IMAGEGEN_DEFAULT_MODEL: /imagine 默认模型（默认 flux）
    IMAGEGEN_DEFAULT_SIZE: /imagine 默认尺寸（默认 1024x1024）
    IMAGEGEN_DEFAULT_STYLE: /imagine 默认风格（默认 auto）
    IMAGEGEN_MAX_PROMPT_LENGTH: 提示词最大长度（默认 1000）

    IMAGEGEN_DEBUG: 调试模式
        - true/1/yes/on = 开启 (工具调用参数写入 DEBUG 日志)
        - false/0/no = 关闭 (默认)

    IMAGEGEN_LOG_DEBUG: 日志调试模式
        - true/1/yes/on = 开启 (日志输出到临时文件)
        - false/0/no = 关闭 (默认，日志输出到 stderr)
"""

from __future__ import annotations

import os
import tempfile
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Mapping

from .shared.image import DEFAULT_PROVIDER

__all__ = [
    "FALLBACK_MODEL",
    "FALLBACK_SIZE",
    "FALLBACK_STYLE",
    "DEFAULT_MAX_PROMPT_LENGTH",
    "ImagineConfig",
    "ImageGenPluginConfig",
    "Config",
    "load_config",
    "get_config",
    "reload_config",
]

# 请求与配置都未指定时的兜底值
FALLBACK_MODEL = "flux"
FALLBACK_SIZE = "1024x1024"
FALLBACK_STYLE = "auto"

DEFAULT_MAX_PROMPT_LENGTH = 1000


def _parse_bool(value: str | None, default: bool = False) -> bool:
    """解析布尔值环境变量。"""
    if value is None:
        return default
    return value.lower() in ("true", "1", "yes", "on")


def _parse_int(value: Any, default: int) -> int:
    """解析正整数，无效值返回默认值。"""
    if value is None or isinstance(value, bool):
        return default
    try:
        parsed = int(value)
    except (TypeError, ValueError):
        return default
    return parsed if parsed > 0 else default


def _optional_str(value: Any) -> str | None:
    """非空字符串原样返回，其余视为未设置。"""
    if isinstance(value, str) and value.strip():
        return value
    return None


@dataclass(frozen=True)
class ImagineConfig:
    """/imagine 命令配置。

    Attributes:
        default_model: --model 缺省时使用的模型
        default_size: --size 缺省时使用的尺寸
        default_style: --style 缺省时使用的风格
        max_prompt_length: 提示词最大字符数
    """

    default_model: str | None = None
    default_size: str | None = None
    default_style: str | None = None
    max_prompt_length: int = DEFAULT_MAX_PROMPT_LENGTH

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any] | None) -> "ImagineConfig":
        """从宿主配置字典读取。"""
        data = data or {}
        return cls(
            default_model=_optional_str(data.get("defaultModel")),
            default_size=_optional_str(data.get("defaultSize")),
            default_style=_optional_str(data.get("defaultStyle")),
            max_prompt_length=_parse_int(data.get("maxPromptLength"), DEFAULT_MAX_PROMPT_LENGTH),
        )

    def resolve_model(self, requested: str | None) -> str:
        return requested or self.default_model or FALLBACK_MODEL

    def resolve_size(self, requested: str | None) -> str:
        return requested or self.default_size or FALLBACK_SIZE

    def resolve_style(self, requested: str | None) -> str:
        return requested or self.default_style or FALLBACK_STYLE


@dataclass(frozen=True)
class ImageGenPluginConfig:
    """直连 provider 配置。

    Attributes:
        provider: provider 名称
        api_key: API key（None 时回退 OPENAI_API_KEY 环境变量）
    """

    provider: str = DEFAULT_PROVIDER
    api_key: str | None = None

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any] | None) -> "ImageGenPluginConfig":
        """从宿主配置字典读取。"""
        data = data or {}
        return cls(
            provider=_optional_str(data.get("provider")) or DEFAULT_PROVIDER,
            api_key=_optional_str(data.get("apiKey")),
        )

    def __repr__(self) -> str:
        return (
            f"ImageGenPluginConfig(provider={self.provider}, "
            f"api_key={'***' if self.api_key else None})"
        )


@dataclass
class Config:
    """独立 MCP Server 配置。

    Attributes:
        imagine: /imagine 配置
        image: 直连 provider 配置
        debug: 调试模式
        log_debug: 日志调试模式（输出到临时文件）
        log_file: 日志文件路径（当 log_debug=True 时自动设置）
    """

    imagine: ImagineConfig = field(default_factory=ImagineConfig)
    image: ImageGenPluginConfig = field(default_factory=ImageGenPluginConfig)
    debug: bool = False
    log_debug: bool = False
    log_file: str | None = None

    def __repr__(self) -> str:
        return (
            f"Config(provider={self.image.provider}, "
            f"api_key={'set' if self.image.api_key else 'unset'}, "
            f"max_prompt_length={self.imagine.max_prompt_length}, "
            f"debug={self.debug}, "
            f"log_debug={self.log_debug}, "
            f"log_file={self.log_file})"
        )


def _generate_log_file_path() -> str:
    """生成日志文件路径。

    Returns:
        临时目录下的日志文件绝对路径
    """
    log_dir = Path(tempfile.gettempdir()) / "imagegen-plugin"
    log_dir.mkdir(parents=True, exist_ok=True)

    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    log_file = log_dir / f"imagegen_debug_{timestamp}.log"

    return str(log_file.resolve())


def load_config() -> Config:
    """从环境变量加载配置。"""
    log_debug = _parse_bool(os.environ.get("IMAGEGEN_LOG_DEBUG"), default=False)
    log_file = _generate_log_file_path() if log_debug else None

    return Config(
        imagine=ImagineConfig.from_mapping({
            "defaultModel": os.environ.get("IMAGEGEN_DEFAULT_MODEL"),
            "defaultSize": os.environ.get("IMAGEGEN_DEFAULT_SIZE"),
            "defaultStyle": os.environ.get("IMAGEGEN_DEFAULT_STYLE"),
            "maxPromptLength": os.environ.get("IMAGEGEN_MAX_PROMPT_LENGTH"),
        }),
        image=ImageGenPluginConfig.from_mapping({
            "provider": os.environ.get("IMAGEGEN_PROVIDER"),
            "apiKey": os.environ.get("IMAGEGEN_API_KEY"),
        }),
        debug=_parse_bool(os.environ.get("IMAGEGEN_DEBUG"), default=False),
        log_debug=log_debug,
        log_file=log_file,
    )


# 全局配置实例（延迟加载）
_config: Config | None = None


def get_config() -> Config:
    """获取全局配置实例。"""
    global _config
    if _config is None:
        _config = load_config()
    return _config


def reload_config() -> Config:
    """重新加载配置（用于测试）。"""
    global _config
    _config = load_config()
    return _config
