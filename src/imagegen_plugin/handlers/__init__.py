"""Tool Handlers 模块。

提供工具处理器抽象和具体实现。
"""

from .base import ToolContext, ToolHandler
from .image_generate import ImageGenerateHandler
from .imagine import ImagineHandler, handle_imagine_command

__all__ = [
    "ToolContext",
    "ToolHandler",
    "ImageGenerateHandler",
    "ImagineHandler",
    "handle_imagine_command",
]
