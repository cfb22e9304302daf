"""imagegen-plugin - 聊天平台图像生成插件。

提供:
    - /imagine 频道命令（经宿主路由）
    - imagine / image_generate agent 工具
    - 独立 stdio MCP Server（image_generate）

用法:
    uvx imagegen-plugin
"""

__version__ = "1.0.0"

from .app import main
from .plugin import ImageGenPlugin, plugin

__all__ = ["__version__", "ImageGenPlugin", "main", "plugin"]
