"""Tool Schema 定义。

包含工具描述、参数 schema 和 schema 创建函数。
"""

from __future__ import annotations

import copy
from typing import Any

__all__ = [
    "TOOL_DESCRIPTIONS",
    "IMAGINE_COMMAND_DESCRIPTION",
    "create_tool_schema",
]

IMAGINE_COMMAND_DESCRIPTION = "Generate an image from a text prompt"

# 工具描述
TOOL_DESCRIPTIONS = {
    "imagine": """Generate an image from a text prompt through the platform's image-generation capability.

ROUTING:
- The request is routed by the host (credit check, adapter selection).
- Returns the URL of the generated image.

FLAGS:
- model/size/style may be passed as arguments or inline as --model/--size/--style.
- size must be WxH, e.g. 1024x1024.""",

    "image_generate": """Generate an image from a text prompt using AI (DALL-E). Returns the file path of the generated image.

RESPONSE FORMAT:
- JSON with filePath, sizeBytes, provider and optional revisedPrompt
- Image is saved to disk as PNG (no base64 in response)""",
}

_TOOL_SCHEMAS: dict[str, dict[str, Any]] = {
    "imagine": {
        "type": "object",
        "properties": {
            "prompt": {
                "type": "string",
                "description": "Text description of the image to generate",
            },
            "model": {
                "type": "string",
                "description": "Model to use (e.g. flux, sdxl, dall-e). Default: plugin config",
            },
            "size": {
                "type": "string",
                "description": "Image size in WxH format, e.g. 1024x1024. Default: plugin config",
            },
            "style": {
                "type": "string",
                "description": "Style preset (auto, photorealistic, artistic, anime, pixel-art)",
            },
        },
        "required": ["prompt"],
    },
    "image_generate": {
        "type": "object",
        "properties": {
            "prompt": {
                "type": "string",
                "description": "Text description of the image to generate",
            },
            "size": {
                "type": "string",
                "enum": ["256", "512", "1024"],
                "description": "Image size in pixels (256, 512, or 1024). Default: 1024",
            },
            "quality": {
                "type": "string",
                "enum": ["standard", "hd"],
                "description": "Image quality: standard or hd. Default: standard",
            },
            "style": {
                "type": "string",
                "enum": ["natural", "vivid"],
                "description": "Image style: natural or vivid. Default: natural",
            },
        },
        "required": ["prompt"],
    },
}


def create_tool_schema(tool_name: str) -> dict[str, Any]:
    """创建工具的 inputSchema（返回副本）。

    Raises:
        KeyError: 未知工具
    """
    return copy.deepcopy(_TOOL_SCHEMAS[tool_name])
