"""image_generate 工具处理器。

直连图像 provider，图片保存到 $WOPR_HOME/attachments/generated/。
"""

from __future__ import annotations

import asyncio
import logging
import uuid
from typing import Any, Callable

from ..config import ImageGenPluginConfig
from ..shared.image import (
    ImageError,
    ImageGenerationProvider,
    ImageGenerationRequest,
    ensure_output_dir,
    resolve_provider,
)
from ..shared.response_formatter import ToolResult, format_error_response, format_json_response
from ..tool_schema import TOOL_DESCRIPTIONS, create_tool_schema
from .base import ToolContext, ToolHandler, string_arg

__all__ = ["ImageGenerateHandler"]

logger = logging.getLogger(__name__)

ProviderFactory = Callable[[ImageGenPluginConfig], ImageGenerationProvider]


class ImageGenerateHandler(ToolHandler):
    """image_generate 工具处理器。"""

    def __init__(self, provider_factory: ProviderFactory = resolve_provider) -> None:
        self._provider_factory = provider_factory

    @property
    def name(self) -> str:
        return "image_generate"

    @property
    def description(self) -> str:
        return TOOL_DESCRIPTIONS["image_generate"]

    def get_input_schema(self) -> dict[str, Any]:
        return create_tool_schema("image_generate")

    def validate(self, arguments: dict[str, Any]) -> str | None:
        prompt = string_arg(arguments, "prompt")
        if not prompt or not prompt.strip():
            return "Error: prompt cannot be empty"
        return None

    async def handle(
        self,
        arguments: dict[str, Any],
        ctx: ToolContext,
    ) -> ToolResult:
        error = self.validate(arguments)
        if error:
            return format_error_response(error)

        # 非字符串的可选参数直接忽略
        request = ImageGenerationRequest(
            prompt=string_arg(arguments, "prompt") or "",
            size=string_arg(arguments, "size"),
            quality=string_arg(arguments, "quality"),
            style=string_arg(arguments, "style"),
        )

        try:
            output_dir = ensure_output_dir()
            provider = self._provider_factory(ctx.image_config)
            output_path = output_dir / f"{uuid.uuid4()}.png"

            result = await provider.generate(request, str(output_path))

        except asyncio.CancelledError:
            raise

        except ImageError as e:
            logger.warning(f"image_generate failed: {e}")
            return format_error_response(f"Image generation failed: {e}")

        except Exception as e:
            logger.exception(f"image_generate tool error: {e}")
            return format_error_response(f"Image generation failed: {e}")

        logger.info(f"Generated image {result.file_path} ({result.size_bytes} bytes) via {provider.name}")
        return format_json_response(result.to_dict(provider.name))
