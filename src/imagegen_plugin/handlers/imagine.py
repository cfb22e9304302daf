"""/imagine 命令与 imagine 工具处理器。

流程:
1. 解析提示词与 flag
2. 校验（空提示词 / 长度 / size 格式）
3. 合并配置默认值
4. 通过 inject 提交能力请求（宿主负责额度检查与 adapter 选择）
5. 规范化回复并转换为用户可见文本
"""

from __future__ import annotations

import asyncio
import dataclasses
import logging
from typing import TYPE_CHECKING, Any

from ..config import ImagineConfig
from ..shared.prompt import (
    INSUFFICIENT_CREDITS,
    ImagineRequest,
    is_valid_size,
    parse_imagine_prompt,
    parse_imagine_response,
)
from ..shared.response_formatter import ToolResult, format_error_response, format_text_response
from ..tool_schema import TOOL_DESCRIPTIONS, create_tool_schema
from .base import ToolContext, ToolHandler, string_arg

if TYPE_CHECKING:
    from ..host import ChannelCommandContext, PluginContext

__all__ = [
    "CAPABILITY_MARKER",
    "USAGE_MESSAGE",
    "ImagineHandler",
    "build_capability_message",
    "build_session_key",
    "handle_imagine_command",
    "validate_imagine_request",
]

logger = logging.getLogger(__name__)

CAPABILITY_MARKER = "[capability:image-generation]"

USAGE_MESSAGE = (
    "Please provide a prompt. Usage: /imagine <prompt> "
    "[--model flux] [--size 1024x1024] [--style photorealistic]"
)
EMPTY_PROMPT_MESSAGE = (
    "Could not extract a prompt from your message. "
    "Please provide a description of the image you want."
)
CREDITS_MESSAGE = "You need credits to generate images. Visit your WOPR dashboard to add credits."
NO_IMAGE_MESSAGE = "Image generation completed but no image was returned."
GENERIC_FAILURE_MESSAGE = "Something went wrong generating your image. Please try again."

A2A_SESSION_KEY = "imagegen:a2a:imagine"


def validate_imagine_request(request: ImagineRequest, config: ImagineConfig) -> str | None:
    """校验解析结果。

    Returns:
        面向用户的错误消息，校验通过返回 None
    """
    if not request.prompt:
        return EMPTY_PROMPT_MESSAGE

    max_len = config.max_prompt_length
    if len(request.prompt) > max_len:
        return f"Prompt is too long ({len(request.prompt)} chars). Maximum is {max_len} characters."

    if request.size is not None and not is_valid_size(request.size):
        return f'Invalid size format: "{request.size}". Use WxH format, e.g. 1024x1024'

    return None


def build_capability_message(request: ImagineRequest, config: ImagineConfig) -> str:
    """构建宿主可识别的能力请求消息。"""
    return "\n".join([
        CAPABILITY_MARKER,
        f"prompt: {request.prompt}",
        f"model: {config.resolve_model(request.model)}",
        f"size: {config.resolve_size(request.size)}",
        f"style: {config.resolve_style(request.style)}",
    ])


def build_session_key(channel_type: str, channel: str) -> str:
    return f"imagegen:{channel_type}:{channel}"


def _describe_response(raw: str) -> tuple[str, bool]:
    """把路由回复转换为 (回复文本, 是否失败)。"""
    parsed = parse_imagine_response(raw)
    if parsed.is_empty:
        return raw or NO_IMAGE_MESSAGE, False

    if parsed.error:
        if parsed.error == INSUFFICIENT_CREDITS:
            return CREDITS_MESSAGE, True
        return f"Image generation failed: {parsed.error}", True

    return parsed.image_url, False


async def handle_imagine_command(
    cmd_ctx: "ChannelCommandContext",
    plugin_ctx: "PluginContext",
    config: ImagineConfig,
) -> None:
    """处理任意频道的 /imagine 命令。

    所有失败都转换为回复，不向宿主抛出。
    """
    raw_prompt = " ".join(cmd_ctx.args).strip()

    if not raw_prompt:
        await cmd_ctx.reply(USAGE_MESSAGE)
        return

    request = parse_imagine_prompt(raw_prompt)

    error = validate_imagine_request(request, config)
    if error:
        await cmd_ctx.reply(error)
        return

    message = build_capability_message(request, config)
    session_key = build_session_key(cmd_ctx.channel_type, cmd_ctx.channel)

    try:
        response = await plugin_ctx.inject(session_key, message, {
            "from": cmd_ctx.sender,
            "channel": {"type": cmd_ctx.channel_type, "id": cmd_ctx.channel, "name": "imagine"},
        })
    except asyncio.CancelledError:
        raise
    except Exception:
        logger.exception(f"Image generation failed for session {session_key}")
        await cmd_ctx.reply(GENERIC_FAILURE_MESSAGE)
        return

    text, _ = _describe_response(response)
    await cmd_ctx.reply(text)


class ImagineHandler(ToolHandler):
    """imagine 工具处理器（经宿主路由）。"""

    @property
    def name(self) -> str:
        return "imagine"

    @property
    def description(self) -> str:
        return TOOL_DESCRIPTIONS["imagine"]

    def get_input_schema(self) -> dict[str, Any]:
        return create_tool_schema("imagine")

    def validate(self, arguments: dict[str, Any]) -> str | None:
        prompt = string_arg(arguments, "prompt")
        if not prompt or not prompt.strip():
            return "Error: prompt cannot be empty"
        return None

    def _build_request(self, arguments: dict[str, Any]) -> ImagineRequest:
        """解析 prompt 内联 flag，显式参数优先。"""
        request = parse_imagine_prompt(string_arg(arguments, "prompt") or "")
        overrides: dict[str, str] = {}
        for key in ("model", "size", "style"):
            value = string_arg(arguments, key)
            if value:
                overrides[key] = value
        return dataclasses.replace(request, **overrides)

    async def handle(
        self,
        arguments: dict[str, Any],
        ctx: ToolContext,
    ) -> ToolResult:
        error = self.validate(arguments)
        if error:
            return format_error_response(error)

        if ctx.inject is None:
            return format_error_response("Image generation failed: no routing host available")

        request = self._build_request(arguments)
        error = validate_imagine_request(request, ctx.imagine_config)
        if error:
            return format_error_response(error)

        message = build_capability_message(request, ctx.imagine_config)

        try:
            response = await ctx.inject(A2A_SESSION_KEY, message, {
                "from": "a2a",
                "channel": {"type": "a2a", "id": "imagine", "name": "imagine"},
            })
        except asyncio.CancelledError:
            raise
        except Exception as e:
            logger.exception(f"Imagine tool error: {e}")
            return format_error_response(f"Image generation failed: {e}")

        text, failed = _describe_response(response)
        if failed:
            if not text.startswith("Image generation failed"):
                text = f"Image generation failed: {text}"
            return format_error_response(text)
        return format_text_response(text)
