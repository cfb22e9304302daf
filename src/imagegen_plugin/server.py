"""imagegen MCP Server。

独立运行时通过 stdio 暴露 image_generate 工具（imagine 工具依赖宿主
路由，只在插件模式下注册）。

用法:
    uvx imagegen-plugin
"""

from __future__ import annotations

import asyncio
import json
import logging
from typing import Any

from mcp.server import Server
from mcp.types import TextContent, Tool

from .config import Config, get_config
from .handlers import ImageGenerateHandler, ToolContext
from .handlers.base import ToolHandler
from .manifest import PLUGIN_ID
from .shared.response_formatter import format_error_response

__all__ = ["ToolExecutionError", "create_server", "dispatch_tool"]

logger = logging.getLogger(__name__)


class ToolExecutionError(Exception):
    """工具返回错误结果；MCP 层据此设置 isError。"""
    pass


def _handlers() -> dict[str, ToolHandler]:
    handler = ImageGenerateHandler()
    return {handler.name: handler}


async def dispatch_tool(
    name: str,
    arguments: dict[str, Any],
    handlers: dict[str, ToolHandler],
    tool_ctx: ToolContext,
) -> list[TextContent]:
    """执行工具，错误结果以 ToolExecutionError 抛出。"""
    handler = handlers.get(name)
    if handler is None:
        result = format_error_response(f"Unknown tool '{name}'")
    else:
        result = await handler.handle(arguments or {}, tool_ctx)

    if result.is_error:
        raise ToolExecutionError(result.text)
    return result.content


def create_server(config: Config | None = None) -> Server:
    """创建 MCP Server 实例。"""
    config = config or get_config()
    server = Server(PLUGIN_ID)
    handlers = _handlers()
    tool_ctx = ToolContext(
        imagine_config=config.imagine,
        image_config=config.image,
        debug=config.debug,
    )

    @server.list_tools()
    async def list_tools() -> list[Tool]:
        """列出可用工具。"""
        tools = [
            Tool(
                name=handler.name,
                description=handler.description,
                inputSchema=handler.get_input_schema(),
            )
            for handler in handlers.values()
        ]
        logger.debug(f"[MCP] list_tools called, returning {[t.name for t in tools]}")
        return tools

    @server.call_tool()
    async def call_tool(name: str, arguments: dict[str, Any]) -> list[TextContent]:
        """调用工具。"""
        if tool_ctx.debug:
            logger.debug(
                f"[MCP] call_tool request: {name} "
                f"{json.dumps(arguments, ensure_ascii=False, default=str)[:500]}"
            )
        try:
            return await dispatch_tool(name, arguments, handlers, tool_ctx)
        except asyncio.CancelledError:
            logger.info(f"Tool '{name}' cancelled")
            raise

    return server
