"""imagegen MCP 应用入口。

包含日志配置、stdio 服务器运行和主入口点。
"""

from __future__ import annotations

import asyncio
import logging
import sys

from mcp.server.stdio import stdio_server

from .config import get_config
from .server import create_server

__all__ = ["run_server", "main"]

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


async def run_server() -> None:
    """通过 stdio 运行 MCP Server。"""
    config = get_config()
    logger.info(f"Starting imagegen MCP Server: {config}")

    server = create_server(config)
    async with stdio_server() as (read_stream, write_stream):
        await server.run(read_stream, write_stream, server.create_initialization_options())

    logger.info("imagegen MCP Server stopped")


def configure_logging() -> None:
    """配置日志输出。"""
    config = get_config()
    log_handlers: list[logging.Handler] = []

    if config.log_debug and config.log_file:
        # LOG_DEBUG 模式：输出到临时文件
        file_handler = logging.FileHandler(config.log_file, encoding="utf-8")
        file_handler.setFormatter(logging.Formatter(LOG_FORMAT))
        log_handlers.append(file_handler)
        log_level = logging.DEBUG
    else:
        # 默认模式：输出到 stderr（stdout 用于 MCP 协议）
        stderr_handler = logging.StreamHandler(sys.stderr)
        stderr_handler.setFormatter(logging.Formatter(LOG_FORMAT))
        log_handlers.append(stderr_handler)
        log_level = logging.INFO

    # 第三方库保持 WARNING
    logging.basicConfig(level=logging.WARNING, handlers=log_handlers)
    logging.getLogger("imagegen_plugin").setLevel(log_level)


def main() -> None:
    """主入口点。"""
    configure_logging()
    try:
        asyncio.run(run_server())
    except KeyboardInterrupt:
        logger.info("Interrupted, exiting")


if __name__ == "__main__":
    main()
