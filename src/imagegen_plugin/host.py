"""宿主接口定义。

插件运行时由宿主提供，这里只描述插件实际用到的边界，
调用方在每个入口显式传入，便于在没有宿主的情况下测试。

可选的宿主能力（不存在或为 None 时跳过）:
    register_config_schema(plugin_id, schema)
    register_a2a_server(config)
    get_channel_providers() -> list[ChannelProvider]
    events.on(event, handler) -> unsubscribe
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Awaitable, Callable, Protocol

if TYPE_CHECKING:
    from .shared.response_formatter import ToolResult

__all__ = [
    "InjectFn",
    "ChannelCommandContext",
    "ChannelCommand",
    "ChannelProvider",
    "A2ATool",
    "A2AServerConfig",
    "PluginContext",
]

# inject(session_key, message, metadata) -> 原始回复文本
InjectFn = Callable[[str, str, dict[str, Any]], Awaitable[str]]


@dataclass
class ChannelCommandContext:
    """频道命令调用上下文。

    Attributes:
        args: 命令参数（按空白切分）
        reply: 回复当前频道
        channel: 频道 ID
        channel_type: 频道类型（discord/slack/...）
        sender: 发送者
    """

    args: list[str]
    reply: Callable[[str], Awaitable[None]]
    channel: str
    channel_type: str
    sender: str = ""


@dataclass
class ChannelCommand:
    """注册到频道 provider 的命令。"""

    name: str
    description: str
    handler: Callable[[ChannelCommandContext], Awaitable[None]]


class ChannelProvider(Protocol):
    """频道 provider（Discord/Slack 等），对插件是黑盒。"""

    id: str

    def register_command(self, command: ChannelCommand) -> None:
        ...

    def unregister_command(self, name: str) -> None:
        ...


@dataclass
class A2ATool:
    """Agent 可调用的工具。"""

    name: str
    description: str
    input_schema: dict[str, Any]
    handler: Callable[[dict[str, Any]], Awaitable["ToolResult"]]


@dataclass
class A2AServerConfig:
    """注册到宿主的 A2A server。"""

    name: str
    version: str
    tools: list[A2ATool] = field(default_factory=list)


class PluginContext(Protocol):
    """宿主传入的插件上下文。"""

    async def inject(self, session_key: str, message: str, metadata: dict[str, Any]) -> str:
        """把能力请求交给宿主路由（额度检查、adapter 选择），返回原始回复。"""
        ...

    def get_config(self) -> dict[str, Any]:
        """读取插件配置（camelCase 键）。"""
        ...
