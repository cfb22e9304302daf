"""imagegen 插件生命周期。

init 时注册配置 schema、A2A 工具（imagine / image_generate）以及各频道
provider 上的 /imagine 命令；晚于 init 出现的 provider 通过
plugin:afterInit 事件补注册。shutdown 注销全部命令。
"""

from __future__ import annotations

import logging
from typing import Any, Callable

from .config import ImageGenPluginConfig, ImagineConfig
from .handlers import ImageGenerateHandler, ImagineHandler, ToolContext, handle_imagine_command
from .handlers.base import ToolHandler
from .host import (
    A2AServerConfig,
    A2ATool,
    ChannelCommand,
    ChannelCommandContext,
    ChannelProvider,
    PluginContext,
)
from .manifest import (
    A2A_SERVER_NAME,
    IMAGINE_CONFIG_SCHEMA,
    MANIFEST,
    PLUGIN_DESCRIPTION,
    PLUGIN_ID,
    PLUGIN_VERSION,
)
from .shared.response_formatter import ToolResult
from .tool_schema import IMAGINE_COMMAND_DESCRIPTION

__all__ = ["ImageGenPlugin", "CommandRegistry", "plugin"]

logger = logging.getLogger(__name__)

AFTER_INIT_EVENT = "plugin:afterInit"
COMMAND_NAME = "imagine"


class CommandRegistry:
    """记录已注册 /imagine 的频道 provider。

    同一个 provider（按 id）只注册一次。
    """

    def __init__(self, command: ChannelCommand) -> None:
        self._command = command
        self._providers: dict[str, ChannelProvider] = {}

    def register_all(self, providers: list[ChannelProvider]) -> int:
        """在尚未注册的 provider 上注册命令，返回新注册数量。"""
        registered = 0
        for provider in providers:
            provider_id = getattr(provider, "id", None) or str(id(provider))
            if provider_id in self._providers:
                continue
            try:
                provider.register_command(self._command)
            except Exception as e:
                logger.warning(f"Failed to register /{self._command.name} on {provider_id}: {e}")
                continue
            self._providers[provider_id] = provider
            registered += 1
        return registered

    def unregister_all(self) -> None:
        """注销全部命令，单个 provider 出错不影响其他 provider。"""
        for provider_id, provider in self._providers.items():
            try:
                provider.unregister_command(self._command.name)
            except Exception as e:
                logger.warning(f"Failed to unregister /{self._command.name} from {provider_id}: {e}")
        self._providers.clear()


class ImageGenPlugin:
    """图像生成插件。"""

    name = PLUGIN_ID
    version = PLUGIN_VERSION
    description = PLUGIN_DESCRIPTION
    manifest = MANIFEST

    def __init__(self) -> None:
        self._ctx: PluginContext | None = None
        self._imagine_config = ImagineConfig()
        self._registry: CommandRegistry | None = None
        self._unsubscribe: Callable[[], Any] | None = None

    @property
    def is_initialized(self) -> bool:
        return self._ctx is not None

    def _read_config(self, ctx: PluginContext) -> dict[str, Any]:
        get_config = getattr(ctx, "get_config", None)
        if get_config is None:
            return {}
        data = get_config()
        return data if isinstance(data, dict) else {}

    def _make_tool(self, handler: ToolHandler, tool_ctx: ToolContext) -> A2ATool:
        async def run(arguments: dict[str, Any]) -> ToolResult:
            return await handler.handle(arguments or {}, tool_ctx)

        return A2ATool(
            name=handler.name,
            description=handler.description,
            input_schema=handler.get_input_schema(),
            handler=run,
        )

    def _channel_providers(self, ctx: PluginContext) -> list[ChannelProvider]:
        get_providers = getattr(ctx, "get_channel_providers", None)
        if get_providers is None:
            return []
        return list(get_providers() or [])

    def _register_channel_commands(self) -> None:
        if self._ctx is None or self._registry is None:
            return
        count = self._registry.register_all(self._channel_providers(self._ctx))
        if count:
            logger.info(f"[{PLUGIN_ID}] registered /{COMMAND_NAME} on {count} channel provider(s)")

    async def _on_imagine(self, cmd_ctx: ChannelCommandContext) -> None:
        if self._ctx is None:
            await cmd_ctx.reply("Image generation is not available right now.")
            return
        await handle_imagine_command(cmd_ctx, self._ctx, self._imagine_config)

    async def init(self, ctx: PluginContext) -> None:
        """初始化插件并向宿主注册命令与工具。"""
        self._ctx = ctx

        register_schema = getattr(ctx, "register_config_schema", None)
        if register_schema is not None:
            register_schema(PLUGIN_ID, IMAGINE_CONFIG_SCHEMA)

        raw_config = self._read_config(ctx)
        self._imagine_config = ImagineConfig.from_mapping(raw_config)
        tool_ctx = ToolContext(
            imagine_config=self._imagine_config,
            image_config=ImageGenPluginConfig.from_mapping(raw_config),
            inject=ctx.inject,
        )

        register_a2a = getattr(ctx, "register_a2a_server", None)
        if register_a2a is not None:
            register_a2a(A2AServerConfig(
                name=A2A_SERVER_NAME,
                version=PLUGIN_VERSION,
                tools=[
                    self._make_tool(ImagineHandler(), tool_ctx),
                    self._make_tool(ImageGenerateHandler(), tool_ctx),
                ],
            ))

        self._registry = CommandRegistry(ChannelCommand(
            name=COMMAND_NAME,
            description=IMAGINE_COMMAND_DESCRIPTION,
            handler=self._on_imagine,
        ))
        self._register_channel_commands()

        events = getattr(ctx, "events", None)
        if events is not None:
            self._unsubscribe = events.on(AFTER_INIT_EVENT, self._register_channel_commands)

        logger.info(f"[{PLUGIN_ID}] initialized")

    async def shutdown(self) -> None:
        """注销命令与事件订阅。"""
        if self._registry is not None:
            self._registry.unregister_all()
            self._registry = None

        if callable(self._unsubscribe):
            try:
                self._unsubscribe()
            except Exception as e:
                logger.warning(f"[{PLUGIN_ID}] failed to unsubscribe from {AFTER_INIT_EVENT}: {e}")
        self._unsubscribe = None
        self._ctx = None


plugin = ImageGenPlugin()
