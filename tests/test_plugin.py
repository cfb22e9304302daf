"""插件生命周期测试。"""

from __future__ import annotations

import json
from unittest.mock import AsyncMock, MagicMock

import pytest

from imagegen_plugin import ImageGenPlugin
from imagegen_plugin.host import A2AServerConfig, ChannelCommandContext
from imagegen_plugin.manifest import MANIFEST


def make_provider(provider_id: str) -> MagicMock:
    provider = MagicMock()
    provider.id = provider_id
    return provider


def make_ctx(config: dict | None = None, providers: list | None = None) -> MagicMock:
    ctx = MagicMock()
    ctx.get_config.return_value = config if config is not None else {"provider": "openai-dalle"}
    ctx.get_channel_providers.return_value = providers if providers is not None else []
    ctx.inject = AsyncMock(return_value=json.dumps({"imageUrl": "https://example.com/generated.png"}))
    return ctx


def registered_server(ctx: MagicMock) -> A2AServerConfig:
    return ctx.register_a2a_server.call_args.args[0]


def after_init_handler(ctx: MagicMock):
    for call in ctx.events.on.call_args_list:
        if call.args[0] == "plugin:afterInit":
            return call.args[1]
    return None


@pytest.fixture
def plugin() -> ImageGenPlugin:
    return ImageGenPlugin()


class TestManifest:
    """manifest 测试。"""

    def test_metadata(self, plugin: ImageGenPlugin):
        assert plugin.name == "wopr-plugin-imagegen"
        assert plugin.version == "1.0.0"

    def test_capabilities(self):
        assert "image-gen" in MANIFEST["capabilities"]
        assert "image-generation" in MANIFEST["capabilities"]
        provided = MANIFEST["provides"]["capabilities"]
        assert any(c["type"] == "image-gen" and c["id"] == "wopr-imagegen-dalle" for c in provided)

    def test_config_schema_fields(self):
        fields = {f["name"]: f for f in MANIFEST["configSchema"]["fields"]}
        assert "provider" in fields
        assert fields["apiKey"]["type"] == "password"
        assert fields["apiKey"]["secret"] is True

    def test_lifecycle(self):
        assert MANIFEST["lifecycle"]["shutdownBehavior"] == "drain"
        assert MANIFEST["lifecycle"]["shutdownTimeoutMs"] > 0
        assert MANIFEST["category"] == "creative"
        assert isinstance(MANIFEST["tags"], list)


class TestInit:
    """init 测试。"""

    @pytest.mark.asyncio
    async def test_registers_config_schema(self, plugin: ImageGenPlugin):
        ctx = make_ctx()
        await plugin.init(ctx)
        plugin_id, schema = ctx.register_config_schema.call_args.args
        assert plugin_id == "wopr-plugin-imagegen"
        assert {f["name"] for f in schema["fields"]} == {
            "defaultModel", "defaultSize", "defaultStyle", "maxPromptLength",
        }
        await plugin.shutdown()

    @pytest.mark.asyncio
    async def test_registers_a2a_tools(self, plugin: ImageGenPlugin):
        ctx = make_ctx()
        await plugin.init(ctx)
        server = registered_server(ctx)
        assert server.name == "imagegen"
        assert server.version == "1.0.0"
        assert [t.name for t in server.tools] == ["imagine", "image_generate"]
        generate = server.tools[1]
        assert generate.input_schema["required"] == ["prompt"]
        assert set(generate.input_schema["properties"]) == {"prompt", "size", "quality", "style"}
        await plugin.shutdown()

    @pytest.mark.asyncio
    async def test_skips_missing_host_hooks(self, plugin: ImageGenPlugin):
        ctx = make_ctx()
        ctx.register_a2a_server = None
        ctx.register_config_schema = None
        ctx.get_channel_providers = None
        ctx.events = None
        await plugin.init(ctx)
        assert plugin.is_initialized
        await plugin.shutdown()

    @pytest.mark.asyncio
    async def test_registers_command_on_providers(self, plugin: ImageGenPlugin):
        provider = make_provider("discord-1")
        ctx = make_ctx(providers=[provider])
        await plugin.init(ctx)
        command = provider.register_command.call_args.args[0]
        assert command.name == "imagine"
        await plugin.shutdown()

    @pytest.mark.asyncio
    async def test_late_provider_registered_once(self, plugin: ImageGenPlugin):
        early = make_provider("discord-1")
        ctx = make_ctx(providers=[early])
        await plugin.init(ctx)

        late = make_provider("slack-1")
        ctx.get_channel_providers.return_value = [early, late]
        handler = after_init_handler(ctx)
        assert handler is not None
        handler()
        handler()

        assert early.register_command.call_count == 1
        assert late.register_command.call_count == 1
        await plugin.shutdown()

    @pytest.mark.asyncio
    async def test_imagine_tool_routes_through_inject(self, plugin: ImageGenPlugin):
        ctx = make_ctx()
        await plugin.init(ctx)
        imagine = registered_server(ctx).tools[0]

        result = await imagine.handler({"prompt": "a dragon"})

        assert result.is_error is False
        assert result.text == "https://example.com/generated.png"
        assert "[capability:image-generation]" in ctx.inject.call_args.args[1]
        await plugin.shutdown()

    @pytest.mark.asyncio
    async def test_imagine_tool_inject_failure(self, plugin: ImageGenPlugin):
        ctx = make_ctx()
        ctx.inject = AsyncMock(side_effect=RuntimeError("Connection failed"))
        await plugin.init(ctx)

        result = await registered_server(ctx).tools[0].handler({"prompt": "a dragon"})

        assert result.is_error is True
        assert "failed" in result.to_dict()["content"][0]["text"]
        await plugin.shutdown()

    @pytest.mark.asyncio
    async def test_command_uses_host_config(self, plugin: ImageGenPlugin):
        provider = make_provider("discord-1")
        ctx = make_ctx(config={"defaultModel": "sdxl", "defaultStyle": "anime"}, providers=[provider])
        await plugin.init(ctx)
        command = provider.register_command.call_args.args[0]

        cmd_ctx = ChannelCommandContext(args=["a", "fox"], reply=AsyncMock(), channel="c1", channel_type="discord")
        await command.handler(cmd_ctx)

        message = ctx.inject.call_args.args[1]
        assert "model: sdxl" in message
        assert "style: anime" in message
        cmd_ctx.reply.assert_awaited_once_with("https://example.com/generated.png")
        await plugin.shutdown()


class TestShutdown:
    """shutdown 测试。"""

    @pytest.mark.asyncio
    async def test_unregisters_commands(self, plugin: ImageGenPlugin):
        provider = make_provider("discord-1")
        ctx = make_ctx(providers=[provider])
        await plugin.init(ctx)
        await plugin.shutdown()
        provider.unregister_command.assert_called_once_with("imagine")
        assert not plugin.is_initialized

    @pytest.mark.asyncio
    async def test_unregister_errors_ignored(self, plugin: ImageGenPlugin):
        broken = make_provider("discord-1")
        broken.unregister_command.side_effect = RuntimeError("Provider already destroyed")
        healthy = make_provider("slack-1")
        ctx = make_ctx(providers=[broken, healthy])
        await plugin.init(ctx)

        await plugin.shutdown()

        healthy.unregister_command.assert_called_once_with("imagine")

    @pytest.mark.asyncio
    async def test_unsubscribes_event(self, plugin: ImageGenPlugin):
        ctx = make_ctx()
        unsubscribe = MagicMock()
        ctx.events.on.return_value = unsubscribe
        await plugin.init(ctx)
        await plugin.shutdown()
        unsubscribe.assert_called_once_with()

    @pytest.mark.asyncio
    async def test_shutdown_without_init(self, plugin: ImageGenPlugin):
        await plugin.shutdown()
        assert not plugin.is_initialized

    @pytest.mark.asyncio
    async def test_reinit_after_shutdown(self, plugin: ImageGenPlugin):
        provider = make_provider("discord-1")
        ctx = make_ctx(providers=[provider])
        await plugin.init(ctx)
        await plugin.shutdown()
        await plugin.init(ctx)
        assert provider.register_command.call_count == 2
        await plugin.shutdown()
