"""image_generate 工具与 provider 解析测试。"""

from __future__ import annotations

import json
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest

from imagegen_plugin.config import ImageGenPluginConfig
from imagegen_plugin.handlers import ImageGenerateHandler, ToolContext
from imagegen_plugin.shared.image import (
    ImageConfigError,
    ImageGenerationRequest,
    ImageGenerationResult,
    ImageRateLimitError,
    OpenAIDalleProvider,
    ensure_output_dir,
    get_generated_dir,
    resolve_provider,
)


def make_provider(result: ImageGenerationResult | None = None, side_effect: Exception | None = None) -> MagicMock:
    """构建 mock provider，generate 为 AsyncMock。"""
    provider = MagicMock()
    provider.name = "openai-dalle"
    provider.generate = AsyncMock()
    if side_effect is not None:
        provider.generate.side_effect = side_effect
    else:
        async def _generate(request: ImageGenerationRequest, output_path: str) -> ImageGenerationResult:
            return result or ImageGenerationResult(file_path=output_path, size_bytes=123)
        provider.generate.side_effect = _generate
    return provider


class TestResolveProvider:
    """provider 解析测试。"""

    def test_openai_with_config_key(self, no_openai_key):
        provider = resolve_provider(ImageGenPluginConfig(api_key="sk-config"))
        assert isinstance(provider, OpenAIDalleProvider)
        assert provider.name == "openai-dalle"

    def test_openai_env_fallback(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("OPENAI_API_KEY", "sk-env")
        provider = resolve_provider(ImageGenPluginConfig())
        assert isinstance(provider, OpenAIDalleProvider)

    def test_missing_key(self, no_openai_key):
        with pytest.raises(ImageConfigError, match="API key not configured"):
            resolve_provider(ImageGenPluginConfig())

    def test_unknown_provider(self):
        with pytest.raises(ImageConfigError, match="Unknown image generation provider: replicate"):
            resolve_provider(ImageGenPluginConfig(provider="replicate", api_key="k"))


class TestOutputDir:
    """输出目录测试。"""

    def test_wopr_home(self, wopr_home: Path):
        assert get_generated_dir() == wopr_home / "attachments" / "generated"

    def test_home_fallback(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.delenv("WOPR_HOME", raising=False)
        monkeypatch.setenv("HOME", str(tmp_path))
        assert get_generated_dir() == tmp_path / ".wopr" / "attachments" / "generated"

    def test_ensure_is_idempotent(self, wopr_home: Path):
        first = ensure_output_dir()
        second = ensure_output_dir()
        assert first == second
        assert first.is_dir()


class TestImageGenerateHandler:
    """ImageGenerateHandler 测试。"""

    def test_schema(self):
        schema = ImageGenerateHandler().get_input_schema()
        assert schema["required"] == ["prompt"]
        for key in ("prompt", "size", "quality", "style"):
            assert key in schema["properties"]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("arguments", [{}, {"prompt": ""}, {"prompt": "   "}, {"prompt": 12}])
    async def test_empty_prompt(self, arguments: dict):
        factory = MagicMock()
        result = await ImageGenerateHandler(factory).handle(arguments, ToolContext())
        assert result.is_error is True
        assert result.text == "Error: prompt cannot be empty"
        factory.assert_not_called()

    @pytest.mark.asyncio
    async def test_success(self, wopr_home: Path):
        provider = make_provider()
        handler = ImageGenerateHandler(lambda config: provider)

        result = await handler.handle(
            {"prompt": "a sunset", "size": "512", "quality": "hd", "style": "vivid"},
            ToolContext(),
        )

        assert result.is_error is False
        payload = json.loads(result.text)
        assert payload["provider"] == "openai-dalle"
        assert payload["sizeBytes"] == 123
        assert "revisedPrompt" not in payload

        file_path = Path(payload["filePath"])
        assert file_path.parent == wopr_home / "attachments" / "generated"
        assert file_path.suffix == ".png"
        assert file_path.parent.is_dir()

        request, output_path = provider.generate.call_args.args
        assert request == ImageGenerationRequest(prompt="a sunset", size="512", quality="hd", style="vivid")
        assert output_path == payload["filePath"]

    @pytest.mark.asyncio
    async def test_revised_prompt_included(self, wopr_home: Path):
        provider = make_provider(ImageGenerationResult(file_path="/x.png", size_bytes=5, revised_prompt="better"))
        result = await ImageGenerateHandler(lambda config: provider).handle({"prompt": "a cat"}, ToolContext())
        assert json.loads(result.text)["revisedPrompt"] == "better"

    @pytest.mark.asyncio
    async def test_non_string_options_ignored(self, wopr_home: Path):
        provider = make_provider()
        handler = ImageGenerateHandler(lambda config: provider)

        result = await handler.handle({"prompt": "a cat", "size": 512, "quality": None, "style": ["vivid"]}, ToolContext())

        assert result.is_error is False
        request = provider.generate.call_args.args[0]
        assert request == ImageGenerationRequest(prompt="a cat")

    @pytest.mark.asyncio
    async def test_unique_filenames(self, wopr_home: Path):
        provider = make_provider()
        handler = ImageGenerateHandler(lambda config: provider)
        first = json.loads((await handler.handle({"prompt": "a"}, ToolContext())).text)["filePath"]
        second = json.loads((await handler.handle({"prompt": "b"}, ToolContext())).text)["filePath"]
        assert first != second

    @pytest.mark.asyncio
    async def test_config_error_reported(self, wopr_home: Path, no_openai_key):
        """缺少 API key 时返回错误结果而不是抛出。"""
        result = await ImageGenerateHandler().handle({"prompt": "a cat"}, ToolContext())
        assert result.is_error is True
        assert "Image generation failed" in result.text
        assert "API key not configured" in result.text

    @pytest.mark.asyncio
    async def test_unknown_provider_reported(self, wopr_home: Path):
        ctx = ToolContext(image_config=ImageGenPluginConfig(provider="midjourney", api_key="k"))
        result = await ImageGenerateHandler().handle({"prompt": "a cat"}, ctx)
        assert result.is_error is True
        assert "Unknown image generation provider" in result.text

    @pytest.mark.asyncio
    async def test_provider_error_reported(self, wopr_home: Path):
        provider = make_provider(side_effect=ImageRateLimitError("Rate limited by OpenAI API. Details: slow down"))
        result = await ImageGenerateHandler(lambda config: provider).handle({"prompt": "a cat"}, ToolContext())
        assert result.is_error is True
        assert "Rate limited" in result.text

    @pytest.mark.asyncio
    async def test_unexpected_error_reported(self, wopr_home: Path):
        provider = make_provider(side_effect=OSError("disk full"))
        result = await ImageGenerateHandler(lambda config: provider).handle({"prompt": "a cat"}, ToolContext())
        assert result.is_error is True
        assert "disk full" in result.text
