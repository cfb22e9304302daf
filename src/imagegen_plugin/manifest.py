"""插件 manifest 与配置 schema。"""

from __future__ import annotations

from typing import Any

__all__ = [
    "PLUGIN_ID",
    "PLUGIN_VERSION",
    "PLUGIN_DESCRIPTION",
    "A2A_SERVER_NAME",
    "IMAGINE_CONFIG_SCHEMA",
    "MANIFEST",
]

PLUGIN_ID = "wopr-plugin-imagegen"
PLUGIN_VERSION = "1.0.0"
PLUGIN_DESCRIPTION = "Image generation via DALL-E and more"
A2A_SERVER_NAME = "imagegen"

IMAGINE_CONFIG_SCHEMA: dict[str, Any] = {
    "title": "Image Generation",
    "description": "Configure AI image generation settings",
    "fields": [
        {
            "name": "defaultModel",
            "type": "select",
            "label": "Default Model",
            "options": [
                {"value": "flux", "label": "Flux"},
                {"value": "sdxl", "label": "SDXL"},
                {"value": "dall-e", "label": "DALL-E"},
            ],
            "default": "flux",
            "description": "Default model for /imagine when --model is not specified",
        },
        {
            "name": "defaultSize",
            "type": "select",
            "label": "Default Size",
            "options": [
                {"value": "512x512", "label": "512x512"},
                {"value": "768x768", "label": "768x768"},
                {"value": "1024x1024", "label": "1024x1024"},
                {"value": "1024x768", "label": "1024x768 (landscape)"},
                {"value": "768x1024", "label": "768x1024 (portrait)"},
            ],
            "default": "1024x1024",
            "description": "Default image dimensions when --size is not specified",
        },
        {
            "name": "defaultStyle",
            "type": "select",
            "label": "Default Style",
            "options": [
                {"value": "auto", "label": "Auto"},
                {"value": "photorealistic", "label": "Photorealistic"},
                {"value": "artistic", "label": "Artistic"},
                {"value": "anime", "label": "Anime"},
                {"value": "pixel-art", "label": "Pixel Art"},
            ],
            "default": "auto",
            "description": "Default style preset when --style is not specified",
        },
        {
            "name": "maxPromptLength",
            "type": "number",
            "label": "Max Prompt Length",
            "default": 1000,
            "description": "Maximum character length for image prompts (safety limit)",
        },
    ],
}

MANIFEST: dict[str, Any] = {
    "name": PLUGIN_ID,
    "version": PLUGIN_VERSION,
    "description": "Image generation plugin: /imagine command and DALL-E tool",
    "license": "MIT",
    "capabilities": ["image-gen", "image-generation"],
    "requires": {
        "env": [],
        "network": {
            "outbound": True,
            "hosts": ["api.openai.com"],
        },
    },
    "provides": {
        "capabilities": [
            {
                "type": "image-gen",
                "id": "wopr-imagegen-dalle",
                "displayName": "Image Generation (DALL-E)",
                "tier": "byok",
            },
        ],
    },
    "configSchema": {
        "title": "Image Generation Settings",
        "description": "Configure your image generation provider and credentials",
        "fields": [
            {
                "name": "provider",
                "type": "select",
                "label": "Provider",
                "description": "Image generation provider to use",
                "default": "openai-dalle",
                "options": [{"value": "openai-dalle", "label": "OpenAI DALL-E 3"}],
                "required": False,
            },
            {
                "name": "apiKey",
                "type": "password",
                "label": "OpenAI API Key",
                "description": "Your OpenAI API key for DALL-E image generation",
                "secret": True,
                "required": False,
            },
        ],
    },
    "lifecycle": {
        "shutdownBehavior": "drain",
        "shutdownTimeoutMs": 30000,
    },
    "icon": "🎨",
    "category": "creative",
    "tags": ["image", "generation", "imagine", "dalle", "openai", "ai"],
}
