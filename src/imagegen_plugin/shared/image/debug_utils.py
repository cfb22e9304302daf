"""DALL-E 请求/响应的调试日志摘要。

日志中不出现 API key 和完整图片数据，prompt 截断显示。

imagegen-plugin shared/image v0.1.0
"""

from __future__ import annotations

from typing import Any

__all__ = ["PROMPT_PREVIEW_CHARS", "mask_headers", "summarize_request", "summarize_response"]

PROMPT_PREVIEW_CHARS = 80

_PROMPT_KEYS = ("prompt", "revised_prompt")


def _preview(text: str) -> str:
    if len(text) <= PROMPT_PREVIEW_CHARS:
        return text
    return f"{text[:PROMPT_PREVIEW_CHARS]}...({len(text)} chars)"


def mask_headers(headers: dict[str, str]) -> dict[str, str]:
    """Authorization 只保留 scheme。"""
    masked = dict(headers)
    for key, value in headers.items():
        if key.lower() == "authorization":
            scheme = value.split(" ", 1)[0] if " " in value else ""
            masked[key] = f"{scheme} ***".strip()
    return masked


def summarize_request(body: dict[str, Any]) -> dict[str, Any]:
    """请求体摘要：prompt 截断，其余字段原样。"""
    summary = dict(body)
    if isinstance(summary.get("prompt"), str):
        summary["prompt"] = _preview(summary["prompt"])
    return summary


def summarize_response(api_response: Any) -> Any:
    """响应体摘要：b64_json 替换为长度，prompt 类字段截断。"""
    if not isinstance(api_response, dict):
        return api_response

    summary = dict(api_response)
    data = api_response.get("data")
    if isinstance(data, list):
        items = []
        for item in data:
            if not isinstance(item, dict):
                items.append(item)
                continue
            entry = dict(item)
            if isinstance(entry.get("b64_json"), str):
                entry["b64_json"] = f"<base64:{len(entry['b64_json'])} chars>"
            for key in _PROMPT_KEYS:
                if isinstance(entry.get(key), str):
                    entry[key] = _preview(entry[key])
            items.append(entry)
        summary["data"] = items
    return summary
