"""工具响应格式化器。

工具调用统一返回 ToolResult：content 为 TextContent 列表，
is_error 标记失败。成功 payload 序列化为缩进 JSON。
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any

from mcp.types import TextContent

__all__ = [
    "ToolResult",
    "format_text_response",
    "format_json_response",
    "format_error_response",
]


@dataclass
class ToolResult:
    """工具调用结果。"""

    content: list[TextContent] = field(default_factory=list)
    is_error: bool = False

    @property
    def text(self) -> str:
        """拼接所有文本内容。"""
        return "\n".join(item.text for item in self.content)

    def to_dict(self) -> dict[str, Any]:
        """转换为宿主 A2A 协议使用的字典形式。"""
        data: dict[str, Any] = {
            "content": [{"type": item.type, "text": item.text} for item in self.content],
        }
        if self.is_error:
            data["isError"] = True
        return data


def format_text_response(text: str) -> ToolResult:
    """成功的纯文本响应。"""
    return ToolResult(content=[TextContent(type="text", text=text)])


def format_json_response(payload: dict[str, Any]) -> ToolResult:
    """成功的 JSON 响应。"""
    return format_text_response(json.dumps(payload, indent=2, ensure_ascii=False))


def format_error_response(error: str) -> ToolResult:
    """统一的错误响应格式化函数。"""
    return ToolResult(content=[TextContent(type="text", text=error)], is_error=True)
