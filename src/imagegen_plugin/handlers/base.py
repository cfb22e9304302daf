"""Tool Handler 基础抽象。

定义工具处理器的协议和上下文。
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from ..config import ImageGenPluginConfig, ImagineConfig
from ..shared.response_formatter import ToolResult

if TYPE_CHECKING:
    from ..host import InjectFn

__all__ = [
    "ToolContext",
    "ToolHandler",
    "string_arg",
]


def string_arg(arguments: dict[str, Any], key: str) -> str | None:
    """读取字符串参数，非字符串值视为未提供。"""
    value = arguments.get(key)
    return value if isinstance(value, str) else None


@dataclass
class ToolContext:
    """工具执行上下文。

    封装工具执行所需的所有依赖，避免在函数间传递大量参数。
    """

    imagine_config: ImagineConfig = field(default_factory=ImagineConfig)
    image_config: ImageGenPluginConfig = field(default_factory=ImageGenPluginConfig)
    inject: "InjectFn | None" = None
    debug: bool = False


class ToolHandler(ABC):
    """工具处理器协议。

    所有工具处理器必须实现此接口。handle 不抛出业务异常，
    失败以 is_error 的 ToolResult 返回。
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """工具名称。"""
        ...

    @property
    @abstractmethod
    def description(self) -> str:
        """工具描述。"""
        ...

    @abstractmethod
    def get_input_schema(self) -> dict[str, Any]:
        """获取输入参数 schema。"""
        ...

    @abstractmethod
    async def handle(
        self,
        arguments: dict[str, Any],
        ctx: ToolContext,
    ) -> ToolResult:
        """处理工具调用。

        Args:
            arguments: 工具参数
            ctx: 执行上下文

        Returns:
            ToolResult
        """
        ...

    def validate(self, arguments: dict[str, Any]) -> str | None:
        """验证参数。

        Returns:
            错误消息，如果验证通过则返回 None
        """
        return None
