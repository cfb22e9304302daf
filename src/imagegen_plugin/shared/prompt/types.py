"""Prompt 模块类型定义。"""

from __future__ import annotations

from dataclasses import dataclass

__all__ = ["ImagineRequest", "ImagineResponse"]


@dataclass(frozen=True)
class ImagineRequest:
    """/imagine 解析结果。

    Attributes:
        prompt: 去掉 flag 并规范空白后的提示词（可能为空）
        model: --model 值
        size: --size 值（未校验）
        style: --style 值
    """
    prompt: str
    model: str | None = None
    size: str | None = None
    style: str | None = None


@dataclass(frozen=True)
class ImagineResponse:
    """路由回复的规范化结果。

    image_url 与 error 至多一个有值；两者都为空表示无法识别，
    调用方应直接使用原始回复文本。
    """
    image_url: str | None = None
    error: str | None = None

    @property
    def is_empty(self) -> bool:
        return self.image_url is None and self.error is None
