"""Prompt 模块。

imagegen-plugin shared/prompt v0.1.0

/imagine 参数解析与路由回复规范化。
"""

from __future__ import annotations

from .parser import KNOWN_FLAGS, is_valid_size, parse_imagine_prompt
from .response import INSUFFICIENT_CREDITS, parse_imagine_response
from .types import ImagineRequest, ImagineResponse

__all__ = [
    "KNOWN_FLAGS",
    "INSUFFICIENT_CREDITS",
    "ImagineRequest",
    "ImagineResponse",
    "is_valid_size",
    "parse_imagine_prompt",
    "parse_imagine_response",
]
