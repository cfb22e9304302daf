"""路由回复规范化。

回复可能是 JSON、包含图片 URL 的纯文本，或包含已知错误短语的纯文本。
按顺序尝试，第一个命中的结果生效。
"""

from __future__ import annotations

import json
import re
from typing import Callable

from .types import ImagineResponse

__all__ = ["INSUFFICIENT_CREDITS", "parse_imagine_response"]

INSUFFICIENT_CREDITS = "insufficient_credits"

_IMAGE_URL_RE = re.compile(
    r"https?://\S+\.(png|jpg|jpeg|gif|webp)(\?\S+)?",
    re.IGNORECASE,
)


def _from_json(raw: str) -> ImagineResponse | None:
    try:
        parsed = json.loads(raw)
    except (ValueError, RecursionError):
        return None
    if not isinstance(parsed, dict):
        return None

    if isinstance(parsed.get("imageUrl"), str):
        return ImagineResponse(image_url=parsed["imageUrl"])
    if isinstance(parsed.get("error"), str):
        return ImagineResponse(error=parsed["error"])
    if isinstance(parsed.get("url"), str):
        return ImagineResponse(image_url=parsed["url"])
    return None


def _from_url(raw: str) -> ImagineResponse | None:
    match = _IMAGE_URL_RE.search(raw)
    if match:
        return ImagineResponse(image_url=match.group(0))
    return None


def _from_error_phrase(raw: str) -> ImagineResponse | None:
    lowered = raw.lower()
    if "insufficient_credits" in lowered or "insufficient credits" in lowered:
        return ImagineResponse(error=INSUFFICIENT_CREDITS)
    return None


_ATTEMPTS: tuple[Callable[[str], ImagineResponse | None], ...] = (
    _from_json,
    _from_url,
    _from_error_phrase,
)


def parse_imagine_response(raw: str) -> ImagineResponse:
    """解析路由回复。

    Returns:
        ImagineResponse；无法识别时两个字段都为 None
    """
    for attempt in _ATTEMPTS:
        result = attempt(raw)
        if result is not None:
            return result
    return ImagineResponse()
