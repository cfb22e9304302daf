"""/imagine 提示词解析。

从自由文本中提取 `--model` / `--size` / `--style` flag，其余内容作为提示词。
"""

from __future__ import annotations

import re

from .types import ImagineRequest

__all__ = ["KNOWN_FLAGS", "parse_imagine_prompt", "is_valid_size"]

KNOWN_FLAGS = frozenset({"model", "size", "style"})

_FLAG_RE = re.compile(r"--([A-Za-z0-9_]+)\s+(\S+)")
_WHITESPACE_RE = re.compile(r"\s+")
_SIZE_RE = re.compile(r"[0-9]{2,4}x[0-9]{2,4}")


def parse_imagine_prompt(raw: str) -> ImagineRequest:
    """解析 /imagine 参数。

    未知 flag 原样保留在提示词中；同一 flag 出现多次时以最后一次为准。
    本函数从不失败，也不做校验。
    """
    flags: dict[str, str] = {}

    def _extract(match: re.Match[str]) -> str:
        key, value = match.group(1), match.group(2)
        if key in KNOWN_FLAGS:
            flags[key] = value
            return ""
        return match.group(0)

    cleaned = _FLAG_RE.sub(_extract, raw)
    prompt = _WHITESPACE_RE.sub(" ", cleaned).strip()

    return ImagineRequest(
        prompt=prompt,
        model=flags.get("model"),
        size=flags.get("size"),
        style=flags.get("style"),
    )


def is_valid_size(size: str) -> bool:
    """校验 WxH 格式，每边 2-4 位数字，如 "1024x1024"。"""
    return _SIZE_RE.fullmatch(size) is not None
