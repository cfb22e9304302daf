"""Pytest 配置和 fixtures。"""

from __future__ import annotations

import base64
import sys
from pathlib import Path

import pytest

# 项目根目录
PROJECT_ROOT = Path(__file__).parent.parent

# 添加 src 目录到 Python 路径
SRC_DIR = PROJECT_ROOT / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

# 最小 PNG 文件头 + 数据
FAKE_IMAGE_BYTES = b"\x89PNG\r\n\x1a\nfake-image-data"


@pytest.fixture
def fake_image_bytes() -> bytes:
    """假图片内容。"""
    return FAKE_IMAGE_BYTES


@pytest.fixture
def fake_image_b64() -> str:
    """假图片的 base64 编码。"""
    return base64.b64encode(FAKE_IMAGE_BYTES).decode()


@pytest.fixture
def wopr_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """把 WOPR_HOME 指向临时目录。"""
    home = tmp_path / "wopr"
    monkeypatch.setenv("WOPR_HOME", str(home))
    return home


@pytest.fixture
def no_openai_key(monkeypatch: pytest.MonkeyPatch) -> None:
    """移除 OPENAI_API_KEY。"""
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
