"""OpenAI DALL-E Provider - 使用 /images/generations API 生成图像。

imagegen-plugin shared/image/providers v0.1.0
"""

from __future__ import annotations

import asyncio
import base64
import binascii
import json
import logging
import time
from pathlib import Path
from typing import Any

import aiohttp

from ..debug_utils import mask_headers, summarize_request, summarize_response
from ..errors import (
    ImageAPIError,
    ImageContentPolicyError,
    ImageNoDataError,
    ImageRateLimitError,
    ImageTimeoutError,
)
from ..types import (
    DEFAULT_QUALITY,
    DEFAULT_STYLE,
    ImageGenerationRequest,
    ImageGenerationResult,
    resolve_size,
)

__all__ = ["OpenAIDalleProvider", "DALLE_API_URL", "DALLE_MODEL", "REQUEST_TIMEOUT"]

logger = logging.getLogger(__name__)

DALLE_API_URL = "https://api.openai.com/v1/images/generations"
DALLE_MODEL = "dall-e-3"

# 单次请求的硬超时（秒），超时即中止
REQUEST_TIMEOUT = 120.0


def _extract_error_detail(body: str) -> str:
    """从错误响应中提取 error.message，失败时返回原文。"""
    try:
        parsed = json.loads(body)
    except ValueError:
        return body
    if isinstance(parsed, dict):
        error = parsed.get("error")
        if isinstance(error, dict) and isinstance(error.get("message"), str):
            return error["message"]
    return body


def _parse_retry_after(value: str | None) -> float | None:
    if not value:
        return None
    try:
        return float(value)
    except ValueError:
        return None


class OpenAIDalleProvider:
    """OpenAI DALL-E Provider。

    每次调用只发一个 POST，不做重试；429 以 ImageRateLimitError
    抛出，由调用方决定是否重试。
    """

    name = "openai-dalle"

    def __init__(
        self,
        api_key: str,
        api_url: str = DALLE_API_URL,
        timeout: float = REQUEST_TIMEOUT,
        session: aiohttp.ClientSession | None = None,
    ) -> None:
        self._api_key = api_key
        self._api_url = api_url
        self._timeout = timeout
        self._session = session

    def _build_headers(self) -> dict[str, str]:
        return {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self._api_key}",
        }

    def _build_request_body(self, request: ImageGenerationRequest) -> dict[str, Any]:
        """构建请求体。"""
        return {
            "model": DALLE_MODEL,
            "prompt": request.prompt,
            "n": 1,
            "size": resolve_size(request.size),
            "quality": request.quality or DEFAULT_QUALITY,
            "style": request.style or DEFAULT_STYLE,
            "response_format": "b64_json",
        }

    def _raise_for_status(self, status: int, error_text: str, retry_after: str | None) -> None:
        """把非 2xx 响应分类为具体异常。"""
        detail = _extract_error_detail(error_text)

        if status == 429:
            raise ImageRateLimitError(
                f"Rate limited by OpenAI API. Please retry later. Details: {detail}",
                _parse_retry_after(retry_after),
                self._api_url,
            )
        if status == 400 and "content policy" in detail.lower():
            raise ImageContentPolicyError(
                f"Content policy violation: {detail}",
                self._api_url,
            )
        raise ImageAPIError(status, f"DALL-E API error ({status}): {detail}", self._api_url)

    def _save_image(
        self,
        api_response: Any,
        output_path: str,
    ) -> ImageGenerationResult:
        """解码 b64_json 并写入 output_path。"""
        data_list = api_response.get("data") if isinstance(api_response, dict) else None
        item = data_list[0] if isinstance(data_list, list) and data_list else None
        b64_json = item.get("b64_json") if isinstance(item, dict) else None

        if not isinstance(b64_json, str) or not b64_json:
            raise ImageNoDataError("DALL-E API returned no image data")

        try:
            image_bytes = base64.b64decode(b64_json)
        except (binascii.Error, ValueError) as e:
            raise ImageNoDataError(f"DALL-E API returned no image data (invalid base64: {e})") from e
        if not image_bytes:
            raise ImageNoDataError("DALL-E API returned no image data (empty payload)")

        path = Path(output_path)
        path.write_bytes(image_bytes)

        revised_prompt = item.get("revised_prompt")
        return ImageGenerationResult(
            file_path=output_path,
            size_bytes=len(image_bytes),
            revised_prompt=revised_prompt if isinstance(revised_prompt, str) else None,
        )

    async def _post(
        self,
        session: aiohttp.ClientSession,
        headers: dict[str, str],
        body: dict[str, Any],
        output_path: str,
    ) -> ImageGenerationResult:
        start_time = time.time()
        async with session.post(
            self._api_url,
            json=body,
            headers=headers,
            timeout=aiohttp.ClientTimeout(total=self._timeout),
        ) as resp:
            duration_ms = int((time.time() - start_time) * 1000)
            logger.debug(f"DALL-E response: status={resp.status}, duration_ms={duration_ms}")

            if not 200 <= resp.status < 300:
                error_text = await resp.text(errors="replace")
                logger.debug(f"DALL-E error body: {error_text[:2000]}")
                self._raise_for_status(resp.status, error_text, resp.headers.get("Retry-After"))

            try:
                api_response = await resp.json(content_type=None)
            except ValueError as e:
                raise ImageNoDataError(f"DALL-E API returned no image data (malformed body: {e})") from e
            logger.debug(f"DALL-E response body: {summarize_response(api_response)}")
            return self._save_image(api_response, output_path)

    async def generate(
        self,
        request: ImageGenerationRequest,
        output_path: str,
    ) -> ImageGenerationResult:
        """生成图像并写入 output_path。

        Args:
            request: 生成请求
            output_path: 图片落盘路径（已存在则覆盖）

        Returns:
            ImageGenerationResult

        Raises:
            ImageRateLimitError: 429
            ImageContentPolicyError: 400 且违反内容策略
            ImageAPIError: 其他非成功状态或网络错误
            ImageNoDataError: 响应中没有图片数据
            ImageTimeoutError: 超过超时时间
        """
        headers = self._build_headers()
        body = self._build_request_body(request)

        logger.debug(
            f"DALL-E request: url={self._api_url}, "
            f"headers={mask_headers(headers)}, body={summarize_request(body)}"
        )

        try:
            if self._session is not None:
                return await self._post(self._session, headers, body, output_path)
            async with aiohttp.ClientSession() as session:
                return await self._post(session, headers, body, output_path)
        except asyncio.TimeoutError as e:
            raise ImageTimeoutError(self._timeout, self._api_url) from e
        except aiohttp.ClientError as e:
            raise ImageAPIError(0, f"Network error: {e}", self._api_url) from e
