"""
HTTP delivery of webhook payloads.

The router only depends on the ``HttpPost`` protocol; ``WebhookPoster`` is the
httpx-backed implementation used by the CLI and the MCP server.
"""

from typing import Any, Protocol

import httpx
import structlog

from im_notifier.core.errors import TransportError

logger = structlog.get_logger()

# Keys the platforms use to report a rejected message in a 200 response:
# Feishu sends code/StatusCode, DingTalk and WeChat Work send errcode.
ACK_KEYS = ("code", "StatusCode", "errcode")


class HttpPost(Protocol):
    async def __call__(self, url: str, payload: dict) -> Any: ...


def _decode_body(resp: httpx.Response) -> Any:
    try:
        return resp.json()
    except ValueError:
        # invalid JSON or a body that is not UTF-8
        return resp.text


def _rejection(body: Any) -> str | None:
    """Return an error description if the backend refused the message."""
    if not isinstance(body, dict):
        return None
    for key in ACK_KEYS:
        value = body.get(key)
        if value not in (None, 0):
            detail = body.get("msg") or body.get("errmsg") or body.get("StatusMessage") or ""
            return f"{key}={value} {detail}".strip()
    return None


class WebhookPoster:
    """POST a JSON payload to a webhook URL.

    Opens a fresh client per call so concurrent sends share nothing.
    """

    def __init__(self, timeout: float = 10.0, transport: httpx.AsyncBaseTransport | None = None):
        self.timeout = timeout
        self._transport = transport

    async def __call__(self, url: str, payload: dict) -> Any:
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                resp = await client.post(url, json=payload)
        except httpx.HTTPError as e:
            logger.warning("http.post_failed", url=url[:60], error=str(e))
            raise TransportError(str(e) or type(e).__name__) from e

        body = _decode_body(resp)

        if not resp.is_success:
            logger.warning("http.bad_status", url=url[:60], status=resp.status_code)
            raise TransportError(
                f"Request failed with status code {resp.status_code}",
                status_code=resp.status_code,
                response_body=body,
            )

        rejection = _rejection(body)
        if rejection:
            logger.warning("http.rejected", url=url[:60], detail=body)
            raise TransportError(
                f"Webhook rejected the message: {rejection}",
                status_code=resp.status_code,
                response_body=body,
            )

        return body
