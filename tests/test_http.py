"""Tests for the httpx webhook poster."""

import json

import httpx
import pytest

from conftest import DINGTALK_URL, FEISHU_URL, WECHAT_URL
from im_notifier.core.errors import TransportError
from im_notifier.output.base import NotificationRequest
from im_notifier.output.http import WebhookPoster
from im_notifier.output.router import send


def _poster(handler) -> WebhookPoster:
    return WebhookPoster(timeout=5, transport=httpx.MockTransport(handler))


@pytest.mark.asyncio
async def test_posts_json_and_returns_body():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = str(request.url)
        seen["method"] = request.method
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json={"StatusCode": 0, "StatusMessage": "success", "code": 0, "msg": "success"})

    payload = {"msg_type": "text", "content": {"text": "OK"}}
    body = await _poster(handler)(FEISHU_URL, payload)

    assert seen == {"url": FEISHU_URL, "method": "POST", "body": payload}
    assert body["StatusMessage"] == "success"


@pytest.mark.asyncio
async def test_non_json_body_is_returned_as_text():
    poster = _poster(lambda request: httpx.Response(200, text="ok"))
    assert await poster(FEISHU_URL, {}) == "ok"


@pytest.mark.asyncio
async def test_non_2xx_raises():
    poster = _poster(lambda request: httpx.Response(404, json={"message": "not found"}))
    with pytest.raises(TransportError) as exc:
        await poster(FEISHU_URL, {})

    assert exc.value.status_code == 404
    assert exc.value.response_body == {"message": "not found"}
    assert "404" in exc.value.message


@pytest.mark.asyncio
async def test_dingtalk_rejection_raises():
    body = {"errcode": 310000, "errmsg": "keywords not in content"}
    poster = _poster(lambda request: httpx.Response(200, json=body))
    with pytest.raises(TransportError) as exc:
        await poster(DINGTALK_URL, {})

    assert exc.value.response_body == body
    assert "errcode=310000" in exc.value.message
    assert "keywords not in content" in exc.value.message


@pytest.mark.asyncio
async def test_feishu_rejection_raises():
    body = {"code": 19001, "msg": "param invalid: incoming webhook access token invalid"}
    poster = _poster(lambda request: httpx.Response(200, json=body))
    with pytest.raises(TransportError, match="code=19001"):
        await poster(FEISHU_URL, {})


@pytest.mark.asyncio
async def test_network_error_raises():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(TransportError, match="connection refused") as exc:
        await _poster(handler)(FEISHU_URL, {})
    assert exc.value.status_code is None


@pytest.mark.asyncio
async def test_undecodable_body_is_still_a_success():
    poster = _poster(lambda request: httpx.Response(200, content=b"\xff\xfe\xfaok"))
    body = await poster(WECHAT_URL, {})
    assert isinstance(body, str)


@pytest.mark.asyncio
async def test_undecodable_body_delivers(config):
    poster = _poster(lambda request: httpx.Response(200, content=b"\xff\xfe\xfaok"))
    result = await send(NotificationRequest(message="OK", webhook_url=WECHAT_URL), config, poster)

    assert result.success is True
    assert result.error_message is None
    assert isinstance(result.raw_response, str)
