"""Shared fixtures for im_notifier tests."""

import pytest

from im_notifier.config import Settings
from im_notifier.core.errors import TransportError

FEISHU_URL = "https://open.feishu.cn/open-apis/bot/v2/hook/abc"
DINGTALK_URL = "https://oapi.dingtalk.com/robot/send?access_token=xyz"
WECHAT_URL = "https://qyapi.weixin.qq.com/cgi-bin/webhook/send?key=k1"


def make_settings(**overrides) -> Settings:
    """Settings isolated from the process environment and any .env file."""
    values = {
        "FEISHU_WEBHOOK_URL": "",
        "DINGTALK_WEBHOOK_URL": "",
        "WECHAT_WEBHOOK_URL": "",
        "DEFAULT_PLATFORM": "feishu",
        "DINGTALK_MARKDOWN_STYLE": "plain",
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


class SpyPost:
    """Records every POST and answers with a canned response or error."""

    def __init__(self, response=None, error: Exception | None = None):
        self.calls: list[tuple[str, dict]] = []
        self.response = {"errcode": 0, "errmsg": "ok"} if response is None else response
        self.error = error

    async def __call__(self, url: str, payload: dict):
        self.calls.append((url, payload))
        if self.error is not None:
            raise self.error
        return self.response

    @property
    def last_payload(self) -> dict:
        return self.calls[-1][1]


@pytest.fixture
def config():
    return make_settings()


@pytest.fixture
def spy():
    return SpyPost()


@pytest.fixture
def failing_spy():
    return SpyPost(error=TransportError("connection refused"))


@pytest.fixture(autouse=True)
def _quiet_cli_logging(monkeypatch):
    """Keep structlog on its defaults; CLI tests would otherwise bind it to a captured stream."""
    monkeypatch.setattr("im_notifier.cli.configure_logging", lambda config: None)
