"""
Platform resolution: decide which backend a request targets.

Resolution only looks at its inputs (requested platform, webhook URL, config).
It never touches the network.
"""

from enum import Enum
from typing import TYPE_CHECKING

from im_notifier.core.errors import MissingWebhook, UnresolvedPlatform

if TYPE_CHECKING:
    from im_notifier.config import Settings

AUTO = "auto"


class PlatformId(str, Enum):
    FEISHU = "feishu"
    DINGTALK = "dingtalk"
    WECHATWORK = "wechatwork"

    @property
    def display_name(self) -> str:
        return _DISPLAY_NAMES[self]

    @property
    def env_var(self) -> str:
        return _WEBHOOK_SETTINGS[self]


_DISPLAY_NAMES = {
    PlatformId.FEISHU: "Feishu",
    PlatformId.DINGTALK: "DingTalk",
    PlatformId.WECHATWORK: "WeChat Work",
}

_WEBHOOK_SETTINGS = {
    PlatformId.FEISHU: "FEISHU_WEBHOOK_URL",
    PlatformId.DINGTALK: "DINGTALK_WEBHOOK_URL",
    PlatformId.WECHATWORK: "WECHAT_WEBHOOK_URL",
}

# Checked in order, first match wins
URL_PATTERNS: list[tuple[PlatformId, tuple[str, ...]]] = [
    (PlatformId.FEISHU, ("feishu.cn", "lark.suite")),
    (PlatformId.DINGTALK, ("dingtalk.com",)),
    (PlatformId.WECHATWORK, ("qyapi.weixin.qq.com",)),
]


def parse_platform(value: str | PlatformId) -> PlatformId:
    """Turn a caller-supplied identifier into a PlatformId."""
    if isinstance(value, PlatformId):
        return value
    try:
        return PlatformId(value.strip().lower())
    except ValueError:
        raise UnresolvedPlatform(f"Unknown platform: {value}") from None


def detect_platform(webhook_url: str) -> PlatformId:
    """Infer the platform from substrings of the webhook URL."""
    for platform, needles in URL_PATTERNS:
        if any(needle in webhook_url for needle in needles):
            return platform
    raise UnresolvedPlatform(
        f"Unknown platform for webhook URL: {webhook_url}", webhook_url=webhook_url
    )


def configured_webhook(platform: PlatformId, config: "Settings") -> str:
    return getattr(config, platform.env_var, "") or ""


def resolve_platform(
    requested: str | PlatformId | None,
    webhook_url: str | None,
    config: "Settings",
) -> PlatformId:
    """Resolve the target platform of a request.

    Args:
        requested: A concrete platform, "auto", or None (same as "auto").
        webhook_url: Explicit webhook URL from the caller, if any.
        config: Settings holding DEFAULT_PLATFORM and the default webhooks.

    Raises:
        UnresolvedPlatform: unknown identifier, or auto-detection found no match.
        MissingWebhook: no URL given and the default platform has none configured.
    """
    if requested is not None and str(requested).strip().lower() != AUTO:
        # Explicit platforms are trusted, the URL is not cross-checked
        return parse_platform(requested)

    if webhook_url:
        return detect_platform(webhook_url)

    platform = parse_platform(config.DEFAULT_PLATFORM)
    if not configured_webhook(platform, config):
        raise MissingWebhook(platform.value, platform.env_var)
    return platform


def resolve_webhook(platform: PlatformId, webhook_url: str | None, config: "Settings") -> str:
    """Return the explicit URL if given, else the configured default for the platform."""
    if webhook_url:
        return webhook_url
    url = configured_webhook(platform, config)
    if not url:
        raise MissingWebhook(platform.value, platform.env_var)
    return url
