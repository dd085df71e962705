from im_notifier.core.errors import MissingWebhook, NotifierError, TransportError, UnresolvedPlatform
from im_notifier.core.payloads import (
    DingTalkMarkdownStyle,
    DingTalkMentions,
    RenderStyle,
    WeChatWorkMentions,
    build_payload,
)
from im_notifier.core.platforms import AUTO, PlatformId, detect_platform, resolve_platform, resolve_webhook

__all__ = [
    "AUTO",
    "DingTalkMarkdownStyle",
    "DingTalkMentions",
    "MissingWebhook",
    "NotifierError",
    "PlatformId",
    "RenderStyle",
    "TransportError",
    "UnresolvedPlatform",
    "WeChatWorkMentions",
    "build_payload",
    "detect_platform",
    "resolve_platform",
    "resolve_webhook",
]
