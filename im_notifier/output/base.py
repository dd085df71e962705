from dataclasses import dataclass, field
from typing import Any

from im_notifier.core.payloads import MentionSpec, RenderStyle
from im_notifier.core.platforms import AUTO, PlatformId


@dataclass(frozen=True)
class NotificationRequest:
    message: str
    platform: PlatformId | str = AUTO  # a PlatformId or "auto"
    webhook_url: str | None = None  # None -> configured default
    title: str | None = None
    mentions: MentionSpec | None = None
    style: RenderStyle = field(default_factory=RenderStyle)


@dataclass
class DeliveryResult:
    success: bool
    platform: PlatformId | None  # None when the platform could not be resolved
    webhook_url: str | None = None
    raw_response: Any = None
    error_message: str | None = None
