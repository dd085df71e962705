"""
Delivery router: resolve the platform, build the payload, hand it to HTTP.

Every path returns a DeliveryResult; nothing raised by resolution or
transport escapes ``send``.
"""

import structlog

from im_notifier.config import Settings
from im_notifier.core.errors import NotifierError, TransportError
from im_notifier.core.payloads import build_payload
from im_notifier.core.platforms import PlatformId, resolve_platform, resolve_webhook
from im_notifier.output.base import DeliveryResult, NotificationRequest
from im_notifier.output.http import HttpPost

logger = structlog.get_logger()


async def send(request: NotificationRequest, config: Settings, http_post: HttpPost) -> DeliveryResult:
    """Deliver one notification.

    Args:
        request: What to send and where.
        config: Supplies DEFAULT_PLATFORM and the default webhook URLs.
        http_post: Transport capability, called at most once.

    Returns:
        DeliveryResult. On resolution failure the transport is never called.
    """
    platform: PlatformId | None = None
    try:
        platform = resolve_platform(request.platform, request.webhook_url, config)
        url = resolve_webhook(platform, request.webhook_url, config)
    except NotifierError as e:
        logger.warning("notify.unresolved", platform=platform, error=e.message)
        return DeliveryResult(
            success=False,
            platform=platform,
            webhook_url=request.webhook_url,
            error_message=e.message,
        )

    payload = build_payload(platform, request.message, request.title, request.mentions, request.style)
    log = logger.bind(platform=platform.value, target=url[:60])

    try:
        response = await http_post(url, payload.to_wire())
    except TransportError as e:
        log.warning("notify.failed", error=e.message, status=e.status_code)
        return DeliveryResult(
            success=False,
            platform=platform,
            webhook_url=url,
            raw_response=e.response_body,
            error_message=e.message,
        )
    except Exception as e:
        # Injected transports may raise anything; it is still a transport failure
        log.exception("notify.failed")
        return DeliveryResult(
            success=False,
            platform=platform,
            webhook_url=url,
            error_message=str(e) or type(e).__name__,
        )

    log.info("notify.sent")
    return DeliveryResult(success=True, platform=platform, webhook_url=url, raw_response=response)
