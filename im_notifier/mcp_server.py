"""MCP server exposing Feishu, DingTalk and WeChat Work webhook notifications as tools."""

import json
from typing import Annotated, Any

import structlog
from mcp.server.fastmcp import FastMCP
from pydantic import Field

from im_notifier.config import settings
from im_notifier.core.errors import NotifierError, UnresolvedPlatform
from im_notifier.core.payloads import DingTalkMarkdownStyle, DingTalkMentions, RenderStyle, WeChatWorkMentions
from im_notifier.core.platforms import AUTO, PlatformId, resolve_platform
from im_notifier.log_config import configure_logging
from im_notifier.output.base import DeliveryResult, NotificationRequest
from im_notifier.output.http import WebhookPoster
from im_notifier.output.router import send

logger = structlog.get_logger()

mcp = FastMCP("im-notifier")

http_post = WebhookPoster(timeout=settings.HTTP_TIMEOUT)

TOOL_CARD_TEMPLATE = "blue"

Webhook = Annotated[
    str | None,
    Field(description="Webhook URL; the configured default is used when omitted"),
]
Message = Annotated[str, Field(description="Message content to send")]
Title = Annotated[str | None, Field(description="Optional message title")]


def _tool_style() -> RenderStyle:
    return RenderStyle(
        card_template=TOOL_CARD_TEMPLATE,
        dingtalk_markdown=DingTalkMarkdownStyle(settings.DINGTALK_MARKDOWN_STYLE),
    )


def _dump(response: Any) -> str:
    return json.dumps(response, ensure_ascii=False, separators=(",", ":"), default=str)


def _envelope(result: DeliveryResult, name: str, failure_prefix: str) -> str:
    if result.success:
        return f"Message sent to {name} successfully. Response: {_dump(result.raw_response)}"
    return f"{failure_prefix}: {result.error_message}"


async def _deliver(request: NotificationRequest, name: str, failure_prefix: str) -> str:
    try:
        result = await send(request, settings, http_post)
    except Exception as e:
        logger.exception("mcp.tool_failed", platform=name)
        return f"{failure_prefix}: {e}"
    return _envelope(result, name, failure_prefix)


@mcp.tool()
async def feishu_send(message: Message, webhook: Webhook = None, title: Title = None) -> str:
    """Send a message to a Feishu (Lark) group bot. With a title, an interactive card is sent."""
    platform = PlatformId.FEISHU
    request = NotificationRequest(
        message=message,
        platform=platform,
        webhook_url=webhook,
        title=title,
        style=_tool_style(),
    )
    return await _deliver(request, platform.display_name, f"Error sending {platform.display_name} message")


@mcp.tool()
async def dingtalk_send(
    message: Message,
    webhook: Webhook = None,
    title: Title = None,
    atMobiles: Annotated[
        list[str] | None, Field(description="Array of phone numbers to @ mention")
    ] = None,
    isAtAll: Annotated[bool, Field(description="Whether to @ all members")] = False,
) -> str:
    """Send a message to a DingTalk group bot. With a title, a markdown message is sent."""
    platform = PlatformId.DINGTALK
    request = NotificationRequest(
        message=message,
        platform=platform,
        webhook_url=webhook,
        title=title,
        mentions=DingTalkMentions(at_mobiles=atMobiles or [], is_at_all=isAtAll),
        style=_tool_style(),
    )
    return await _deliver(request, platform.display_name, f"Error sending {platform.display_name} message")


@mcp.tool()
async def wechatwork_send(
    message: Message,
    webhook: Webhook = None,
    mentionedList: Annotated[
        list[str] | None, Field(description="Array of userids to @ mention")
    ] = None,
    mentionedMobileList: Annotated[
        list[str] | None, Field(description="Array of phone numbers to @ mention")
    ] = None,
) -> str:
    """Send a text message to a WeChat Work (WeCom) group bot."""
    platform = PlatformId.WECHATWORK
    request = NotificationRequest(
        message=message,
        platform=platform,
        webhook_url=webhook,
        mentions=WeChatWorkMentions(
            mentioned_list=mentionedList or [],
            mentioned_mobile_list=mentionedMobileList or [],
        ),
        style=_tool_style(),
    )
    return await _deliver(request, platform.display_name, f"Error sending {platform.display_name} message")


@mcp.tool()
async def send_message(
    message: Message,
    webhook: Annotated[
        str | None,
        Field(description="Webhook URL for the messaging platform; the platform is detected from it"),
    ] = None,
    title: Title = None,
    atUsers: Annotated[
        list[str] | None, Field(description="Array of users/phone numbers to @ mention")
    ] = None,
    isAtAll: Annotated[bool, Field(description="Whether to @ all members")] = False,
) -> str:
    """Send a message to Feishu, DingTalk or WeChat Work, detecting the platform from the webhook URL."""
    try:
        platform = resolve_platform(AUTO, webhook, settings)
    except UnresolvedPlatform as e:
        logger.warning("mcp.unknown_platform", webhook=(webhook or "")[:60])
        if webhook:
            return f"Unknown platform for webhook URL: {webhook}"
        return f"Error sending message: {e.message}"
    except NotifierError as e:
        return f"Error sending message: {e.message}"

    mentions = None
    if platform == PlatformId.DINGTALK:
        mentions = DingTalkMentions(at_mobiles=atUsers or [], is_at_all=isAtAll)
    elif platform == PlatformId.WECHATWORK:
        mentions = WeChatWorkMentions(mentioned_list=atUsers or [])

    request = NotificationRequest(
        message=message,
        platform=platform,
        webhook_url=webhook,
        title=title,
        mentions=mentions,
        style=_tool_style(),
    )
    return await _deliver(request, platform.value, "Error sending message")


def main():
    configure_logging(settings)
    logger.info("mcp.startup", transport=settings.MCP_TRANSPORT, default_platform=settings.DEFAULT_PLATFORM)
    if settings.MCP_TRANSPORT != "stdio":
        mcp.settings.host = settings.HTTP_HOST
        mcp.settings.port = settings.HTTP_PORT
    mcp.run(transport=settings.MCP_TRANSPORT)


if __name__ == "__main__":
    main()
