"""
Payload builder: shape a message into each platform's webhook JSON.

Every wire shape is a pydantic model holding exactly the fields the platform
expects. Models are turned into plain dicts only at the HTTP boundary via
``to_wire()``.

Field names below are the platforms' own (camelCase for DingTalk's ``at``
block included) and must not be renamed.
"""

from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from typing import Literal

from pydantic import BaseModel, Field

from im_notifier.core.platforms import PlatformId

DEFAULT_CARD_TEMPLATE = "blue"


class DingTalkMarkdownStyle(str, Enum):
    """How the DingTalk markdown body is rendered when a title is given."""

    PLAIN = "plain"  # text is the message as-is
    HEADING = "heading"  # text is "### {title}\n{message}"


@dataclass(frozen=True)
class RenderStyle:
    card_template: str = DEFAULT_CARD_TEMPLATE
    dingtalk_markdown: DingTalkMarkdownStyle = DingTalkMarkdownStyle.PLAIN


# ------------------------------------------------------------------
# Mentions
# ------------------------------------------------------------------


@dataclass(frozen=True)
class DingTalkMentions:
    at_mobiles: list[str] = field(default_factory=list)
    is_at_all: bool = False


@dataclass(frozen=True)
class WeChatWorkMentions:
    mentioned_list: list[str] = field(default_factory=list)
    mentioned_mobile_list: list[str] = field(default_factory=list)


MentionSpec = DingTalkMentions | WeChatWorkMentions


# ------------------------------------------------------------------
# Wire models
# ------------------------------------------------------------------


class Payload(BaseModel):
    model_config = {"frozen": True}

    def to_wire(self) -> dict:
        """JSON-ready dict; optional blocks that were not set are left out."""
        return self.model_dump(exclude_none=True)


class FeishuText(BaseModel):
    text: str


class FeishuTextPayload(Payload):
    msg_type: Literal["text"] = "text"
    content: FeishuText


class CardConfig(BaseModel):
    wide_screen_mode: bool = True


class LarkMarkdown(BaseModel):
    content: str
    tag: Literal["lark_md"] = "lark_md"


class CardElement(BaseModel):
    tag: Literal["div"] = "div"
    text: LarkMarkdown


class PlainText(BaseModel):
    content: str
    tag: Literal["plain_text"] = "plain_text"


class CardHeader(BaseModel):
    template: str
    title: PlainText


class Card(BaseModel):
    config: CardConfig = Field(default_factory=CardConfig)
    elements: list[CardElement]
    header: CardHeader


class FeishuCardPayload(Payload):
    msg_type: Literal["interactive"] = "interactive"
    card: Card


class DingTalkText(BaseModel):
    content: str


class DingTalkMarkdown(BaseModel):
    title: str
    text: str


class DingTalkAt(BaseModel):
    atMobiles: list[str] = Field(default_factory=list)
    isAtAll: bool = False


class DingTalkTextPayload(Payload):
    msgtype: Literal["text"] = "text"
    text: DingTalkText
    at: DingTalkAt | None = None


class DingTalkMarkdownPayload(Payload):
    msgtype: Literal["markdown"] = "markdown"
    markdown: DingTalkMarkdown
    at: DingTalkAt | None = None


class WeChatWorkText(BaseModel):
    content: str
    mentioned_list: list[str] = Field(default_factory=list)
    mentioned_mobile_list: list[str] = Field(default_factory=list)


class WeChatWorkTextPayload(Payload):
    msgtype: Literal["text"] = "text"
    text: WeChatWorkText


# ------------------------------------------------------------------
# Builders
# ------------------------------------------------------------------


def build_feishu(
    message: str, title: str | None, mentions: MentionSpec | None, style: RenderStyle
) -> Payload:
    # Feishu webhooks have no mention support here; mentions are dropped
    if not title:
        return FeishuTextPayload(content=FeishuText(text=message))

    return FeishuCardPayload(
        card=Card(
            elements=[CardElement(text=LarkMarkdown(content=message))],
            header=CardHeader(
                template=style.card_template,
                title=PlainText(content=title),
            ),
        )
    )


def build_dingtalk(
    message: str, title: str | None, mentions: MentionSpec | None, style: RenderStyle
) -> Payload:
    at = None
    if isinstance(mentions, DingTalkMentions):
        at = DingTalkAt(atMobiles=list(mentions.at_mobiles), isAtAll=mentions.is_at_all)

    if not title:
        return DingTalkTextPayload(text=DingTalkText(content=message), at=at)

    if style.dingtalk_markdown == DingTalkMarkdownStyle.HEADING:
        text = f"### {title}\n{message}"
    else:
        text = message
    return DingTalkMarkdownPayload(markdown=DingTalkMarkdown(title=title, text=text), at=at)


def build_wechatwork(
    message: str, title: str | None, mentions: MentionSpec | None, style: RenderStyle
) -> Payload:
    # Title has no place in a WeChat Work text message and is ignored
    mentioned_list: list[str] = []
    mentioned_mobile_list: list[str] = []
    if isinstance(mentions, WeChatWorkMentions):
        mentioned_list = list(mentions.mentioned_list)
        mentioned_mobile_list = list(mentions.mentioned_mobile_list)

    return WeChatWorkTextPayload(
        text=WeChatWorkText(
            content=message,
            mentioned_list=mentioned_list,
            mentioned_mobile_list=mentioned_mobile_list,
        )
    )


PayloadBuilder = Callable[[str, str | None, MentionSpec | None, RenderStyle], Payload]

PAYLOAD_BUILDERS: dict[PlatformId, PayloadBuilder] = {
    PlatformId.FEISHU: build_feishu,
    PlatformId.DINGTALK: build_dingtalk,
    PlatformId.WECHATWORK: build_wechatwork,
}


def build_payload(
    platform: PlatformId,
    message: str,
    title: str | None = None,
    mentions: MentionSpec | None = None,
    style: RenderStyle | None = None,
) -> Payload:
    """Build the webhook payload for a resolved platform.

    Pure: identical inputs always yield identical payloads. An empty message
    is passed through unchanged.
    """
    builder = PAYLOAD_BUILDERS[platform]
    return builder(message, title, mentions, style or RenderStyle())
