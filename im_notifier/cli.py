"""Command-line notifier.

Usage:
  notify <platform|auto> <webhook_url> <message> [title]

Sends one notification, e.g. at the end of a CI job or cron run, and exits 0 on
delivery, 1 on any failure. Pass "" as webhook_url to use the configured one.
"""

import argparse
import asyncio
import json
import sys

import structlog

from im_notifier.config import Settings, settings
from im_notifier.core.payloads import DingTalkMarkdownStyle, DingTalkMentions, RenderStyle
from im_notifier.log_config import configure_logging
from im_notifier.output.base import NotificationRequest
from im_notifier.output.http import WebhookPoster
from im_notifier.output.router import send

logger = structlog.get_logger()

EXIT_OK = 0
EXIT_FAILURE = 1

SUCCESS_CARD_TEMPLATE = "green"


class _Parser(argparse.ArgumentParser):
    """Argument parser whose usage errors exit with EXIT_FAILURE instead of 2."""

    def error(self, message):
        self.print_usage(sys.stderr)
        self.exit(EXIT_FAILURE, f"{self.prog}: error: {message}\n")


def build_parser() -> argparse.ArgumentParser:
    parser = _Parser(
        prog="notify",
        description="Send a notification to Feishu, DingTalk or WeChat Work",
    )
    parser.add_argument("platform", help='"feishu", "dingtalk", "wechatwork" or "auto"')
    parser.add_argument("webhook_url", help='Webhook URL ("" for the configured default)')
    parser.add_argument("message", help="Message content")
    parser.add_argument("title", nargs="?", default="", help="Optional message title")
    parser.add_argument(
        "--template",
        default=SUCCESS_CARD_TEMPLATE,
        help="Feishu card header colour (default: green)",
    )
    parser.add_argument(
        "--dingtalk-markdown",
        choices=[s.value for s in DingTalkMarkdownStyle],
        default=DingTalkMarkdownStyle.HEADING.value,
        help='DingTalk markdown body: "heading" prefixes "### title" (default), "plain" sends the message as-is',
    )
    parser.add_argument("--at-mobile", action="append", default=None, help="DingTalk phone number to @ (repeatable)")
    parser.add_argument("--at-all", action="store_true", help="DingTalk: @ all members")
    parser.add_argument("--timeout", type=float, default=None, help="HTTP timeout in seconds")
    return parser


def _format(response) -> str:
    if isinstance(response, str):
        return response
    return json.dumps(response, ensure_ascii=False)


def build_request(args: argparse.Namespace) -> NotificationRequest:
    mentions = None
    if args.at_mobile or args.at_all:
        mentions = DingTalkMentions(at_mobiles=args.at_mobile or [], is_at_all=args.at_all)

    return NotificationRequest(
        message=args.message,
        platform=args.platform.lower(),
        webhook_url=args.webhook_url or None,
        title=args.title or None,
        mentions=mentions,
        style=RenderStyle(
            card_template=args.template,
            dingtalk_markdown=DingTalkMarkdownStyle(args.dingtalk_markdown),
        ),
    )


def main(argv: list[str] | None = None, config: Settings | None = None, http_post=None) -> int:
    config = config or settings
    args = build_parser().parse_args(argv)
    configure_logging(config)

    if http_post is None:
        timeout = args.timeout if args.timeout is not None else config.HTTP_TIMEOUT
        http_post = WebhookPoster(timeout=timeout)

    result = asyncio.run(send(build_request(args), config, http_post))

    if not result.success:
        print(f"Error sending notification: {result.error_message}", file=sys.stderr)
        if result.raw_response is not None:
            print(f"Response data: {_format(result.raw_response)}", file=sys.stderr)
        return EXIT_FAILURE

    print("Notification sent successfully!")
    print(f"Response: {_format(result.raw_response)}")
    return EXIT_OK


def run():
    sys.exit(main())


if __name__ == "__main__":
    run()
