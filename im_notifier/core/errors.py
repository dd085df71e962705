"""Error taxonomy for notification delivery.

None of these escape the delivery boundary: ``output.router.send`` turns every
one of them into a failed ``DeliveryResult``.
"""

from typing import Any


class NotifierError(Exception):
    """Base class for every recoverable notification failure."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class UnresolvedPlatform(NotifierError):
    """No platform could be determined for the request."""

    def __init__(self, message: str, webhook_url: str | None = None):
        super().__init__(message)
        self.webhook_url = webhook_url


class MissingWebhook(NotifierError):
    """No explicit webhook URL and no usable configured default."""

    def __init__(self, platform: str, env_var: str):
        super().__init__(
            f"No webhook URL supplied and {env_var} is not configured for {platform}"
        )
        self.platform = platform
        self.env_var = env_var


class TransportError(NotifierError):
    """Network failure, non-2xx status, or a rejection reported by the backend."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        response_body: Any = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.response_body = response_body
