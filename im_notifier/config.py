from typing import Literal

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}

    APP_ENV: str = "development"
    LOG_LEVEL: str = "INFO"

    # Default webhooks, used when a call does not carry its own URL
    FEISHU_WEBHOOK_URL: str = ""
    DINGTALK_WEBHOOK_URL: str = ""
    WECHAT_WEBHOOK_URL: str = ""
    DEFAULT_PLATFORM: str = "feishu"

    # "plain" sends the message as-is, "heading" prefixes "### {title}"
    DINGTALK_MARKDOWN_STYLE: Literal["plain", "heading"] = "plain"

    HTTP_TIMEOUT: float = 10.0

    # HTTP_HOST/HTTP_PORT only apply to the sse and streamable-http transports
    MCP_TRANSPORT: Literal["stdio", "sse", "streamable-http"] = "stdio"
    HTTP_HOST: str = "127.0.0.1"
    HTTP_PORT: int = 3000


settings = Settings()
