"""Discord delivery client.

Posts embeds through the bot API when a bot token and channel are configured
(needed for buttons), otherwise through the channel webhook.
"""
import logging
from typing import Any, Optional

import httpx

from app.config import settings
from app.errors import NotificationDeliveryError

logger = logging.getLogger(__name__)

DISCORD_API = "https://discord.com/api/v10"


class DiscordNotifier:
    def __init__(
        self,
        bot_token: str = "",
        channel_id: str = "",
        webhook_url: str = "",
        timeout: float = 10.0,
        client: Optional[httpx.Client] = None,
    ):
        self.bot_token = bot_token
        self.channel_id = channel_id
        self.webhook_url = webhook_url
        self.timeout = timeout
        self._client = client

    @classmethod
    def from_settings(cls) -> "DiscordNotifier":
        return cls(
            bot_token=settings.DISCORD_BOT_TOKEN,
            channel_id=settings.DISCORD_CHANNEL_ID,
            webhook_url=settings.DISCORD_WEBHOOK_URL,
            timeout=settings.NOTIFY_TIMEOUT_SECONDS,
        )

    @property
    def configured(self) -> bool:
        return bool((self.bot_token and self.channel_id) or self.webhook_url)

    def _target(self) -> tuple[str, dict[str, str]]:
        if self.bot_token and self.channel_id:
            return (
                f"{DISCORD_API}/channels/{self.channel_id}/messages",
                {"Authorization": f"Bot {self.bot_token}"},
            )
        return self.webhook_url, {}

    def send(self, message: dict[str, Any], mention_all: bool = False) -> None:
        """Deliver one embed. Raises NotificationDeliveryError on failure."""
        if not self.configured:
            logger.debug("Discord not configured; dropping message '%s'", message.get("title"))
            return

        body: dict[str, Any] = {"embeds": [message]}
        if mention_all:
            body["content"] = "@everyone"
            body["allowed_mentions"] = {"parse": ["everyone"]}

        url, headers = self._target()
        try:
            if self._client is not None:
                resp = self._client.post(url, json=body, headers=headers, timeout=self.timeout)
            else:
                with httpx.Client(timeout=self.timeout) as client:
                    resp = client.post(url, json=body, headers=headers)
        except httpx.HTTPError as e:
            raise NotificationDeliveryError(f"Discord request failed: {e}") from e

        if resp.status_code >= 400:
            raise NotificationDeliveryError(f"Discord returned {resp.status_code}: {resp.text[:200]}")
        logger.info("Discord message sent: %s", message.get("title"))
