"""
Discord webhook client.

Sends change notifications to a Discord channel through an incoming webhook.
https://discord.com/developers/docs/resources/webhook#execute-webhook
"""

import logging
from typing import List, Optional

import requests

from ps_watch.config import get_settings

logger = logging.getLogger(__name__)

# Discord rejects message content longer than this
MAX_CONTENT_LENGTH = 2000


class DiscordNotifier:
    """
    Discord webhook client for sending notifications.

    Posts plain text messages as the webhook's configured bot user.
    """

    def __init__(
        self,
        webhook_url: Optional[str] = None,
        timeout: Optional[float] = None,
    ):
        """
        Initialize Discord notifier.

        Args:
            webhook_url: Discord channel webhook URL
            timeout: Request timeout in seconds
        """
        if webhook_url is None or timeout is None:
            settings = get_settings()
            webhook_url = webhook_url or settings.discord_webhook_url
            timeout = timeout or settings.request_timeout

        self.webhook_url = webhook_url
        self.timeout = timeout
        self.session = requests.Session()

    def send_message(self, message: str) -> bool:
        """
        Send a text message to the webhook channel.

        Args:
            message: The message text to send

        Returns:
            bool: True if message was sent successfully (or there was nothing to send)
        """
        if not message:
            return True

        payload = {"content": message}

        try:
            response = self.session.post(self.webhook_url, json=payload, timeout=self.timeout)

            if response.status_code in (200, 204):
                logger.info("Discord notification sent")
                return True
            else:
                logger.error(
                    f"Discord webhook error: {response.status_code} - {response.text}"
                )
                return False

        except requests.exceptions.Timeout:
            logger.error("Discord webhook request timed out")
            return False
        except requests.exceptions.RequestException as e:
            logger.error(f"Discord webhook request failed: {e}")
            return False

    def send_long_message(self, message: str) -> bool:
        """
        Send a message, splitting it if it exceeds Discord's content limit.

        Args:
            message: The message text to send

        Returns:
            bool: True if all parts were sent successfully
        """
        success = True
        for part in split_message(message):
            if not self.send_message(part):
                success = False

        return success


def split_message(message: str, limit: int = MAX_CONTENT_LENGTH) -> List[str]:
    """
    Split a message into parts no longer than limit.

    Splits on line boundaries; a single line longer than the limit is cut
    into limit-sized pieces.

    Args:
        message: Text to split
        limit: Maximum length of each part

    Returns:
        List[str]: Parts in order, empty for an empty message
    """
    if len(message) <= limit:
        return [message] if message else []

    parts: List[str] = []
    current: Optional[str] = None

    for line in message.split("\n"):
        while len(line) > limit:
            if current is not None:
                parts.append(current)
                current = None
            parts.append(line[:limit])
            line = line[limit:]

        if current is None:
            current = line
        elif len(current) + 1 + len(line) <= limit:
            current += "\n" + line
        else:
            parts.append(current)
            current = line

    if current is not None:
        parts.append(current)

    return parts
