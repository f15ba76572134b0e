"""Discord notification module for PowerSchool Grade Watch."""

from ps_watch.notify.discord import DiscordNotifier
from ps_watch.notify.formatters import MessageFormatter

__all__ = ["DiscordNotifier", "MessageFormatter"]
