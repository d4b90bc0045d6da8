"""Discord adapter."""

from agent_relay.adapters.discord.bot import DiscordChatAdapter, RelayBot, split_message

__all__ = ["DiscordChatAdapter", "RelayBot", "split_message"]
