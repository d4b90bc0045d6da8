"""Discord adapter — bridges discord.Client to the relay domain.

RelayBot converts discord.Message into InboundEvent, filters and classifies
it, and hands it to MessageRelay. DiscordChatAdapter is the ChatPort the
domain uses to talk back.
"""

import sys
from typing import List, Optional

import discord

from agent_relay.config import AppConfig
from agent_relay.domain.classifier import apply_response_toggles, classify, ignore_reason
from agent_relay.domain.dispatch import Dispatcher, MessageRelay
from agent_relay.domain.models import MessageType
from agent_relay.domain.policy import ChannelPolicy
from agent_relay.ports.inbound import InboundEvent, ReferencedMessage
from agent_relay.ports.outbound import AgentPort, SendFn

DISCORD_MESSAGE_LIMIT = 2000


def _log(msg: str):
    print(msg, file=sys.stderr)


def split_message(text: str, limit: int = DISCORD_MESSAGE_LIMIT) -> List[str]:
    """Split a message into chunks that fit Discord's character limit."""
    if len(text) <= limit:
        return [text]
    chunks = []
    while text:
        chunks.append(text[:limit])
        text = text[limit:]
    return chunks


class DiscordChatAdapter:
    """ChatPort implementation using discord.Client."""

    def __init__(self, client: discord.Client):
        self._client = client

    async def _get_channel(self, channel_id: str):
        channel = self._client.get_channel(int(channel_id))
        if channel is None:
            channel = await self._client.fetch_channel(int(channel_id))
        return channel

    async def reply(self, event: InboundEvent, text: str) -> None:
        channel = await self._get_channel(event.channel_id)
        chunks = split_message(text)
        target = channel.get_partial_message(int(event.message_id))
        await target.reply(chunks[0])
        for chunk in chunks[1:]:
            await channel.send(chunk)

    async def send(self, channel_id: str, text: str) -> None:
        channel = await self._get_channel(channel_id)
        for chunk in split_message(text):
            await channel.send(chunk)

    async def send_typing(self, channel_id: str) -> None:
        channel = await self._get_channel(channel_id)
        await channel.typing()

    async def fetch_message(self, channel_id: str, message_id: str) -> Optional[ReferencedMessage]:
        channel = await self._get_channel(channel_id)
        original = await channel.fetch_message(int(message_id))
        return ReferencedMessage(
            message_id=str(original.id),
            author_id=str(original.author.id),
            content=original.content,
        )

    async def resolve_channel(self, channel_id: str) -> Optional[SendFn]:
        channel = await self._get_channel(channel_id)
        if channel is None or not hasattr(channel, "send"):
            return None

        async def _send(text: str) -> None:
            for chunk in split_message(text):
                await channel.send(chunk)

        return _send


class RelayBot(discord.Client):
    """Discord client that relays messages to the agent backend."""

    def __init__(self, config: AppConfig, agent: AgentPort, **discord_kwargs):
        intents = discord.Intents.default()
        intents.message_content = True
        intents.dm_messages = True
        super().__init__(intents=intents, **discord_kwargs)
        self.config = config
        self.chat = DiscordChatAdapter(self)
        self.policy = ChannelPolicy(config.discord.response_channel_id)
        self.relay = MessageRelay(Dispatcher(agent, self.chat, self.policy), config.batch)

    async def on_ready(self):
        _log(f"Logged in as {self.user}!")
        if self.relay.batching_enabled:
            batch = self.config.batch
            _log(f"Message batching enabled: {batch.max_size} messages or {batch.timeout_ms}ms timeout")

    def to_event(self, message: discord.Message) -> InboundEvent:
        """Convert a Discord message to a platform-agnostic InboundEvent."""
        reference = message.reference
        return InboundEvent(
            channel_id=str(message.channel.id),
            message_id=str(message.id),
            author_id=str(message.author.id),
            author_name=message.author.name,
            content=message.content,
            is_dm=message.guild is None,
            mentions_bot=self.user is not None and self.user in message.mentions,
            author_is_bot=message.author.bot,
            reply_to_message_id=(
                str(reference.message_id) if reference and reference.message_id else None
            ),
            channel_name=getattr(message.channel, "name", None),
        )

    async def on_message(self, message: discord.Message):
        if not self.user:
            return
        await self.handle_event(self.to_event(message))

    async def handle_event(self, event: InboundEvent):
        bot_user_id = str(self.user.id)
        reason = ignore_reason(event, bot_user_id, self.config.discord, self.config.responses)
        if reason:
            _log(f"Ignoring {reason}...")
            return

        kind = "DM" if event.is_dm else "message"
        _log(f"Received {kind} from {event.author_name}: {event.content}")

        referenced = None
        if event.is_reply and not event.is_dm and self.config.responses.respond_to_mentions:
            referenced = await self._fetch_referenced(event)

        classified = classify(event, bot_user_id, referenced)
        message = apply_response_toggles(classified, self.config.responses)
        if message is None:
            _log(f"Ignoring {classified.message_type.value} message (responses disabled)")
            return

        if message.message_type in (MessageType.MENTION, MessageType.REPLY):
            await self._show_typing(event)

        await self.relay.submit(message)

    async def _fetch_referenced(self, event: InboundEvent) -> Optional[ReferencedMessage]:
        try:
            return await self.chat.fetch_message(event.channel_id, event.reply_to_message_id)
        except Exception as e:
            _log(f"Could not fetch referenced message {event.reply_to_message_id}: {e}")
            return None

    async def _show_typing(self, event: InboundEvent):
        can_respond = self.policy.can_respond(event.channel_id)
        _log(f"Can respond in this channel: {can_respond} "
             f"(channel={event.channel_id}, responseChannel={self.policy.describe()})")
        if not can_respond:
            _log("Skipping typing indicator (observation-only channel)")
            return
        try:
            await self.chat.send_typing(event.channel_id)
        except Exception as e:
            _log(f"Typing indicator failed: {e}")
