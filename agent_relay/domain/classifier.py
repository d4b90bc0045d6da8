"""Inbound message classification and intake filtering.

Pure domain logic, no framework dependencies.
"""

import sys
from typing import Optional

from agent_relay.config import DiscordConfig, ResponseConfig
from agent_relay.domain.models import ClassifiedMessage, MessageType
from agent_relay.ports.inbound import InboundEvent, ReferencedMessage

MESSAGE_REPLY_TRUNCATE_LENGTH = 100
COMMAND_PREFIX = "!"


def _log(msg: str):
    print(msg, file=sys.stderr)


def truncate_message(message: str, max_length: int) -> str:
    """Cut to max_length, replacing the last 3 characters with an ellipsis."""
    if len(message) > max_length:
        return message[: max_length - 3] + "..."
    return message


def quote_reply(original: str, text: str) -> str:
    quoted = truncate_message(original, MESSAGE_REPLY_TRUNCATE_LENGTH)
    return f'[Replying to previous message: "{quoted}"] {text}'


def classify(
    event: InboundEvent,
    bot_user_id: str,
    referenced: Optional[ReferencedMessage] = None,
) -> ClassifiedMessage:
    """Label an event. Rules are checked in priority order:

    DM > reply to the agent > mention or reply to someone else > generic.
    A reply whose referenced message could not be fetched counts as a reply
    to someone else.
    """
    if event.is_dm:
        return ClassifiedMessage(event, MessageType.DM, event.content)

    if event.is_reply and referenced is not None and referenced.author_id == bot_user_id:
        return ClassifiedMessage(
            event, MessageType.REPLY, quote_reply(referenced.content, event.content)
        )

    if event.mentions_bot or event.is_reply:
        return ClassifiedMessage(event, MessageType.MENTION, event.content)

    return ClassifiedMessage(event, MessageType.GENERIC, event.content)


def ignore_reason(
    event: InboundEvent,
    bot_user_id: str,
    discord: DiscordConfig,
    responses: ResponseConfig,
) -> Optional[str]:
    """Return why an event is dropped before classification, or None to keep it."""
    if discord.channel_id and event.channel_id != discord.channel_id:
        return f"other channel (only listening on channel={discord.channel_id})"
    if event.author_id == bot_user_id:
        return "message from myself"
    if event.author_is_bot and not responses.respond_to_bots:
        return "other bot"
    if event.content.startswith(COMMAND_PREFIX):
        return f"message starts with {COMMAND_PREFIX}"
    return None


def apply_response_toggles(
    message: ClassifiedMessage, responses: ResponseConfig
) -> Optional[ClassifiedMessage]:
    """Gate a classified message on the per-label response toggles.

    Mentions and replies fall through to the generic rule when mention
    handling is off.
    """
    label = message.message_type
    if label is MessageType.DM:
        return message if responses.respond_to_dms else None

    if label in (MessageType.MENTION, MessageType.REPLY):
        if responses.respond_to_mentions:
            return message
        message = ClassifiedMessage(message.event, MessageType.GENERIC, message.event.content)

    return message if responses.respond_to_generic else None
