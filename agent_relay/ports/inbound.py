"""Inbound port — platform-agnostic message representation."""

import time
from dataclasses import dataclass, field
from typing import Optional


@dataclass(frozen=True)
class InboundEvent:
    """One received chat message. Never mutated after creation."""

    channel_id: str
    message_id: str
    author_id: str
    author_name: str
    content: str
    is_dm: bool = False
    mentions_bot: bool = False
    author_is_bot: bool = False
    reply_to_message_id: Optional[str] = None
    channel_name: Optional[str] = None
    timestamp: float = field(default_factory=time.time)

    @property
    def is_reply(self) -> bool:
        return self.reply_to_message_id is not None


@dataclass(frozen=True)
class ReferencedMessage:
    """The message an inbound event replies to."""

    message_id: str
    author_id: str
    content: str
