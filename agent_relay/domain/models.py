"""Domain data models — pure Python dataclasses."""

from dataclasses import dataclass
from enum import Enum

from agent_relay.ports.inbound import InboundEvent


class MessageType(Enum):
    """Why an inbound event warrants the agent's attention."""

    DM = "dm"
    MENTION = "mention"
    REPLY = "reply"
    GENERIC = "generic"


class DrainTrigger(Enum):
    SIZE_LIMIT = "size_limit"
    TIMEOUT = "timeout"


@dataclass(frozen=True)
class ClassifiedMessage:
    """An event with its label and the text that goes to the agent."""

    event: InboundEvent
    message_type: MessageType
    text: str
