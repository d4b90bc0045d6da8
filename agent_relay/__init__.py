"""Discord Agent Relay — batches Discord messages into a stateful agent."""

__version__ = "0.1.0"

from agent_relay.config import AppConfig
from agent_relay.domain import (
    ChannelPolicy,
    Dispatcher,
    MessageBatcher,
    MessageRelay,
    MessageType,
    RandomEventTimer,
    classify,
)
from agent_relay.ports import InboundEvent, ReferencedMessage

__all__ = [
    "AppConfig",
    "ChannelPolicy",
    "Dispatcher",
    "MessageBatcher",
    "MessageRelay",
    "MessageType",
    "RandomEventTimer",
    "classify",
    "InboundEvent",
    "ReferencedMessage",
]
