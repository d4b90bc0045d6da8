"""Domain layer — pure Python, no framework dependencies."""

from agent_relay.domain.models import ClassifiedMessage, DrainTrigger, MessageType
from agent_relay.domain.classifier import (
    apply_response_toggles,
    classify,
    ignore_reason,
    truncate_message,
)
from agent_relay.domain.policy import ChannelPolicy
from agent_relay.domain.batching import MessageBatcher
from agent_relay.domain.dispatch import Dispatcher, MessageRelay, format_batch
from agent_relay.domain.timer import RandomEventTimer

__all__ = [
    "ClassifiedMessage",
    "DrainTrigger",
    "MessageType",
    "apply_response_toggles",
    "classify",
    "ignore_reason",
    "truncate_message",
    "ChannelPolicy",
    "MessageBatcher",
    "Dispatcher",
    "MessageRelay",
    "format_batch",
    "RandomEventTimer",
]
