"""Port interfaces (Hexagonal Architecture)."""

from agent_relay.ports.inbound import InboundEvent, ReferencedMessage
from agent_relay.ports.outbound import AgentPort, ChatPort, SendFn

__all__ = [
    "InboundEvent",
    "ReferencedMessage",
    "AgentPort",
    "ChatPort",
    "SendFn",
]
