"""Outbound ports — interfaces for external system adapters."""

from typing import TYPE_CHECKING, Awaitable, Callable, Optional, Protocol, runtime_checkable

from agent_relay.ports.inbound import InboundEvent, ReferencedMessage

if TYPE_CHECKING:
    from agent_relay.domain.models import ClassifiedMessage

SendFn = Callable[[str], Awaitable[None]]


@runtime_checkable
class AgentPort(Protocol):
    """Interface for the conversational-agent backend.

    Both calls return the agent's reply text, or "" when it chose not to reply.
    """

    async def send_message(
        self,
        message: "ClassifiedMessage",
        can_respond: bool,
        batch_content: Optional[str] = None,
    ) -> str: ...

    async def send_timer_message(self, send: Optional[SendFn] = None) -> str: ...


@runtime_checkable
class ChatPort(Protocol):
    """Interface for the chat platform."""

    async def reply(self, event: InboundEvent, text: str) -> None: ...
    async def send(self, channel_id: str, text: str) -> None: ...
    async def send_typing(self, channel_id: str) -> None: ...

    async def fetch_message(
        self, channel_id: str, message_id: str
    ) -> Optional[ReferencedMessage]: ...

    async def resolve_channel(self, channel_id: str) -> Optional[SendFn]: ...
