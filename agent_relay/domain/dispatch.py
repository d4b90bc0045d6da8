"""Drain/dispatch engine — turns buffered or single messages into agent calls.

Both entry paths compute the channel policy at dispatch time, call the agent
once, and reply to the most recent message only when the channel allows it.
Failures are logged and swallowed; the batcher has already cleared its state
before any of this runs.
"""

import sys
from typing import List, Optional

from agent_relay.config import BatchConfig
from agent_relay.domain.batching import MessageBatcher
from agent_relay.domain.models import ClassifiedMessage, DrainTrigger, MessageType
from agent_relay.domain.policy import ChannelPolicy
from agent_relay.ports.inbound import InboundEvent
from agent_relay.ports.outbound import AgentPort, ChatPort

PROVENANCE = {
    MessageType.DM: "sent you a DM",
    MessageType.MENTION: "mentioned you",
    MessageType.REPLY: "replied to you",
}


def _log(msg: str):
    print(msg, file=sys.stderr)


def format_batch_line(index: int, message: ClassifiedMessage) -> str:
    event = message.event
    author = f"{event.author_name} (id={event.author_id})"
    provenance = PROVENANCE.get(message.message_type)
    prefix = f"[{author} {provenance}]" if provenance else f"[{author}]"
    return f"{index}. {prefix} {message.text}"


def format_batch(items: List[ClassifiedMessage], channel_id: str) -> str:
    """Render buffered messages as one numbered block, oldest first."""
    channel_name = items[-1].event.channel_name
    source = f"#{channel_name}" if channel_name else f"channel {channel_id}"
    lines = [format_batch_line(i, m) for i, m in enumerate(items, start=1)]
    return f"[Batch of {len(items)} messages from {source}]\n" + "\n".join(lines)


class Dispatcher:
    """Sends messages to the agent and routes replies under the channel policy."""

    def __init__(self, agent: AgentPort, chat: ChatPort, policy: ChannelPolicy):
        self.agent = agent
        self.chat = chat
        self.policy = policy

    async def dispatch_single(self, message: ClassifiedMessage):
        """Immediate path: one message, no batch wrapper."""
        event = message.event
        can_respond = self.policy.can_respond(event.channel_id)
        try:
            response = await self.agent.send_message(message, can_respond)
            await self._deliver(event, response, can_respond, tag="")
        except Exception as e:
            _log(f"Error processing and sending message: {e}")

    async def drain(
        self,
        channel_id: str,
        items: List[ClassifiedMessage],
        trigger: Optional[DrainTrigger] = None,
    ):
        """Batch path: one agent call for all items, replying to the last one."""
        if not items:
            return
        last = items[-1]
        can_respond = self.policy.can_respond(channel_id)
        try:
            batch_content = format_batch(items, channel_id)
            _log(f"[batch] content:\n{batch_content}")
            response = await self.agent.send_message(last, can_respond, batch_content)
            await self._deliver(last.event, response, can_respond, tag="[batch] ")
        except Exception as e:
            _log(f"[batch] error processing batch ch={channel_id}: {e}")

    async def _deliver(self, event: InboundEvent, response: str, can_respond: bool, tag: str):
        if not response:
            return
        if not can_respond:
            _log(f"{tag}Agent generated response but not responding "
                 f"(not in response channel): {response}")
            return
        await self.chat.reply(event, response)
        _log(f"{tag}Response sent: {response}")


class MessageRelay:
    """Single entry point for classified messages: batched or immediate."""

    def __init__(self, dispatcher: Dispatcher, batch: Optional[BatchConfig] = None):
        self.dispatcher = dispatcher
        batch = batch or BatchConfig()
        self.batcher: Optional[MessageBatcher] = None
        if batch.enabled:
            self.batcher = MessageBatcher(
                dispatcher.drain,
                max_size=batch.max_size,
                timeout_ms=batch.timeout_ms,
            )

    @property
    def batching_enabled(self) -> bool:
        return self.batcher is not None

    async def submit(self, message: ClassifiedMessage):
        if self.batcher is None:
            await self.dispatcher.dispatch_single(message)
            return
        await self.batcher.enqueue(message)
