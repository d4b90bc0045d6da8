"""Letta agent client using aiohttp. Implements AgentPort."""

import sys
from typing import Any, Dict, List, Optional

import aiohttp

from agent_relay.config import AgentConfig
from agent_relay.domain.models import ClassifiedMessage, MessageType
from agent_relay.ports.outbound import SendFn

OBSERVE_ONLY_NOTICE = (
    "[Note: you are observing this channel only. "
    "Any reply you write here will not be sent to Discord.]"
)

HEARTBEAT_PROMPT = (
    "[EVENT] This is an automated timed heartbeat (visible to yourself only). "
    "Use this event to send a message, to reflect and edit your memories, "
    "or do nothing at all. It's up to you! Consider though that this is an "
    "opportunity for you to think for yourself - since your circuit will not "
    "be activated until the next automated/timed heartbeat or incoming message event."
)

_SENDER_FRAMING = {
    MessageType.DM: "sent you a direct message",
    MessageType.MENTION: "sent a message mentioning you",
    MessageType.REPLY: "replied to you",
    MessageType.GENERIC: "sent a message to the channel",
}


def _log(msg: str):
    print(msg, file=sys.stderr)


class AgentBackendError(RuntimeError):
    """The agent server rejected or failed a request."""


class LettaAgentClient:
    """Async client for one agent on a Letta server."""

    def __init__(self, config: AgentConfig):
        self.config = config

    @property
    def is_configured(self) -> bool:
        return bool(self.config.agent_id)

    @staticmethod
    def build_message_text(message: ClassifiedMessage, can_respond: bool,
                           batch_content: Optional[str] = None) -> str:
        if batch_content is not None:
            text = batch_content
        else:
            event = message.event
            framing = _SENDER_FRAMING[message.message_type]
            text = f"[{event.author_name} (id={event.author_id}) {framing}] {message.text}"
        if not can_respond:
            text = f"{text}\n\n{OBSERVE_ONLY_NOTICE}"
        return text

    @staticmethod
    def extract_assistant_messages(data: Dict[str, Any]) -> List[str]:
        texts = []
        for item in data.get("messages", []):
            if item.get("message_type") != "assistant_message":
                continue
            content = item.get("content")
            if isinstance(content, list):
                content = "".join(part.get("text", "") for part in content if isinstance(part, dict))
            if content:
                texts.append(str(content).strip())
        return [t for t in texts if t]

    async def _post_messages(self, text: str) -> List[str]:
        if not self.is_configured:
            raise AgentBackendError("LETTA_AGENT_ID is not set")

        url = f"{self.config.base_url}/v1/agents/{self.config.agent_id}/messages"
        headers = {"Content-Type": "application/json"}
        if self.config.api_key:
            headers["Authorization"] = f"Bearer {self.config.api_key}"
        payload = {"messages": [{"role": "user", "content": text}]}
        timeout = aiohttp.ClientTimeout(total=self.config.timeout_seconds)

        async with aiohttp.ClientSession(timeout=timeout) as session:
            async with session.post(url, json=payload, headers=headers) as resp:
                if resp.status >= 400:
                    body = await resp.text()
                    raise AgentBackendError(f"HTTP {resp.status}: {body[:200]}")
                data = await resp.json()
        return self.extract_assistant_messages(data)

    async def send_message(
        self,
        message: ClassifiedMessage,
        can_respond: bool,
        batch_content: Optional[str] = None,
    ) -> str:
        text = self.build_message_text(message, can_respond, batch_content)
        _log(f"[agent] sending {message.message_type.value} message ({len(text)} chars)")
        return "\n".join(await self._post_messages(text))

    async def send_timer_message(self, send: Optional[SendFn] = None) -> str:
        """Heartbeat call.

        With a send capability, every assistant message except the last is
        delivered through it; the last one is returned to the caller.
        """
        replies = await self._post_messages(HEARTBEAT_PROMPT)
        if not replies:
            return ""
        if send is None:
            return "\n".join(replies)
        for text in replies[:-1]:
            try:
                await send(text)
            except Exception as e:
                _log(f"[agent] failed to deliver intermediate heartbeat message: {e}")
        return replies[-1]
