"""Random heartbeat events — an independent, self-rescheduling timer loop.

Each cycle waits a random number of whole minutes, then fires with a fixed
probability. A fired event invokes the agent with no inbound context and
delivers any reply to the configured destination channel, bypassing the
channel response policy.
"""

import asyncio
import random
import sys
from typing import Awaitable, Callable, Optional

from agent_relay.config import TimerConfig
from agent_relay.ports.outbound import AgentPort, ChatPort, SendFn

MIN_DELAY_MINUTES = 1
SETTLE_SECONDS = 1.0


def _log(msg: str):
    print(msg, file=sys.stderr)


class RandomEventTimer:
    """Fires heartbeat events on a randomized schedule for the process lifetime."""

    def __init__(
        self,
        agent: AgentPort,
        chat: Optional[ChatPort],
        config: TimerConfig,
        channel_id: Optional[str] = None,
        rng: Optional[random.Random] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.agent = agent
        self.chat = chat
        self.config = config
        self.channel_id = channel_id
        self._rng = rng or random.Random()
        self._sleep = sleep
        self._task: Optional[asyncio.Task] = None

    def next_delay_minutes(self) -> int:
        """Whole minutes in [1, interval_minutes), never below 1."""
        span = self.config.interval_minutes - MIN_DELAY_MINUTES
        extra = int(self._rng.random() * span) if span > 0 else 0
        return MIN_DELAY_MINUTES + extra

    async def start(self):
        if not self.config.enabled:
            _log("Timer feature is disabled.")
            return
        if not self._task or self._task.done():
            self._task = asyncio.create_task(self._run())

    async def _run(self):
        while True:
            minutes = self.next_delay_minutes()
            _log(f"[timer] scheduled to fire in {minutes} minutes")
            await self._sleep(minutes * 60)
            _log(f"[timer] fired after {minutes} minutes")
            try:
                await self.fire()
            except Exception as e:
                _log(f"[timer] error during firing: {e}")
            await self._sleep(SETTLE_SECONDS)

    async def fire(self) -> bool:
        """Run one Bernoulli trial; returns True when the event was triggered."""
        probability = self.config.firing_probability
        if self._rng.random() >= probability:
            _log(f"[timer] random event not triggered ({(1 - probability) * 100:.0f}% chance)")
            return False

        _log(f"[timer] random event triggered ({probability * 100:.0f}% chance)")
        send = await self._resolve_destination()

        try:
            response = await self.agent.send_timer_message(send)
        except Exception as e:
            _log(f"[timer] agent call failed: {e}")
            return True

        if not send:
            _log("[timer] no CHANNEL_ID defined or channel not available; message not sent.")
            return True
        if response:
            try:
                await send(response)
                _log("[timer] message sent to channel")
            except Exception as e:
                _log(f"[timer] error sending timer message: {e}")
        return True

    async def _resolve_destination(self) -> Optional[SendFn]:
        if not self.channel_id or self.chat is None:
            return None
        try:
            send = await self.chat.resolve_channel(self.channel_id)
        except Exception as e:
            _log(f"[timer] error fetching channel {self.channel_id}: {e}")
            return None
        if send is None:
            _log("[timer] channel not found or is not a text channel.")
        return send
