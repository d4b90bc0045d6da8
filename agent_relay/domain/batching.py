"""Per-channel message batching with size and sliding-timeout drains.

Enqueue and the detach half of a drain never await, so buffer/timer state
for a channel is always consistent between suspension points. asyncio tasks
don't start running until the next loop iteration, so the timeout path
detaches in the timer callback itself and only hands the detached items to
a task.
"""

import asyncio
import sys
from typing import Awaitable, Callable, Dict, List, Optional

from agent_relay.domain.models import ClassifiedMessage, DrainTrigger

DrainHandler = Callable[[str, List[ClassifiedMessage], DrainTrigger], Awaitable[None]]


def _log(msg: str):
    print(msg, file=sys.stderr)


class MessageBatcher:
    """Accumulates classified messages per channel until a drain trigger fires."""

    def __init__(
        self,
        drain_handler: DrainHandler,
        max_size: int = 10,
        timeout_ms: int = 30000,
    ):
        self._drain_handler = drain_handler
        self.max_size = max(1, max_size)
        self.timeout_ms = timeout_ms
        self._buffers: Dict[str, List[ClassifiedMessage]] = {}
        self._timers: Dict[str, asyncio.TimerHandle] = {}
        self._drain_tasks: set = set()  # timeout drains still running

    def buffered(self, channel_id: str) -> int:
        return len(self._buffers.get(channel_id, ()))

    def has_pending_timer(self, channel_id: str) -> bool:
        return channel_id in self._timers

    async def enqueue(self, message: ClassifiedMessage):
        """Buffer a message; drains inline when the size limit is reached."""
        channel_id = message.event.channel_id
        buffer = self._buffers.setdefault(channel_id, [])
        buffer.append(message)
        _log(f"[batch] added message to batch ({len(buffer)}/{self.max_size}) ch={channel_id}")

        if len(buffer) >= self.max_size:
            _log(f"[batch] size limit reached, draining ch={channel_id}")
            await self.drain(channel_id, DrainTrigger.SIZE_LIMIT)
            return

        self._arm_timer(channel_id)

    async def drain(self, channel_id: str, trigger: DrainTrigger):
        items = self._detach(channel_id)
        if items:
            await self._run_drain(channel_id, items, trigger)

    async def wait_idle(self):
        """Wait for timeout drains that are already in flight."""
        while self._drain_tasks:
            await asyncio.gather(*list(self._drain_tasks), return_exceptions=True)

    def _arm_timer(self, channel_id: str):
        # Sliding window: measured from the most recent enqueue
        previous = self._timers.pop(channel_id, None)
        if previous:
            previous.cancel()
        loop = asyncio.get_running_loop()
        self._timers[channel_id] = loop.call_later(
            self.timeout_ms / 1000, self._on_timeout, channel_id
        )

    def _on_timeout(self, channel_id: str):
        _log(f"[batch] timeout reached, draining ch={channel_id}")
        items = self._detach(channel_id)
        if not items:
            return
        task = asyncio.ensure_future(self._run_drain(channel_id, items, DrainTrigger.TIMEOUT))
        self._drain_tasks.add(task)
        task.add_done_callback(self._drain_tasks.discard)

    def _detach(self, channel_id: str) -> Optional[List[ClassifiedMessage]]:
        timer = self._timers.pop(channel_id, None)
        if timer:
            timer.cancel()
        return self._buffers.pop(channel_id, None)

    async def _run_drain(
        self, channel_id: str, items: List[ClassifiedMessage], trigger: DrainTrigger
    ):
        _log(f"[batch] draining {len(items)} message(s) ch={channel_id} trigger={trigger.value}")
        try:
            await self._drain_handler(channel_id, items, trigger)
        except Exception as e:
            _log(f"[batch] drain failed ch={channel_id}: {e}")
