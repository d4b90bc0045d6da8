"""Channel response policy."""

from typing import Optional


class ChannelPolicy:
    """Decides whether generated replies may be sent to a channel.

    The agent observes every channel it listens on, but when a response
    channel is configured it only speaks there.
    """

    def __init__(self, response_channel_id: Optional[str] = None):
        self.response_channel_id = response_channel_id

    def can_respond(self, channel_id: str) -> bool:
        if not self.response_channel_id:
            return True
        return channel_id == self.response_channel_id

    def describe(self) -> str:
        return self.response_channel_id or "any"
