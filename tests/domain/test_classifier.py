"""Tests for domain/classifier.py — labels, reply quoting, intake filtering."""

import pytest

from agent_relay.config import DiscordConfig, ResponseConfig
from agent_relay.domain.classifier import (
    apply_response_toggles,
    classify,
    ignore_reason,
    truncate_message,
)
from agent_relay.domain.models import ClassifiedMessage, MessageType
from agent_relay.ports.inbound import InboundEvent, ReferencedMessage

BOT_ID = "999"


def _event(content="hello", **kwargs) -> InboundEvent:
    defaults = dict(
        channel_id="100",
        message_id="1",
        author_id="42",
        author_name="alice",
    )
    defaults.update(kwargs)
    return InboundEvent(content=content, **defaults)


class TestTruncateMessage:
    def test_short_unchanged(self):
        assert truncate_message("hello", 100) == "hello"

    def test_exact_limit_unchanged(self):
        text = "a" * 100
        assert truncate_message(text, 100) == text

    def test_over_limit(self):
        text = "b" * 150
        result = truncate_message(text, 100)
        assert result == "b" * 97 + "..."
        assert len(result) == 100


class TestClassify:
    def test_dm_wins_over_everything(self):
        event = _event(is_dm=True, mentions_bot=True, reply_to_message_id="5")
        ref = ReferencedMessage("5", BOT_ID, "earlier")
        result = classify(event, BOT_ID, ref)
        assert result.message_type is MessageType.DM
        assert result.text == "hello"

    def test_reply_to_bot(self):
        event = _event("sure", reply_to_message_id="5")
        ref = ReferencedMessage("5", BOT_ID, "want to play?")
        result = classify(event, BOT_ID, ref)
        assert result.message_type is MessageType.REPLY
        assert result.text == '[Replying to previous message: "want to play?"] sure'

    def test_reply_to_bot_truncates_long_original(self):
        original = "x" * 150
        event = _event("ok", reply_to_message_id="5")
        result = classify(event, BOT_ID, ReferencedMessage("5", BOT_ID, original))
        assert result.message_type is MessageType.REPLY
        assert result.text == f'[Replying to previous message: "{"x" * 97}..."] ok'

    def test_reply_does_not_mutate_event(self):
        event = _event("sure", reply_to_message_id="5")
        result = classify(event, BOT_ID, ReferencedMessage("5", BOT_ID, "q"))
        assert result.event.content == "sure"
        assert result.event is event

    def test_reply_to_someone_else_is_mention(self):
        event = _event(reply_to_message_id="5")
        result = classify(event, BOT_ID, ReferencedMessage("5", "7", "other"))
        assert result.message_type is MessageType.MENTION
        assert result.text == "hello"

    def test_unresolved_reply_is_mention(self):
        event = _event(reply_to_message_id="5")
        result = classify(event, BOT_ID, None)
        assert result.message_type is MessageType.MENTION

    def test_mention(self):
        result = classify(_event(mentions_bot=True), BOT_ID)
        assert result.message_type is MessageType.MENTION

    def test_reply_to_bot_beats_mention(self):
        event = _event(mentions_bot=True, reply_to_message_id="5")
        result = classify(event, BOT_ID, ReferencedMessage("5", BOT_ID, "hi"))
        assert result.message_type is MessageType.REPLY

    def test_generic(self):
        result = classify(_event(), BOT_ID)
        assert result.message_type is MessageType.GENERIC
        assert result.text == "hello"


class TestIgnoreReason:
    def test_accepts_normal_message(self):
        assert ignore_reason(_event(), BOT_ID, DiscordConfig(), ResponseConfig()) is None

    def test_other_channel_ignored(self):
        reason = ignore_reason(_event(channel_id="200"), BOT_ID,
                               DiscordConfig(channel_id="100"), ResponseConfig())
        assert "other channel" in reason

    def test_listen_channel_accepted(self):
        assert ignore_reason(_event(channel_id="100"), BOT_ID,
                             DiscordConfig(channel_id="100"), ResponseConfig()) is None

    def test_own_message_ignored(self):
        reason = ignore_reason(_event(author_id=BOT_ID), BOT_ID, DiscordConfig(), ResponseConfig())
        assert reason == "message from myself"

    def test_bots_ignored_by_default(self):
        reason = ignore_reason(_event(author_is_bot=True), BOT_ID, DiscordConfig(), ResponseConfig())
        assert reason == "other bot"

    def test_bots_allowed_when_enabled(self):
        assert ignore_reason(_event(author_is_bot=True), BOT_ID, DiscordConfig(),
                             ResponseConfig(respond_to_bots=True)) is None

    def test_bang_prefix_ignored(self):
        reason = ignore_reason(_event("!help"), BOT_ID, DiscordConfig(), ResponseConfig())
        assert "starts with !" in reason


class TestResponseToggles:
    def _msg(self, label, text="t"):
        return ClassifiedMessage(_event("raw"), label, text)

    def test_dm_requires_dm_toggle(self):
        msg = self._msg(MessageType.DM)
        assert apply_response_toggles(msg, ResponseConfig()) is None
        assert apply_response_toggles(msg, ResponseConfig(respond_to_dms=True)) is msg

    def test_dm_not_rescued_by_generic(self):
        msg = self._msg(MessageType.DM)
        assert apply_response_toggles(msg, ResponseConfig(respond_to_generic=True)) is None

    @pytest.mark.parametrize("label", [MessageType.MENTION, MessageType.REPLY])
    def test_mention_and_reply_use_mention_toggle(self, label):
        msg = self._msg(label)
        assert apply_response_toggles(msg, ResponseConfig(respond_to_mentions=True)) is msg

    def test_mention_falls_through_to_generic(self):
        msg = self._msg(MessageType.REPLY, text="[Replying to ...] raw")
        result = apply_response_toggles(msg, ResponseConfig(respond_to_generic=True))
        assert result.message_type is MessageType.GENERIC
        assert result.text == "raw"

    def test_mention_dropped_when_both_off(self):
        assert apply_response_toggles(self._msg(MessageType.MENTION), ResponseConfig()) is None

    def test_generic_toggle(self):
        msg = self._msg(MessageType.GENERIC)
        assert apply_response_toggles(msg, ResponseConfig()) is None
        assert apply_response_toggles(msg, ResponseConfig(respond_to_generic=True)) is msg
