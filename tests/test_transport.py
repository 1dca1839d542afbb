"""Tests for the slack_bolt transport."""

import re
from types import SimpleNamespace
from unittest.mock import MagicMock, patch

import pytest

from knit import TriggerType
from knit.transport import SlackTransport, addressing, compile_trigger

AMBIENT = {TriggerType.AMBIENT}
COMMAND = {TriggerType.DIRECT_MENTION, TriggerType.DIRECT_MESSAGE}


@pytest.fixture
def mock_app() -> MagicMock:
    """Create a mock slack_bolt App."""
    return MagicMock()


@pytest.fixture
def slack(mock_app: MagicMock) -> SlackTransport:
    return SlackTransport(app=mock_app, app_token="xapp-test-token")


def channel_event(text: str, **extra) -> dict:
    event = {
        "type": "message",
        "channel": "C0123",
        "channel_type": "channel",
        "user": "U0456",
        "text": text,
        "ts": "1700000000.000100",
    }
    event.update(extra)
    return event


class TestCompileTrigger:

    def test_strings_match_literally_ignoring_case(self):
        (pattern,) = compile_trigger("what? me.")
        assert pattern.search("WHAT? ME.")
        assert not pattern.search("whatx mex")

    def test_patterns_are_kept(self):
        compiled = re.compile(r"i'?m hungry")
        assert compile_trigger([compiled, "food"])[0] is compiled


class TestAddressing:

    def test_channel_message_is_ambient(self):
        modes, text = addressing(channel_event("hello"), "UBOT")
        assert modes == AMBIENT
        assert text == "hello"

    def test_direct_message(self):
        modes, _ = addressing(channel_event("hello", channel_type="im"), "UBOT")
        assert modes == {TriggerType.AMBIENT, TriggerType.DIRECT_MESSAGE}

    def test_direct_mention_is_stripped(self):
        modes, text = addressing(channel_event("<@UBOT>: roll a die"), "UBOT")
        assert TriggerType.DIRECT_MENTION in modes
        assert text == "roll a die"

    def test_mention_of_someone_else(self):
        modes, _ = addressing(channel_event("<@UOTHER> roll a die"), "UBOT")
        assert modes == AMBIENT


class TestDispatch:

    def test_registers_message_event(self, mock_app):
        SlackTransport(app=mock_app)
        mock_app.event.assert_called_once_with("message")

    def test_message_event_dispatches_with_bot_user_id(self, mock_app):
        slack = SlackTransport(app=mock_app)
        calls = []
        slack.subscribe("roll", COMMAND, calls.append)

        handle_message_event = mock_app.event.return_value.call_args.args[0]
        handle_message_event(
            event=channel_event("<@UBOT> roll a die"),
            context=SimpleNamespace(bot_user_id="UBOT"),
        )

        assert [message["text"] for message in calls] == ["roll a die"]

    def test_all_matching_subscriptions_fire(self, slack):
        calls = []
        slack.subscribe("hungry", AMBIENT, lambda m: calls.append("first"))
        slack.subscribe(re.compile(r"i'?m hungry", re.I), AMBIENT, lambda m: calls.append("second"))
        slack.subscribe("thirsty", AMBIENT, lambda m: calls.append("third"))

        assert slack.dispatch(channel_event("I'm hungry"), "UBOT") == 2
        assert calls == ["first", "second"]

    def test_command_needs_addressing(self, slack):
        calls = []
        slack.subscribe("roll", COMMAND, calls.append)

        slack.dispatch(channel_event("roll a die"), "UBOT")
        assert calls == []

        slack.dispatch(channel_event("<@UBOT> roll a die"), "UBOT")
        slack.dispatch(channel_event("roll a die", channel_type="im"), "UBOT")
        assert [message["text"] for message in calls] == ["roll a die", "roll a die"]

    def test_match_is_attached(self, slack):
        calls = []
        slack.subscribe(re.compile(r"roll (\d+)"), AMBIENT, calls.append)
        slack.dispatch(channel_event("roll 20"), "UBOT")
        assert calls[0]["match"].group(1) == "20"

    @pytest.mark.parametrize("extra", [{"bot_id": "B1"}, {"subtype": "message_changed"}])
    def test_ignores_bot_and_subtype_messages(self, slack, extra):
        calls = []
        slack.subscribe("hi", AMBIENT, calls.append)
        assert slack.dispatch(channel_event("hi", **extra), "UBOT") == 0
        assert calls == []

    def test_failing_callback_does_not_stop_others(self, slack):
        calls = []

        def explode(message):
            raise RuntimeError("boom")

        slack.subscribe("hi", AMBIENT, explode)
        slack.subscribe("hi", AMBIENT, calls.append)
        assert slack.dispatch(channel_event("hi"), "UBOT") == 2
        assert len(calls) == 1


class TestWebApi:

    def test_send_posts_to_channel(self, slack, mock_app):
        mock_app.client.chat_postMessage.return_value.data = {"ok": True}
        result = slack.send(channel_event("hi"), {"text": "hello", "username": "DiceBot"})
        assert result == {"ok": True}
        mock_app.client.chat_postMessage.assert_called_once_with(
            text="hello", username="DiceBot", channel="C0123"
        )

    def test_send_replies_in_thread(self, slack, mock_app):
        slack.send(channel_event("hi", thread_ts="1.0"), {"text": "hello"})
        assert mock_app.client.chat_postMessage.call_args.kwargs["thread_ts"] == "1.0"

    @pytest.mark.parametrize("resource, method", [
        ("channels", "conversations_list"),
        ("users", "users_list"),
    ])
    def test_list(self, slack, mock_app, resource, method):
        getattr(mock_app.client, method).return_value.data = {"ok": True}
        assert slack.list(resource, limit=200, cursor="X") == {"ok": True}
        getattr(mock_app.client, method).assert_called_once_with(limit=200, cursor="X")


class TestConnection:

    def test_connect_requires_app_token(self, mock_app):
        with pytest.raises(ValueError, match="app-level token"):
            SlackTransport(app=mock_app).connect()

    def test_connect_and_disconnect(self, slack, mock_app):
        with patch("knit.transport.SocketModeHandler") as handler_class:
            slack.connect()
            handler_class.assert_called_once_with(mock_app, "xapp-test-token")
            handler_class.return_value.connect.assert_called_once_with()

            slack.disconnect()
            handler_class.return_value.close.assert_called_once_with()
            assert slack.handler is None

    def test_connect_checks_token_first(self, slack, mock_app):
        mock_app.client.auth_test.side_effect = RuntimeError("invalid_auth")
        with patch("knit.transport.SocketModeHandler") as handler_class:
            with pytest.raises(RuntimeError, match="invalid_auth"):
                slack.connect()
        handler_class.assert_not_called()
        assert slack.handler is None
