"""Tests for src/realtime/dispatcher.py: event fan-out and failure isolation."""

import threading
from unittest.mock import MagicMock

from src.engine.events import EventPayload, RoundEvent
from src.realtime.dispatcher import EventDispatcher


def payload(event=RoundEvent.SCORE_UPDATED):
    return EventPayload(event=event, round_id="round-1", participant_id=1)


class TestSubscribe:
    def test_delivers_to_all_subscribers(self):
        dispatcher = EventDispatcher()
        a, b = MagicMock(), MagicMock()
        dispatcher.subscribe(a)
        dispatcher.subscribe(b)

        p = payload()
        dispatcher.publish(p)

        a.assert_called_once_with(p)
        b.assert_called_once_with(p)

    def test_filtered_subscription(self):
        dispatcher = EventDispatcher()
        listener = MagicMock()
        dispatcher.subscribe(listener, {RoundEvent.PARTICIPANT_CRASHED})

        dispatcher.publish(payload(RoundEvent.SCORE_UPDATED))
        dispatcher.publish(payload(RoundEvent.PARTICIPANT_CRASHED))

        assert listener.call_count == 1
        assert listener.call_args.args[0].event == RoundEvent.PARTICIPANT_CRASHED

    def test_duplicate_subscription_ignored(self):
        dispatcher = EventDispatcher()
        listener = MagicMock()
        dispatcher.subscribe(listener)
        dispatcher.subscribe(listener)

        assert dispatcher.subscriber_count == 1

    def test_unsubscribe(self):
        dispatcher = EventDispatcher()
        listener = MagicMock()
        dispatcher.subscribe(listener)
        dispatcher.unsubscribe(listener)

        dispatcher.publish(payload())
        listener.assert_not_called()

    def test_unsubscribe_unknown_is_noop(self):
        EventDispatcher().unsubscribe(MagicMock())

    def test_clear(self):
        dispatcher = EventDispatcher()
        dispatcher.subscribe(MagicMock())
        dispatcher.clear()
        assert dispatcher.subscriber_count == 0

    def test_subscriber_count_waits_for_lock(self):
        dispatcher = EventDispatcher()
        dispatcher.subscribe(MagicMock())
        counts = []
        reader = threading.Thread(target=lambda: counts.append(dispatcher.subscriber_count))

        with dispatcher._lock:
            reader.start()
            reader.join(timeout=0.1)
            assert counts == []
        reader.join(timeout=5)

        assert counts == [1]


class TestFailureIsolation:
    def test_failing_subscriber_does_not_block_others(self):
        dispatcher = EventDispatcher()
        broken = MagicMock(side_effect=RuntimeError("audio device lost"))
        healthy = MagicMock()
        dispatcher.subscribe(broken)
        dispatcher.subscribe(healthy)

        dispatcher.publish(payload())

        broken.assert_called_once()
        healthy.assert_called_once()

    def test_failure_is_logged(self, caplog):
        dispatcher = EventDispatcher()
        dispatcher.subscribe(MagicMock(side_effect=RuntimeError("boom")))

        with caplog.at_level("ERROR", logger="src.realtime.dispatcher"):
            dispatcher.publish(payload())

        assert "failed handling SCORE_UPDATED" in caplog.text
