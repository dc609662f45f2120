"""
Test cases for the client-side notification listener, reconnection and banner.
"""
import asyncio

import pytest

from app.client.notifications import (
    ConnectionState,
    NotificationBanner,
    NotificationListener,
    ReconnectionPolicy,
    decode_event,
    notification_url,
    subscribe,
)
from app.exceptions import DecodeError, TransportError
from app.schemas.auth import UserOut
from app.schemas.notification import NewQuizEvent


def new_quiz(title):
    return NewQuizEvent(title=title).model_dump_json()


class FakeTransport:
    """Replays a fixed list of messages, then closes."""
    
    def __init__(self, messages=(), fail_open=False):
        self._messages = list(messages)
        self.fail_open = fail_open
        self.closed = False
    
    async def open(self):
        if self.fail_open:
            raise TransportError("connection refused")
    
    async def messages(self):
        for message in self._messages:
            yield message
    
    async def close(self):
        self.closed = True


class QueueTransport:
    """Delivers messages pushed onto a queue until closed."""
    
    def __init__(self):
        self.queue = asyncio.Queue()
        self.closed = False
    
    async def open(self):
        pass
    
    async def messages(self):
        while True:
            message = await self.queue.get()
            if message is None:
                return
            yield message
    
    async def close(self):
        self.closed = True
        self.queue.put_nowait(None)


class FakeTimer:
    def __init__(self, delay, callback):
        self.delay = delay
        self.callback = callback
        self.cancelled = False
    
    def cancel(self):
        self.cancelled = True
    
    def fire(self):
        if not self.cancelled:
            self.callback()


class FakeLoop:
    def __init__(self):
        self.timers = []
    
    def call_later(self, delay, callback):
        timer = FakeTimer(delay, callback)
        self.timers.append(timer)
        return timer


class TestDecodeEvent:
    
    def test_valid_payload(self):
        event = decode_event('{"type": "NEW_QUIZ", "title": "Science Quiz"}')
        assert event == NewQuizEvent(title="Science Quiz")
    
    @pytest.mark.parametrize("raw", [
        "not json",
        '{"type": "QUIZ_DELETED", "title": "x"}',
        '{"type": "NEW_QUIZ"}',
        '["NEW_QUIZ"]',
        "",
    ])
    def test_malformed_payloads_raise(self, raw):
        with pytest.raises(DecodeError):
            decode_event(raw)


class TestReconnectionPolicy:
    """Test cases for the flat-delay reconnection policy."""
    
    def test_flat_delay_without_limit(self):
        policy = ReconnectionPolicy(delay=3.0)
        delays = []
        for _ in range(50):
            policy.connected()
            delays.append(policy.closed())
        
        assert set(delays) == {3.0}
        assert policy.reconnects == 50
        assert policy.state is ConnectionState.RECONNECTING
    
    def test_connected_then_stopped(self):
        policy = ReconnectionPolicy()
        assert policy.state is ConnectionState.DISCONNECTED
        policy.connected()
        assert policy.state is ConnectionState.CONNECTED
        
        policy.stop()
        assert policy.closed() is None
        policy.connected()
        assert policy.stopped


class TestNotificationListener:
    """Test cases for the listen/reconnect loop."""
    
    def test_dispatches_drops_malformed_and_reconnects(self):
        transports = [
            FakeTransport([new_quiz("Science Quiz"), "garbage", new_quiz("History")]),
            FakeTransport(fail_open=True),
            FakeTransport([new_quiz("never delivered")]),
        ]
        factory = iter(transports)
        received = []
        delays = []
        
        listener = NotificationListener(
            lambda: next(factory),
            lambda event: received.append(event.title),
            policy=ReconnectionPolicy(delay=3.0),
        )
        
        async def fake_sleep(delay):
            delays.append(delay)
            if len(delays) == 2:
                listener.policy.stop()
        
        listener._sleep = fake_sleep
        asyncio.run(listener.run())
        
        assert received == ["Science Quiz", "History"]
        assert delays == [3.0, 3.0]
        assert transports[0].closed and transports[1].closed
        assert listener.policy.reconnects == 2
    
    def test_handle_message_returns_none_for_bad_payload(self):
        listener = NotificationListener(lambda: None, lambda event: None)
        assert listener.handle_message("{") is None
        assert listener.handle_message(new_quiz("Algebra")).title == "Algebra"
    
    def test_failing_handler_does_not_end_listener(self):
        transports = iter([FakeTransport([new_quiz("Boom"), new_quiz("Geography")])])
        received = []
        
        def on_event(event):
            if event.title == "Boom":
                raise RuntimeError("render failed")
            received.append(event.title)
        
        listener = NotificationListener(lambda: next(transports), on_event, policy=ReconnectionPolicy(delay=0))
        
        async def fake_sleep(delay):
            listener.policy.stop()
        
        listener._sleep = fake_sleep
        asyncio.run(listener.run())
        
        assert received == ["Geography"]
        assert listener.policy.reconnects == 1


class TestNotificationBanner:
    """Test cases for auto-dismiss behaviour."""
    
    def test_dismisses_after_window(self):
        loop = FakeLoop()
        banner = NotificationBanner(dismiss_after=10.0, loop=loop)
        banner.show(NewQuizEvent(title="Science Quiz"))
        
        assert banner.message == "Science Quiz"
        assert loop.timers[0].delay == 10.0
        
        loop.timers[0].fire()
        assert banner.message is None
    
    def test_new_event_resets_timer(self):
        loop = FakeLoop()
        banner = NotificationBanner(dismiss_after=10.0, loop=loop)
        banner.show(NewQuizEvent(title="First"))
        banner.show(NewQuizEvent(title="Second"))
        
        first, second = loop.timers
        assert first.cancelled
        
        first.fire()
        assert banner.message == "Second"
        
        second.fire()
        assert banner.message is None


class TestSubscribe:
    """Test cases for the subscribe/unsubscribe pair."""
    
    def test_teachers_are_not_subscribed(self):
        teacher = UserOut(id=1, username="ms_rahma", role="teacher")
        
        async def scenario():
            return subscribe(teacher, lambda event: None, transport_factory=FakeTransport)
        
        assert asyncio.run(scenario()) is None
    
    def test_student_receives_until_unsubscribed(self):
        student = UserOut(id=2, username="budi", role="student")
        transport = QueueTransport()
        received = []
        
        async def scenario():
            subscription = subscribe(
                student,
                lambda event: received.append(event.title),
                transport_factory=lambda: transport,
                policy=ReconnectionPolicy(delay=0),
            )
            await transport.queue.put(new_quiz("Science Quiz"))
            for _ in range(20):
                if received:
                    break
                await asyncio.sleep(0)
            await subscription.unsubscribe()
            return subscription
        
        subscription = asyncio.run(scenario())
        
        assert received == ["Science Quiz"]
        assert transport.closed
        assert subscription.listener.policy.stopped


def test_notification_url():
    assert notification_url("http://localhost:8000") == "ws://localhost:8000/ws"
    assert notification_url("https://quiz.example.org/") == "wss://quiz.example.org/ws"
