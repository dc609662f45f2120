"""
Client side of the new-quiz notification channel

- ReconnectionPolicy: flat delay, unbounded retries
- NotificationListener: connect, decode, dispatch, reconnect
- NotificationBanner: one visible message with an auto-dismiss timer
- subscribe(): students only
"""
import asyncio
import logging
from enum import Enum
from typing import Any, Callable, Optional

import websockets
from websockets.exceptions import ConnectionClosed, WebSocketException
from pydantic import ValidationError

from app.config import settings
from app.exceptions import DecodeError, TransportError
from app.schemas.auth import UserOut
from app.schemas.notification import NewQuizEvent

logger = logging.getLogger(__name__)


def decode_event(raw: Any) -> NewQuizEvent:
    """
    Parse one wire message

    Raises:
        DecodeError: invalid JSON, unknown event type or missing fields
    """
    try:
        return NewQuizEvent.model_validate_json(raw)
    except (ValidationError, TypeError) as e:
        raise DecodeError(f"Undecodable notification payload: {raw!r}") from e


def notification_url(base_url: str) -> str:
    """ws(s) URL of the channel for an http(s) API base URL"""
    if base_url.startswith("https://"):
        base_url = "wss://" + base_url[len("https://"):]
    elif base_url.startswith("http://"):
        base_url = "ws://" + base_url[len("http://"):]
    return base_url.rstrip("/") + "/ws"


class ConnectionState(str, Enum):
    CONNECTED = "connected"
    DISCONNECTED = "disconnected"
    RECONNECTING = "reconnecting"
    STOPPED = "stopped"


class ReconnectionPolicy:
    """
    Every close, normal or not, schedules one retry after the same delay.
    There is no attempt limit; only stop() ends reconnection.
    """

    def __init__(self, delay: float = settings.RECONNECT_DELAY_SECONDS):
        self.delay = delay
        self.state = ConnectionState.DISCONNECTED
        self.reconnects = 0

    def connected(self) -> None:
        if self.state is not ConnectionState.STOPPED:
            self.state = ConnectionState.CONNECTED

    def closed(self) -> Optional[float]:
        """Record a closed transport; returns the delay before reconnecting, or None when stopped"""
        if self.state is ConnectionState.STOPPED:
            return None
        self.state = ConnectionState.RECONNECTING
        self.reconnects += 1
        return self.delay

    def stop(self) -> None:
        self.state = ConnectionState.STOPPED

    @property
    def stopped(self) -> bool:
        return self.state is ConnectionState.STOPPED


class WebSocketTransport:
    """One WebSocket connection; create a new instance per attempt"""

    def __init__(self, url: str, open_timeout: float = settings.REQUEST_TIMEOUT_SECONDS):
        self.url = url
        self.open_timeout = open_timeout
        self._connection = None

    async def open(self) -> None:
        try:
            self._connection = await websockets.connect(self.url, open_timeout=self.open_timeout)
        except (OSError, asyncio.TimeoutError, WebSocketException) as e:
            raise TransportError(f"Cannot connect to {self.url}: {e!r}") from e

    async def messages(self):
        try:
            async for message in self._connection:
                yield message
        except ConnectionClosed as e:
            raise TransportError(f"Connection to {self.url} lost: {e!r}") from e

    async def close(self) -> None:
        if self._connection is not None:
            await self._connection.close()
            self._connection = None


class NotificationListener:
    """
    Keeps one logical subscription alive across transport failures

    Events that arrive while disconnected are lost.
    """

    def __init__(
        self,
        transport_factory: Callable[[], Any],
        on_event: Callable[[NewQuizEvent], None],
        policy: Optional[ReconnectionPolicy] = None,
        sleep: Callable[[float], Any] = asyncio.sleep
    ):
        self._transport_factory = transport_factory
        self._on_event = on_event
        self.policy = policy or ReconnectionPolicy()
        self._sleep = sleep
        self._transport = None

    async def run(self) -> None:
        while not self.policy.stopped:
            transport = self._transport_factory()
            self._transport = transport
            try:
                await transport.open()
                self.policy.connected()
                logger.info("Notification channel connected")
                async for raw in transport.messages():
                    self.handle_message(raw)
            except TransportError as e:
                logger.warning(f"Notification channel error: {e}")
            finally:
                self._transport = None
                await transport.close()

            delay = self.policy.closed()
            if delay is None:
                break
            logger.info(f"Notification channel closed, reconnecting in {delay}s (attempt {self.policy.reconnects})")
            await self._sleep(delay)

        logger.info("Notification listener stopped")

    def handle_message(self, raw: Any) -> Optional[NewQuizEvent]:
        """Decode and dispatch one message; undecodable messages and handler errors are logged and dropped"""
        try:
            event = decode_event(raw)
        except DecodeError as e:
            logger.warning(str(e))
            return None

        try:
            self._on_event(event)
        except Exception as e:
            logger.error(f"Notification handler failed for {event.title!r}: {str(e)}", exc_info=True)
        return event

    async def stop(self) -> None:
        self.policy.stop()
        if self._transport is not None:
            await self._transport.close()


class NotificationBanner:
    """
    Shows the latest new-quiz title and hides it after a fixed time

    A new event replaces the message and restarts the timer.
    """

    def __init__(
        self,
        dismiss_after: float = settings.NOTIFICATION_DISMISS_SECONDS,
        loop: Optional[asyncio.AbstractEventLoop] = None
    ):
        self.dismiss_after = dismiss_after
        self._loop = loop
        self._timer = None
        self.message: Optional[str] = None

    def show(self, event: NewQuizEvent) -> None:
        self.message = event.title
        if self._timer is not None:
            self._timer.cancel()
        loop = self._loop or asyncio.get_running_loop()
        self._timer = loop.call_later(self.dismiss_after, self.dismiss)

    def dismiss(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
        self.message = None


class NotificationSubscription:
    """Handle returned by subscribe(); runs the listener as a task"""

    def __init__(self, listener: NotificationListener):
        self.listener = listener
        self._task: Optional[asyncio.Task] = None

    def start(self) -> "NotificationSubscription":
        self._task = asyncio.get_running_loop().create_task(self.listener.run())
        return self

    async def unsubscribe(self) -> None:
        await self.listener.stop()
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None


def subscribe(
    user: UserOut,
    on_event: Callable[[NewQuizEvent], None],
    url: Optional[str] = None,
    transport_factory: Optional[Callable[[], Any]] = None,
    policy: Optional[ReconnectionPolicy] = None
) -> Optional[NotificationSubscription]:
    """
    Start listening for new quizzes; must be called from a running event loop

    Returns:
        The running subscription, or None for non-student users
    """
    if user.role != "student":
        logger.debug(f"User {user.id} is a {user.role}; no notification subscription")
        return None

    if transport_factory is None:
        url = url or notification_url(settings.API_BASE_URL)
        transport_factory = lambda: WebSocketTransport(url)  # noqa: E731

    listener = NotificationListener(transport_factory, on_event, policy=policy)
    return NotificationSubscription(listener).start()
