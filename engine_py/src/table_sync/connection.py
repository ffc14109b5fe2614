"""
WebSocket connection to the game relay.

One ConnectionManager owns at most one channel at a time. Inbound frames are
handed, one at a time and in arrival order, to a single message handler. Once
``disconnect()`` has been called no frame from the old channel reaches the
handler, even if it was already buffered.
"""

import asyncio
import logging
from typing import Any, Awaitable, Callable, List, Optional, Union

import websockets
from websockets.exceptions import ConnectionClosed, WebSocketException

from .errors import TransportError
from .models import ConnectionState

logger = logging.getLogger(__name__)

MessageHandler = Callable[[Union[str, bytes]], Any]
StateListener = Callable[[ConnectionState, ConnectionState], None]
ErrorListener = Callable[[Exception], None]
ConnectFactory = Callable[..., Awaitable[Any]]


async def open_websocket(url: str, open_timeout: Optional[float] = None):
    return await websockets.connect(url, open_timeout=open_timeout)


class ConnectionManager:
    """Manages the WebSocket channel and reports its state changes."""

    def __init__(
        self,
        url: str,
        on_message: Optional[MessageHandler] = None,
        open_timeout: Optional[float] = None,
        connect_factory: ConnectFactory = open_websocket,
    ):
        self.url = url
        self.open_timeout = open_timeout
        self._connect_factory = connect_factory
        self._on_message = on_message
        self._state = ConnectionState.DISCONNECTED
        self._ws = None
        self._reader: Optional[asyncio.Task] = None
        self._generation = 0
        self._state_listeners: List[StateListener] = []
        self._error_listeners: List[ErrorListener] = []

    @property
    def state(self) -> ConnectionState:
        return self._state

    @property
    def is_connected(self) -> bool:
        return self._state == ConnectionState.CONNECTED

    def add_state_listener(self, listener: StateListener) -> None:
        self._state_listeners.append(listener)

    def remove_state_listener(self, listener: StateListener) -> None:
        if listener in self._state_listeners:
            self._state_listeners.remove(listener)

    def add_error_listener(self, listener: ErrorListener) -> None:
        self._error_listeners.append(listener)

    def remove_error_listener(self, listener: ErrorListener) -> None:
        if listener in self._error_listeners:
            self._error_listeners.remove(listener)

    async def connect(self) -> None:
        """
        Open the channel. No-op while connecting or connected.

        Failures are reported to error listeners and leave the manager
        disconnected; nothing is raised and nothing is retried.
        """
        if self._state != ConnectionState.DISCONNECTED:
            logger.debug(f"connect() ignored, already {self._state.value}")
            return

        generation = self._generation
        self._set_state(ConnectionState.CONNECTING)
        logger.info(f"Connecting to {self.url}")

        try:
            ws = await self._connect_factory(self.url, open_timeout=self.open_timeout)
        except (OSError, asyncio.TimeoutError, WebSocketException) as e:
            if generation == self._generation:
                self._set_state(ConnectionState.DISCONNECTED)
                self._report_error(TransportError(f"Could not connect to {self.url}: {e}"))
            return

        if generation != self._generation:
            # disconnect() ran while the handshake was in flight
            logger.info("Connection opened after disconnect, closing it")
            await self._close_quietly(ws)
            return

        self._ws = ws
        self._set_state(ConnectionState.CONNECTED)
        self._reader = asyncio.create_task(self._read_loop(ws, generation))

    async def disconnect(self) -> None:
        """Close the channel. Safe to call when already closed."""
        self._generation += 1
        ws, reader = self._ws, self._reader
        self._ws = None
        self._reader = None

        if reader is not None and reader is not asyncio.current_task():
            reader.cancel()
        if ws is not None:
            await self._close_quietly(ws)
        self._set_state(ConnectionState.DISCONNECTED)

    async def send(self, data: str) -> bool:
        """
        Transmit one frame if connected; otherwise drop it.

        Returns:
            True if the frame was handed to the channel
        """
        if self._state != ConnectionState.CONNECTED or self._ws is None:
            logger.warning(f"Not connected ({self._state.value}), dropping outbound message: {data[:80]}")
            return False

        ws = self._ws
        try:
            await ws.send(data)
        except ConnectionClosed as e:
            logger.error(f"Send failed, connection closed: {e}")
            self._lose_channel(ws, TransportError(f"Connection closed during send: {e}"))
            return False

        logger.debug(f"Sent: {data[:80]}")
        return True

    async def _read_loop(self, ws, generation: int) -> None:
        try:
            async for frame in ws:
                if generation != self._generation:
                    logger.debug("Discarding frame from a closed channel")
                    return
                self._deliver(frame)
        except ConnectionClosed as e:
            if generation == self._generation:
                self._lose_channel(ws, TransportError(f"Connection closed unexpectedly: {e}"))
            return
        except (OSError, WebSocketException) as e:
            if generation == self._generation:
                self._lose_channel(ws, TransportError(f"Connection error: {e}"))
            return

        if generation == self._generation:
            logger.info("Connection closed by server")
            self._lose_channel(ws, None)

    def _deliver(self, frame: Union[str, bytes]) -> None:
        if self._on_message is None:
            logger.debug("No message handler registered, dropping frame")
            return
        try:
            self._on_message(frame)
        except Exception as e:
            logger.error(f"Message handler failed: {e}")

    def _lose_channel(self, ws, error: Optional[Exception]) -> None:
        if ws is not self._ws:
            return
        self._generation += 1
        self._ws = None
        self._reader = None
        self._set_state(ConnectionState.DISCONNECTED)
        if error is not None:
            self._report_error(error)

    async def _close_quietly(self, ws) -> None:
        try:
            await ws.close()
        except (OSError, WebSocketException) as e:
            logger.debug(f"Error while closing channel: {e}")

    def _set_state(self, new_state: ConnectionState) -> None:
        old_state = self._state
        if old_state == new_state:
            return
        self._state = new_state
        logger.info(f"Connection state: {old_state.value} -> {new_state.value}")
        for listener in list(self._state_listeners):
            try:
                listener(old_state, new_state)
            except Exception as e:
                logger.error(f"Connection state listener failed: {e}")

    def _report_error(self, error: Exception) -> None:
        logger.error(f"Transport error: {error}")
        for listener in list(self._error_listeners):
            try:
                listener(error)
            except Exception as e:
                logger.error(f"Connection error listener failed: {e}")
