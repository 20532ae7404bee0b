"""Publishing and subscribing to short text messages over ZeroMQ."""

from __future__ import annotations

import logging
import threading
from abc import ABC, abstractmethod
from typing import Optional

import zmq

log = logging.getLogger(__name__)

EMPTY_MESSAGE_MARKER = "<EMPTY_MESSAGE>"


class Publisher(ABC):
    """Something that text messages can be sent through."""

    @abstractmethod
    def send(self, message: str) -> None:
        """Send one message."""


def _configure(socket: zmq.Socket, hwm_option: int) -> None:
    # Keep only the newest message and never block on exit.
    socket.setsockopt(hwm_option, 1)
    socket.setsockopt(zmq.CONFLATE, 1)
    socket.setsockopt(zmq.LINGER, 0)
    socket.setsockopt(zmq.IPV6, 1)


class ZmqPublisher(Publisher):
    """A PUB socket bound to an address; errors are logged, never raised."""

    def __init__(
        self,
        address: str,
        context: Optional[zmq.Context] = None,
        test_mode: bool = False,
    ) -> None:
        self._address = address
        self._test_mode = test_mode
        self._context = context if context is not None else zmq.Context.instance()
        self._socket: Optional[zmq.Socket] = None
        self._connected = False
        if test_mode:
            return
        socket = self._context.socket(zmq.PUB)
        try:
            _configure(socket, zmq.SNDHWM)
            socket.bind(address)
        except zmq.ZMQError as exc:
            log.error("ZMQ Error initializing publisher: %s", exc)
            socket.close(linger=0)
            return
        self._socket = socket
        self._connected = True

    @property
    def address(self) -> str:
        return self._address

    @property
    def is_connected(self) -> bool:
        """Whether messages can be sent; always true in test mode."""
        return self._connected or self._test_mode

    def send(self, message: str) -> None:
        """Publish a message; an empty one goes out as a marker."""
        if self._test_mode:
            log.info("TEST MODE - PUBLISHING to %s: %s", self._address, message)
            return
        if not self._connected or self._socket is None:
            log.error("Cannot send message - publisher not connected")
            return
        log.debug("PUBLISHING to %s: %s", self._address, message)
        payload = message if message else EMPTY_MESSAGE_MARKER
        try:
            self._socket.send(payload.encode("utf-8"))
        except zmq.ZMQError as exc:
            log.error("ZMQ Error sending message: %s", exc)

    def close(self) -> None:
        """Unbind and close the socket."""
        if self._socket is None:
            return
        try:
            self._socket.unbind(self._address)
        except zmq.ZMQError as exc:
            log.debug("Error during publisher shutdown: %s", exc)
        finally:
            self._socket.close(linger=0)
            self._socket = None
            self._connected = False

    def __enter__(self) -> "ZmqPublisher":
        return self

    def __exit__(self, *args) -> None:
        self.close()


class ZmqSubscriber:
    """A SUB socket connected to an address and subscribed to everything."""

    def __init__(
        self,
        address: str,
        context: Optional[zmq.Context] = None,
        test_mode: bool = False,
    ) -> None:
        self._address = address
        self._test_mode = test_mode
        self._context = context if context is not None else zmq.Context.instance()
        self._socket: Optional[zmq.Socket] = None
        self._connected = False
        self._test_message: Optional[str] = None
        if test_mode:
            return
        socket = self._context.socket(zmq.SUB)
        try:
            _configure(socket, zmq.RCVHWM)
            socket.connect(address)
            socket.setsockopt(zmq.SUBSCRIBE, b"")
        except zmq.ZMQError as exc:
            log.error("ZMQ Error initializing subscriber: %s", exc)
            socket.close(linger=0)
            return
        self._socket = socket
        self._connected = True

    @property
    def address(self) -> str:
        return self._address

    @property
    def is_connected(self) -> bool:
        """Whether messages can be received; always true in test mode."""
        return self._connected or self._test_mode

    def receive(self, timeout_ms: int = 0) -> str:
        """Return the next message, or "" if none arrives in time."""
        if self._test_mode:
            if self._test_message is None:
                return ""
            message, self._test_message = self._test_message, None
            log.info("TEST MODE - RECEIVED from %s: %s", self._address, message)
            return message
        if not self._connected or self._socket is None:
            log.error("Cannot receive message - subscriber not connected")
            return ""
        try:
            if timeout_ms > 0 and not self._socket.poll(timeout_ms, zmq.POLLIN):
                return ""
            try:
                data = self._socket.recv(zmq.NOBLOCK)
            except zmq.Again:
                return ""
        except zmq.ZMQError as exc:
            log.error("ZMQ Error receiving message: %s", exc)
            return ""
        message = data.decode("utf-8", errors="replace")
        if message == EMPTY_MESSAGE_MARKER:
            log.debug("RECEIVED from %s: <empty message>", self._address)
            return ""
        log.debug("RECEIVED from %s: %s", self._address, message)
        return message

    def set_test_message(self, message: str) -> None:
        """In test mode, set the message the next receive returns."""
        if self._test_mode:
            self._test_message = message

    def close(self) -> None:
        """Disconnect and close the socket."""
        if self._socket is None:
            return
        try:
            self._socket.disconnect(self._address)
        except zmq.ZMQError as exc:
            log.debug("Error during subscriber shutdown: %s", exc)
        finally:
            self._socket.close(linger=0)
            self._socket = None
            self._connected = False

    def __enter__(self) -> "ZmqSubscriber":
        return self

    def __exit__(self, *args) -> None:
        self.close()


class RecordingPublisher(Publisher):
    """A publisher that keeps every message it is given."""

    def __init__(self) -> None:
        self._messages: list[str] = []
        self._lock = threading.Lock()

    def send(self, message: str) -> None:
        with self._lock:
            self._messages.append(message)

    @property
    def messages(self) -> list[str]:
        """A copy of the messages sent so far, oldest first."""
        with self._lock:
            return list(self._messages)

    def has_message(self, message: str) -> bool:
        with self._lock:
            return message in self._messages

    def clear(self) -> None:
        with self._lock:
            self._messages.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._messages)