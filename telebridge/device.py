"""Sending side of the telemetry link: a buffered command transmitter."""

from __future__ import annotations

from typing import Callable

from telebridge.protocol import (
    TextLike,
    encode_data_field,
    encode_id_assign,
    encode_node_name,
    encode_publish,
)

BUFFER_SIZE = 1024


class BufferFullError(Exception):
    """Raised when the transmit buffer has no room for more bytes."""


class Telemetry:
    """Queues command frames and hands them to a transmitter in chunks.

    ``transmit`` is called with the bytes of one contiguous run of the ring
    buffer; the caller signals completion with :meth:`transmit_complete`.
    """

    def __init__(self, transmit: Callable[[bytes], object]) -> None:
        self._transmit = transmit
        self._rx = bytearray(BUFFER_SIZE)
        self._rx_index = 0
        self._tx = bytearray(BUFFER_SIZE)
        self._head = 0
        self._tail = 0
        self._busy = False
        self._current_length = 0

    @property
    def busy(self) -> bool:
        """Whether a transmission is in progress."""
        return self._busy

    def receive(self, byte: int) -> None:
        """Store one received byte; the receive index wraps at the buffer end."""
        if not 0 <= byte <= 0xFF:
            raise ValueError(f"not a byte: {byte}")
        self._rx[self._rx_index] = byte
        self._rx_index += 1
        if self._rx_index >= BUFFER_SIZE:
            self._rx_index = 0

    def received(self) -> bytes:
        """Bytes received since the receive index last started from zero."""
        return bytes(self._rx[:self._rx_index])

    def enqueue(self, data: bytes | bytearray) -> None:
        """Append bytes to the transmit buffer.

        Raises BufferFullError when the buffer fills; bytes queued before
        that point stay queued.
        """
        for byte in bytes(data):
            next_head = (self._head + 1) % BUFFER_SIZE
            if next_head == self._tail:
                raise BufferFullError("transmit buffer is full")
            self._tx[self._head] = byte
            self._head = next_head

    def set_node_name(self, name: TextLike) -> None:
        """Queue a set-node-name command."""
        self.enqueue(encode_node_name(name))

    def set_id_assign(self, value_id: int, name: TextLike) -> None:
        """Queue a command mapping a value id to a name."""
        self.enqueue(encode_id_assign(value_id, name))

    def set_data_field(self, value_id: int, value: float) -> None:
        """Queue a command setting the value for an id."""
        self.enqueue(encode_data_field(value_id, value))

    def publish_data(self) -> None:
        """Queue a publish command."""
        self.enqueue(encode_publish())

    def pending(self) -> int:
        """Number of queued bytes not yet acknowledged as sent."""
        return (self._head - self._tail) % BUFFER_SIZE

    def process(self) -> None:
        """Start transmitting the next contiguous run, if idle and data waits."""
        if self._busy:
            return
        if self._head >= self._tail:
            run = self._head - self._tail
        else:
            run = BUFFER_SIZE - self._tail
        if run > 0:
            self._busy = True
            self._current_length = run
            self._transmit(bytes(self._tx[self._tail:self._tail + run]))

    def transmit_complete(self) -> None:
        """Mark the current transmission as finished and release its bytes."""
        self._tail = (self._tail + self._current_length) % BUFFER_SIZE
        self._current_length = 0
        self._busy = False