"""Serial link: JSON frame extraction on receive and guarded transmission."""

from __future__ import annotations

import logging
import threading
from enum import IntEnum
from typing import Callable, Iterable, Optional, Protocol

log = logging.getLogger(__name__)

RX_BUFFER_SIZE = 128
TX_BUFFER_SIZE = 512
JSON_BUFFER_SIZE = 128

FrameCallback = Callable[[str], None]


class ReceiveMode(IntEnum):
    DMA = 0
    IT = 1


class UartError(Exception):
    """Raised when data cannot be sent."""


class Transport(Protocol):
    def write(self, data: bytes) -> None: ...


class JsonFrameAssembler:
    """Collects bytes into brace-balanced JSON frames.

    Bytes outside a frame are dropped. A complete frame is handed to the
    callback as text. A frame that would not fit in ``buffer_size - 1``
    bytes is discarded.
    """

    def __init__(
        self,
        callback: Optional[FrameCallback] = None,
        buffer_size: int = JSON_BUFFER_SIZE,
    ) -> None:
        if buffer_size < 2:
            raise ValueError("buffer must hold at least two bytes")
        self.callback = callback
        self.buffer_size = buffer_size
        self._buffer = bytearray()
        self._bracket_count = 0
        self._in_frame = False

    @property
    def pending(self) -> bytes:
        """The bytes of the frame collected so far."""
        return bytes(self._buffer)

    def feed(self, data: Iterable[int]) -> None:
        """Process each byte of ``data`` in order."""
        for byte in data:
            self.process_byte(byte)

    def process_byte(self, byte: int) -> None:
        """Process a single received byte."""
        limit = self.buffer_size - 1
        if byte == ord("{"):
            if self._bracket_count == 0:
                self._in_frame = True
            self._bracket_count += 1
        elif byte == ord("}"):
            self._bracket_count -= 1
            if self._bracket_count == 0 and self._in_frame:
                if len(self._buffer) < limit:
                    self._buffer.append(byte)
                frame = self._buffer.decode("utf-8", errors="replace")
                if self.callback is not None:
                    log.debug("rxCallback: %s", frame)
                    self.callback(frame)
                self.reset()
                return

        if self._in_frame and len(self._buffer) < limit:
            self._buffer.append(byte)

        if len(self._buffer) >= limit:
            log.warning("JSON buffer overflow, resetting")
            self.reset()

    def reset(self) -> None:
        """Drop any partial frame and the bracket count."""
        self._buffer.clear()
        self._bracket_count = 0
        self._in_frame = False


class Uart:
    """A serial port that turns incoming bytes into JSON frames and sends data."""

    def __init__(self, transport: Optional[Transport]) -> None:
        self.transport = transport
        self.receive_mode = ReceiveMode.DMA
        self.tx_busy = False
        self._tx_lock = threading.Lock()
        self._assembler = JsonFrameAssembler()

    @property
    def rx_callback(self) -> Optional[FrameCallback]:
        return self._assembler.callback

    def set_rx_callback(self, callback: Optional[FrameCallback]) -> None:
        """Set the function called with each complete JSON frame."""
        self._assembler.callback = callback

    def set_receive_mode(self, mode: ReceiveMode) -> None:
        """Switch between block (DMA) and byte-by-byte (IT) reception."""
        self.receive_mode = ReceiveMode(mode)

    def receive(self, data: bytes) -> None:
        """Hand received bytes to the frame assembler."""
        self._assembler.feed(data)

    def _require_transport(self) -> Transport:
        if self.transport is None:
            raise UartError("no transport attached")
        return self.transport

    def send_data(self, data: bytes) -> None:
        """Send ``data`` straight away."""
        transport = self._require_transport()
        if not data:
            raise UartError("nothing to send")
        transport.write(bytes(data))

    def send_data_dma(self, data: bytes) -> None:
        """Start a background send; the link stays busy until :meth:`tx_complete`."""
        transport = self._require_transport()
        if not data:
            raise UartError("nothing to send")
        if len(data) > TX_BUFFER_SIZE:
            raise UartError(f"data longer than {TX_BUFFER_SIZE} bytes")
        if not self._tx_lock.acquire(timeout=0.1):
            raise UartError("transmitter lock timed out")
        try:
            if self.tx_busy:
                raise UartError("transmitter busy")
            self.tx_busy = True
            try:
                transport.write(bytes(data))
            except Exception as exc:
                self.tx_busy = False
                raise UartError("transmission failed") from exc
        finally:
            self._tx_lock.release()

    def tx_complete(self) -> None:
        """Mark the current background send as finished."""
        self.tx_busy = False

    def printf(self, fmt: str, *args: object) -> int:
        """Format with ``%`` and send in the background; return the formatted length.

        Send failures are ignored, as with a fire-and-forget print.
        """
        text = fmt % args if args else fmt
        encoded = text.encode("utf-8")
        if encoded:
            try:
                self.send_data_dma(encoded)
            except UartError:
                pass
        return len(encoded)

    def print_string(self, text: str) -> None:
        """Send a string shorter than the transmit buffer."""
        encoded = text.encode("utf-8")
        if not encoded or len(encoded) >= TX_BUFFER_SIZE:
            raise UartError("string empty or too long")
        self.send_data_dma(encoded)