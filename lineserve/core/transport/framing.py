import logging

from lineserve.core.errors import LineTooLongError
from lineserve.core.models.config import ServerConfig
from lineserve.core.models.framing import FramingMode
from lineserve.core.ports.framer import Framer
from lineserve.core.ports.network import Connection

PLACEHOLDER = "."

_ESCAPES = {
    ord("\r"): "\\r",
    ord("\n"): "\\n",
}


def escape(data: bytes) -> str:
    """
    Render bytes for a log line: CR and LF as two-character escapes,
    printable ASCII unchanged, anything else as a placeholder.
    """
    out = []
    for byte in data:
        if byte in _ESCAPES:
            out.append(_ESCAPES[byte])
        elif 32 <= byte <= 126:
            out.append(chr(byte))
        else:
            out.append(PLACEHOLDER)
    return "".join(out)


class LineFramer:
    """
    Line mode framing: one unit per line-feed terminated line.

    Bytes are received in chunks of at most `recv_size` and accumulated in
    an internal buffer until a line-feed is found. The unit is everything
    before the line-feed, with a single trailing carriage-return removed so
    that CRLF clients are accepted.

    Bytes received after a line-feed stay in the buffer and are parsed on
    the next call, so several lines sent in one segment are all answered.

    If more than `max_line_size` bytes accumulate without a terminator,
    LineTooLongError is raised and the session must be terminated.
    """
    def __init__(self, recv_size: int = 512, max_line_size: int = 8192) -> None:
        self._recv_size = recv_size
        self._max_line_size = max_line_size
        self._buffer = bytearray()
        self._logger = logging.getLogger("core.transport.framing")

    @property
    def pending(self) -> int:
        return len(self._buffer)

    def read(self, conn: Connection) -> bytes | None:
        while True:
            end = self._buffer.find(b"\n")
            if end >= 0:
                if end > self._max_line_size:
                    raise LineTooLongError(end, self._max_line_size)

                line = bytes(self._buffer[:end])
                del self._buffer[:end + 1]
                if line.endswith(b"\r"):
                    line = line[:-1]
                return line

            if len(self._buffer) > self._max_line_size:
                raise LineTooLongError(len(self._buffer), self._max_line_size)

            chunk = conn.recv(self._recv_size)
            if not chunk:
                if self._buffer:
                    self._logger.debug(
                        f"Discarding {len(self._buffer)} unterminated byte(s) at end of stream"
                    )
                    self._buffer.clear()
                return None

            self._buffer.extend(chunk)

    def describe(self, unit: bytes) -> str:
        return f"Received: [{unit.decode('ascii', errors='backslashreplace')}]"


class RawFramer:
    """
    Debug mode framing: every receive call is one unit.

    No reassembly happens, so no accumulation guard is needed. Units are
    logged with their byte count and an escaped preview.
    """
    def __init__(self, recv_size: int = 1024) -> None:
        self._recv_size = recv_size

    def read(self, conn: Connection) -> bytes | None:
        chunk = conn.recv(self._recv_size)
        return chunk or None

    def describe(self, unit: bytes) -> str:
        return f"Received {len(unit)} bytes: [{escape(unit)}]"


def build_framer(config: ServerConfig) -> Framer:
    """Create a fresh framer for one session according to config.framing."""
    if config.framing == FramingMode.line:
        return LineFramer(
            recv_size=config.line_recv_size,
            max_line_size=config.max_line_size,
        )
    if config.framing == FramingMode.raw:
        return RawFramer(recv_size=config.raw_recv_size)
    raise ValueError(f"Unknown framing mode: {config.framing!r}")
