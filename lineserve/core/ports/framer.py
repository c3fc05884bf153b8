from typing import Protocol

from lineserve.core.ports.network import Connection


class Framer(Protocol):
    """
    Turns the inbound byte stream of a Connection into discrete units.

    A Framer instance is bound to a single session: it may keep bytes
    received past the end of a unit and return them from the next call.
    """

    def read(self, conn: Connection) -> bytes | None:
        """
        Block until the next unit is available and return it.
        Returns None when the peer closed the stream. Raises a
        SessionError subclass when the stream can no longer be framed.
        """

    def describe(self, unit: bytes) -> str:
        """Render a unit as a single human readable log line."""
