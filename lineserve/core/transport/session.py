import logging
from collections.abc import Callable

from lineserve.core.errors import SendError, SessionError
from lineserve.core.models.config import ServerConfig
from lineserve.core.ports.framer import Framer
from lineserve.core.ports.network import Connection
from lineserve.core.transport.framing import build_framer


class SessionHandler:
    """
    Serves a single client connection until it ends.

    For every unit produced by the framer the handler logs the unit and
    sends exactly one reply line before the next receive is issued, so a
    client blocked on a line-oriented read never stalls. The reply does not
    depend on the unit's content.

    The session ends when the peer closes the stream, when receiving fails,
    when the framer rejects the stream (oversized line), or when the reply
    cannot be sent. Whatever the exit path, the connection is closed exactly
    once and no SessionError escapes to the listener.

    A new framer is built for every session, so nothing buffered for one
    client can leak into the next.
    """
    def __init__(
        self,
        config: ServerConfig,
        framer_factory: Callable[[ServerConfig], Framer] = build_framer,
    ) -> None:
        self._config = config
        self._framer_factory = framer_factory
        self._reply = config.reply_line
        self._logger = logging.getLogger("core.transport.session")

    def handle(self, conn: Connection) -> int:
        """Run the session loop and return the number of units answered."""
        framer = self._framer_factory(self._config)
        who = "%s:%d - " % conn.peer if conn.peer else ""
        served = 0

        try:
            while True:
                unit = framer.read(conn)
                if unit is None:
                    self._logger.debug(f"{who}Peer closed the connection")
                    break

                self._logger.info(framer.describe(unit))
                conn.sendall(self._reply)
                served += 1
        except SendError as exc:
            self._logger.error(f"{who}Failed to send reply, terminating session: {exc}")
        except SessionError as exc:
            self._logger.warning(f"{who}Terminating session: {exc}")
        finally:
            conn.close()

        return served
