import logging

from lineserve.core.errors import AcceptError
from lineserve.core.models.config import ServerConfig
from lineserve.core.models.framing import FramingMode
from lineserve.core.ports.network import Network, ServerSocket
from lineserve.core.transport.session import SessionHandler

_MODE_BANNERS = {
    FramingMode.line: "ASCII, one line per message",
    FramingMode.raw: "raw debug mode, one dump per receive",
}


class LineServer:
    """
    Owns the listening socket and serves one client at a time.

    `start()` binds the configured host and port through the Network
    port and logs the active port. `serve_forever()` then blocks in
    accept(); every accepted Connection is handed synchronously to the
    SessionHandler and the next client is accepted only once the handler
    returns. Clients connecting in the meantime wait in the OS backlog.

    Accept failures are transient: they are logged and accept() is called
    again immediately. Only `shutdown()` ends the loop.

    The server does not implement framing or replies itself; both belong to
    the SessionHandler.
    """
    def __init__(
        self,
        config: ServerConfig,
        network: Network,
        handler: SessionHandler | None = None,
    ) -> None:
        self._config = config
        self._network = network
        self._handler = handler or SessionHandler(config)
        self._server: ServerSocket | None = None
        self.should_exit = False
        self._logger = logging.getLogger("core.transport.server")

    @property
    def running(self) -> bool:
        return self._server is not None and not self.should_exit

    @property
    def listen(self) -> tuple[str, int]:
        if self._server is None:
            raise RuntimeError("Server is not started")
        return self._server.address

    def start(self) -> None:
        config = self._config
        self._server = self._network.listen(
            config.host,
            config.port,
            config.backlog,
        )
        self._log_startup_message()

    def run(self) -> None:
        """Start and serve until shutdown() is called."""
        self.start()
        self.serve_forever()

    def serve_forever(self) -> None:
        if self._server is None:
            raise RuntimeError("Server is not started")

        while not self.should_exit:
            self.serve_once()

    def serve_once(self) -> bool:
        """
        Accept a single client and serve it until it disconnects.
        Returns False when no client could be accepted.
        """
        if self._server is None:
            raise RuntimeError("Server is not started")

        try:
            conn = self._server.accept()
        except AcceptError as exc:
            if not self.should_exit:
                self._logger.error(f"accept() failed: {exc}")
            return False

        who = " from %s:%d" % conn.peer if conn.peer else ""
        self._logger.info(f"Client connected{who}")

        self._handler.handle(conn)

        self._logger.info(f"Client disconnected{who}")
        return True

    def shutdown(self) -> None:
        self.should_exit = True
        if self._server is not None:
            self._server.close()

    def _log_startup_message(self) -> None:
        port = self._config.port
        banner = _MODE_BANNERS[self._config.framing]

        if port == 0:
            self._logger.info(
                "Server listening on port %d (OS assigned %d) (%s)",
                port,
                self.listen[1],
                banner,
            )
        else:
            self._logger.info("Server listening on port %d (%s)", port, banner)
