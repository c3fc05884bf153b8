import logging
import socket
from types import TracebackType
from typing import Self

from lineserve.core.errors import (
    AcceptError,
    BindError,
    ListenError,
    ReceiveError,
    SendError,
    SocketCreateError,
    SocketSubsystemInitError,
)
from lineserve.core.ports.network import Network

logger = logging.getLogger("infra.socket_network")


class SocketConnection:
    """
    Connection backed by a blocking stdlib socket.

    OS errors are translated into the session error taxonomy so the
    session handler never has to know about OSError.
    """
    def __init__(self, sock: socket.socket, peer: tuple[str, int] | None) -> None:
        self._sock = sock
        self._peer = peer
        self._closed = False

    @property
    def peer(self) -> tuple[str, int] | None:
        return self._peer

    @property
    def closed(self) -> bool:
        return self._closed

    def recv(self, size: int) -> bytes:
        try:
            return self._sock.recv(size)
        except OSError as exc:
            raise ReceiveError(f"recv() failed: {exc}") from exc

    def sendall(self, data: bytes) -> None:
        try:
            self._sock.sendall(data)
        except OSError as exc:
            raise SendError(f"send() failed: {exc}") from exc

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._sock.close()


class SocketServerSocket:
    def __init__(self, sock: socket.socket) -> None:
        self._sock = sock
        self._closed = False

    @property
    def address(self) -> tuple[str, int]:
        host, port = self._sock.getsockname()[:2]
        return str(host), int(port)

    def accept(self) -> SocketConnection:
        try:
            sock, addr = self._sock.accept()
        except OSError as exc:
            raise AcceptError(str(exc)) from exc

        peer = (str(addr[0]), int(addr[1])) if isinstance(addr, tuple) else None
        return SocketConnection(sock, peer)

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True

        # Wake up a thread blocked in accept(); close() alone does not on Linux.
        try:
            self._sock.shutdown(socket.SHUT_RDWR)
        except OSError:
            logger.debug("shutdown() on listening socket not supported, closing only")
        self._sock.close()


class SocketNetwork(Network):
    """
    Network implementation over Python's `socket` module.

    The interpreter's socket module already performs the per-process
    subsystem initialization the platform needs (WSAStartup on Windows,
    nothing on POSIX), so entering the scope checks that an IPv4 stream
    socket can actually be created and records that the subsystem is
    available. Listening outside the scope is an error.
    """
    def __init__(self) -> None:
        self._initialized = False

    @property
    def initialized(self) -> bool:
        return self._initialized

    def __enter__(self) -> Self:
        try:
            sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        except OSError as exc:
            raise SocketSubsystemInitError(
                f"IPv4 stream sockets are not available: {exc}"
            ) from exc
        sock.close()

        self._initialized = True
        logger.debug("Socket subsystem initialized")
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self._initialized = False
        logger.debug("Socket subsystem released")

    def listen(self, host: str, port: int, backlog: int) -> SocketServerSocket:
        if not self._initialized:
            raise SocketSubsystemInitError("Socket subsystem is not initialized")

        try:
            sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        except OSError as exc:
            raise SocketCreateError(f"socket() failed: {exc}") from exc

        try:
            sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        except OSError as exc:
            logger.debug(f"SO_REUSEADDR not applied: {exc}")

        try:
            sock.bind((host, port))
        except OSError as exc:
            sock.close()
            raise BindError(f"bind() to {host}:{port} failed: {exc}") from exc

        try:
            sock.listen(backlog)
        except OSError as exc:
            sock.close()
            raise ListenError(f"listen() failed: {exc}") from exc

        return SocketServerSocket(sock)
