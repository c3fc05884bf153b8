from types import TracebackType
from typing import Protocol, Self


class Connection(Protocol):
    """
    An open bidirectional byte stream with a single peer.

    A Connection is created by ServerSocket.accept() and is owned
    exclusively by the session handler until it is closed. All calls
    block at the OS level; there is no timeout.
    """

    @property
    def peer(self) -> tuple[str, int] | None:
        """Remote address, informational only."""

    @property
    def closed(self) -> bool:
        """True once close() has been called."""

    def recv(self, size: int) -> bytes:
        """
        Receive at most `size` bytes. An empty result means the peer
        closed the stream. Raises ReceiveError on socket failure.
        """

    def sendall(self, data: bytes) -> None:
        """
        Transmit the whole buffer, retrying partial writes.
        Raises SendError on socket failure.
        """

    def close(self) -> None:
        """Release the stream. Calling it more than once is a no-op."""


class ServerSocket(Protocol):
    """A bound, listening stream socket."""

    @property
    def address(self) -> tuple[str, int]:
        """Address actually bound, with the OS-assigned port when 0 was requested."""

    def accept(self) -> Connection:
        """Block until a client connects. Raises AcceptError on failure."""

    def close(self) -> None:
        """Stop listening. Calling it more than once is a no-op."""


class Network(Protocol):
    """
    Uniform capability interface over the platform stream-socket layer.

    The network is a scoped resource: it is entered once at process start
    (initializing the socket subsystem where the platform requires it)
    and exited once at process end. One implementation exists per target
    platform and is selected when the application is wired together.
    """

    def __enter__(self) -> Self:
        """Initialize the socket subsystem. Raises SocketSubsystemInitError."""

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        """Tear the socket subsystem down."""

    def listen(self, host: str, port: int, backlog: int) -> ServerSocket:
        """
        Create, bind and listen. Raises SocketCreateError, BindError or
        ListenError depending on which step failed.
        """
