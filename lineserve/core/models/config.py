from dataclasses import dataclass

from lineserve.core.models.framing import FramingMode


@dataclass
class ServerConfig:
    """
    Static configuration for a LineServer.

    This structure defines all parameters required to start a server:
    networking, framing policy, and the reply sent for every unit.
    """
    host: str = "0.0.0.0"
    """
    IP address on which the server listens. All interfaces by default.
    """

    port: int = 8080
    """
    TCP port to bind. If set to 0, the OS selects an available port.
    """

    backlog: int = 8
    """
    Maximum number of pending TCP connections waiting for accept().
    Clients beyond the one being served queue here.
    """

    framing: FramingMode = FramingMode.line
    """
    Framing policy applied by the session handler.
    """

    line_recv_size: int = 512
    """
    Maximum number of bytes requested per receive call in line mode.
    """

    raw_recv_size: int = 1024
    """
    Maximum number of bytes requested per receive call in raw mode.
    """

    max_line_size: int = 8192
    """
    Maximum number of bytes accumulated without a line-feed before the
    session is terminated. Protects against unbounded memory growth.
    """

    reply: str = "hello from server"
    """
    ASCII text sent back, followed by a single line-feed, for every unit.
    """

    @property
    def reply_line(self) -> bytes:
        return self.reply.encode("ascii") + b"\n"
