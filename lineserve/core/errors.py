class LineServeError(Exception):
    """Base class for every error raised by the lineserve core."""


class StartupError(LineServeError):
    """
    Fatal error while bringing the listener up.

    Startup errors are never retried: they are reported and the process
    terminates with a non-zero status.
    """


class SocketSubsystemInitError(StartupError):
    pass


class SocketCreateError(StartupError):
    pass


class BindError(StartupError):
    pass


class ListenError(StartupError):
    pass


class AcceptError(LineServeError):
    """Transient accept failure, the listener logs it and accepts again."""


class SessionError(LineServeError):
    """
    Error that terminates the current session only.

    The connection is closed and the listener resumes accepting; a
    SessionError never propagates past the session handler.
    """


class ReceiveError(SessionError):
    pass


class LineTooLongError(SessionError):
    def __init__(self, size: int, limit: int) -> None:
        super().__init__(
            f"Line exceeds {limit} bytes without terminator ({size} bytes buffered)"
        )
        self.size = size
        self.limit = limit


class SendError(SessionError):
    pass
