import contextlib
import logging
import signal
import sys
import threading
from types import FrameType
from typing import Generator

SHUTDOWN_SIGNALS: tuple[signal.Signals, ...] = (
    signal.SIGTERM,
)

if sys.platform == "win32":
    SHUTDOWN_SIGNALS += (signal.SIGBREAK,)


@contextlib.contextmanager
def setup_signal_handler() -> Generator[None, None, None]:
    """
    Turn shutdown signals into KeyboardInterrupt for the duration of the block.

    SIGINT already raises KeyboardInterrupt; doing the same for SIGTERM lets a
    thread blocked in accept() or recv() unwind through the same path, so the
    listening socket and the socket subsystem are released.
    """
    if threading.current_thread() is not threading.main_thread():
        yield
        return

    def handle(sig: int, frame: FrameType | None) -> None:
        raise KeyboardInterrupt(f"Received {signal.Signals(sig).name}")

    # Install temporary handlers
    original_handlers = {
        sig: signal.signal(sig, handle)
        for sig in SHUTDOWN_SIGNALS
    }

    try:
        yield
    finally:
        # Restore original handlers
        for sig, old in original_handlers.items():
            signal.signal(sig, old)


def setup_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=level,
        format='%(asctime)s %(levelname)-8s [%(name)s:%(funcName)s] : %(message)s',
    )
