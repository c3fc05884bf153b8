import os
import socket
import threading
from dataclasses import dataclass, field

from pydantic_settings import BaseSettings, PydanticBaseSettingsSource, YamlConfigSettingsSource

from lineserve.bootstrap.config.settings import LineServeConfig
from lineserve.core.transport.server import LineServer


class LineClient:
    """
    Blocking line client, the counterpart of the server for tests.

    Sends raw bytes and reads replies one line-feed terminated line at a
    time, the way the intended peer client does.
    """
    def __init__(self, host: str, port: int, timeout: float = 5.0) -> None:
        self._sock = socket.create_connection((host, port), timeout=timeout)
        self._buffer = b""

    def send(self, data: bytes) -> None:
        self._sock.sendall(data)

    def readline(self) -> bytes:
        while b"\n" not in self._buffer:
            chunk = self._sock.recv(1024)
            if not chunk:
                raise ConnectionError("Connection closed by peer")
            self._buffer += chunk

        line, _, self._buffer = self._buffer.partition(b"\n")
        return line + b"\n"

    def request(self, data: bytes) -> bytes:
        self.send(data)
        return self.readline()

    def read_eof(self) -> bytes:
        """Read until the server closes the connection."""
        data = self._buffer
        self._buffer = b""
        while chunk := self._sock.recv(1024):
            data += chunk
        return data

    def close(self) -> None:
        self._sock.close()


@dataclass
class ServerThread:
    """Runs LineServer.serve_once() in a background thread for `clients` clients."""
    server: LineServer
    clients: int
    served: list[bool] = field(default_factory=list)
    thread: threading.Thread | None = None

    def start(self) -> None:
        self.thread = threading.Thread(target=self._run, daemon=True)
        self.thread.start()

    def _run(self) -> None:
        for _ in range(self.clients):
            self.served.append(self.server.serve_once())

    def join(self, timeout: float = 5.0) -> None:
        assert self.thread is not None
        self.thread.join(timeout)
        assert not self.thread.is_alive(), "server thread did not finish"


class FakeLineServeConfig(LineServeConfig, BaseSettings):
    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (
            init_settings,
            env_settings,
            YamlConfigSettingsSource(settings_cls, yaml_file=os.environ["TEST_LINESERVECONFIG"]),
        )
