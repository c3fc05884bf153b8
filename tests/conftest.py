import os
from typing import Generator

import pytest
import yaml

from lineserve.bootstrap.config import loader
from lineserve.bootstrap import deps
from lineserve.core.models.config import ServerConfig
from lineserve.core.models.framing import FramingMode
from tests.fake.fake_network import FakeNetwork, FakeServerSocket
from tests.helpers import FakeLineServeConfig


@pytest.fixture
def config() -> ServerConfig:
    return ServerConfig(host="127.0.0.1", port=0)


@pytest.fixture
def raw_config() -> ServerConfig:
    return ServerConfig(host="127.0.0.1", port=0, framing=FramingMode.raw)


@pytest.fixture
def server_socket() -> FakeServerSocket:
    return FakeServerSocket()


@pytest.fixture
def network(server_socket) -> FakeNetwork:
    return FakeNetwork(server_socket=server_socket)


@pytest.fixture
def clear_caches() -> Generator[None, None, None]:
    caches = (
        loader.get_cli_args,
        loader.get_configfile,
        deps.get_config,
        deps.get_network,
        deps.get_server,
    )
    for cached in caches:
        cached.cache_clear()
    yield
    for cached in caches:
        cached.cache_clear()


@pytest.fixture
def cli_argv(monkeypatch, tmp_path, clear_caches):
    """Replace the process arguments seen by the cached argument parser."""
    monkeypatch.chdir(tmp_path)

    def apply(*argv: str) -> None:
        monkeypatch.setattr("sys.argv", ["lineserve", *argv])
        loader.get_cli_args.cache_clear()
        loader.get_configfile.cache_clear()

    for name in list(os.environ):
        if name.startswith("LINESERVE"):
            monkeypatch.delenv(name)
    apply()
    return apply


@pytest.fixture
def config_file(tmp_path):
    base = tmp_path / "config"
    base.mkdir()
    file = base / "lineserve.yaml"

    data = {
        "server": {
            "host": "127.0.0.1",
            "port": 9100,
            "backlog": 4,
        },
        "session": {
            "framing": "raw",
            "max_line_size": 1024,
            "reply": "ack",
        },
    }

    file.write_text(yaml.dump(data))
    return file


@pytest.fixture
def lineserve_config(config_file, monkeypatch) -> FakeLineServeConfig:
    monkeypatch.setenv("TEST_LINESERVECONFIG", str(config_file))
    return FakeLineServeConfig()
