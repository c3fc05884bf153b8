import pytest
from pydantic import ValidationError

from lineserve.bootstrap.config.settings import LineServeConfig, SessionSettings
from lineserve.core.models.config import ServerConfig
from lineserve.core.models.framing import FramingMode
from tests.helpers import FakeLineServeConfig


@pytest.mark.ut
def test_defaults_without_config_file(cli_argv):
    config = LineServeConfig()

    assert config.server.host == "0.0.0.0"
    assert config.server.port == 8080
    assert config.server.backlog == 8
    assert config.session.framing == FramingMode.line
    assert config.session.max_line_size == 8192
    assert config.session.line_recv_size == 512
    assert config.session.raw_recv_size == 1024
    assert config.session.reply == "hello from server"


@pytest.mark.ut
def test_yaml_file_is_loaded(lineserve_config):
    assert lineserve_config.server.host == "127.0.0.1"
    assert lineserve_config.server.port == 9100
    assert lineserve_config.server.backlog == 4
    assert lineserve_config.session.framing == FramingMode.raw
    assert lineserve_config.session.max_line_size == 1024
    assert lineserve_config.session.reply == "ack"


@pytest.mark.ut
def test_config_file_selected_on_command_line(cli_argv, config_file):
    cli_argv("--config", str(config_file))

    config = LineServeConfig()

    assert config.server.port == 9100
    assert config.session.framing == FramingMode.raw


@pytest.mark.ut
def test_environment_overrides_defaults(cli_argv, monkeypatch):
    monkeypatch.setenv("LINESERVE_SERVER__PORT", "9200")
    monkeypatch.setenv("LINESERVE_SESSION__FRAMING", "raw")

    config = LineServeConfig()

    assert config.server.port == 9200
    assert config.session.framing == FramingMode.raw


@pytest.mark.ut
def test_init_overrides_are_merged_over_file(lineserve_config):
    config = FakeLineServeConfig(server={"port": 9300})

    assert config.server.port == 9300
    assert config.server.host == "127.0.0.1"
    assert config.server.backlog == 4


@pytest.mark.ut
@pytest.mark.parametrize("port", [-1, 65536])
def test_port_out_of_range_is_rejected(cli_argv, port):
    with pytest.raises(ValidationError):
        LineServeConfig(server={"port": port})


@pytest.mark.ut
@pytest.mark.parametrize("reply", ["two\nlines", "carriage\r", "café"])
def test_invalid_reply_is_rejected(reply):
    with pytest.raises(ValidationError):
        SessionSettings(reply=reply)


@pytest.mark.ut
def test_unknown_framing_is_rejected():
    with pytest.raises(ValidationError):
        SessionSettings(framing="xml")


@pytest.mark.ut
def test_to_server_config(lineserve_config):
    server_config = lineserve_config.to_server_config()

    assert server_config == ServerConfig(
        host="127.0.0.1",
        port=9100,
        backlog=4,
        framing=FramingMode.raw,
        line_recv_size=512,
        raw_recv_size=1024,
        max_line_size=1024,
        reply="ack",
    )
    assert server_config.reply_line == b"ack\n"
