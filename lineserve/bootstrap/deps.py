import json
import logging
from functools import lru_cache
from typing import Any

from pydantic import ValidationError

from lineserve.bootstrap.config.loader import get_cli_args, parse_port, DEFAULT_PORT
from lineserve.bootstrap.config.settings import LineServeConfig
from lineserve.core.ports.network import Network
from lineserve.core.transport.server import LineServer
from lineserve.infra.socket_network import SocketNetwork

logger = logging.getLogger("lineserve.deps")


@lru_cache
def get_server() -> LineServer:
    config = get_config()

    return LineServer(
        config=config.to_server_config(),
        network=get_network(),
    )


@lru_cache
def get_network() -> Network:
    # Python's socket module covers every supported platform.
    return SocketNetwork()


def get_cli_overrides() -> dict[str, Any]:
    cli = get_cli_args()
    overrides: dict[str, Any] = {}

    if cli.port is not None:
        port = parse_port(cli.port)
        if port is None:
            logger.warning(f"Invalid port argument {cli.port!r}, using {DEFAULT_PORT}")
            port = DEFAULT_PORT
        overrides["server"] = {"port": port}

    if cli.framing is not None:
        overrides["session"] = {"framing": cli.framing}

    return overrides


@lru_cache
def get_config() -> LineServeConfig:
    try:
        return LineServeConfig(**get_cli_overrides())
    except FileNotFoundError as ex:
        raise SystemExit(f"Provide a correct configuration file path: {ex}")
    except ValidationError as ex:
        msg = ["Configuration validation failed:"]
        errs = json.loads(ex.json())
        for err in errs:
            msg.append(f"  {'.'.join(map(str, err['loc']))}: {err['msg']}")
        raise SystemExit("\n".join(msg))
