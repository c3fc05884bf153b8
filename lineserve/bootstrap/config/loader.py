import argparse
import os
import re
from functools import lru_cache
from pathlib import Path

DEFAULT_PORT = 8080

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


def parse_port(raw: str | None) -> int | None:
    """
    Lenient port parsing, in the manner of C atoi().

    Leading whitespace and sign are accepted and the longest leading run
    of digits is used, so "9000abc" gives 9000. Returns None when the input
    holds no leading integer or the integer is not a valid TCP port; the
    caller then falls back to DEFAULT_PORT.
    """
    if raw is None:
        return None

    match = _LEADING_INT.match(raw)
    if match is None:
        return None

    port = int(match.group(1))
    if not 0 <= port <= 65535:
        return None
    return port


@lru_cache
def get_cli_args(argv: tuple[str, ...] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="lineserve",
        description=(
            "Start a lineserve server.\n\n"
            "lineserve accepts one TCP client at a time, logs every newline "
            "delimited ASCII message it receives and answers each one with a "
            "fixed acknowledgement line."
        ),
        formatter_class=argparse.RawTextHelpFormatter
    )

    parser.add_argument(
        "port",
        nargs="?",
        type=str,
        help=(
            "TCP port to listen on (default: 8080).\n"
            "Input that does not start with a number falls back to 8080."
        )
    )

    parser.add_argument(
        "-c", "--config",
        type=str,
        help="Path to a lineserve configuration file"
    )

    parser.add_argument(
        "-f", "--framing",
        type=str,
        choices=["line", "raw"],
        help=(
            "Framing policy for inbound data.\n"
            "line → one message per line-feed terminated line (default).\n"
            "raw  → debug mode, every receive is dumped with escapes."
        )
    )

    parser.add_argument(
        "-l", "--log-level",
        type=str,
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help=(
            "Logging verbosity for the server.\n"
            "Choose among: DEBUG, INFO, WARNING, ERROR, CRITICAL.\n\n"
            "Example:\n"
            "  --log-level DEBUG"
        ),
    )

    args, extras = parser.parse_known_args(argv)

    # A dash-prefixed port such as "-abc" is not a known option; treat it as
    # the port so parse_port() can fall back to the default.
    if args.port is None and extras:
        args.port, *extras = extras
    if extras:
        parser.error(f"unrecognized arguments: {' '.join(extras)}")

    return args


@lru_cache
def get_configfile() -> Path | None:
    args = get_cli_args()

    # Priority: CLI > ENV > default file in current working directory
    raw = args.config or os.getenv("LINESERVECONFIG")

    if raw is None:
        file = Path.cwd() / "lineserve.yaml"
        return file if file.is_file() else None

    file = Path(raw)
    if not file.is_file():
        raise SystemExit(
            f"[config] Configuration file not found: '{file}'.\n"
            "  - Use --config <file.yaml>\n"
            "  - Or set the LINESERVECONFIG environment variable\n"
            "  - Or place a 'lineserve.yaml' file in the current working directory."
        )

    return file
