import logging

from lineserve.bootstrap.config.loader import get_cli_args
from lineserve.bootstrap.deps import get_network, get_server
from lineserve.core.errors import StartupError
from lineserve.core.helpers.utils import setup_signal_handler, setup_logging

logger = logging.getLogger("lineserve.boot")


def main() -> int:
    cli = get_cli_args()
    setup_logging(cli.log_level)

    network = get_network()
    server = get_server()

    try:
        with network, setup_signal_handler():
            server.start()
            try:
                server.serve_forever()
            except KeyboardInterrupt as ex:
                logger.info(f"Shutting down server. {ex}".strip())
            finally:
                server.shutdown()
    except StartupError as ex:
        logger.error(f"Startup failed: {ex}")
        return 1

    return 0
