"""Application entry point for the ledgerdesk backend server."""

import structlog

from ledgerdesk.app import App
from ledgerdesk.config import Config
from ledgerdesk.logging import setup_logging
from ledgerdesk.web.runner import run_server

logger = structlog.get_logger(__name__)


def main() -> None:
    config = Config()
    setup_logging(config.debug)
    logger.info("starting_server", host=config.host, port=config.port, debug=config.debug)
    run_server(App(config), config)


if __name__ == "__main__":
    main()
