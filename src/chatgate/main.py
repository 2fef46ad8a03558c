"""Application entry point for the chatgate server."""

from chatgate.app import App
from chatgate.config import Config
from chatgate.logging import setup_logging
from chatgate.web.runner import run_server


def main() -> None:
    config = Config()
    setup_logging(config.debug)
    app = App(config)
    run_server(app, config)


if __name__ == "__main__":
    main()
