"""Entry point for the Villa Tours API server."""

from villatours.app import App
from villatours.config import Config
from villatours.logging import setup_logging
from villatours.web.runner import run_server


def main() -> None:
    config = Config()
    setup_logging(config)
    run_server(App(config), config)


if __name__ == "__main__":
    main()
