"""Command-line entry point for the Search Arena server."""

import argparse
import logging
import os

from .config.settings import LOG_LEVELS, PROVIDER_NAMES, TRANSPORTS, get_settings
from .server import SearchServer
from .utils.logging import configure_logging

# Command-line option -> settings environment variable
OPTION_ENV = {
    "transport": "TRANSPORT",
    "host": "HOST",
    "port": "PORT",
    "log_level": "LOG_LEVEL",
    "results_dir": "RESULTS_DIR",
}


def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        prog="search-arena",
        description="Compare web search providers and judge their results",
    )
    parser.add_argument(
        "--transport",
        choices=TRANSPORTS,
        help="MCP transport to serve on",
    )
    parser.add_argument("--host", help="Bind address for the HTTP transport")
    parser.add_argument("--port", type=int, help="Port for the HTTP transport")
    parser.add_argument(
        "--log-level",
        choices=LOG_LEVELS,
    )
    parser.add_argument("--results-dir", help="Directory for saved snapshots")

    keys = parser.add_argument_group("provider credentials")
    for provider in PROVIDER_NAMES:
        keys.add_argument(
            f"--{provider}-api-key",
            metavar="KEY",
            help=f"Overrides {provider.upper()}_API_KEY",
        )

    return parser.parse_args(argv)


def apply_args(args: argparse.Namespace) -> None:
    """Export command-line overrides so the settings loader picks them up."""
    for option, env_name in OPTION_ENV.items():
        value = getattr(args, option, None)
        if value:
            os.environ[env_name] = str(value)

    for provider in PROVIDER_NAMES:
        key = getattr(args, f"{provider}_api_key", None)
        if key:
            os.environ[f"{provider.upper()}_API_KEY"] = key


def main(argv=None):
    """Run the Search Arena server."""
    apply_args(parse_args(argv))

    # Settings are built once, after the overrides are in place
    get_settings.cache_clear()
    settings = get_settings()
    configure_logging(settings.log_level)

    server = SearchServer(settings)
    try:
        server.run(
            transport=settings.transport,
            host=settings.host,
            port=settings.port,
        )
    except KeyboardInterrupt:
        logging.getLogger("search_arena").info("Server stopped")


if __name__ == "__main__":
    main()
