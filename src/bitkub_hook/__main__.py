"""Entry point for the webhook server."""

import sys

import uvicorn

from .config import load_config
from .logging_config import configure_logging
from .server import create_app


def main():
    """Main entry point for the webhook server."""
    try:
        config = load_config()
    except ValueError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        sys.exit(1)

    configure_logging()
    try:
        uvicorn.run(create_app(config), host=config.host, port=config.port, log_config=None)
    except Exception as e:
        print(f"Unexpected error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
