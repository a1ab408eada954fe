"""Entry point for running the CLI as a module: ``python -m cli``."""

import argparse
import asyncio
import sys

from .wikichat_cli import main


def parse_args() -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Interactive CLI for the WikiChat API",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Inside the chat loop:\n"
            "  /suggest   show suggested questions\n"
            "  /reset     forget the conversation so far\n"
            "  exit       quit"
        ),
    )

    parser.add_argument("--host", default="localhost", help="Server host (default: localhost)")
    parser.add_argument("--port", type=int, default=8080, help="Server port (default: 8080)")
    parser.add_argument(
        "--llm",
        default=None,
        help="Chat model to request, e.g. gpt-4o (default: server default)",
    )
    parser.add_argument(
        "--suggest",
        action="store_true",
        help="Print suggested questions and exit instead of starting the chat loop",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging (shows response headers and trace ids)",
    )

    return parser.parse_args()


def cli_entry() -> None:
    args = parse_args()

    try:
        asyncio.run(
            main(
                host=args.host,
                port=args.port,
                llm=args.llm,
                suggest_only=args.suggest,
                debug=args.debug,
            )
        )
    except KeyboardInterrupt:
        sys.exit(0)


if __name__ == "__main__":
    cli_entry()
