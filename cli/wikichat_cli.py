"""Main CLI loop for interactive chat."""

import logging
import sys
from typing import TextIO

import httpx

from .client import APIError, ChatAPIClient
from .config import CLIConfig

logger = logging.getLogger(__name__)

SUGGEST_COMMAND = "/suggest"
RESET_COMMAND = "/reset"
EXIT_COMMANDS = ("exit", "quit", "q")


class WikiChatCLI:
    """Interactive CLI for the WikiChat API.

    The server is stateless, so the CLI keeps the conversation and sends
    the whole message list with every question.
    """

    def __init__(
        self,
        config: CLIConfig,
        input_stream: TextIO = sys.stdin,
        output_stream: TextIO = sys.stdout,
        client: ChatAPIClient | None = None,
    ):
        """Initialize the CLI.

        Parameters
        ----------
        config
            CLI configuration.
        input_stream
            Input stream for user input (default: stdin).
        output_stream
            Output stream for responses (default: stdout).
        client
            API client; one is built from *config* when omitted.
        """
        self.config = config
        self.input_stream = input_stream
        self.output_stream = output_stream
        self.client = client or ChatAPIClient(config)
        self.messages: list[dict[str, str]] = []

    async def run(self) -> None:
        """Run the interactive CLI loop."""
        try:
            self._print_welcome()
            while True:
                try:
                    query = self._get_user_input()
                    if not query.strip():
                        continue

                    command = query.strip().lower()
                    if command in EXIT_COMMANDS:
                        self._print("Goodbye!\n")
                        break
                    if command == SUGGEST_COMMAND:
                        await self._show_suggestions()
                        continue
                    if command == RESET_COMMAND:
                        self.messages = []
                        self._print("Conversation cleared.\n\n")
                        continue

                    await self._process_query(query)

                except KeyboardInterrupt:
                    self._print("\n\nInterrupted. Use 'exit' or 'quit' to exit.\n")
                except EOFError:
                    self._print("\nGoodbye!\n")
                    break
        finally:
            await self.client.close()

    async def suggest_once(self) -> None:
        """Print suggested questions, then release the client."""
        try:
            await self._show_suggestions()
        finally:
            await self.client.close()

    async def _process_query(self, query: str) -> None:
        """Send *query* with the conversation so far and print the answer."""
        self.messages.append({"role": "user", "content": query})
        answer: list[str] = []

        try:
            async for chunk in self.client.chat(self.messages):
                answer.append(chunk)
                self._print(chunk)
        except (APIError, httpx.HTTPError) as e:
            # Keep history consistent: drop the unanswered question.
            self.messages.pop()
            self._print(f"\n❌ Error: {e}\n\n")
            return

        self.messages.append({"role": "assistant", "content": "".join(answer)})
        self._print("\n\n")

    async def _show_suggestions(self) -> None:
        try:
            async for chunk in self.client.suggestions():
                self._print(chunk)
        except (APIError, httpx.HTTPError) as e:
            self._print(f"\n❌ Error: {e}\n\n")
            return
        self._print("\n\n")

    def _get_user_input(self) -> str:
        """Get user input from the input stream."""
        self._print("> ")
        line = self.input_stream.readline()
        if not line:
            raise EOFError
        return line.rstrip("\n\r")

    def _print_welcome(self) -> None:
        """Print welcome message."""
        self._print("WikiChat CLI - Interactive Chat Interface\n")
        self._print(f"Connected to: {self.config.base_url}\n")
        self._print(
            f"Type your message and press Enter. '{SUGGEST_COMMAND}' shows "
            f"suggested questions, '{RESET_COMMAND}' clears the conversation, "
            "'exit' quits.\n\n"
        )

    def _print(self, text: str) -> None:
        """Print text to output stream."""
        self.output_stream.write(text)
        self.output_stream.flush()


async def main(
    host: str = "localhost",
    port: int = 8080,
    llm: str | None = None,
    suggest_only: bool = False,
    debug: bool = False,
) -> None:
    """Main entry point for the CLI.

    Parameters
    ----------
    host
        Server host.
    port
        Server port.
    llm
        Chat model to request.
    suggest_only
        Print one batch of suggested questions instead of chatting.
    debug
        Enable debug logging.
    """
    log_level = logging.DEBUG if debug else logging.INFO
    logging.basicConfig(
        level=log_level,
        format="%(levelname)s: %(message)s",
        stream=sys.stderr,
    )

    config = CLIConfig(host=host, port=port, llm=llm)
    cli = WikiChatCLI(config)
    if suggest_only:
        await cli.suggest_once()
    else:
        await cli.run()
