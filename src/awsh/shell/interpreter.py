"""Shell interpreter for executing parsed commands.

Resolves session variables in command arguments and dispatches to the
registered command handlers, which call AWS through boto3.
"""

from __future__ import annotations

import logging
from typing import Any, List, Optional, Sequence

import awsh.services  # noqa: F401  (registers service commands)
from awsh.lib.clients import ClientFactory
from awsh.lib.config_parser import ShellConfig
from awsh.lib.formatting import to_json, to_key_value, to_table
from awsh.shell.builtins import BuiltinRegistry, get_registry
from awsh.shell.parser import Command, split_arguments, tokenize
from awsh.shell.variables import VariableStore

logger = logging.getLogger(__name__)


class ShellSession:
    """State shared by every command of one shell session.

    Holds the variable store, the AWS client factory, configuration and
    command history. Nothing here is global: create one per session.
    """

    def __init__(
        self,
        config: Optional[ShellConfig] = None,
        clients: Optional[ClientFactory] = None,
        variables: Optional[VariableStore] = None,
    ):
        """Initialize session.

        Args:
            config: Shell configuration (defaults apply if None)
            clients: AWS client factory (built from config if None)
            variables: Variable store (new empty store if None)
        """
        self.config = config or ShellConfig()
        self.variables = variables if variables is not None else VariableStore()
        self.clients = clients or ClientFactory(
            profile=self.config.profile,
            region=self.config.region,
        )
        self.history: List[str] = []

    def client(self, service: str) -> Any:
        """Get the boto3 client for ``service``."""
        return self.clients.client(service)

    def render_table(self, rows: Sequence[Sequence[Optional[str]]]) -> str:
        """Render header + rows in the configured output format."""
        if self.config.output == "json":
            header, *body = rows
            return to_json([dict(zip(header, row)) for row in body])
        return to_table(rows)

    def render_pairs(self, pairs: Sequence[Sequence[Optional[str]]]) -> str:
        """Render key/value pairs in the configured output format."""
        if self.config.output == "json":
            return to_json({pair[0]: pair[1] for pair in pairs if len(pair) >= 2})
        return to_key_value(pairs)

    def get_history(self) -> List[str]:
        """Get command history.

        Returns:
            List of executed commands
        """
        return self.history.copy()

    def clear_history(self) -> None:
        """Clear command history."""
        self.history.clear()


class ShellInterpreter:
    """Interprets and executes shell command lines."""

    def __init__(
        self,
        session: Optional[ShellSession] = None,
        registry: Optional[BuiltinRegistry] = None,
    ):
        """Initialize interpreter.

        Args:
            session: Shell session (creates new if None)
            registry: Command registry (global registry if None)
        """
        self.session = session or ShellSession()
        self.registry = registry or get_registry()
        self._last_result: Any = None

    def parse(self, command_line: str) -> Command:
        """Parse a command line against the registered commands.

        Args:
            command_line: Command line to parse

        Returns:
            Command with resolved arguments and options

        Raises:
            ValueError: If the line cannot be parsed or the command is unknown
        """
        tokens = tokenize(command_line)
        cmd, remaining = self.registry.match(tokens)
        if cmd is None:
            raise ValueError(f"Unknown command: {tokens[0]}. Type help for available commands")

        if not cmd.resolve:
            return Command(name=cmd.name, args=remaining)

        args, kwargs = split_arguments(remaining)
        resolve = self.session.variables.resolve
        args = [resolve(arg) for arg in args]
        kwargs = {k: resolve(v) if isinstance(v, str) else v for k, v in kwargs.items()}
        return Command(name=cmd.name, args=args, kwargs=kwargs)

    def execute(self, command_line: str) -> Any:
        """Execute a command line.

        Args:
            command_line: Command line to execute

        Returns:
            Result of execution (usually text)

        Raises:
            ValueError: If the command is unknown or cannot be parsed
            TypeError: If the arguments do not match the command
        """
        command = self.parse(command_line)
        self.session.history.append(command_line)
        cmd = self.registry.get(command.name)

        try:
            cmd.bind(self.session, *command.args, **command.kwargs)
        except TypeError as e:
            raise TypeError(f"Invalid arguments for {cmd.name}: {e}") from e

        logger.debug(f"Dispatching {command!r}")
        result = cmd.execute(self.session, *command.args, **command.kwargs)
        self._last_result = result
        return result

    def get_last_result(self) -> Any:
        """Get the last execution result.

        Returns:
            Last result
        """
        return self._last_result
