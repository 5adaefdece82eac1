"""Built-in commands for the shell.

Provides the command registry plus variable management (set, get, unset,
vars, clear-vars, export, echo) and shell housekeeping commands.
"""

from __future__ import annotations

import inspect
import logging
import os
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

from awsh.lib.formatting import truncate
from awsh.shell.variables import is_valid_name

logger = logging.getLogger(__name__)


class BuiltinCommand:
    """A registered shell command."""

    def __init__(
        self,
        name: str,
        description: str,
        func: Callable,
        resolve: bool = True,
        aliases: Sequence[str] = (),
    ):
        """Initialize command.

        Args:
            name: Command key, possibly several words (e.g., "s3 ls")
            description: Help text
            func: Handler called as ``func(session, *args, **options)``
            resolve: Resolve variables in arguments before calling ``func``.
                Commands that resolve values themselves pass False so values
                are never resolved twice.
            aliases: Alternative keys
        """
        self.name = ' '.join(name.split())
        self.description = description
        self.func = func
        self.resolve = resolve
        self.aliases = tuple(' '.join(alias.split()) for alias in aliases)

    def bind(self, session: Any, *args: Any, **kwargs: Any) -> inspect.BoundArguments:
        """Check arguments against the handler signature.

        Raises:
            TypeError: If arguments do not fit the handler
        """
        return inspect.signature(self.func).bind(session, *args, **kwargs)

    def execute(self, session: Any, *args: Any, **kwargs: Any) -> Any:
        """Execute the command.

        Args:
            session: Shell session
            *args: Positional arguments
            **kwargs: Options

        Returns:
            Command result
        """
        return self.func(session, *args, **kwargs)

    @property
    def usage(self) -> str:
        """Usage section of the handler docstring."""
        doc = inspect.getdoc(self.func) or ""
        return doc.partition("Usage:")[2].strip()


class BuiltinRegistry:
    """Registry of shell commands."""

    def __init__(self):
        """Initialize registry."""
        self.commands: Dict[str, BuiltinCommand] = {}
        self._keys: Dict[str, BuiltinCommand] = {}

    def register(
        self,
        name: str,
        description: str,
        resolve: bool = True,
        aliases: Sequence[str] = (),
    ) -> Callable:
        """Decorator to register a command.

        Args:
            name: Command key
            description: Help text
            resolve: Resolve variables in arguments before dispatch
            aliases: Alternative keys

        Returns:
            Decorator function
        """
        def decorator(func: Callable) -> Callable:
            cmd = BuiltinCommand(name, description, func, resolve=resolve, aliases=aliases)
            self.commands[cmd.name] = cmd
            for key in (cmd.name, *cmd.aliases):
                self._keys[key] = cmd
            logger.debug(f"Registered command: {cmd.name}")
            return func
        return decorator

    def get(self, name: str) -> Optional[BuiltinCommand]:
        """Get a command by key or alias.

        Args:
            name: Command key (extra whitespace ignored)

        Returns:
            Command if found, None otherwise
        """
        return self._keys.get(' '.join(name.split()))

    def match(self, tokens: List[str]) -> Tuple[Optional[BuiltinCommand], List[str]]:
        """Find the longest command key that prefixes ``tokens``.

        Args:
            tokens: Tokenized command line

        Returns:
            Tuple of (command or None, remaining tokens)
        """
        for size in range(len(tokens), 0, -1):
            cmd = self._keys.get(' '.join(tokens[:size]))
            if cmd is not None:
                return cmd, tokens[size:]
        return None, tokens

    def list_commands(self) -> List[BuiltinCommand]:
        """List all commands sorted by key."""
        return sorted(self.commands.values(), key=lambda cmd: cmd.name)


_registry = BuiltinRegistry()


def get_registry() -> BuiltinRegistry:
    """Get the global command registry.

    Returns:
        Registry instance
    """
    return _registry


# ---------------------------------------------------------------------------
# Variable commands
# ---------------------------------------------------------------------------

@_registry.register("set", "Set a shell variable", resolve=False)
def set_command(session: Any, name: str, *value: str) -> str:
    """Set a variable. References in the value are resolved first.

    Usage:
        set MY_VAR value
        set INSTANCE_ID i-1234567890abcdef0
        set KEY_PATH s3://$BUCKET/data
    """
    if not is_valid_name(name):
        return f"Invalid variable name: {name}"
    resolved = session.variables.resolve(' '.join(value))
    session.variables.set(name, resolved)
    return f"Variable set: {name} = {resolved}"


@_registry.register("export", "Export a value to a variable (alias for set)", resolve=False)
def export_command(session: Any, name: str, *value: str) -> str:
    """Alias for set; also accepts NAME=VALUE.

    Usage:
        export MY_VAR some-value
        export MY_VAR=some-value
    """
    if not value and '=' in name:
        name, _, assigned = name.partition('=')
        value = (assigned,)
    return set_command(session, name, *value)


@_registry.register("get", "Get a variable value", resolve=False)
def get_command(session: Any, name: str) -> str:
    """Usage:
        get MY_VAR
    """
    value, found = session.variables.get(name)
    if not found:
        return f"Variable not found: {name}"
    return value


@_registry.register("vars", "List all shell variables", aliases=("variables",))
def vars_command(session: Any) -> str:
    """List variables; long values are truncated.

    Usage:
        vars
        variables
    """
    variables = session.variables.all()
    if not variables:
        return "No variables set"

    rows = [["Variable", "Value"]]
    for name in sorted(variables):
        rows.append([name, truncate(variables[name])])
    return session.render_table(rows)


@_registry.register("unset", "Unset a shell variable", resolve=False)
def unset_command(session: Any, name: str) -> str:
    """Usage:
        unset MY_VAR
    """
    if not session.variables.remove(name):
        return f"Variable not found: {name}"
    return f"Variable unset: {name}"


@_registry.register("clear-vars", "Clear all shell variables")
def clear_vars_command(session: Any) -> str:
    """Usage:
        clear-vars
    """
    count = session.variables.clear()
    return f"Cleared {count} variable{'s' if count != 1 else ''}"


@_registry.register("echo", "Echo text with variable substitution", resolve=False)
def echo_command(session: Any, *text: str) -> str:
    """Usage:
        echo Hello $USER
        echo Instance ID is ${INSTANCE_ID}
    """
    return session.variables.resolve(' '.join(text))


# ---------------------------------------------------------------------------
# Shell commands
# ---------------------------------------------------------------------------

@_registry.register("help", "Show help for available commands", resolve=False)
def help_command(session: Any, *topic: str) -> str:
    """Show help for all commands, a service, or one command.

    Usage:
        help
        help s3
        help s3 ls
    """
    if topic:
        key = ' '.join(topic)
        cmd = _registry.get(key)
        if cmd is not None:
            lines = [f"{cmd.name} - {cmd.description}"]
            if cmd.aliases:
                lines.append(f"Aliases: {', '.join(cmd.aliases)}")
            if cmd.usage:
                lines.extend(["", "Usage:"])
                lines.extend(f"  {line.strip()}" for line in cmd.usage.splitlines())
            return '\n'.join(lines)

        matching = [c for c in _registry.list_commands() if c.name.startswith(key + ' ')]
        if not matching:
            return f"No command '{key}' found\n\nUse help to see all available commands"
        commands = matching
    else:
        commands = _registry.list_commands()

    width = max(len(cmd.name) for cmd in commands) + 2
    lines = ["awsh - interactive AWS shell", "", "Available commands:", ""]
    for cmd in commands:
        lines.append(f"  {cmd.name:<{width}} {cmd.description}")
    lines.extend([
        "",
        "Variables:",
        "  set BUCKET my-bucket",
        "  s3 ls s3://$BUCKET/logs    (or ${BUCKET})",
        "",
        "Use help <command> for command-specific help (e.g., help s3 ls)",
        "Use exit or Ctrl+D to quit",
    ])
    return '\n'.join(lines)


@_registry.register("history", "Show command history")
def history_command(session: Any) -> str:
    """Usage:
        history
    """
    history = session.get_history()
    if not history:
        return "No command history"

    lines = ["Command history:"]
    for i, cmd in enumerate(history, 1):
        lines.append(f"  {i}. {cmd}")
    return '\n'.join(lines)


@_registry.register("exit", "Exit the shell", aliases=("quit",))
def exit_command(session: Any) -> None:
    """Exit the shell.

    Raises:
        SystemExit: To exit the shell
    """
    logger.info("Exiting shell...")
    raise SystemExit(0)


@_registry.register("configure show", "Show current AWS configuration",
                    aliases=("aws configure show", "configure-show"))
def configure_show_command(session: Any) -> str:
    """Usage:
        configure show
        aws configure show
    """
    profile = os.environ.get("AWS_PROFILE")
    region = os.environ.get("AWS_REGION")
    default_region = os.environ.get("AWS_DEFAULT_REGION")

    pairs = [
        ["AWS_PROFILE", profile or "(not set - using default)"],
        ["AWS_REGION", region or "(not set)"],
        ["AWS_DEFAULT_REGION", default_region or "(not set)"],
        ["Effective Profile", session.config.effective_profile],
        ["Effective Region", session.config.region],
        ["Output", session.config.output],
    ]
    return session.render_pairs(pairs)


@_registry.register("output", "Show or change the output format (table, json)")
def output_command(session: Any, output_format: Optional[str] = None) -> str:
    """Usage:
        output
        output json
        output table
    """
    if output_format is None:
        return f"Output format: {session.config.output}"

    output_format = output_format.lower()
    if output_format not in ("table", "json"):
        return f"Invalid output format: {output_format}. Must be one of: table, json"
    session.config.output = output_format
    return f"✓ Output format: {output_format}"


@_registry.register("version", "Show the awsh version")
def version_command(session: Any) -> str:
    """Usage:
        version
    """
    from awsh import __version__
    return f"awsh {__version__}"
