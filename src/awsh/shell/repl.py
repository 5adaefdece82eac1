"""REPL (Read-Eval-Print Loop) for the interactive shell."""

from __future__ import annotations

import atexit
import logging
import sys
from pathlib import Path
from typing import Any, Optional, Union

from awsh.shell.interpreter import ShellInterpreter, ShellSession

logger = logging.getLogger(__name__)

try:
    import readline
    HAS_READLINE = True
except ImportError:
    HAS_READLINE = False
    logger.debug("readline not available - command history disabled")


class REPL:
    """Read-Eval-Print Loop for interactive shell."""

    def __init__(self, session: Optional[ShellSession] = None, use_readline: bool = True):
        """Initialize REPL.

        Args:
            session: Shell session (creates new if None)
            use_readline: Load and save line history with readline
        """
        self.interpreter = ShellInterpreter(session)
        self.session = self.interpreter.session
        self.running = False

        if use_readline and HAS_READLINE:
            self._setup_readline()

    @property
    def prompt(self) -> str:
        """Prompt showing the active profile and region."""
        return self.session.config.render_prompt()

    def _setup_readline(self) -> None:
        """Setup readline for command history."""
        history_file = self.session.config.history_file
        try:
            readline.read_history_file(str(history_file))
        except (FileNotFoundError, PermissionError):
            pass

        readline.set_history_length(self.session.config.history_length)
        atexit.register(readline.write_history_file, str(history_file))

    def run(self) -> None:
        """Run the REPL loop."""
        self.running = True
        self._print_welcome()
        while self.running:
            try:
                line = input(self.prompt).strip()
                if not line or line.startswith('#'):
                    continue
                self._execute_line(line)
            except EOFError:
                # Ctrl+D
                print()
                break
            except KeyboardInterrupt:
                # Ctrl+C
                print()
                continue
            except SystemExit:
                break
        self.running = False
        self._print_goodbye()

    def _print_welcome(self) -> None:
        """Print welcome message."""
        print("awsh - interactive AWS shell")
        print(f"Profile: {self.session.config.effective_profile}  Region: {self.session.config.region}")
        print("Type help for available commands")
        print()

    def _print_goodbye(self) -> None:
        """Print goodbye message."""
        print("Goodbye!")

    def _execute_line(self, line: str) -> None:
        """Execute a single line of input.

        Args:
            line: Input line
        """
        try:
            result = self.interpreter.execute(line)
        except SystemExit:
            raise
        except Exception as e:
            logger.debug("Command failed", exc_info=True)
            print(f"Error: {e}", file=sys.stderr)
            return

        if result is not None:
            print(str(result).rstrip('\n'))


def run_repl(session: Optional[ShellSession] = None) -> None:
    """Run interactive REPL.

    Args:
        session: Optional shell session
    """
    repl = REPL(session=session)
    repl.run()


def run_command(command: str, session: Optional[ShellSession] = None) -> Any:
    """Run a single command non-interactively.

    Args:
        command: Command to execute
        session: Optional shell session

    Returns:
        Command result
    """
    return ShellInterpreter(session).execute(command)


def run_script(script_path: Union[str, Path], session: Optional[ShellSession] = None) -> None:
    """Run commands from a script file, sharing one session.

    Args:
        script_path: Path to script file
        session: Optional shell session

    Raises:
        Exception: The first command failure, after reporting its line number
    """
    interpreter = ShellInterpreter(session)

    with open(script_path) as f:
        for line_num, line in enumerate(f, 1):
            line = line.strip()

            if not line or line.startswith('#'):
                continue

            try:
                logger.debug(f"Executing line {line_num}: {line}")
                result = interpreter.execute(line)

                if result is not None:
                    print(str(result).rstrip('\n'))

            except SystemExit:
                break
            except Exception as e:
                logger.error(f"Error on line {line_num}: {e}")
                print(f"Error on line {line_num}: {e}", file=sys.stderr)
                raise
