"""Shell module for the interactive AWS CLI.

Provides the session variable store, command registry, interpreter and REPL.
"""

from __future__ import annotations

from awsh.shell.builtins import BuiltinRegistry, get_registry
from awsh.shell.interpreter import ShellInterpreter, ShellSession
from awsh.shell.repl import REPL, run_command, run_repl, run_script
from awsh.shell.variables import VariableStore, is_valid_name, resolve_variables

__all__ = [
    "REPL",
    "BuiltinRegistry",
    "ShellInterpreter",
    "ShellSession",
    "VariableStore",
    "get_registry",
    "is_valid_name",
    "resolve_variables",
    "run_command",
    "run_repl",
    "run_script",
]
