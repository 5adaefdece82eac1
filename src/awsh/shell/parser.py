"""Parser for shell command lines.

Parses commands like: ec2 describe-instances --instance-ids $INSTANCE_ID
"""

from __future__ import annotations

import logging
import shlex
from dataclasses import dataclass, field
from typing import Any, Dict, List, Tuple

logger = logging.getLogger(__name__)

PYTHON_KEYWORDS = {'from', 'import', 'class', 'def', 'return', 'if', 'else', 'elif',
                   'while', 'for', 'in', 'is', 'not', 'and', 'or', 'global', 'lambda'}


@dataclass
class Command:
    """A command line split into command words, arguments and options."""

    name: str
    args: List[str] = field(default_factory=list)
    kwargs: Dict[str, Any] = field(default_factory=dict)

    def __repr__(self) -> str:
        """String representation."""
        args_str = ', '.join(repr(a) for a in self.args)
        kwargs_str = ', '.join(f'{k}={v!r}' for k, v in self.kwargs.items())
        params = ', '.join(filter(None, [args_str, kwargs_str]))
        return f"Command({self.name!r}, [{params}])"


def strip_comment(command_line: str) -> str:
    """Cut ``command_line`` at the first ``#`` that begins a word.

    A ``#`` inside a word (``page#frag``), inside quotes or escaped with a
    backslash is ordinary text.
    """
    quote = None
    escaped = False
    at_word_start = True

    for index, char in enumerate(command_line):
        if escaped:
            escaped = False
        elif quote:
            if char == quote:
                quote = None
            elif char == '\\' and quote == '"':
                escaped = True
        elif char == '\\':
            escaped = True
        elif char in ('"', "'"):
            quote = char
        elif char.isspace():
            at_word_start = True
            continue
        elif char == '#' and at_word_start:
            return command_line[:index]
        at_word_start = False

    return command_line


def tokenize(command_line: str) -> List[str]:
    """Split a command line into tokens, honouring quotes and ``#`` comments.

    Args:
        command_line: Raw command line

    Returns:
        List of tokens

    Raises:
        ValueError: If quotes are unbalanced or the line is empty
    """
    try:
        tokens = shlex.split(strip_comment(command_line))
    except ValueError as e:
        raise ValueError(f"Failed to parse command: {command_line}") from e

    if not tokens:
        raise ValueError("Empty command")

    return tokens


def option_to_param(option_name: str) -> str:
    """Convert a kebab-case option name to a Python parameter name.

    Args:
        option_name: Option name without dashes (e.g., "instance-ids")

    Returns:
        Parameter name (e.g., "instance_ids")
    """
    param = option_name.replace('-', '_')
    if param in PYTHON_KEYWORDS:
        param += '_'
    return param


def split_arguments(tokens: List[str]) -> Tuple[List[str], Dict[str, Any]]:
    """Separate positional arguments from ``--long-options``.

    ``--name value`` and ``--name=value`` set an option; an option followed by
    another option (or by nothing) is a flag set to True.

    Args:
        tokens: Tokens following the command words

    Returns:
        Tuple of (positional args, options)
    """
    args: List[str] = []
    kwargs: Dict[str, Any] = {}

    i = 0
    while i < len(tokens):
        token = tokens[i]
        if token.startswith('--') and len(token) > 2:
            name, sep, value = token[2:].partition('=')
            key = option_to_param(name)
            if sep:
                kwargs[key] = value
            elif i + 1 < len(tokens) and not tokens[i + 1].startswith('--'):
                kwargs[key] = tokens[i + 1]
                i += 1
            else:
                kwargs[key] = True
        else:
            args.append(token)
        i += 1

    return args, kwargs
