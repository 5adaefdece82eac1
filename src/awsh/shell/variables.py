"""Session variables and ``$NAME`` / ``${NAME}`` interpolation.

Users capture values with ``set`` and reference them in later command
arguments. Resolution is a single left-to-right pass: substituted values are
never rescanned and unbound references are left exactly as written.
"""

from __future__ import annotations

import logging
import string
from typing import Any, Callable, Dict, Optional, Tuple

logger = logging.getLogger(__name__)

IDENTIFIER_START = frozenset(string.ascii_letters + "_")
IDENTIFIER_CHARS = IDENTIFIER_START | frozenset(string.digits)

Lookup = Callable[[str], Tuple[Optional[str], bool]]


def is_valid_name(name: str) -> bool:
    """Check that ``name`` matches ``[A-Za-z_][A-Za-z0-9_]*``."""
    if not name or name[0] not in IDENTIFIER_START:
        return False
    return all(char in IDENTIFIER_CHARS for char in name[1:])


def _scan_identifier(text: str, start: int) -> int:
    """Return the end index of the identifier starting at ``start``.

    Returns ``start`` itself when no identifier begins there.
    """
    if start >= len(text) or text[start] not in IDENTIFIER_START:
        return start
    end = start + 1
    while end < len(text) and text[end] in IDENTIFIER_CHARS:
        end += 1
    return end


def resolve_variables(text: Optional[str], lookup: Lookup) -> Optional[str]:
    """Replace bound variable references in ``text``.

    Both ``${NAME}`` and ``$NAME`` are recognised; the bare form consumes the
    longest identifier it can, so ``$FOOBAR`` never matches ``FOO``. A ``$``
    that does not start a valid reference is copied through unchanged.

    Args:
        text: Input string (``None`` and ``""`` are returned as-is)
        lookup: Callable returning ``(value, found)`` for a name

    Returns:
        Resolved string
    """
    if not text:
        return text

    out = []
    pos = 0
    length = len(text)

    while pos < length:
        dollar = text.find('$', pos)
        if dollar == -1:
            out.append(text[pos:])
            break
        out.append(text[pos:dollar])

        start = dollar + 1
        if start < length and text[start] == '{':
            end = _scan_identifier(text, start + 1)
            if end == start + 1 or end >= length or text[end] != '}':
                out.append('$')
                pos = start
                continue
            name = text[start + 1:end]
            token_end = end + 1
        else:
            end = _scan_identifier(text, start)
            if end == start:
                out.append('$')
                pos = start
                continue
            name = text[start:end]
            token_end = end

        value, found = lookup(name)
        out.append(value if found else text[dollar:token_end])
        pos = token_end

    return ''.join(out)


class VariableStore:
    """In-memory variables for one shell session.

    Values are kept as given and rendered with ``str()`` on every read path.
    There is no internal locking; callers driving several commands at once
    must serialize access themselves.
    """

    def __init__(self):
        """Initialize an empty store."""
        self._variables: Dict[str, Any] = {}

    def set(self, name: str, value: Any) -> None:
        """Bind ``name`` to ``value``, replacing any previous binding.

        Args:
            name: Variable name
            value: Any value, including the empty string
        """
        self._variables[name] = value
        logger.debug(f"Variable set: ${name}")

    def get(self, name: str) -> Tuple[Optional[str], bool]:
        """Get a variable value as text.

        Args:
            name: Variable name (without $)

        Returns:
            ``(value, True)`` when bound, ``(None, False)`` otherwise
        """
        if name not in self._variables:
            return None, False
        return str(self._variables[name]), True

    def has(self, name: str) -> bool:
        """Check whether ``name`` is bound."""
        return name in self._variables

    def remove(self, name: str) -> bool:
        """Remove a binding.

        Args:
            name: Variable name

        Returns:
            True if a binding was deleted, False if there was none
        """
        if name not in self._variables:
            return False
        del self._variables[name]
        logger.debug(f"Variable removed: ${name}")
        return True

    def clear(self) -> int:
        """Remove every binding.

        Returns:
            Number of variables removed
        """
        count = len(self._variables)
        self._variables.clear()
        logger.debug(f"Variables cleared ({count})")
        return count

    def all(self) -> Dict[str, str]:
        """Snapshot of all bindings, rendered as text."""
        return {name: str(value) for name, value in self._variables.items()}

    def resolve(self, text: Optional[str]) -> Optional[str]:
        """Resolve variable references in ``text`` against this store."""
        return resolve_variables(text, self.get)

    def __len__(self) -> int:
        return len(self._variables)

    def __contains__(self, name: object) -> bool:
        return name in self._variables
