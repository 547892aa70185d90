"""Per-session recursion depth for annotation content parsing.

The counter lives in the ``env`` mapping of the parse session. markdown-it
passes the same mapping to the top-level parse and to every nested fragment
parse, so nested annotations see one shared counter, while two documents
rendered back to back (each with its own env) never share one.

Usage:
    with descend(state.env, limit=3):
        state.md.inline.parse(text, state.md, state.env, children)

"""

from __future__ import annotations

from collections.abc import Iterator, MutableMapping
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any

from marginalia.errors import RecursionLimitExceeded

# Key under which the counter is stored in the session env
ENV_KEY = "marginalia_depth"


@dataclass(slots=True)
class DepthCounter:
    """Nesting depth of annotation content parses for one session."""

    value: int = 0


def current_depth(env: MutableMapping[str, Any]) -> int:
    """Return the current depth without creating a counter."""
    counter = env.get(ENV_KEY)
    return counter.value if counter is not None else 0


@contextmanager
def descend(env: MutableMapping[str, Any], limit: int) -> Iterator[int]:
    """Enter one level of annotation nesting.

    Args:
        env: Session environment shared with nested parses
        limit: Depth ceiling; entering at the ceiling is refused

    Yields:
        The depth inside the block (1 for top-level annotation content)

    Raises:
        RecursionLimitExceeded: If the counter is already at ``limit``

    """
    counter = env.get(ENV_KEY)
    if counter is None:
        counter = DepthCounter()
        env[ENV_KEY] = counter

    if counter.value >= limit:
        if counter.value == 0:
            env.pop(ENV_KEY, None)
        raise RecursionLimitExceeded(counter.value, limit)

    counter.value += 1
    try:
        yield counter.value
    finally:
        counter.value -= 1
        if counter.value <= 0:
            counter.value = 0
            # Discarded with the outermost level; env is left as it was found
            env.pop(ENV_KEY, None)


__all__ = ["DepthCounter", "ENV_KEY", "current_depth", "descend"]
