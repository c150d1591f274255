"""Protocols for Runeflow.

Defines the contracts between a StateMachine and the code it runs:
the controller handed to state functions, the state function shapes,
and the sources a RuneReader can wrap.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, Protocol, TypeAlias


class Controller(Protocol):
    """Limited control of a running StateMachine from inside a state.

    A fresh controller is created for every state call. It exposes
    nothing but these two operations.
    """

    def unread(self, rune: str) -> None:
        """Push rune back so it is the next rune the machine reads."""
        ...

    def set_error(self, err: BaseException) -> None:
        """Latch err on the machine.

        The current state call still completes; the machine then ends
        the pass and refuses all later passes.
        """
        ...


# A state: called with each rune, returns the next state or None to stop.
StateFunc: TypeAlias = Callable[[Controller, str], "StateFunc | None"]

# Pseudo-state called at end-of-input under the Delegate policy.
EOFFunc: TypeAlias = Callable[[Controller], "StateFunc | None"]

# Maps the bytes accumulated so far to a token, or None if more input is needed.
Mapper: TypeAlias = Callable[[bytes], Any]


class RuneSource(Protocol):
    """A stream read with ``read(n)``, yielding ``str`` or ``bytes``.

    An empty result means the stream is exhausted.
    """

    def read(self, size: int = -1, /) -> str | bytes: ...
