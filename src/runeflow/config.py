"""Machine configuration and end-of-input policies.

A MachineConfig names the state a StateMachine starts every pass in and
the policy it applies when the source runs out. The policy is one of
three variants:

- ``Stop()``: end the pass immediately.
- ``Delegate(func)``: call ``func(controller)``; a returned state becomes
  the current state, ``None`` ends the pass.
- ``Substitute(rune)``: latch end-of-input, then feed ``rune`` to the
  current state as if it had been read.

Usage:
    from runeflow.config import MachineConfig, Substitute

    config = MachineConfig(initial=start, eof=Substitute("\\n"))

All config values are frozen dataclasses and safe to share between
machines.

"""

from __future__ import annotations

import dataclasses
from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from runeflow.errors import MachineConfigError

if TYPE_CHECKING:
    from runeflow.protocols import EOFFunc, StateFunc


@dataclass(frozen=True, slots=True)
class Stop:
    """End the pass as soon as the source is exhausted."""


@dataclass(frozen=True, slots=True)
class Delegate:
    """Hand end-of-input to a pseudo-state.

    The function usually unreads a sentinel and returns an ordinary
    state, or returns None. Returning a state without unreading anything
    calls the function again on the next read.

    Returning None ends the pass with ``run()`` returning False. To report
    a final value, unread a sentinel rune and return a state that ends
    the pass on it; that pass returns True.
    """

    func: EOFFunc


@dataclass(frozen=True, slots=True)
class Substitute:
    """Feed a sentinel rune to the current state at end-of-input."""

    rune: str

    def __post_init__(self) -> None:
        if not isinstance(self.rune, str) or len(self.rune) != 1:
            raise MachineConfigError(
                f"Substitute rune must be a single code point, got {self.rune!r}"
            )


EOFPolicy = Stop | Delegate | Substitute

# Shared default policy
STOP = Stop()


@dataclass(frozen=True, slots=True)
class MachineConfig:
    """Immutable StateMachine configuration.

    Attributes:
        initial: State every pass starts in
        eof: End-of-input policy (defaults to STOP)

    """

    initial: StateFunc
    eof: EOFPolicy = STOP

    def with_eof(self, eof: EOFPolicy) -> MachineConfig:
        """Return a copy of this config with another end-of-input policy."""
        return dataclasses.replace(self, eof=eof)


@dataclass(frozen=True, slots=True)
class TokenizerOptions:
    """Immutable WhitespaceTokenizer options.

    Attributes:
        eof_rune: Rune substituted for end-of-input. A line terminator by
            default, so a token at the very end of the input is finished
            exactly as if a newline followed it.
        buffer_encoding: Codec used to append runes to the token buffer
        is_space: Predicate for the whitespace skipped between tokens

    """

    eof_rune: str = "\n"
    buffer_encoding: str = "utf-8"
    is_space: Callable[[str], bool] = str.isspace

    def __post_init__(self) -> None:
        if not isinstance(self.eof_rune, str) or len(self.eof_rune) != 1:
            raise MachineConfigError(
                f"eof_rune must be a single code point, got {self.eof_rune!r}"
            )

    @classmethod
    def from_dict(cls, options: dict[str, Any]) -> TokenizerOptions:
        """Create TokenizerOptions from a dictionary.

        Unknown keys are silently ignored.

        Example:
            >>> TokenizerOptions.from_dict({"eof_rune": ";", "other": 1}).eof_rune
            ';'

        """
        valid_fields = {f.name for f in dataclasses.fields(cls)}
        filtered = {k: v for k, v in options.items() if k in valid_fields}
        return cls(**filtered)


DEFAULT_TOKENIZER_OPTIONS = TokenizerOptions()


__all__ = [
    "DEFAULT_TOKENIZER_OPTIONS",
    "STOP",
    "Delegate",
    "EOFPolicy",
    "MachineConfig",
    "Stop",
    "Substitute",
    "TokenizerOptions",
]
