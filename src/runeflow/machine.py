"""Rune-at-a-time state machine driver.

A StateMachine reads code points from a RuneReader and feeds them to
state functions. Each state returns the next state, or None to end the
pass. States get a Controller that can only unread runes and latch an
error, so they cannot otherwise touch the machine.

Errors:
    Once a non-clean error is latched (a source read fault, or an error
    set through a controller) every later ``run()`` returns False without
    reading. Clean end-of-input is latched only by the Substitute policy
    and is never reported by ``err()``.

Thread Safety:
StateMachine instances are single-owner. The pushback stack and the
error latch are mutated in place during ``run()``.

"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from runeflow.config import Delegate, MachineConfig, Stop, Substitute
from runeflow.errors import END_OF_INPUT, EndOfInput, MachineConfigError, TokenizeError, is_clean_eof
from runeflow.source import RuneReader

if TYPE_CHECKING:
    from runeflow.protocols import StateFunc

logger = logging.getLogger(__name__)


class StateMachine:
    """DFA-style automaton driven by state functions.

    Unlike a textbook DFA, states may keep memory elsewhere and may have
    side effects (unreading runes, latching errors).

    Usage:
            >>> def initial(ctrl, rune):
            ...     return None if rune == ";" else initial
            >>> machine = StateMachine("a;b;", MachineConfig(initial))
            >>> machine.run(), machine.run(), machine.run()
            (True, True, False)
            >>> machine.err() is None
            True

    """

    __slots__ = ("_reader", "_config", "_err")

    def __init__(
        self,
        source: object,
        config: MachineConfig,
        *,
        encoding: str = "utf-8",
    ) -> None:
        """Initialize machine. No input is read until ``run()``.

        Args:
            source: RuneReader, or anything RuneReader accepts
            config: Initial state and end-of-input policy
            encoding: Codec for byte sources (ignored for a RuneReader)
        """
        self._reader = source if isinstance(source, RuneReader) else RuneReader(source, encoding=encoding)
        self._config = config
        self._err: BaseException | None = None

    @property
    def config(self) -> MachineConfig:
        """Config every pass starts from."""
        return self._config

    @property
    def offset(self) -> int:
        """Code points consumed so far."""
        return self._reader.offset

    def run(self) -> bool:
        """Run a single pass starting at the configured initial state.

        Returns:
            True if a state ended the pass by returning None. False if the
            pass was refused, an error was latched, or input ran out
            before a state ended the pass.

        Raises:
            MachineConfigError: The end-of-input policy is not one of
                Stop, Delegate or Substitute.
        """
        if self._blocked():
            return False

        state: StateFunc | None = self._config.initial
        while state is not None:
            try:
                rune: str | None = self._reader.read()
            except EndOfInput:
                rune = None
            except Exception as exc:
                logger.debug("read fault at offset %d: %r", self.offset, exc)
                self._err = exc
                return False

            if rune is None:
                if self._err is not None:
                    # Input already ended once under Substitute
                    return False

                match self._config.eof:
                    case Stop():
                        logger.debug("end of input at offset %d, stopping", self.offset)
                        return False
                    case Delegate(func=func):
                        logger.debug("end of input at offset %d, delegating", self.offset)
                        state = func(_Controller(self))
                        if state is None or self._blocked():
                            return False
                        continue
                    case Substitute(rune=sentinel):
                        logger.debug("end of input at offset %d, substituting %r", self.offset, sentinel)
                        self._err = END_OF_INPUT
                        rune = sentinel
                    case other:
                        raise MachineConfigError(
                            f"Unexpected end-of-input policy type: {type(other).__name__!r}"
                        )

            state = state(_Controller(self), rune)
            if self._blocked():
                return False

        return True

    def err(self) -> BaseException | None:
        """Return the latched error, or None for none or clean end-of-input."""
        if is_clean_eof(self._err):
            return None
        return self._err

    def _blocked(self) -> bool:
        return self._err is not None and not is_clean_eof(self._err)

    def _unread(self, rune: str) -> None:
        self._reader.unread(rune)

    def _set_error(self, err: BaseException) -> None:
        if is_clean_eof(err):
            raise MachineConfigError("End-of-input cannot be latched as an error")
        if isinstance(err, TokenizeError) and err.offset is None:
            err.offset = self.offset
        logger.debug("error latched at offset %d: %r", self.offset, err)
        self._err = err


class _Controller:
    """Controller bound to one StateMachine."""

    __slots__ = ("_machine",)

    def __init__(self, machine: StateMachine) -> None:
        self._machine = machine

    def unread(self, rune: str) -> None:
        self._machine._unread(rune)

    def set_error(self, err: BaseException) -> None:
        self._machine._set_error(err)
