"""Whitespace-delimited tokenizer built on StateMachine.

The tokenizer has two states:

- ``initial`` skips whitespace. The first other rune is unread, the
  buffer is reset and the machine moves to ``match``.
- ``match`` appends each rune to the buffer and calls the mapper with
  everything accumulated so far. The mapper returns a token (pass ends),
  None (keep reading), or raises a RuneflowError (error latched, pass ends).

The mapper always sees the whole prefix, not just the newest rune, so it
can decide on total length or look back over several runes.

End-of-input is replaced by ``options.eof_rune`` (a newline by default),
so the last token of an input without a trailing newline is finished
exactly like one followed by a line break.

Example:
    >>> def words(buf):
    ...     if buf[-1:].isspace():
    ...         return buf[:-1].decode()
    ...     return None
    >>> tokenizer = WhitespaceTokenizer(words)
    >>> machine = StateMachine("  foo bar", tokenizer.config())
    >>> machine.run(), tokenizer.token
    (True, 'foo')
    >>> machine.run(), tokenizer.token
    (True, 'bar')
    >>> machine.run()
    False

"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from runeflow.config import DEFAULT_TOKENIZER_OPTIONS, MachineConfig, Substitute, TokenizerOptions
from runeflow.errors import RuneflowError, TokenizeError

if TYPE_CHECKING:
    from runeflow.protocols import Controller, Mapper, StateFunc

logger = logging.getLogger(__name__)


class WhitespaceTokenizer:
    """Recognizes one token per pass by feeding a growing buffer to a mapper.

    A tokenizer is independent of any machine: ``config()`` produces a
    MachineConfig that any StateMachine may run. It is reused across
    passes; ``token`` is overwritten by every successful pass.

    Note:
        ``token`` is only meaningful right after a pass that returned
        True. After a failed pass it holds a stale value.

    """

    __slots__ = ("_mapper", "_options", "_buf", "_tok")

    def __init__(self, mapper: Mapper, options: TokenizerOptions | None = None) -> None:
        """Initialize tokenizer.

        Args:
            mapper: Maps the accumulated bytes to a token or None
            options: Tokenizer options (defaults if None)
        """
        self._mapper = mapper
        self._options = options or DEFAULT_TOKENIZER_OPTIONS
        self._buf = bytearray()
        self._tok: Any = None

    @property
    def options(self) -> TokenizerOptions:
        return self._options

    @property
    def token(self) -> Any:
        """The most recently recognized token."""
        return self._tok

    def config(self) -> MachineConfig:
        """Return a config that runs this tokenizer."""
        return MachineConfig(initial=self.initial, eof=Substitute(self._options.eof_rune))

    def initial(self, ctrl: Controller, rune: str) -> StateFunc | None:
        if self._options.is_space(rune):
            return self.initial

        ctrl.unread(rune)
        self._buf.clear()
        return self.match

    def match(self, ctrl: Controller, rune: str) -> StateFunc | None:
        encoding = self._options.buffer_encoding
        try:
            self._buf += rune.encode(encoding)
        except UnicodeEncodeError as exc:
            err = TokenizeError(f"cannot encode {rune!r} with {encoding}")
            err.__cause__ = exc
            ctrl.set_error(err)
            return None

        try:
            tok = self._mapper(bytes(self._buf))
        except RuneflowError as exc:
            logger.debug("mapper rejected %r: %s", bytes(self._buf), exc)
            ctrl.set_error(exc)
            return None

        if tok is None:
            return self.match

        self._tok = tok
        return None
