"""Scanner: a WhitespaceTokenizer bundled with its StateMachine.

Usage:
    >>> scanner = Scanner("1 22 333", lambda buf: len(buf) if buf[-1:].isspace() else None)
    >>> list(scanner)
    [2, 3, 4]

"""

from __future__ import annotations

from collections.abc import Iterator
from typing import TYPE_CHECKING, Any

from runeflow.config import TokenizerOptions
from runeflow.machine import StateMachine
from runeflow.tokenizer import WhitespaceTokenizer

if TYPE_CHECKING:
    from runeflow.protocols import Mapper


class Scanner:
    """Reads whitespace-delimited tokens from a source, one per ``scan()``.

    Typical loop:
            >>> scanner = Scanner(source, mapper)
            >>> while scanner.scan():
            ...     handle(scanner.token)
            >>> if scanner.err() is not None:
            ...     raise scanner.err()

    Iterating a Scanner does the same and raises the latched error, if
    any, once scanning stops.

    """

    __slots__ = ("_tokenizer", "_machine")

    def __init__(
        self,
        source: object,
        mapper: Mapper,
        options: TokenizerOptions | None = None,
        *,
        encoding: str = "utf-8",
    ) -> None:
        self._tokenizer = WhitespaceTokenizer(mapper, options)
        self._machine = StateMachine(source, self._tokenizer.config(), encoding=encoding)

    def scan(self) -> bool:
        """Recognize the next token. Returns False when none is left or on error."""
        return self._machine.run()

    @property
    def token(self) -> Any:
        """Token from the last successful ``scan()``."""
        return self._tokenizer.token

    @property
    def offset(self) -> int:
        return self._machine.offset

    def err(self) -> BaseException | None:
        """Error that stopped scanning, or None."""
        return self._machine.err()

    def __iter__(self) -> Iterator[Any]:
        while self.scan():
            yield self.token

        err = self.err()
        if err is not None:
            raise err


def tokenize(
    source: object,
    mapper: Mapper,
    *,
    encoding: str = "utf-8",
    **options: Any,
) -> Iterator[Any]:
    """Yield every token mapper recognizes in source.

    Args:
        source: str, stream, or iterable of characters
        mapper: Maps accumulated bytes to a token or None
        encoding: Codec for byte sources
        **options: TokenizerOptions fields (unknown keys are ignored)

    Raises:
        RuneflowError: The mapper failed (raised after the preceding tokens).
        Exception: The source failed while being read.
    """
    scanner = Scanner(source, mapper, TokenizerOptions.from_dict(options), encoding=encoding)
    return iter(scanner)
