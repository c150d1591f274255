"""Code-point reader with pushback.

RuneReader turns any sequential source into a stream of single code
points and lets state functions push code points back for re-reading.

Pushback is a LIFO stack: the most recently unread rune is the next one
read, and the underlying source is consulted only when the stack is empty.

Thread Safety:
RuneReader instances are owned by a single StateMachine.
Not safe for concurrent use.

"""

from __future__ import annotations

import codecs
from collections.abc import Callable, Iterable
from functools import partial
from typing import TYPE_CHECKING

from runeflow.errors import EndOfInput

if TYPE_CHECKING:
    from runeflow.protocols import RuneSource

# Bytes or characters requested from a stream per underlying read
_CHUNK_SIZE = 4096


class RuneReader:
    """Sequential code-point reader with an unbounded pushback stack.

    Accepts a ``str``, ``bytes``, a text stream, a binary stream (decoded
    incrementally), or any iterable of strings.

    A fault raised by the underlying source propagates unchanged and
    leaves the reader usable: the next ``read()`` asks the source again.

    Usage:
            >>> reader = RuneReader("ab")
            >>> reader.read()
            'a'
            >>> reader.unread("x")
            >>> reader.read(), reader.read()
            ('x', 'b')

    """

    __slots__ = (
        "_next_chunk",  # Returns the next str/bytes chunk, or None at end
        "_encoding",
        "_errors",
        "_decoder",  # Created on the first bytes chunk
        "_chunk",
        "_pos",  # Cursor into _chunk
        "_pushback",
        "_exhausted",
        "_offset",
    )

    def __init__(
        self,
        source: object,
        *,
        encoding: str = "utf-8",
        errors: str = "strict",
    ) -> None:
        """Initialize reader over source. Nothing is read yet.

        Args:
            source: str, bytes, stream with ``read(n)``, or iterable of strings
            encoding: Codec used when the source yields bytes
            errors: Codec error handler ("strict" raises UnicodeDecodeError)
        """
        self._next_chunk = _chunk_reader(source)
        self._encoding = encoding
        self._errors = errors
        self._decoder: codecs.IncrementalDecoder | None = None
        self._chunk = ""
        self._pos = 0
        self._pushback: list[str] = []
        self._exhausted = False
        self._offset = 0

    def read(self) -> str:
        """Read the next code point.

        Returns:
            A one-character string.

        Raises:
            EndOfInput: The source is exhausted and no rune is pushed back.
            Exception: Any fault of the underlying source, unchanged.
        """
        if self._pushback:
            self._offset += 1
            return self._pushback.pop()

        while self._pos >= len(self._chunk):
            if self._exhausted:
                raise EndOfInput()
            self._fill()

        rune = self._chunk[self._pos]
        self._pos += 1
        self._offset += 1
        return rune

    def unread(self, rune: str) -> None:
        """Push rune onto the pushback stack."""
        self._pushback.append(rune)
        self._offset -= 1

    @property
    def pending(self) -> int:
        """Number of runes waiting on the pushback stack."""
        return len(self._pushback)

    @property
    def offset(self) -> int:
        """Code points consumed so far (reads minus pushbacks)."""
        return self._offset

    @property
    def exhausted(self) -> bool:
        """True once the source has ended and no rune is left to read."""
        return self._exhausted and not self._pushback and self._pos >= len(self._chunk)

    def _fill(self) -> None:
        raw = self._next_chunk()
        if raw is None:
            # Raises for a truncated multi-byte sequence under "strict"
            text = self._decoder.decode(b"", final=True) if self._decoder is not None else ""
            self._exhausted = True
        elif isinstance(raw, str):
            text = raw
        else:
            if self._decoder is None:
                self._decoder = codecs.getincrementaldecoder(self._encoding)(self._errors)
            text = self._decoder.decode(raw)

        self._chunk = text
        self._pos = 0


def _chunk_reader(source: object) -> Callable[[], str | bytes | None]:
    if isinstance(source, (str, bytes, bytearray, memoryview)):
        whole = [source if isinstance(source, str) else bytes(source)]
        return lambda: whole.pop() if whole else None
    if hasattr(source, "read"):
        return partial(_read_stream, source)
    if isinstance(source, Iterable):
        # Empty items are skipped, not taken as the end
        return partial(next, iter(source), None)
    raise TypeError(f"Cannot read code points from {type(source).__name__!r}")


def _read_stream(stream: RuneSource) -> str | bytes | None:
    return stream.read(_CHUNK_SIZE) or None
